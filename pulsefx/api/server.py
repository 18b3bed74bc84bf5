"""PULSEFX FastAPI server — main application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pulsefx.api.routes.console import router as console_router
from pulsefx.api.routes.hands import router as hands_router

app = FastAPI(
    title="PULSEFX",
    description="Parametric pulse-wave sound effect synthesizer.",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(hands_router, prefix="/api")
app.include_router(console_router, prefix="/api")


# ── Public routes ──
@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "service": "pulsefx"}


@app.get("/api/info")
async def info() -> dict[str, object]:
    """System information and capabilities."""
    from pulsefx import __version__

    return {
        "name": "PULSEFX",
        "version": __version__,
        "layers": {
            "hands": "Synthesis",
            "console": "Timeline Mixdown & Export",
        },
        "endpoints": {
            "docs": "/docs",
            "health": "/health",
            "hands_presets": "GET /api/hands/presets",
            "hands_preset": "GET /api/hands/presets/{name}",
            "hands_random": "GET /api/hands/random",
            "hands_generate": "POST /api/hands/generate",
            "console_mixdown": "POST /api/console/mixdown",
            "console_schedule": "POST /api/console/schedule",
        },
    }


def main() -> None:
    """Run the API with uvicorn using ``PULSEFX_HOST`` / ``PULSEFX_PORT``."""
    import uvicorn

    from pulsefx.config import settings

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
