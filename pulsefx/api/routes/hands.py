"""PULSEFX API — HANDS routes (recipes, presets, single-sound rendering)."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from pulsefx import config
from pulsefx.console.export import encode_wav
from pulsefx.errors import EncodingFailure, InvalidParameter
from pulsefx.hands.envelope import duration
from pulsefx.hands.params import SoundParameters
from pulsefx.hands.presets import PRESETS, get_preset, random_parameters
from pulsefx.hands.synth import generate

router = APIRouter(prefix="/hands", tags=["hands"])


# ── Models ───────────────────────────────────────────────


class GenerateRequest(BaseModel):
    """Render one recipe, optionally starting from a preset."""

    preset: str | None = None
    settings: dict[str, Any] = Field(default_factory=dict)
    sample_rate: int = Field(default_factory=lambda: config.settings.sample_rate)


def _recipe_from(req: GenerateRequest) -> SoundParameters:
    base: dict[str, Any] = {}
    if req.preset is not None:
        try:
            base = get_preset(req.preset).to_dict()
        except KeyError as e:
            raise HTTPException(status_code=404, detail=str(e.args[0])) from e
    return SoundParameters.from_dict({**base, **req.settings})


# ── Endpoints ────────────────────────────────────────────


@router.get("/presets")
def list_presets() -> dict:
    """List available preset recipes."""
    return {
        name: {
            "waveform": params.waveform,
            "frequency": params.frequency,
            "duration_s": round(duration(params), 4),
        }
        for name, params in PRESETS.items()
    }


@router.get("/presets/{name}")
def preset_detail(name: str) -> dict:
    """Full recipe for one preset."""
    try:
        return get_preset(name).to_dict()
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0])) from e


@router.get("/random")
def random_recipe(seed: int | None = None) -> dict:
    """A random valid recipe (reproducible when ``seed`` is given)."""
    return random_parameters(seed).to_dict()


@router.post("/generate")
def generate_sound(req: GenerateRequest) -> Response:
    """Render a recipe and return it as a 16-bit WAV file."""
    if not 0 < req.sample_rate <= config.settings.max_sample_rate:
        raise HTTPException(
            status_code=400,
            detail=f"sample_rate must be within 1..{config.settings.max_sample_rate} Hz",
        )
    params = _recipe_from(req)
    try:
        params.validate()
    except InvalidParameter as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if duration(params) > config.settings.max_render_seconds:
        raise HTTPException(
            status_code=400,
            detail=f"Sound longer than {config.settings.max_render_seconds}s",
        )

    try:
        buffer = generate(params, req.sample_rate)
        wav = encode_wav(buffer)
    except InvalidParameter as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except EncodingFailure as e:
        raise HTTPException(status_code=413, detail=str(e)) from e

    return Response(
        content=wav,
        media_type="audio/wav",
        headers={
            "X-Samples": str(len(buffer)),
            "X-Duration-S": f"{buffer.duration_s:.4f}",
        },
    )
