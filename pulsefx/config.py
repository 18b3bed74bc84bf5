"""PULSEFX global configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8000
    env: str = "development"

    # Rendering
    sample_rate: int = 44100
    max_render_seconds: float = 30.0
    max_sample_rate: int = 192000

    # Paths
    export_dir: Path = Path("./exports")
    projects_dir: Path = Path("./projects")

    model_config = {"env_prefix": "PULSEFX_"}


settings = Settings()
