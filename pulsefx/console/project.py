"""PULSEFX project files — JSON track lists on disk.

Format (keys as written by the editor)::

    {
      "sampleRate": 44100,
      "layers": [
        {"name": "coin", "settings": {...}, "muted": false, "solo": false,
         "volume": 1.0, "startTime": 0.0, "fadeIn": 0.0, "fadeOut": 0.0}
      ]
    }

``settings`` accepts snake_case or the editor's camelCase recipe keys.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

import structlog
from pydantic import BaseModel, ConfigDict, Field

from pulsefx.console.mixer import TrackPlacement
from pulsefx.hands.params import SoundParameters

logger = structlog.get_logger()


class LayerModel(BaseModel):
    """One track as stored in a project file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = ""
    settings: dict[str, Any] = Field(default_factory=dict)
    muted: bool = False
    solo: bool = False
    volume: float = 1.0
    start_time: float = Field(0.0, alias="startTime")
    fade_in: float = Field(0.0, alias="fadeIn")
    fade_out: float = Field(0.0, alias="fadeOut")

    def to_placement(self) -> TrackPlacement:
        return TrackPlacement(
            parameters=SoundParameters.from_dict(self.settings),
            volume=self.volume,
            start_offset_s=self.start_time,
            fade_in_s=self.fade_in,
            fade_out_s=self.fade_out,
            muted=self.muted,
            solo=self.solo,
            name=self.name,
        )

    @classmethod
    def from_placement(cls, track: TrackPlacement) -> LayerModel:
        return cls(
            name=track.name,
            settings=track.parameters.to_dict(),
            muted=track.muted,
            solo=track.solo,
            volume=track.volume,
            start_time=track.start_offset_s,
            fade_in=track.fade_in_s,
            fade_out=track.fade_out_s,
        )


class ProjectModel(BaseModel):
    """A whole project: its sample rate and ordered track list."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sample_rate: int = Field(44100, alias="sampleRate")
    layers: list[LayerModel] = Field(default_factory=list)

    def placements(self) -> list[TrackPlacement]:
        return [layer.to_placement() for layer in self.layers]


def load_project(path: str | Path) -> ProjectModel:
    """Read and validate a project file."""
    p = Path(path)
    project = ProjectModel.model_validate(json.loads(p.read_text(encoding="utf-8")))
    logger.info("project.loaded", path=str(p), layers=len(project.layers))
    return project


def save_project(
    tracks: Sequence[TrackPlacement],
    path: str | Path,
    sample_rate: int = 44100,
) -> Path:
    """Write ``tracks`` to a project file."""
    project = ProjectModel(
        sample_rate=sample_rate,
        layers=[LayerModel.from_placement(t) for t in tracks],
    )
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(project.model_dump(by_alias=True), indent=2), encoding="utf-8")
    logger.info("project.saved", path=str(p), layers=len(project.layers))
    return p
