"""CONSOLE — Timeline mixdown and export layer.

Modules:
  mixer: active-set selection, placement, fades, clip-safe mixdown
  export: 16-bit PCM WAV encoding
  project: JSON project files
"""

from pulsefx.console.export import encode_wav, export_mix, write_wav
from pulsefx.console.mixer import (
    PlaybackCue,
    TimelinePlan,
    TrackFailure,
    TrackPlacement,
    active_tracks,
    mixdown,
    plan_timeline,
)
from pulsefx.console.project import load_project, save_project

__all__ = [
    "encode_wav",
    "export_mix",
    "write_wav",
    "PlaybackCue",
    "TimelinePlan",
    "TrackFailure",
    "TrackPlacement",
    "active_tracks",
    "mixdown",
    "plan_timeline",
    "load_project",
    "save_project",
]
