"""PULSEFX API — CONSOLE routes (timeline mixdown and playback planning)."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from pulsefx.config import settings
from pulsefx.console.export import encode_wav
from pulsefx.console.mixer import TimelinePlan, TrackPlacement, plan_timeline
from pulsefx.console.project import ProjectModel
from pulsefx.errors import EncodingFailure, InvalidParameter

router = APIRouter(prefix="/console", tags=["console"])


def _plan(project: ProjectModel) -> TimelinePlan:
    if not 0 < project.sample_rate <= settings.max_sample_rate:
        raise HTTPException(
            status_code=400,
            detail=f"sampleRate must be within 1..{settings.max_sample_rate} Hz",
        )
    tracks: list[TrackPlacement] = project.placements()
    try:
        return plan_timeline(tracks, project.sample_rate, settings.max_render_seconds)
    except InvalidParameter as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post("/mixdown")
def mixdown_project(project: ProjectModel) -> Response:
    """Mix all active layers and return the result as a 16-bit WAV file."""
    plan = _plan(project)
    if plan.is_empty:
        raise HTTPException(
            status_code=409,
            detail={
                "error": "no active tracks",
                "failures": [asdict(f) for f in plan.failures],
            },
        )
    try:
        wav = encode_wav(plan.mix)
    except EncodingFailure as e:
        raise HTTPException(status_code=413, detail=str(e)) from e

    return Response(
        content=wav,
        media_type="audio/wav",
        headers={
            "X-Tracks-Mixed": str(len(plan.cues)),
            "X-Tracks-Failed": str(len(plan.failures)),
            "X-Peak": f"{plan.peak:.6f}",
        },
    )


@router.post("/schedule")
def schedule_project(project: ProjectModel) -> dict:
    """Playback plan for a live player: start times, gain ramps, shared scale."""
    plan = _plan(project)
    return {
        "sample_rate": plan.sample_rate,
        "length_samples": len(plan.mix),
        "peak": plan.peak,
        "scale": plan.scale,
        "cues": [
            {
                "index": cue.index,
                "name": cue.name,
                "start_s": cue.start_s,
                "duration_s": cue.buffer.duration_s,
                "volume": cue.volume,
                "automation": [[t, g] for t, g in cue.automation()],
            }
            for cue in plan.cues
        ],
        "failures": [asdict(f) for f in plan.failures],
    }
