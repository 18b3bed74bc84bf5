"""PULSEFX Mixer — Timeline placement, fades, and clip-safe mixdown.

Every active track is rendered, placed on a shared sample timeline at its
start offset, shaped by its volume and fade ramps, and summed. The sum is
scaled down only if it would clip.

Live playback and file export go through the same ``plan_timeline``: a
playback adapter schedules each ``PlaybackCue`` (start time + gain
automation + the plan's shared ``scale``), export writes ``plan.mix``. Both
are built from ``PlaybackCue.render()``, so they cannot drift apart.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
import structlog
from numpy.typing import NDArray

from pulsefx.errors import InvalidParameter
from pulsefx.hands.envelope import duration
from pulsefx.hands.params import SoundParameters, require_finite, validate_sample_rate
from pulsefx.hands.synth import DEFAULT_SAMPLE_RATE, RenderedBuffer, generate

logger = structlog.get_logger()


# ── Data Types ───────────────────────────────────────────


@dataclass(frozen=True)
class TrackPlacement:
    """A sound recipe placed on the timeline. Read-only to the mixer."""

    parameters: SoundParameters = field(default_factory=SoundParameters)
    volume: float = 1.0  # 0-1 linear
    start_offset_s: float = 0.0
    fade_in_s: float = 0.0
    fade_out_s: float = 0.0
    muted: bool = False
    solo: bool = False
    name: str = ""

    def validate(self) -> TrackPlacement:
        """Raise ``InvalidParameter`` for out-of-range placement fields."""
        require_finite("volume", self.volume)
        if not 0.0 <= self.volume <= 1.0:
            raise InvalidParameter("volume", self.volume, "must be within 0..1")
        for name in ("start_offset_s", "fade_in_s", "fade_out_s"):
            value = getattr(self, name)
            require_finite(name, value)
            if value < 0:
                raise InvalidParameter(name, value, "must be >= 0")
        return self


@dataclass(frozen=True)
class TrackFailure:
    """A track that could not be rendered and was left out of the mix."""

    index: int
    name: str
    field: str
    reason: str


@dataclass(frozen=True)
class PlaybackCue:
    """One active track scheduled on the timeline."""

    index: int
    name: str
    buffer: RenderedBuffer
    offset_samples: int
    volume: float
    fade_in_samples: int
    fade_out_samples: int

    @property
    def start_s(self) -> float:
        return self.offset_samples / self.buffer.sample_rate

    @property
    def end_samples(self) -> int:
        return self.offset_samples + len(self.buffer)

    def fade(self) -> NDArray[np.float64]:
        """Per-sample fade gain over this cue's own buffer."""
        return fade_curve(len(self.buffer), self.fade_in_samples, self.fade_out_samples)

    def automation(self) -> list[tuple[float, float]]:
        """Fade envelope as ``(seconds from cue start, gain)`` ramp points.

        Linear interpolation between the points reproduces ``fade()``
        exactly, so a gain node ramping through them plays the same
        samples the offline mix contains.
        """
        n = len(self.buffer)
        sr = self.buffer.sample_rate
        points = {0.0, float(n)}
        n_in, n_out = self.fade_in_samples, self.fade_out_samples
        if n_in > 0 and n_out > 0 and n_in + n_out > n:
            # Ramps overlap: the peak sits where they cross.
            points.add(n * n_in / (n_in + n_out))
        else:
            if 0 < n_in < n:
                points.add(float(n_in))
            if 0 < n_out < n:
                points.add(float(n - n_out))
        return [(p / sr, _fade_gain(p, n, n_in, n_out)) for p in sorted(points)]

    def render(self) -> NDArray[np.float64]:
        """Samples this cue contributes to the mix, before normalization."""
        return self.buffer.samples.astype(np.float64) * self.volume * self.fade()


@dataclass(frozen=True)
class TimelinePlan:
    """Everything needed to play or export a set of tracks."""

    cues: tuple[PlaybackCue, ...]
    failures: tuple[TrackFailure, ...]
    sample_rate: int
    peak: float  # before normalization
    mix: RenderedBuffer

    @property
    def scale(self) -> float:
        """Gain applied to every cue so the mix never exceeds full scale."""
        return 1.0 / self.peak if self.peak > 1.0 else 1.0

    @property
    def is_empty(self) -> bool:
        return not self.cues


# ── Helpers ──────────────────────────────────────────────


def _fade_gain(i: float, n: int, n_in: int, n_out: int) -> float:
    gain = 1.0
    if n_in > 0:
        gain = min(gain, i / n_in)
    if n_out > 0:
        gain = min(gain, (n - i) / n_out)
    return max(0.0, gain)


def fade_curve(n: int, fade_in_samples: int, fade_out_samples: int) -> NDArray[np.float64]:
    """Linear 0→1 ramp over the first samples, 1→0 over the last ones.

    Where the two ramps overlap the lower of the two wins.
    """
    i = np.arange(n, dtype=np.float64)
    gain = np.ones(n, dtype=np.float64)
    if fade_in_samples > 0:
        gain = np.minimum(gain, i / fade_in_samples)
    if fade_out_samples > 0:
        gain = np.minimum(gain, (n - i) / fade_out_samples)
    return np.maximum(gain, 0.0)


def seconds_to_samples(seconds: float, sr: int) -> int:
    """Nearest sample index, halves rounded up."""
    return int(math.floor(seconds * sr + 0.5))


def active_tracks(tracks: Sequence[TrackPlacement]) -> list[int]:
    """Indices of the tracks that sound: solo tracks if any, else unmuted ones."""
    if any(t.solo for t in tracks):
        return [i for i, t in enumerate(tracks) if t.solo]
    return [i for i, t in enumerate(tracks) if not t.muted]


# ── Mixer Engine ─────────────────────────────────────────


def plan_timeline(
    tracks: Sequence[TrackPlacement],
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    max_seconds: float | None = None,
) -> TimelinePlan:
    """Render and place every active track; compute the clip-safe mix.

    A track whose recipe or placement is invalid, or that would end after
    ``max_seconds`` on the timeline, is skipped and reported in
    ``failures``; the remaining tracks still mix.
    """
    sr = validate_sample_rate(sample_rate)

    cues: list[PlaybackCue] = []
    failures: list[TrackFailure] = []
    for index in active_tracks(tracks):
        track = tracks[index]
        try:
            track.validate()
            track.parameters.validate()
            end = track.start_offset_s + duration(track.parameters)
            if max_seconds is not None and end > max_seconds:
                raise InvalidParameter(
                    "parameters", round(end, 4), f"track ends after the {max_seconds}s limit"
                )
            buffer = generate(track.parameters, sr)
        except InvalidParameter as e:
            logger.warning(
                "mixer.track.failed",
                index=index,
                name=track.name,
                field=e.field,
                reason=e.reason,
            )
            failures.append(TrackFailure(index, track.name, e.field, e.reason))
            continue

        cues.append(
            PlaybackCue(
                index=index,
                name=track.name,
                buffer=buffer,
                offset_samples=seconds_to_samples(track.start_offset_s, sr),
                volume=float(track.volume),
                fade_in_samples=seconds_to_samples(track.fade_in_s, sr),
                fade_out_samples=seconds_to_samples(track.fade_out_s, sr),
            )
        )

    length = max((cue.end_samples for cue in cues), default=0)
    output = np.zeros(length, dtype=np.float64)
    for cue in cues:
        output[cue.offset_samples : cue.end_samples] += cue.render()

    peak = float(np.max(np.abs(output))) if length else 0.0
    if peak > 1.0:
        output /= peak

    logger.debug(
        "mixer.plan.done",
        tracks=len(tracks),
        active=len(cues),
        failed=len(failures),
        samples=length,
        peak=round(peak, 4),
    )
    return TimelinePlan(
        cues=tuple(cues),
        failures=tuple(failures),
        sample_rate=sr,
        peak=peak,
        mix=RenderedBuffer(output, sr),
    )


def mixdown(
    tracks: Sequence[TrackPlacement],
    sample_rate: int = DEFAULT_SAMPLE_RATE,
) -> RenderedBuffer:
    """Mix ``tracks`` into one buffer; empty when no track is active."""
    return plan_timeline(tracks, sample_rate).mix
