"""PULSEFX Synthesis Engine — recipe in, mono buffer out.

``generate`` is a pure function: the same ``(params, sample_rate)`` pair
always yields the identical sample sequence, so callers are free to cache,
replay or render in parallel without coordination.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import structlog
from numpy.typing import NDArray

from pulsefx.errors import InvalidParameter
from pulsefx.hands.envelope import duration, envelope_curve, sample_count
from pulsefx.hands.filters import apply_filters
from pulsefx.hands.oscillator import oscillate
from pulsefx.hands.params import SoundParameters, validate_sample_rate

logger = structlog.get_logger()

DEFAULT_SAMPLE_RATE = 44100


# ── Data Types ───────────────────────────────────────────


@dataclass(frozen=True, eq=False)
class RenderedBuffer:
    """Immutable mono float32 audio at a fixed sample rate."""

    samples: NDArray[np.float32]
    sample_rate: int = DEFAULT_SAMPLE_RATE

    def __post_init__(self) -> None:
        # Private copy so the caller's array can't change it afterwards.
        samples = np.array(self.samples, dtype=np.float32)
        samples.flags.writeable = False
        object.__setattr__(self, "samples", samples)

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def duration_s(self) -> float:
        return len(self.samples) / self.sample_rate

    @property
    def peak(self) -> float:
        """Largest absolute sample value (0.0 for an empty buffer)."""
        if len(self.samples) == 0:
            return 0.0
        return float(np.max(np.abs(self.samples)))

    @classmethod
    def empty(cls, sample_rate: int = DEFAULT_SAMPLE_RATE) -> RenderedBuffer:
        return cls(np.zeros(0, dtype=np.float32), sample_rate)


# ── Engine ───────────────────────────────────────────────


def render(params: SoundParameters, sr: int = DEFAULT_SAMPLE_RATE) -> NDArray[np.float64]:
    """Render ``params`` to a float64 array (no validation).

    Oscillator, then envelope and gain, then the filter stage over the
    whole unfiltered signal.
    """
    n = sample_count(params, sr)
    audio = oscillate(params, n, sr)
    audio *= envelope_curve(params, n, sr)
    audio *= params.amplitude
    return apply_filters(audio, params, sr)


def generate(
    params: SoundParameters, sample_rate: int = DEFAULT_SAMPLE_RATE
) -> RenderedBuffer:
    """Render one sound recipe.

    Args:
        params: The sound recipe.
        sample_rate: Output sample rate in Hz.

    Returns:
        A buffer of ``ceil(duration(params) * sample_rate)`` samples.

    Raises:
        InvalidParameter: If ``params`` or ``sample_rate`` is out of range,
            or the recipe drives the oscillator to non-finite values.
    """
    sr = validate_sample_rate(sample_rate)
    params.validate()

    audio = render(params, sr).astype(np.float32)
    if not np.all(np.isfinite(audio)):
        raise InvalidParameter("parameters", params, "render produced non-finite samples")

    logger.debug(
        "synth.generate.done",
        samples=len(audio),
        duration_s=round(duration(params), 4),
        sample_rate=sr,
        waveform=params.waveform,
    )
    return RenderedBuffer(audio, sr)
