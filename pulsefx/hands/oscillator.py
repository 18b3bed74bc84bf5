"""PULSEFX oscillator — pitch modulation and the raw bipolar waveform.

The modulation state (slide, arpeggio, duty sweep) is carried sample by
sample with running accumulators, so the numeric result depends on the
update order below and must not be reordered:

  1. slide / delta-slide, floored at ``min_frequency``
  2. arpeggio toggle
  3. effective frequency = frequency x arpeggio multiplier
  4. vibrato
  5. phase advance
  6. waveform lookup
  7. duty sweep
"""

from __future__ import annotations

import math
from typing import Callable

import numpy as np
from numpy.typing import NDArray

from pulsefx.hands.params import SoundParameters

TWO_PI = 2.0 * math.pi

NOISE_SEED = 42


# ── Waveform Shapes ──────────────────────────────────────
# ``cycle`` is the phase within the current period, in [0, 1).


def _osc_square(cycle: float, duty: float) -> float:
    return 1.0 if cycle < duty else -1.0


def _osc_saw(cycle: float, duty: float) -> float:
    return 2.0 * cycle - 1.0


def _osc_sine(cycle: float, duty: float) -> float:
    return math.sin(TWO_PI * cycle)


def _osc_triangle(cycle: float, duty: float) -> float:
    return 2.0 * abs(2.0 * cycle - 1.0) - 1.0


_OSC_MAP: dict[str, Callable[[float, float], float]] = {
    "square": _osc_square,
    "sawtooth": _osc_saw,
    "sine": _osc_sine,
    "triangle": _osc_triangle,
}


# ── Modulation Core ──────────────────────────────────────


def oscillate(params: SoundParameters, n: int, sr: int) -> NDArray[np.float64]:
    """Render ``n`` raw oscillator samples (before envelope and gain).

    Args:
        params: Validated sound recipe.
        n: Number of samples to produce.
        sr: Sample rate in Hz.

    Returns:
        Bipolar waveform in [-1, 1].
    """
    out = np.empty(n, dtype=np.float64)

    phase = 0.0
    frequency = params.frequency
    slide = params.slide
    duty = params.duty / 100.0
    arp_elapsed = 0.0
    arp_mult = 1.0

    delta_slide_step = params.delta_slide / sr
    duty_step = params.duty_sweep / 100.0 / sr
    vibrato_depth = params.vibrato_depth / 100.0
    arp_active = params.arp_enabled and params.arp_interval > 0

    noise = params.waveform == "noise"
    shape = _OSC_MAP.get(params.waveform, _osc_square)
    rng = np.random.default_rng(NOISE_SEED)
    noise_value = float(rng.uniform(-1.0, 1.0))
    period = 0

    for i in range(n):
        t = i / sr

        slide += delta_slide_step
        frequency += slide
        frequency = max(params.min_frequency, frequency)

        if arp_active:
            arp_elapsed += 1.0 / sr
            if arp_elapsed >= params.arp_interval:
                arp_elapsed = 0.0
                arp_mult = params.arp_multiplier if arp_mult == 1.0 else 1.0

        f = frequency * arp_mult

        if params.vibrato_enabled:
            f *= 1.0 + math.sin(t * params.vibrato_speed * TWO_PI) * vibrato_depth

        phase += f / sr * TWO_PI
        wrapped = phase % TWO_PI

        if noise:
            # New random level once per oscillator period.
            current = int(phase // TWO_PI)
            if current != period:
                period = current
                noise_value = float(rng.uniform(-1.0, 1.0))
            out[i] = noise_value
        elif shape is _osc_square:
            out[i] = 1.0 if wrapped < TWO_PI * duty else -1.0
        else:
            out[i] = shape(wrapped / TWO_PI, duty)

        duty = min(1.0, max(0.0, duty + duty_step))

    return out
