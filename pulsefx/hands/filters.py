"""PULSEFX filter stage — one-pole IIR low-pass and high-pass.

Both filters run as a second pass over a complete buffer, low-pass first.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray
from scipy.signal import lfilter

from pulsefx.hands.params import SoundParameters


def _rc_dt(cutoff_hz: float, sr: int) -> tuple[float, float]:
    return 1.0 / (2.0 * math.pi * cutoff_hz), 1.0 / sr


def low_pass(
    audio: NDArray[np.float64], cutoff_hz: float, sr: int = 44100
) -> NDArray[np.float64]:
    """``y[i] = y[i-1] + a * (x[i] - y[i-1])`` with ``y[0] = x[0]``."""
    if len(audio) == 0:
        return audio.astype(np.float64)
    rc, dt = _rc_dt(cutoff_hz, sr)
    alpha = dt / (rc + dt)
    # Initial state chosen so the first output equals the first input.
    zi = np.array([(1.0 - alpha) * audio[0]])
    y, _ = lfilter([alpha], [1.0, -(1.0 - alpha)], audio, zi=zi)
    return y.astype(np.float64)


def high_pass(
    audio: NDArray[np.float64], cutoff_hz: float, sr: int = 44100
) -> NDArray[np.float64]:
    """``y[i] = a * (y[i-1] + x[i] - x[i-1])`` with ``y[0] = 0``."""
    if len(audio) == 0:
        return audio.astype(np.float64)
    rc, dt = _rc_dt(cutoff_hz, sr)
    alpha = rc / (rc + dt)
    # Initial state cancels the first input so the first output is zero.
    zi = np.array([-alpha * audio[0]])
    y, _ = lfilter([alpha, -alpha], [1.0, -alpha], audio, zi=zi)
    return y.astype(np.float64)


def apply_filters(
    audio: NDArray[np.float64], params: SoundParameters, sr: int = 44100
) -> NDArray[np.float64]:
    """Apply the filters ``params`` enables; disabled filters are skipped."""
    if params.low_pass_enabled:
        audio = low_pass(audio, params.low_pass_cutoff, sr)
    if params.high_pass_enabled:
        audio = high_pass(audio, params.high_pass_cutoff, sr)
    return audio
