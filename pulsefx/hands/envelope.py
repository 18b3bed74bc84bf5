"""PULSEFX envelope — attack / sustain(+punch) / decay amplitude shape.

There is no release stage: the sound ends when the decay ramp reaches zero.
``duration()`` is the single source of truth for how long a recipe renders;
timelines, previews and the engine all size their buffers from it.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from pulsefx.hands.params import SoundParameters

# Silence appended after the decay so filters can ring out.
DURATION_TAIL_S = 0.1


def duration(params: SoundParameters) -> float:
    """Rendered length of ``params`` in seconds, tail included."""
    return params.attack + params.sustain + params.decay + DURATION_TAIL_S


def sample_count(params: SoundParameters, sr: int) -> int:
    """Number of samples ``generate`` produces for ``params`` at ``sr``."""
    return math.ceil(duration(params) * sr)


def envelope(t: float, params: SoundParameters) -> float:
    """Envelope gain at absolute time ``t`` (seconds), in [0, 1].

    The attack segment includes its end point, so ``t == 0`` is always
    silent, even with a zero-length attack.
    """
    attack, sustain, decay = params.attack, params.sustain, params.decay

    if t <= attack:
        env = t / attack if attack > 0 else 0.0
    elif t < attack + sustain:
        env = 1.0 + (params.punch / 100.0) * max(0.0, 1.0 - (t - attack) / sustain)
    elif t < attack + sustain + decay:
        env = 1.0 - (t - attack - sustain) / decay
    else:
        env = 0.0

    # Clamp last: punch overshoots before the clamp, never after.
    return max(0.0, min(1.0, env))


def envelope_curve(params: SoundParameters, n: int, sr: int) -> NDArray[np.float64]:
    """Vectorized ``envelope`` sampled at ``i / sr`` for ``i`` in ``range(n)``."""
    t = np.arange(n, dtype=np.float64) / sr
    attack, sustain, decay = params.attack, params.sustain, params.decay
    env = np.zeros(n, dtype=np.float64)

    in_attack = t <= attack
    if attack > 0:
        env[in_attack] = t[in_attack] / attack

    in_sustain = ~in_attack & (t < attack + sustain)
    if sustain > 0:
        progress = (t[in_sustain] - attack) / sustain
        env[in_sustain] = 1.0 + (params.punch / 100.0) * np.maximum(0.0, 1.0 - progress)

    in_decay = ~in_attack & ~in_sustain & (t < attack + sustain + decay)
    if decay > 0:
        env[in_decay] = 1.0 - (t[in_decay] - attack - sustain) / decay

    return np.clip(env, 0.0, 1.0)
