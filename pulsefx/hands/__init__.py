"""HANDS — Synthesis layer.

- Params: the immutable sound recipe
- Envelope: attack / sustain(+punch) / decay, shared duration formula
- Oscillator: slide, arpeggio, vibrato, duty sweep, waveform
- Filters: one-pole low-pass / high-pass post pass
- Synth: ``generate`` orchestrates all of the above
"""

from pulsefx.hands.envelope import DURATION_TAIL_S, duration, envelope, envelope_curve
from pulsefx.hands.params import WAVEFORMS, SoundParameters
from pulsefx.hands.presets import PRESETS, get_preset, random_parameters
from pulsefx.hands.synth import RenderedBuffer, generate

__all__ = [
    "DURATION_TAIL_S",
    "duration",
    "envelope",
    "envelope_curve",
    "WAVEFORMS",
    "SoundParameters",
    "PRESETS",
    "get_preset",
    "random_parameters",
    "RenderedBuffer",
    "generate",
]
