"""PULSEFX sound recipe — the flat parameter set a track is rendered from.

A ``SoundParameters`` value is immutable: editors build a new one with
``replace()`` instead of mutating it, so a rendered buffer can never go stale
behind its recipe.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace as _replace
from typing import Any, Literal, Mapping

from pulsefx.errors import InvalidParameter

Waveform = Literal["square", "sawtooth", "sine", "triangle", "noise"]

WAVEFORMS: tuple[str, ...] = ("square", "sawtooth", "sine", "triangle", "noise")

# Legacy project files store recipes with the editor's camelCase keys.
_LEGACY_KEYS: dict[str, str] = {
    "minFreq": "min_frequency",
    "minFrequency": "min_frequency",
    "deltaSlide": "delta_slide",
    "vibratoEnable": "vibrato_enabled",
    "vibratoEnabled": "vibrato_enabled",
    "vibratoDepth": "vibrato_depth",
    "vibratoSpeed": "vibrato_speed",
    "arpEnable": "arp_enabled",
    "arpEnabled": "arp_enabled",
    "arpMult": "arp_multiplier",
    "arpMultiplier": "arp_multiplier",
    "arpSpeed": "arp_interval",
    "arpInterval": "arp_interval",
    "dutySweep": "duty_sweep",
    "lpfEnable": "low_pass_enabled",
    "lowPassEnabled": "low_pass_enabled",
    "lpf": "low_pass_cutoff",
    "lowPassCutoff": "low_pass_cutoff",
    "hpfEnable": "high_pass_enabled",
    "highPassEnabled": "high_pass_enabled",
    "hpf": "high_pass_cutoff",
    "highPassCutoff": "high_pass_cutoff",
    "gain": "gain_db",
    "gainDb": "gain_db",
}


@dataclass(frozen=True)
class SoundParameters:
    """One sound recipe.

    Times are in seconds, frequencies in Hz, ``punch``/``duty``/
    ``vibrato_depth`` in percent and ``duty_sweep`` in percent per second.
    """

    # Envelope
    attack: float = 0.0
    sustain: float = 0.1
    punch: float = 0.0
    decay: float = 0.2

    # Pitch
    frequency: float = 440.0
    min_frequency: float = 0.0
    slide: float = 0.0
    delta_slide: float = 0.0

    # Vibrato
    vibrato_enabled: bool = False
    vibrato_depth: float = 0.0
    vibrato_speed: float = 0.0

    # Arpeggio
    arp_enabled: bool = False
    arp_multiplier: float = 1.0
    arp_interval: float = 0.0

    # Oscillator
    duty: float = 50.0
    duty_sweep: float = 0.0
    waveform: Waveform = "square"

    # Filters
    low_pass_enabled: bool = False
    low_pass_cutoff: float = 22050.0
    high_pass_enabled: bool = False
    high_pass_cutoff: float = 0.0

    # Output
    gain_db: float = -10.0

    @property
    def amplitude(self) -> float:
        """Linear gain from ``gain_db`` (0.0 at -inf dB)."""
        return 10 ** (self.gain_db / 20.0)

    def replace(self, **changes: Any) -> SoundParameters:
        """Return a copy with ``changes`` applied."""
        return _replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SoundParameters:
        """Build a recipe from snake_case or legacy camelCase keys.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _LEGACY_KEYS.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)

    def validate(self) -> SoundParameters:
        """Raise ``InvalidParameter`` for any out-of-range field.

        Returns ``self`` so it can be chained.
        """
        for name in ("attack", "sustain", "punch", "decay"):
            require_finite(name, getattr(self, name))
            if getattr(self, name) < 0:
                raise InvalidParameter(name, getattr(self, name), "must be >= 0")

        require_finite("frequency", self.frequency)
        if self.frequency <= 0:
            raise InvalidParameter("frequency", self.frequency, "must be > 0")
        require_finite("min_frequency", self.min_frequency)
        if self.min_frequency < 0:
            raise InvalidParameter("min_frequency", self.min_frequency, "must be >= 0")
        require_finite("slide", self.slide)
        require_finite("delta_slide", self.delta_slide)

        require_finite("vibrato_depth", self.vibrato_depth)
        require_finite("vibrato_speed", self.vibrato_speed)

        require_finite("arp_multiplier", self.arp_multiplier)
        if self.arp_multiplier <= 0:
            raise InvalidParameter("arp_multiplier", self.arp_multiplier, "must be > 0")
        require_finite("arp_interval", self.arp_interval)
        if self.arp_interval < 0:
            raise InvalidParameter("arp_interval", self.arp_interval, "must be >= 0")

        require_finite("duty", self.duty)
        if not 0.0 <= self.duty <= 100.0:
            raise InvalidParameter("duty", self.duty, "must be within 0..100")
        require_finite("duty_sweep", self.duty_sweep)
        if self.waveform not in WAVEFORMS:
            raise InvalidParameter(
                "waveform", self.waveform, f"must be one of {', '.join(WAVEFORMS)}"
            )

        if self.low_pass_enabled:
            require_finite("low_pass_cutoff", self.low_pass_cutoff)
            if self.low_pass_cutoff <= 0:
                raise InvalidParameter("low_pass_cutoff", self.low_pass_cutoff, "must be > 0")
        if self.high_pass_enabled:
            require_finite("high_pass_cutoff", self.high_pass_cutoff)
            if self.high_pass_cutoff <= 0:
                raise InvalidParameter("high_pass_cutoff", self.high_pass_cutoff, "must be > 0")

        # -inf dB is silence; NaN and +inf are not gains.
        if math.isnan(self.gain_db) or self.gain_db == math.inf:
            raise InvalidParameter("gain_db", self.gain_db, "must be finite or -inf")
        return self


def validate_sample_rate(sample_rate: int) -> int:
    """Return ``sample_rate`` as int, raising ``InvalidParameter`` if not > 0."""
    if isinstance(sample_rate, bool) or not isinstance(sample_rate, (int, float)):
        raise InvalidParameter("sample_rate", sample_rate, "must be a number")
    if not math.isfinite(sample_rate) or sample_rate <= 0:
        raise InvalidParameter("sample_rate", sample_rate, "must be > 0")
    if int(sample_rate) != sample_rate:
        raise InvalidParameter("sample_rate", sample_rate, "must be a whole number of Hz")
    return int(sample_rate)


def require_finite(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParameter(name, value, "must be a number")
    if not math.isfinite(value):
        raise InvalidParameter(name, value, "must be finite")
