"""PULSEFX preset recipes and the random recipe generator.

Slide values are per-sample frequency increments at the engine's sample
rate, so small numbers sweep fast.
"""

from __future__ import annotations

import numpy as np

from pulsefx.hands.params import SoundParameters

PRESETS: dict[str, SoundParameters] = {
    "pickup": SoundParameters(
        attack=0.0, sustain=0.075, punch=48.0, decay=0.053,
        frequency=1243.0, arp_enabled=True, arp_multiplier=1.5, arp_interval=0.05,
        duty=50.0, gain_db=-10.0,
    ),
    "laser": SoundParameters(
        attack=0.0, sustain=0.15, punch=0.0, decay=0.3,
        frequency=1200.0, min_frequency=150.0, slide=-0.03,
        duty=25.0, duty_sweep=40.0, gain_db=-12.0,
    ),
    "explosion": SoundParameters(
        attack=0.0, sustain=0.5, punch=80.0, decay=0.8,
        frequency=80.0, min_frequency=20.0, slide=-0.0005, waveform="noise",
        low_pass_enabled=True, low_pass_cutoff=1500.0, gain_db=-8.0,
    ),
    "jump": SoundParameters(
        attack=0.0, sustain=0.12, punch=10.0, decay=0.18,
        frequency=320.0, slide=0.006, duty=40.0,
        high_pass_enabled=True, high_pass_cutoff=120.0, gain_db=-12.0,
    ),
    "powerup": SoundParameters(
        attack=0.01, sustain=0.25, punch=20.0, decay=0.3,
        frequency=440.0, slide=0.002, delta_slide=0.5,
        vibrato_enabled=True, vibrato_depth=8.0, vibrato_speed=12.0,
        arp_enabled=True, arp_multiplier=1.25, arp_interval=0.08,
        gain_db=-12.0,
    ),
    "hit": SoundParameters(
        attack=0.0, sustain=0.03, punch=60.0, decay=0.12,
        frequency=220.0, min_frequency=40.0, slide=-0.01, waveform="noise",
        low_pass_enabled=True, low_pass_cutoff=4000.0, gain_db=-8.0,
    ),
    "blip": SoundParameters(
        attack=0.0, sustain=0.04, punch=0.0, decay=0.04,
        frequency=880.0, duty=50.0, gain_db=-14.0,
    ),
}


def get_preset(name: str) -> SoundParameters:
    """Look up a preset recipe by name."""
    try:
        return PRESETS[name]
    except KeyError:
        raise KeyError(
            f"Unknown preset {name!r}; available: {', '.join(sorted(PRESETS))}"
        ) from None


def random_parameters(seed: int | None = None) -> SoundParameters:
    """Draw a random but always-valid recipe; reproducible for a given seed."""
    rng = np.random.default_rng(seed)

    def uniform(low: float, high: float) -> float:
        return round(float(rng.uniform(low, high)), 4)

    def chance(p: float) -> bool:
        return bool(rng.random() < p)

    frequency = uniform(100.0, 2000.0)
    return SoundParameters(
        attack=uniform(0.0, 0.1) if chance(0.3) else 0.0,
        sustain=uniform(0.02, 0.4),
        punch=uniform(0.0, 80.0),
        decay=uniform(0.05, 0.6),
        frequency=frequency,
        min_frequency=uniform(20.0, frequency / 2),
        slide=uniform(-0.02, 0.02) if chance(0.5) else 0.0,
        delta_slide=uniform(-0.5, 0.5) if chance(0.2) else 0.0,
        vibrato_enabled=chance(0.3),
        vibrato_depth=uniform(0.0, 20.0),
        vibrato_speed=uniform(1.0, 20.0),
        arp_enabled=chance(0.3),
        arp_multiplier=uniform(0.5, 2.0),
        arp_interval=uniform(0.03, 0.2),
        duty=uniform(10.0, 90.0),
        duty_sweep=uniform(-50.0, 50.0) if chance(0.3) else 0.0,
        waveform=str(rng.choice(["square", "square", "sawtooth", "triangle", "noise"])),  # type: ignore[arg-type]
        low_pass_enabled=chance(0.3),
        low_pass_cutoff=uniform(800.0, 12000.0),
        high_pass_enabled=chance(0.2),
        high_pass_cutoff=uniform(50.0, 800.0),
        gain_db=uniform(-20.0, -6.0),
    )
