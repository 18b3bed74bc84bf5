"""PULSEFX — Parametric pulse-wave sound effect synthesizer."""

__version__ = "0.1.0"
