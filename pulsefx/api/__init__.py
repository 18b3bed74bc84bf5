"""PULSEFX HTTP API."""
