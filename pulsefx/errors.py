"""PULSEFX error types.

All rendering errors are local and recoverable: callers decide whether to
retry with corrected parameters, fall back to defaults, or report them.
"""

from __future__ import annotations


class PulseFXError(Exception):
    """Base class for all PULSEFX errors."""


class InvalidParameter(PulseFXError, ValueError):
    """A sound recipe, track placement or sample rate is out of range."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field}={value!r}: {reason}")


class EmptyMixdown(PulseFXError):
    """No active tracks — there is nothing to play or export."""


class EncodingFailure(PulseFXError):
    """Buffer cannot be represented in the target container."""
