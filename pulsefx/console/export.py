"""PULSEFX export — 16-bit PCM mono WAV encoding.

The sample conversion is fixed (clamp to [-1, 1], negatives x32768,
non-negatives x32767, truncate toward zero) so exported files match the
editor's own WAV writer byte for byte. libsndfile writes int16 data as-is,
so the container is left to soundfile.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

import numpy as np
import soundfile as sf
import structlog
from numpy.typing import NDArray

from pulsefx.console.mixer import TimelinePlan
from pulsefx.errors import EmptyMixdown, EncodingFailure
from pulsefx.hands.synth import RenderedBuffer

logger = structlog.get_logger()

WAV_HEADER_BYTES = 44
_MAX_CHUNK = 0xFFFFFFFF
_BYTES_PER_SAMPLE = 2


def pcm16(samples: NDArray[np.floating]) -> NDArray[np.int16]:
    """Convert float samples to 16-bit signed PCM."""
    clipped = np.clip(np.asarray(samples, dtype=np.float64), -1.0, 1.0)
    scaled = np.where(clipped < 0, clipped * 32768.0, clipped * 32767.0)
    return np.trunc(scaled).astype(np.int16)


def check_wav_size(n_samples: int, sample_rate: int) -> int:
    """Size in bytes of the PCM data chunk for ``n_samples`` mono samples.

    Raises:
        EncodingFailure: If the file would not fit the RIFF 32-bit size
            fields.
    """
    data_len = n_samples * _BYTES_PER_SAMPLE
    if WAV_HEADER_BYTES - 8 + data_len > _MAX_CHUNK:
        raise EncodingFailure(
            f"{n_samples} samples ({data_len} bytes) exceed the RIFF size limit"
        )
    if sample_rate * _BYTES_PER_SAMPLE > _MAX_CHUNK:
        raise EncodingFailure(f"sample rate {sample_rate} Hz is too high for WAV")
    return data_len


def _write(buffer: RenderedBuffer, target: str | BytesIO) -> None:
    check_wav_size(len(buffer), buffer.sample_rate)
    sf.write(
        target,
        pcm16(buffer.samples),
        buffer.sample_rate,
        format="WAV",
        subtype="PCM_16",
    )


def encode_wav(buffer: RenderedBuffer) -> bytes:
    """Encode a buffer as a complete WAV file in memory.

    An empty buffer encodes to a header-only file.
    """
    out = BytesIO()
    _write(buffer, out)
    return out.getvalue()


def write_wav(buffer: RenderedBuffer, path: str | Path) -> Path:
    """Encode ``buffer`` and write it to ``path`` (parents created)."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    _write(buffer, str(p))
    logger.info(
        "export.wav.written",
        path=str(p),
        samples=len(buffer),
        sample_rate=buffer.sample_rate,
        bytes=p.stat().st_size,
    )
    return p


def export_mix(plan: TimelinePlan, path: str | Path) -> Path:
    """Write a timeline plan's mix to ``path``.

    Raises:
        EmptyMixdown: If no track was active, so there is nothing to export.
    """
    if plan.is_empty:
        raise EmptyMixdown("no active tracks to export")
    return write_wav(plan.mix, path)
