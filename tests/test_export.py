"""PULSEFX export tests — RIFF/WAVE layout, PCM conversion, file output."""

import struct
from io import BytesIO

import numpy as np
import pytest
import soundfile as sf

from pulsefx.console.export import (
    check_wav_size,
    encode_wav,
    export_mix,
    pcm16,
    write_wav,
)
from pulsefx.console.mixer import TrackPlacement, plan_timeline
from pulsefx.errors import EmptyMixdown, EncodingFailure
from pulsefx.hands.presets import get_preset
from pulsefx.hands.synth import RenderedBuffer, generate


# ── Header ───────────────────────────────────────────────


def test_one_second_of_silence():
    buffer = RenderedBuffer(np.zeros(44100, dtype=np.float32), 44100)
    data = encode_wav(buffer)

    assert len(data) == 44 + 44100 * 2
    (
        riff, riff_size, wave, fmt, fmt_size, audio_format, channels,
        sample_rate, byte_rate, block_align, bits, data_id, data_len,
    ) = struct.unpack("<4sI4s4sIHHIIHH4sI", data[:44])
    assert (riff, wave, fmt, data_id) == (b"RIFF", b"WAVE", b"fmt ", b"data")
    assert riff_size == 36 + 88200
    assert fmt_size == 16
    assert audio_format == 1
    assert channels == 1
    assert sample_rate == 44100
    assert byte_rate == 88200
    assert block_align == 2
    assert bits == 16
    assert data_len == 88200
    assert data[44:] == b"\x00" * 88200


def test_empty_buffer_encodes_header_only():
    data = encode_wav(RenderedBuffer.empty(22050))
    info = sf.info(BytesIO(data))
    assert data[:4] == b"RIFF"
    assert info.frames == 0
    assert info.samplerate == 22050


def test_oversized_buffer_is_rejected():
    assert check_wav_size(44100, 44100) == 88200
    with pytest.raises(EncodingFailure):
        check_wav_size(2**31, 44100)


def test_encoded_samples_are_exact_pcm():
    buffer = generate(get_preset("pickup"), 22050)
    data, sr = sf.read(BytesIO(encode_wav(buffer)), dtype="int16")
    assert sr == 22050
    assert np.array_equal(data, pcm16(buffer.samples))


# ── PCM Conversion ───────────────────────────────────────


def test_pcm16_scaling_is_asymmetric_and_truncates():
    samples = np.array([-1.0, -0.5, -1e-5, 0.0, 0.5, 1.0, 2.0, -2.0])
    assert pcm16(samples).tolist() == [-32768, -16384, 0, 0, 16383, 32767, 32767, -32768]


def test_samples_are_little_endian():
    data = encode_wav(RenderedBuffer(np.array([1.0, -1.0], dtype=np.float32), 8000))
    assert data[44:] == b"\xff\x7f\x00\x80"


# ── Files ────────────────────────────────────────────────


def test_written_file_reads_back(tmp_path):
    buffer = generate(get_preset("laser"), 44100)
    path = write_wav(buffer, tmp_path / "out" / "laser.wav")

    data, sr = sf.read(str(path), dtype="int16")
    assert sr == 44100
    assert np.array_equal(data, pcm16(buffer.samples))


def test_export_mix_writes_plan(tmp_path):
    plan = plan_timeline(
        [TrackPlacement(parameters=get_preset("jump")),
         TrackPlacement(parameters=get_preset("blip"), start_offset_s=0.1)],
        44100,
    )
    path = export_mix(plan, tmp_path / "mix.wav")
    data, sr = sf.read(str(path), dtype="int16")
    assert sr == 44100
    assert np.array_equal(data, pcm16(plan.mix.samples))


def test_export_mix_refuses_empty_plan(tmp_path):
    plan = plan_timeline([TrackPlacement(muted=True)], 44100)
    with pytest.raises(EmptyMixdown):
        export_mix(plan, tmp_path / "nothing.wav")
    assert not (tmp_path / "nothing.wav").exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
