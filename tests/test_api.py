"""Tests for PULSEFX API — health, presets, generate, mixdown, schedule."""

from __future__ import annotations

import struct

import pytest
from fastapi.testclient import TestClient

from pulsefx.api.server import app
from pulsefx.hands.presets import PRESETS

client = TestClient(app)


def _layer(**overrides: object) -> dict:
    layer: dict = {"name": "beep", "settings": {"frequency": 440, "gain": -6}}
    layer.update(overrides)
    return layer


# ── Health & Version ─────────────────────────────────────


def test_health_check() -> None:
    """Health endpoint returns OK."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "pulsefx"}


def test_version() -> None:
    from pulsefx import __version__

    assert __version__ == "0.1.0"


def test_settings_defaults() -> None:
    """Settings load with correct defaults."""
    from pulsefx.config import Settings

    s = Settings()
    assert s.port == 8000
    assert s.sample_rate == 44100


def test_api_info() -> None:
    response = client.get("/api/info")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "PULSEFX"
    assert "hands_generate" in data["endpoints"]


# ── HANDS ────────────────────────────────────────────────


def test_list_presets() -> None:
    response = client.get("/api/hands/presets")
    assert response.status_code == 200
    assert set(response.json()) == set(PRESETS)


def test_preset_detail_and_missing() -> None:
    assert client.get("/api/hands/presets/laser").json()["waveform"] == "square"
    assert client.get("/api/hands/presets/kazoo").status_code == 404


def test_random_recipe_is_reproducible() -> None:
    a = client.get("/api/hands/random", params={"seed": 3}).json()
    b = client.get("/api/hands/random", params={"seed": 3}).json()
    assert a == b


def test_generate_returns_wav() -> None:
    response = client.post(
        "/api/hands/generate",
        json={"settings": {"frequency": 880, "sustain": 0.05, "decay": 0.05},
              "sample_rate": 22050},
    )
    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/wav"
    body = response.content
    assert body[:4] == b"RIFF" and body[8:12] == b"WAVE"
    samples = int(response.headers["X-Samples"])
    assert len(body) == 44 + samples * 2
    assert struct.unpack("<I", body[24:28])[0] == 22050


def test_generate_from_preset_with_override() -> None:
    response = client.post(
        "/api/hands/generate", json={"preset": "blip", "settings": {"gain_db": -20}}
    )
    assert response.status_code == 200


def test_generate_rejects_bad_input() -> None:
    response = client.post("/api/hands/generate", json={"settings": {"frequency": 0}})
    assert response.status_code == 400
    assert "frequency" in response.json()["detail"]

    response = client.post("/api/hands/generate", json={"preset": "kazoo"})
    assert response.status_code == 404

    response = client.post("/api/hands/generate", json={"sample_rate": 0})
    assert response.status_code == 400


def test_generate_rejects_overlong_sound() -> None:
    response = client.post("/api/hands/generate", json={"settings": {"sustain": 600}})
    assert response.status_code == 400


# ── CONSOLE ──────────────────────────────────────────────


def test_mixdown_returns_wav() -> None:
    response = client.post(
        "/api/console/mixdown",
        json={"layers": [_layer(), _layer(name="late", startTime=0.2, fadeOut=0.05)]},
    )
    assert response.status_code == 200
    assert response.content[:4] == b"RIFF"
    assert response.headers["X-Tracks-Mixed"] == "2"
    assert response.headers["X-Tracks-Failed"] == "0"


def test_mixdown_reports_failed_tracks() -> None:
    response = client.post(
        "/api/console/mixdown",
        json={"layers": [_layer(), _layer(name="bad", settings={"frequency": -1})]},
    )
    assert response.status_code == 200
    assert response.headers["X-Tracks-Failed"] == "1"


def test_mistyped_layers_do_not_break_the_mix() -> None:
    layers = [
        _layer(name="ok", settings={}),
        _layer(name="muted", settings={"attack": None}, muted=True),
        _layer(name="typo", settings={"decay": "long"}),
    ]
    response = client.post("/api/console/mixdown", json={"layers": layers})
    assert response.status_code == 200
    assert response.headers["X-Tracks-Mixed"] == "1"
    assert response.headers["X-Tracks-Failed"] == "1"

    response = client.post("/api/console/schedule", json={"layers": layers})
    assert response.status_code == 200
    plan = response.json()
    assert [c["name"] for c in plan["cues"]] == ["ok"]
    assert plan["failures"][0]["name"] == "typo"
    assert plan["failures"][0]["field"] == "decay"


def test_overlong_layer_is_reported_not_fatal() -> None:
    layers = [_layer(), _layer(name="late", startTime=600)]
    response = client.post("/api/console/schedule", json={"layers": layers})
    assert response.status_code == 200
    plan = response.json()
    assert [c["name"] for c in plan["cues"]] == ["beep"]
    assert plan["failures"][0]["name"] == "late"


def test_sample_rate_is_bounded() -> None:
    response = client.post("/api/hands/generate", json={"sample_rate": 10**9})
    assert response.status_code == 400

    response = client.post(
        "/api/console/mixdown", json={"sampleRate": 10**9, "layers": [_layer()]}
    )
    assert response.status_code == 400


def test_mixdown_with_nothing_active() -> None:
    response = client.post("/api/console/mixdown", json={"layers": [_layer(muted=True)]})
    assert response.status_code == 409


def test_schedule_lists_cues() -> None:
    response = client.post(
        "/api/console/schedule",
        json={"layers": [_layer(), _layer(name="late", startTime=0.5, fadeIn=0.1),
                         _layer(name="off", muted=True)]},
    )
    assert response.status_code == 200
    plan = response.json()
    assert [c["name"] for c in plan["cues"]] == ["beep", "late"]
    late = plan["cues"][1]
    assert late["start_s"] == pytest.approx(0.5)
    assert late["automation"][0] == [0.0, 0.0]
    assert plan["scale"] == 1.0
    assert plan["failures"] == []


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
