"""PULSEFX project file tests — legacy layout, save/load round trip."""

import json

import pytest

from pulsefx.console.mixer import TrackPlacement
from pulsefx.console.project import ProjectModel, load_project, save_project
from pulsefx.hands.params import SoundParameters
from pulsefx.hands.presets import get_preset


def test_load_editor_project(tmp_path):
    path = tmp_path / "sfx-project.json"
    path.write_text(json.dumps({
        "layers": [
            {
                "name": "Layer 1",
                "settings": {"frequency": 660, "minFreq": 100, "lpfEnable": True,
                             "lpf": 3000, "gain": -12},
                "muted": False,
                "solo": True,
            },
            {"name": "Layer 2", "settings": {}, "muted": True, "startTime": 0.5,
             "fadeIn": 0.01, "fadeOut": 0.05, "volume": 0.8},
        ]
    }))

    project = load_project(path)
    assert project.sample_rate == 44100
    first, second = project.placements()

    assert first.name == "Layer 1"
    assert first.solo is True
    assert first.parameters.frequency == 660
    assert first.parameters.min_frequency == 100
    assert first.parameters.low_pass_enabled is True
    assert first.parameters.gain_db == -12

    assert second.muted is True
    assert second.parameters == SoundParameters()
    assert (second.start_offset_s, second.fade_in_s, second.fade_out_s) == (0.5, 0.01, 0.05)
    assert second.volume == 0.8


def test_save_and_load_round_trip(tmp_path):
    tracks = [
        TrackPlacement(parameters=get_preset("laser"), name="zap", volume=0.7,
                       start_offset_s=0.25, fade_out_s=0.1),
        TrackPlacement(parameters=get_preset("explosion"), name="boom", muted=True),
    ]
    path = save_project(tracks, tmp_path / "nested" / "p.json", sample_rate=48000)

    raw = json.loads(path.read_text())
    assert raw["sampleRate"] == 48000
    assert raw["layers"][0]["startTime"] == 0.25

    project = load_project(path)
    assert project.sample_rate == 48000
    assert project.placements() == tracks


def test_project_model_accepts_snake_case_fields():
    project = ProjectModel.model_validate(
        {"sample_rate": 22050, "layers": [{"start_time": 1.0, "fade_in": 0.2}]}
    )
    track = project.placements()[0]
    assert project.sample_rate == 22050
    assert track.start_offset_s == 1.0
    assert track.fade_in_s == 0.2


# ── Render Script ────────────────────────────────────────


def _load_script():
    import importlib.util
    from pathlib import Path

    path = Path(__file__).resolve().parent.parent / "scripts" / "render_project.py"
    spec = importlib.util.spec_from_file_location("render_project", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_render_script_project_and_preset(tmp_path):
    script = _load_script()
    project = save_project([TrackPlacement(parameters=get_preset("blip"))], tmp_path / "p.json")

    assert script.main([str(project), "-o", str(tmp_path / "mix.wav")]) == 0
    assert (tmp_path / "mix.wav").read_bytes()[:4] == b"RIFF"

    assert script.main(["--preset", "hit", "-o", str(tmp_path / "hit.wav")]) == 0
    assert (tmp_path / "hit.wav").exists()


def test_render_script_uses_configured_dirs(tmp_path, monkeypatch):
    from pulsefx.config import settings

    monkeypatch.setattr(settings, "projects_dir", tmp_path / "projects")
    monkeypatch.setattr(settings, "export_dir", tmp_path / "exports")
    monkeypatch.chdir(tmp_path)
    save_project([TrackPlacement(parameters=get_preset("jump"))],
                 tmp_path / "projects" / "coins.json")
    script = _load_script()

    assert script.main(["coins.json"]) == 0
    assert (tmp_path / "exports" / "coins.wav").read_bytes()[:4] == b"RIFF"

    assert script.main(["--random", "4"]) == 0
    assert (tmp_path / "exports" / "random-4.wav").exists()


def test_render_script_missing_project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    script = _load_script()
    assert script.main(["nowhere.json", "-o", str(tmp_path / "x.wav")]) == 2


def test_render_script_empty_project(tmp_path):
    script = _load_script()
    project = save_project([TrackPlacement(muted=True)], tmp_path / "p.json")
    assert script.main([str(project), "-o", str(tmp_path / "mix.wav")]) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
