import json
import logging

import pytest

from universe import presets_loader
from universe.errors import ConfigurationError


def write_template(tmp_path, data, name="scene.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_bundled_templates_are_listed():
    names = dict(presets_loader.list_templates())
    assert names["three_body.json"] == "Three bodies"
    assert "two_body.json" in names


def test_default_bodies_match_startup_set():
    bodies = presets_loader.default_bodies()
    assert [b.id for b in bodies] == ["left", "right", "far"]
    right = bodies[1]
    assert right.name == "Right"
    assert right.mass == 1.0
    assert right.position == (10.0, 0.1, 0.0)
    assert right.velocity == (0.0, 0.0, 100.0)
    assert right.color == (0, 255, 255)


def test_load_template_from_path(tmp_path):
    path = write_template(tmp_path, {
        "name": "Custom",
        "universe": {"gravitational_constant": 1.0, "forecast_steps": 5},
        "bodies": [{"id": "x", "mass": 2, "position": [1, 2, 3], "color": [300, -5, 10]}],
    })
    bodies, overrides, display = presets_loader.load_template(path)
    assert display == "Custom"
    assert overrides == {"gravitational_constant": 1.0, "forecast_steps": 5}
    (body,) = bodies
    assert body.position == (1.0, 2.0, 3.0)
    assert body.velocity == (0.0, 0.0, 0.0)
    assert body.color == (255, 0, 10)
    assert body.name == "x"


@pytest.mark.parametrize("data", [
    {"bodies": [{"id": "x", "mass": -1}]},
    {"bodies": [{"id": "x"}]},
    {"bodies": [{"mass": 1.0}]},
    {"bodies": [{"id": "x", "mass": "heavy"}]},
    {"bodies": [{"id": "x", "mass": 1.0, "position": [0, 0]}]},
    {"bodies": [{"id": "x", "mass": 1.0}, {"id": "x", "mass": 2.0}]},
    {"bodies": {"id": "x"}},
    {"universe": {"gravitational_constant": 0}, "bodies": []},
    {"universe": {"warp": 9}, "bodies": []},
])
def test_malformed_templates_are_rejected(tmp_path, data):
    path = write_template(tmp_path, data)
    with pytest.raises(ConfigurationError):
        presets_loader.load_template(path)


def test_invalid_json_is_rejected(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        presets_loader.load_template(str(path))


def test_missing_template_is_rejected():
    with pytest.raises(ConfigurationError):
        presets_loader.load_template("no_such_template.json")


def test_list_templates_skips_broken_files(tmp_path, monkeypatch, caplog):
    write_template(tmp_path, {"name": "Good", "bodies": [{"id": "x", "mass": 1.0}]}, "good.json")
    write_template(tmp_path, {"bodies": [{"id": "y", "mass": 2.0}]}, "unnamed.json")
    write_template(tmp_path, {"bodies": [{"id": "z", "mass": -1.0}]}, "bad_mass.json")
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
    monkeypatch.setattr(presets_loader, "TEMPLATES_DIR", str(tmp_path))

    with caplog.at_level(logging.WARNING, logger="universe.presets_loader"):
        templates = presets_loader.list_templates()

    assert templates == [("good.json", "Good"), ("unnamed.json", "unnamed")]
    assert "bad_mass.json" in caplog.text
    assert "broken.json" in caplog.text


def test_list_templates_without_directory(tmp_path, monkeypatch):
    monkeypatch.setattr(presets_loader, "TEMPLATES_DIR", str(tmp_path / "missing"))
    assert presets_loader.list_templates() == []
