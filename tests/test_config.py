"""Tests for config persistence."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from dance_floor import config


def test_load_defaults_when_missing(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    loaded = config.load_config()
    assert loaded == config.DancePartyConfig()


def test_load_defaults_when_corrupt(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    (tmp_path / "config.json").write_text("{not-json", encoding="utf-8")
    loaded = config.load_config()
    assert loaded == config.DancePartyConfig()


def test_load_defaults_when_not_a_mapping(tmp_path: Path) -> None:
    path = tmp_path / "custom.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert config.load_config(path) == config.DancePartyConfig()


def test_load_defaults_when_read_fails(monkeypatch, tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{}", encoding="utf-8")

    def boom(*_args, **_kwargs) -> str:
        raise OSError("nope")

    monkeypatch.setattr(config, "get_config_path", lambda: config_path)
    monkeypatch.setattr(Path, "read_text", boom)
    loaded = config.load_config()
    assert loaded == config.DancePartyConfig()


def test_save_load_round_trip(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    original = config.DancePartyConfig().with_overrides(
        weights={"has_message": 5.0},
        layout={"vertical_jitter": 2, "min_spacing": 0.05},
        dock={"max_scale": 2.5, "falloff_fn": "gaussian"},
    )
    config.save_config(original)
    loaded = config.load_config()
    assert loaded == original


def test_save_config_atomic_write(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    replaced: list[tuple[Path, Path]] = []

    def fake_replace(src: Path, dest: Path) -> None:
        replaced.append((src, dest))
        assert src.exists()
        data = json.loads(src.read_text(encoding="utf-8"))
        assert set(data) == {"weights", "layout", "dock"}
        dest.write_text(json.dumps(data), encoding="utf-8")

    monkeypatch.setattr(config.os, "replace", fake_replace)
    config.save_config(config.DancePartyConfig())
    assert replaced
    src, dest = replaced[0]
    assert src.suffix == ".tmp"
    assert dest.name == "config.json"


def test_config_from_mapping_sanitizes_values() -> None:
    raw = {
        "weights": {"has_message": "lots", "jitter_weight": -3, "has_paid": True},
        "layout": {
            "center_bias_max": 4,
            "vertical_jitter": 2.5,
            "solo_affinity": -1,
            "message_balance_rate": float("nan"),
            "min_spacing": -0.2,
        },
        "dock": {"max_scale": 0.5, "falloff_fn": "linear", "neighbor_count": 3},
    }
    cfg = config.config_from_mapping(raw)
    assert cfg.weights.has_message == 3.0
    assert cfg.weights.jitter_weight == 0.0
    assert cfg.weights.has_paid == 2.0
    assert cfg.layout.center_bias_max == 1.0
    assert cfg.layout.vertical_jitter == 4
    assert cfg.layout.solo_affinity == 0.0
    assert cfg.layout.message_balance_rate == 0.5
    assert cfg.layout.min_spacing == 0.0
    assert cfg.dock.max_scale == 1.0
    assert cfg.dock.falloff_fn == "cosine"
    assert cfg.dock.neighbor_count == 3.0


def test_config_from_mapping_ignores_bad_sections() -> None:
    cfg = config.config_from_mapping({"weights": [], "dock": "big"})
    assert cfg == config.DancePartyConfig()


def test_with_overrides_rejects_unknown_field() -> None:
    with pytest.raises(TypeError):
        config.DancePartyConfig().with_overrides(dock={"zoom": 3})


def test_get_config_dir_os_defaults(monkeypatch, tmp_path: Path) -> None:
    if os.name == "nt":
        monkeypatch.setenv("APPDATA", str(tmp_path))
        path = config.get_config_dir("dance")
        assert path == tmp_path / "dance"
        monkeypatch.delenv("APPDATA", raising=False)
        monkeypatch.setattr(config.Path, "home", lambda: tmp_path)
        path = config.get_config_dir("dance")
        assert path == tmp_path / "AppData" / "Roaming" / "dance"
    else:
        monkeypatch.setattr(config, "_is_macos", lambda: False)
        xdg = tmp_path / "xdg"
        monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
        path = config.get_config_dir("dance")
        assert path == xdg / "dance"
        assert path.is_dir()


@pytest.mark.parametrize("value", [1.5, 40, float("inf")])
def test_config_from_mapping_caps_min_spacing(value) -> None:
    cfg = config.config_from_mapping({"layout": {"min_spacing": value}})
    assert cfg.layout.min_spacing == 1.0
