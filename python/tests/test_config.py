"""Configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tilepuzzle.config import DEFAULT_CONFIG, EngineConfig, load_config


def test_defaults_without_file() -> None:
    assert load_config(None) == DEFAULT_CONFIG
    assert DEFAULT_CONFIG.supports_solver(3)
    assert not DEFAULT_CONFIG.supports_solver(4)


def test_missing_file_uses_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path / "nope.json") == DEFAULT_CONFIG


def test_overrides_merge_over_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"replay_delay": 0.1, "solver_sizes": [2, 3, 4], "bogus": 1}))

    config = load_config(path)
    assert config.replay_delay == 0.1
    assert config.solver_sizes == (2, 3, 4)
    assert config.supports_solver(4)
    assert config.shuffle_factor == EngineConfig().shuffle_factor


def test_invalid_json_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json")
    assert load_config(path) == DEFAULT_CONFIG


def test_non_object_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2]")
    assert load_config(path) == DEFAULT_CONFIG


@pytest.mark.parametrize(
    "overrides",
    [
        {"tick_seconds": 0},
        {"tick_seconds": -1.0},
        {"tick_seconds": "fast"},
        {"replay_delay": 0},
        {"replay_delay": -0.3},
        {"replay_delay": None},
        {"undo_limit": -1},
        {"undo_limit": 2.5},
        {"undo_limit": True},
        {"shuffle_factor": -5},
        {"shuffle_factor": "many"},
        {"solver_sizes": [1, 2]},
        {"solver_sizes": [2, "3"]},
        {"solver_sizes": 3},
        {"use_processes": "yes"},
    ],
)
def test_out_of_range_values_use_defaults(tmp_path: Path, overrides: dict) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(overrides))
    assert load_config(path) == DEFAULT_CONFIG


def test_zero_limits_are_accepted(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"undo_limit": 0, "shuffle_factor": 0, "tick_seconds": 2}))
    config = load_config(path)
    assert config.undo_limit == 0
    assert config.shuffle_factor == 0
    assert config.tick_seconds == 2


@pytest.mark.parametrize(
    "kwargs",
    [{"tick_seconds": 0.0}, {"replay_delay": 0.0}, {"undo_limit": -1}],
)
def test_constructor_rejects_bad_values(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        EngineConfig(**kwargs)
