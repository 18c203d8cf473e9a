"""TOML configuration loading, merging, and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from loguru import logger

from sparse_life.config import ConfigError, LifeConfig, load_config
from sparse_life.patterns import DEFAULT_COORDINATES


def write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "life.toml"
    path.write_text(text)
    return path


def test_defaults() -> None:
    cfg = LifeConfig()
    assert cfg.ticks == 10
    assert cfg.size == 50
    assert cfg.random is False
    assert cfg.density == 0.2
    assert cfg.coordinates == DEFAULT_COORDINATES
    assert cfg.workers == 1
    assert cfg.validate() is cfg


def test_load_config(tmp_path: Path) -> None:
    path = write(tmp_path, """
[simulation]
ticks = 25
size = 80
random = true
density = 1
seed = 9
workers = 3

[output]
sort = true
log_level = "debug"
log_file = "run.log"
""")
    cfg = load_config(path)
    assert cfg.ticks == 25
    assert cfg.size == 80
    assert cfg.random is True
    assert cfg.density == 1.0
    assert isinstance(cfg.density, float)
    assert cfg.seed == 9
    assert cfg.workers == 3
    assert cfg.sort is True
    assert cfg.log_file == "run.log"
    assert cfg.coordinates == DEFAULT_COORDINATES
    cfg.validate()


def test_shipped_example_config_is_valid() -> None:
    path = Path(__file__).resolve().parents[1] / "life_config.toml"
    load_config(path).validate()


def test_unknown_keys_are_ignored_with_warning(tmp_path: Path) -> None:
    messages: list[str] = []
    handler_id = logger.add(messages.append, level="WARNING", format="{message}")
    try:
        cfg = load_config(write(tmp_path, "[simulation]\ncolour = 'red'\n[extra]\nx = 1\n"))
    finally:
        logger.remove(handler_id)
    assert cfg == LifeConfig()
    assert any("colour" in m for m in messages)
    assert any("[extra]" in m for m in messages)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "nope.toml")


def test_invalid_toml(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(write(tmp_path, "[simulation\nticks = 1\n"))


@pytest.mark.parametrize("text", [
    "[simulation]\nticks = 'ten'\n",
    "[simulation]\nticks = true\n",
    "[simulation]\nrandom = 1\n",
    "[output]\nlog_level = 3\n",
    "simulation = 5\n",
])
def test_wrong_types(tmp_path: Path, text: str) -> None:
    with pytest.raises(ConfigError):
        load_config(write(tmp_path, text))


def test_merge_skips_none() -> None:
    cfg = LifeConfig(ticks=5, seed=1).merge(ticks=None, seed=2, random=True)
    assert cfg.ticks == 5
    assert cfg.seed == 2
    assert cfg.random is True


@pytest.mark.parametrize("overrides", [
    {"ticks": -1},
    {"size": 0},
    {"workers": 0},
    {"density": 1.5},
    {"log_level": "LOUD"},
])
def test_validate_rejects(overrides: dict) -> None:
    with pytest.raises(ConfigError):
        LifeConfig(**overrides).validate()
