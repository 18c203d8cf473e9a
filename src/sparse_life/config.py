"""
Run configuration.

Settings come from defaults, then an optional TOML file, then command-line
flags. Example file (see life_config.toml):

    [simulation]
    ticks = 100
    size = 60
    random = true
    density = 0.2
    seed = 42
    workers = 4

    [output]
    sort = true
    log_level = "INFO"
    log_file = "sparse_life.log"
"""

from __future__ import annotations

import dataclasses
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from .patterns import DEFAULT_COORDINATES, DEFAULT_DENSITY

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

# section -> {key: accepted types}
SECTIONS: dict[str, dict[str, tuple[type, ...]]] = {
    "simulation": {
        "ticks": (int,),
        "size": (int,),
        "random": (bool,),
        "density": (int, float),
        "seed": (int,),
        "coordinates": (str,),
        "pattern": (str,),
        "workers": (int,),
    },
    "output": {
        "sort": (bool,),
        "log_level": (str,),
        "log_file": (str,),
    },
}


class ConfigError(Exception):
    """Raised for an unreadable or invalid configuration."""


@dataclass(frozen=True)
class LifeConfig:
    ticks: int = 10
    size: int = 50
    random: bool = False
    density: float = DEFAULT_DENSITY
    seed: int | None = None
    coordinates: str = DEFAULT_COORDINATES
    pattern: str | None = None
    workers: int = 1
    sort: bool = False
    log_level: str = "WARNING"
    log_file: str | None = None

    def merge(self, **overrides) -> LifeConfig:
        """Return a copy with every override that is not None applied."""
        return dataclasses.replace(
            self, **{key: value for key, value in overrides.items() if value is not None}
        )

    def validate(self) -> LifeConfig:
        if self.ticks < 0:
            raise ConfigError(f"ticks must be non-negative, got {self.ticks}")
        if self.size <= 0:
            raise ConfigError(f"size must be positive, got {self.size}")
        if self.workers < 1:
            raise ConfigError(f"workers must be at least 1, got {self.workers}")
        if not 0.0 <= self.density <= 1.0:
            raise ConfigError(f"density must be within [0, 1], got {self.density}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )
        return self


def _check_type(section: str, key: str, value):
    expected = SECTIONS[section][key]
    # bool is an int subclass; only accept it where a bool is wanted
    if isinstance(value, bool) and bool not in expected:
        raise ConfigError(f"[{section}].{key} must not be a boolean")
    if not isinstance(value, expected):
        names = " or ".join(t.__name__ for t in expected)
        raise ConfigError(f"[{section}].{key} must be {names}, got {type(value).__name__}")
    if key == "density":
        return float(value)
    return value


def load_config(path: str | Path) -> LifeConfig:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"{path} not found")

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e

    values = {}
    for section, table in raw.items():
        if section not in SECTIONS:
            logger.warning(f"{path}: ignoring unknown section [{section}]")
            continue
        if not isinstance(table, dict):
            raise ConfigError(f"{path}: [{section}] must be a table")
        for key, value in table.items():
            if key not in SECTIONS[section]:
                logger.warning(f"{path}: ignoring unknown key [{section}].{key}")
                continue
            values[key] = _check_type(section, key, value)

    logger.debug(f"Loaded config {path}: {values}")
    return LifeConfig(**values)


def configure_logging(level: str = "WARNING", log_file: str | Path | None = None) -> None:
    """Send log records to stderr, and optionally to a rotating file.

    stdout is left alone: it carries the gnuplot stream.
    """
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level=level.upper())
    if log_file:
        logger.add(log_file, rotation="10 MB", retention="30 days", level="DEBUG")
