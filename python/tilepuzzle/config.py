"""Engine configuration.

Defaults can be overridden from a JSON file, e.g.::

    {"shuffle_factor": 80, "replay_delay": 0.1, "solver_sizes": [2, 3]}

Unknown keys are ignored with a warning.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _is_int(value: Any) -> bool:
    # bool is an int subclass; JSON true/false is not a count.
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class EngineConfig:
    # Random-walk length per cell when shuffling.
    shuffle_factor: int = 50
    undo_limit: int = 1000
    # Grid sizes the A* solver may be used on (hint / auto-solve).
    solver_sizes: tuple[int, ...] = (2, 3)
    tick_seconds: float = 1.0
    replay_delay: float = 0.3
    use_processes: bool = False

    def __post_init__(self) -> None:
        for name in ("shuffle_factor", "undo_limit"):
            value = getattr(self, name)
            if not _is_int(value):
                raise TypeError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")
        for name in ("tick_seconds", "replay_delay"):
            value = getattr(self, name)
            if not (_is_int(value) or isinstance(value, float)):
                raise TypeError(f"{name} must be a number, got {value!r}")
            if not value > 0:
                raise ValueError(f"{name} must be > 0, got {value}")
        if not isinstance(self.use_processes, bool):
            raise TypeError(f"use_processes must be true or false, got {self.use_processes!r}")
        if not isinstance(self.solver_sizes, tuple):
            raise TypeError(f"solver_sizes must be a list, got {self.solver_sizes!r}")
        for size in self.solver_sizes:
            if not _is_int(size) or size < 2:
                raise ValueError(f"solver_sizes entries must be integers >= 2, got {size!r}")

    def supports_solver(self, size: int) -> bool:
        return size in self.solver_sizes


DEFAULT_CONFIG = EngineConfig()


def _coerce(data: dict[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(EngineConfig)}
    result: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown config key %r", key)
            continue
        if key == "solver_sizes":
            if not isinstance(value, list):
                raise TypeError(f"solver_sizes must be a list, got {value!r}")
            value = tuple(value)
        result[key] = value
    return result


def load_config(path: Path | None = None) -> EngineConfig:
    """Load configuration from *path*, merged over the defaults.

    Returns the defaults if *path* is ``None``, missing, or invalid.
    """
    if path is None:
        return DEFAULT_CONFIG

    if not path.exists():
        logger.debug("Config file %s not found, using defaults", path)
        return DEFAULT_CONFIG

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("top-level value must be an object")
        config = replace(DEFAULT_CONFIG, **_coerce(data))
    except (OSError, ValueError, TypeError) as e:
        logger.warning("Failed to load config from %s: %s, using defaults", path, e)
        return DEFAULT_CONFIG

    logger.debug("Config loaded: %s", config)
    return config
