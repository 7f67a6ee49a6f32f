from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from display import SPRITE_POLICIES

"""Config loader and validator.

Provides `load_config` which accepts either a path to a YAML file,
a dictionary or None and returns a normalized configuration dict
using DEFAULTS for missing values.
"""


DEFAULTS: dict[str, Any] = {
    "timer_hz": 60,
    "stack_depth": 16,
    "sprite_policy": "clamp",
    "instructions_per_second": 500,
    "tick_limit": 100000,
    "seed": None,
    "lenient_log": False,
}


class ConfigError(ValueError):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


_TRUE_WORDS = ("true", "yes", "on", "1")
_FALSE_WORDS = ("false", "no", "off", "0")


def _to_bool(v: Any) -> bool:
    # quoted YAML booleans arrive as strings; bool("false") would be True
    if isinstance(v, str):
        word = v.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        msg = f"not a boolean: {v!r}"
        raise ValueError(msg)
    return bool(v)


def _convert_types(cfg: dict[str, Any]) -> None:
    """Normalize types for configuration values in-place.

    Raises ConfigError on conversion failure.
    """
    try:
        cfg["timer_hz"] = float(cfg.get("timer_hz", DEFAULTS["timer_hz"]))
        cfg["stack_depth"] = int(cfg.get("stack_depth", DEFAULTS["stack_depth"]))
        cfg["sprite_policy"] = str(cfg.get("sprite_policy", DEFAULTS["sprite_policy"])).lower()
        cfg["instructions_per_second"] = float(
            cfg.get("instructions_per_second", DEFAULTS["instructions_per_second"])
        )
        cfg["tick_limit"] = int(cfg.get("tick_limit", DEFAULTS["tick_limit"]))

        # seed stays None unless given
        v = cfg.get("seed")
        cfg["seed"] = None if v is None else int(v)

        cfg["lenient_log"] = _to_bool(cfg.get("lenient_log", DEFAULTS["lenient_log"]))
    except Exception as e:
        msg = f"Bad types in config: {e}"
        raise ConfigError(msg) from e


def _validate_cfg(cfg: dict[str, Any]) -> None:
    """Perform semantic validation on normalized config dict.

    Raises ConfigError on invalid values.
    """
    if cfg["timer_hz"] <= 0:
        msg = "timer_hz must be positive"
        raise ConfigError(msg)

    if cfg["stack_depth"] < 1:
        msg = "stack_depth must be at least 1"
        raise ConfigError(msg)

    if cfg["sprite_policy"] not in SPRITE_POLICIES:
        msg = f"sprite_policy must be one of {', '.join(SPRITE_POLICIES)} (got {cfg['sprite_policy']!r})"
        raise ConfigError(msg)

    if cfg["instructions_per_second"] <= 0:
        msg = "instructions_per_second must be positive"
        raise ConfigError(msg)

    if cfg["tick_limit"] < 0:
        msg = "tick_limit must be non-negative"
        raise ConfigError(msg)


def load_config(path_or_dict: str | dict[str, Any] | None = None) -> dict[str, Any]:
    """Load and normalize configuration.

    Accepts:
      - None -> returns DEFAULTS copy
      - dict -> overlay DEFAULTS with provided dict
      - str (path) -> load YAML and overlay DEFAULTS

    Returns a normalized dict or raises ConfigError.
    """
    if path_or_dict is None:
        cfg: dict[str, Any] = dict(DEFAULTS)
    elif isinstance(path_or_dict, dict):
        cfg = dict(DEFAULTS)
        cfg.update(path_or_dict)
    elif isinstance(path_or_dict, str):
        p = Path(path_or_dict)
        if not p.exists():
            msg = f"Config file not found: {path_or_dict}"
            raise ConfigError(msg)
        try:
            with p.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except Exception as e:
            msg = f"Failed to load config file {path_or_dict}: {e}"
            raise ConfigError(msg) from e
        if not isinstance(data, dict):
            msg = f"Config file {path_or_dict} does not contain a mapping"
            raise ConfigError(msg)
        cfg = dict(DEFAULTS)
        cfg.update(data)
    else:
        msg = "Unsupported config input"
        raise ConfigError(msg)

    unknown = sorted(set(cfg) - set(DEFAULTS))
    if unknown:
        msg = f"Unknown config keys: {', '.join(unknown)}"
        raise ConfigError(msg)

    # convert types and validate semantics
    _convert_types(cfg)
    _validate_cfg(cfg)

    return cfg
