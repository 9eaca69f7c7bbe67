from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from solver.errors import ConfigError
from types_sudoku import Difficulty

DEFAULTS: Dict[str, Any] = {
    "holes": {"Easy": 30, "Medium": 45, "Hard": 55},
    "max_steps": 2_000_000,
    "max_mistakes": 3,
    "hints": 3,
    "history_limit": 20,
}


class DotDict(dict):
    __getattr__ = dict.get
    __setattr__ = dict.__setitem__
    __delattr__ = dict.__delitem__


def load_yaml(path: str | Path) -> DotDict:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return DotDict(data)


def merge_overrides(cfg: Dict[str, Any], **overrides) -> Dict[str, Any]:
    for k, v in overrides.items():
        if v is None:
            continue
        cfg[k] = v
    return cfg


def _validate(cfg: DotDict) -> DotDict:
    unknown = set(cfg) - set(DEFAULTS)
    if unknown:
        raise ConfigError(f"unknown config keys: {sorted(unknown)}")
    holes = {}
    for name, count in dict(cfg.holes).items():
        try:
            level = Difficulty.parse(name)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        if not isinstance(count, int) or not 0 <= count <= 81:
            raise ConfigError(f"holes for {level.value} must be an int in 0..81, got {count!r}")
        holes[level.value] = count
    cfg.holes = holes
    for key in ("max_steps", "max_mistakes", "history_limit"):
        if not isinstance(cfg[key], int) or cfg[key] < 1:
            raise ConfigError(f"{key} must be a positive int, got {cfg[key]!r}")
    if not isinstance(cfg.hints, int) or cfg.hints < 0:
        raise ConfigError(f"hints must be a non-negative int, got {cfg.hints!r}")
    return cfg


def load_config(path: str | Path | None = None, **overrides) -> DotDict:
    """Defaults, then the YAML file (if any), then keyword overrides (None values ignored)."""
    cfg = DotDict({k: (dict(v) if isinstance(v, dict) else v) for k, v in DEFAULTS.items()})
    layers = [load_yaml(path)] if path is not None else []
    layers.append(overrides)
    for layer in layers:
        layer = dict(layer)
        holes = layer.pop("holes", None)
        if holes is not None:
            if not isinstance(holes, dict):
                raise ConfigError("holes must map difficulty names to counts")
            cfg.holes.update(holes)
        merge_overrides(cfg, **layer)
    return _validate(cfg)


def holes_for(cfg: Dict[str, Any], difficulty: Difficulty | str) -> int:
    return cfg["holes"][Difficulty.parse(difficulty).value]
