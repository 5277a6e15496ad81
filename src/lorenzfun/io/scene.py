from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from lorenzfun.core import constants
from lorenzfun.core.entity import TrajectoryConfig


class ConfigError(Exception):
    """Raised when a scene config is invalid."""


@dataclass(frozen=True)
class SceneConfig:
    dt: float = constants.DEFAULT_DT
    trail_length: int = constants.TRAIL_LEN
    show_help: bool = True
    seed: Optional[int] = None
    preset: Optional[str] = None
    trajectories: List[TrajectoryConfig] = field(default_factory=list)


PRESET_NAMES = {"one": "one", "1": "one", "two": "two", "2": "two"}


def _require(mapping: Dict[str, Any], key: str, expected_type: Tuple[type, ...]):
    if key not in mapping:
        raise ConfigError(f"Missing required key '{key}'")
    val = mapping[key]
    if not isinstance(val, expected_type):
        raise ConfigError(f"Key '{key}' must be of type {expected_type}, got {type(val)}")
    return val


def _triple(value: Any, key: str) -> Tuple[float, float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ConfigError(f"'{key}' must have exactly three entries")
    try:
        return float(value[0]), float(value[1]), float(value[2])
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{key}' entries must be numbers") from exc


def _number(mapping: Dict[str, Any], key: str, default: Any, kind: type = float):
    val = mapping.get(key, default)
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        raise ConfigError(f"Key '{key}' must be a number, got {val!r}")
    if kind is int and not float(val).is_integer():
        raise ConfigError(f"Key '{key}' must be a whole number, got {val!r}")
    return kind(val)


def _flag(mapping: Dict[str, Any], key: str, default: bool) -> bool:
    val = mapping.get(key, default)
    if not isinstance(val, bool):
        raise ConfigError(f"Key '{key}' must be true or false, got {val!r}")
    return val


def normalize_preset(value: Any) -> str:
    name = PRESET_NAMES.get(str(value).strip().lower())
    if name is None:
        raise ConfigError(f"Unknown preset '{value}'. Available: one, two")
    return name


def _trajectory(entry: Any, trail_length: int) -> TrajectoryConfig:
    if not isinstance(entry, dict):
        raise ConfigError("Each trajectories entry must be a mapping.")
    pos = _triple(_require(entry, "pos", (list, tuple)), "pos")
    color = _triple(entry["color"], "color") if entry.get("color") is not None else None
    length = _number(entry, "trail_length", trail_length, int)
    if length < 1:
        raise ConfigError("trail_length must be >= 1")
    return TrajectoryConfig(
        pos=pos,
        color=color,
        has_trail=_flag(entry, "trail", True),
        trail_length=length,
        sigma=_number(entry, "sigma", constants.SIGMA),
        beta=_number(entry, "beta", constants.BETA),
        rho=_number(entry, "rho", constants.RHO),
    )


def parse_scene(path: Path) -> SceneConfig:
    try:
        data = yaml.safe_load(path.read_text(encoding=constants.ENCODING))
    except Exception as exc:  # noqa: BLE001
        raise ConfigError(f"Failed to read YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Top-level YAML must be a mapping.")

    scene = _require(data, "scene", (dict,))
    dt = float(_require(scene, "dt", (int, float)))
    if dt <= 0:
        raise ConfigError("scene.dt must be positive")
    trail_length = _number(scene, "trail_length", constants.TRAIL_LEN, int)
    if trail_length < 1:
        raise ConfigError("scene.trail_length must be >= 1")
    seed = _number(scene, "seed", None, int) if scene.get("seed") is not None else None
    preset = scene.get("preset")

    entries = data.get("trajectories") or []
    if not isinstance(entries, list):
        raise ConfigError("'trajectories' must be a list")
    trajectories = [_trajectory(entry, trail_length) for entry in entries]

    if preset is None and not trajectories:
        raise ConfigError("Scene needs either scene.preset or at least one trajectory")

    return SceneConfig(
        dt=dt,
        trail_length=trail_length,
        show_help=_flag(scene, "show_help", True),
        seed=seed,
        preset=normalize_preset(preset) if preset is not None else None,
        trajectories=trajectories,
    )
