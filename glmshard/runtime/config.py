"""Configuration for per-round shard preparation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml

from glmshard.errors import ConfigError
from glmshard.stats.streaming_correlation import EPSILON

_BUILTIN_PROJECTIONS = ("none", "identity", "index_map", "matrix")


@dataclass
class FeatureSelectionConfig:
    num_features_to_keep: Optional[int] = None
    epsilon: float = EPSILON


@dataclass
class ProjectionConfig:
    # one of _BUILTIN_PROJECTIONS or a "module:factory" path; the factory is
    # called as factory(dataset, cfg) and must return a projector
    kind: str = "none"
    projected_dim: Optional[int] = None
    seed: Optional[int] = None


@dataclass
class ShardConfig:
    presorted: bool = False
    selection: FeatureSelectionConfig = field(default_factory=FeatureSelectionConfig)
    projection: ProjectionConfig = field(default_factory=ProjectionConfig)


def _coerce(value: Any, convert: Callable[[Any], Any], name: str) -> Any:
    try:
        return convert(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc


def _make_selection_config(data: Dict[str, Any]) -> FeatureSelectionConfig:
    keep = data.get("num_features_to_keep")
    if keep is not None and (isinstance(keep, bool) or not isinstance(keep, int) or keep < 0):
        raise ConfigError("selection.num_features_to_keep must be a non-negative integer if set")
    epsilon = _coerce(data.get("epsilon", EPSILON), float, "selection.epsilon")
    if epsilon <= 0:
        raise ConfigError("selection.epsilon must be positive")
    return FeatureSelectionConfig(num_features_to_keep=keep, epsilon=epsilon)


def _make_projection_config(data: Dict[str, Any]) -> ProjectionConfig:
    kind = str(data.get("kind", "none"))
    if kind.lower() in _BUILTIN_PROJECTIONS:
        kind = kind.lower()
    elif ":" not in kind and "." not in kind:
        raise ConfigError(f"projection.kind must be one of {'|'.join(_BUILTIN_PROJECTIONS)} or a dotted path")
    projected_dim = data.get("projected_dim")
    if projected_dim is not None:
        projected_dim = _coerce(projected_dim, int, "projection.projected_dim")
        if projected_dim <= 0:
            raise ConfigError("projection.projected_dim must be positive if set")
    if kind == "matrix" and projected_dim is None:
        raise ConfigError("projection.projected_dim is required for kind=matrix")
    seed = data.get("seed")
    if seed is not None:
        seed = _coerce(seed, int, "projection.seed")
    return ProjectionConfig(kind=kind, projected_dim=projected_dim, seed=seed)


def make_shard_config(data: Dict[str, Any] | None) -> ShardConfig:
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError("shard config must be a mapping")
    for section in ("selection", "projection"):
        if not isinstance(data.get(section, {}), dict):
            raise ConfigError(f"{section} must be a mapping")
    return ShardConfig(
        presorted=bool(data.get("presorted", False)),
        selection=_make_selection_config(data.get("selection", {})),
        projection=_make_projection_config(data.get("projection", {})),
    )


def load_shard_config(path: str | Path) -> ShardConfig:
    """Read a shard config from a YAML (``.yaml``/``.yml``) or JSON file."""

    file = Path(path)
    try:
        text = file.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config {file}") from exc
    try:
        if file.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"malformed config {file}") from exc
    return make_shard_config(data)


__all__ = [
    "FeatureSelectionConfig",
    "ProjectionConfig",
    "ShardConfig",
    "load_shard_config",
    "make_shard_config",
]
