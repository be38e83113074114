"""Resolve user-supplied projector factories named in shard config."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Any, Callable

from glmshard.errors import ConfigError
from glmshard.projector import Projector

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from glmshard.core.dataset import LocalDataset
    from glmshard.runtime.config import ProjectionConfig

ProjectorFactory = Callable[["LocalDataset", "ProjectionConfig"], Projector]


def _split_path(path: str) -> tuple[str, str]:
    if ":" in path:
        module_name, _, attr_name = path.partition(":")
    else:
        module_name, _, attr_name = path.rpartition(".")
    if not module_name or not attr_name:
        raise ConfigError(f"projector factory '{path}' must look like 'package.module:factory'")
    return module_name, attr_name


def load_projector_factory(path: str) -> ProjectorFactory:
    """Import the callable named by ``module:attr`` (or ``module.attr``)."""

    if not isinstance(path, str) or not path:
        raise ConfigError("projector factory path must be a non-empty string")
    module_name, attr_name = _split_path(path)

    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        raise ConfigError(f"projector factory module '{module_name}' could not be imported") from exc

    factory: Any = getattr(module, attr_name, None)
    if factory is None:
        raise ConfigError(f"'{attr_name}' not found in module '{module_name}'")
    if not callable(factory):
        raise ConfigError(f"projector factory '{path}' is not callable")
    return factory


def build_projector(path: str, dataset: "LocalDataset", cfg: "ProjectionConfig") -> Projector:
    """Call the factory at ``path`` and check that it produced a projector."""

    projector = load_projector_factory(path)(dataset, cfg)
    if not isinstance(projector, Projector):
        raise ConfigError(f"projector factory '{path}' returned {type(projector).__name__}, not a projector")
    return projector


__all__ = ["ProjectorFactory", "build_projector", "load_projector_factory"]
