"""Uniform access to feature index maps on the coordinator and in workers.

Referring to a coordinator-side object from inside a unit of work ships that
whole object to every worker. Loaders hand out an index map suited to each
side instead.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

import yaml

from glmshard.errors import ConfigError
from glmshard.index.index_map import DELIMITER, GLOBAL_NS, INTERCEPT_NAME, DefaultIndexMap, IndexMap, feature_key

logger = logging.getLogger(__name__)


# A feature is either a ready-made symbolic name or a (name, term) pair that
# is joined with IndexMapParams.delimiter.
FeatureEntry = Union[str, Sequence[str]]


@dataclass
class IndexMapParams:
    feature_names: List[FeatureEntry] = field(default_factory=list)
    feature_names_path: Optional[str] = None
    add_intercept: bool = True
    delimiter: str = DELIMITER


def _symbolic_name(entry: Any, delimiter: str) -> str:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, (int, float)) and not isinstance(entry, bool):
        return str(entry)
    if isinstance(entry, dict) and "name" in entry:
        return feature_key(str(entry["name"]), str(entry.get("term", "")), delimiter)
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return feature_key(str(entry[0]), str(entry[1]), delimiter)
    raise ConfigError(f"feature entry {entry!r} must be a name, a (name, term) pair or a name/term mapping")


def _read_feature_names(path: Path) -> List[Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read feature names from {path}") from exc
    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            data = json.loads(text)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = [line.strip() for line in text.splitlines() if line.strip()]
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"malformed feature name file {path}") from exc
    if not isinstance(data, list):
        raise ConfigError(f"feature name file {path} must contain a list")
    return data


class IndexMapLoader(ABC):
    @abstractmethod
    def prepare(self, context: Any, params: IndexMapParams, namespace: str = GLOBAL_NS) -> None:
        """One-time setup; call before either accessor."""

    @abstractmethod
    def index_map_for_coordinator(self) -> IndexMap:
        """Index map for the orchestrating node; may be a cached instance."""

    @abstractmethod
    def index_map_for_distributed_unit(self) -> IndexMap:
        """Index map to ship into each unit of work.

        Must not drag coordinator-only state along when serialized.
        """


class DefaultIndexMapLoader(IndexMapLoader):
    """Builds one immutable :class:`DefaultIndexMap` and shares it on both sides."""

    def __init__(self) -> None:
        self._index_map: DefaultIndexMap | None = None
        self.namespace: str | None = None

    def prepare(self, context: Any, params: IndexMapParams, namespace: str = GLOBAL_NS) -> None:
        entries = list(params.feature_names)
        if params.feature_names_path:
            entries.extend(_read_feature_names(Path(params.feature_names_path)))
        names = [_symbolic_name(entry, params.delimiter) for entry in entries]
        if params.add_intercept:
            names.append(INTERCEPT_NAME)
        if not names:
            raise ConfigError("index map has no features")
        self._index_map = DefaultIndexMap.from_names(names)
        self.namespace = namespace
        logger.info(
            "prepared index map for namespace %s with %d features", namespace, self._index_map.feature_dimension
        )

    def _require_map(self) -> DefaultIndexMap:
        if self._index_map is None:
            raise ConfigError("index map loader used before prepare()")
        return self._index_map

    def index_map_for_coordinator(self) -> IndexMap:
        return self._require_map()

    def index_map_for_distributed_unit(self) -> IndexMap:
        return self._require_map()


__all__ = ["DefaultIndexMapLoader", "IndexMapLoader", "IndexMapParams"]
