"""Bidirectional feature name <-> integer index maps."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

GLOBAL_NS = "global"
NULL_KEY = -1
DELIMITER = "\t"
INTERCEPT_NAME = "(INTERCEPT)"


def feature_key(name: str, term: str = "", delimiter: str = DELIMITER) -> str:
    """Canonical symbolic name of a ``(name, term)`` feature."""

    return f"{name}{delimiter}{term}"


class IndexMap(ABC):
    GLOBAL_NS = GLOBAL_NS
    NULL_KEY = NULL_KEY

    @abstractmethod
    def get_index(self, name: str) -> int:
        """Index of ``name`` or :data:`NULL_KEY` when unknown."""

    @abstractmethod
    def get_feature_name(self, index: int) -> Optional[str]:
        ...

    @property
    @abstractmethod
    def feature_dimension(self) -> int:
        ...

    def __len__(self) -> int:
        return self.feature_dimension

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get_index(name) != NULL_KEY


class DefaultIndexMap(IndexMap):
    """Immutable in-memory index map, cheap to pickle into each unit of work."""

    def __init__(self, index_by_name: Mapping[str, int]) -> None:
        self._index_by_name = MappingProxyType(dict(index_by_name))
        self._name_by_index = MappingProxyType({idx: name for name, idx in self._index_by_name.items()})

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "DefaultIndexMap":
        index_by_name: dict[str, int] = {}
        for name in names:
            index_by_name.setdefault(name, len(index_by_name))
        return cls(index_by_name)

    def get_index(self, name: str) -> int:
        return self._index_by_name.get(name, NULL_KEY)

    def get_feature_name(self, index: int) -> Optional[str]:
        return self._name_by_index.get(index)

    @property
    def feature_dimension(self) -> int:
        return len(self._index_by_name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._index_by_name)

    def __reduce__(self):
        return (DefaultIndexMap, (dict(self._index_by_name),))


__all__ = [
    "DELIMITER",
    "DefaultIndexMap",
    "GLOBAL_NS",
    "INTERCEPT_NAME",
    "IndexMap",
    "NULL_KEY",
    "feature_key",
]
