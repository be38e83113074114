"""Immutable sparse vector over a fixed integer key space."""

from __future__ import annotations

from types import MappingProxyType
from typing import AbstractSet, Iterable, Iterator, Mapping, Tuple

import numpy as np

from glmshard.errors import InvalidArgumentError


class SparseVector:
    """Sparse float64 vector of fixed ``dimension``.

    Active entries are held in a mapping, so a key can never appear twice.
    Explicitly stored zeros stay active; ``from_dense`` drops them.
    """

    __slots__ = ("_dimension", "_values")

    def __init__(self, dimension: int, values: Mapping[int, float] | None = None) -> None:
        if dimension < 0:
            raise InvalidArgumentError(f"dimension must be non-negative, got {dimension}")
        data = {}
        for key, value in (values or {}).items():
            key = int(key)
            if not 0 <= key < dimension:
                raise InvalidArgumentError(f"key {key} out of range for dimension {dimension}")
            data[key] = float(value)
        self._dimension = int(dimension)
        self._values = MappingProxyType(dict(sorted(data.items())))

    @classmethod
    def from_items(cls, dimension: int, items: Iterable[Tuple[int, float]]) -> "SparseVector":
        """Build from ``(key, value)`` pairs, rejecting repeated keys."""

        data: dict[int, float] = {}
        for key, value in items:
            key = int(key)
            if key in data:
                raise InvalidArgumentError(f"duplicate key {key} in sparse vector input")
            data[key] = value
        return cls(dimension, data)

    @classmethod
    def from_dense(cls, values: Iterable[float]) -> "SparseVector":
        arr = np.asarray(values if isinstance(values, np.ndarray) else list(values), dtype=np.float64)
        if arr.ndim != 1:
            raise InvalidArgumentError("expected a 1-D array")
        nz = np.flatnonzero(arr)
        return cls(arr.shape[0], {int(i): float(arr[i]) for i in nz})

    @property
    def dimension(self) -> int:
        return self._dimension

    def __len__(self) -> int:
        return self._dimension

    @property
    def nnz(self) -> int:
        return len(self._values)

    def active_items(self) -> Iterator[Tuple[int, float]]:
        return iter(self._values.items())

    def active_keys(self) -> AbstractSet[int]:
        return self._values.keys()

    def get(self, key: int, default: float = 0.0) -> float:
        return self._values.get(key, default)

    def __getitem__(self, key: int) -> float:
        if not 0 <= key < self._dimension:
            raise IndexError(f"key {key} out of range for dimension {self._dimension}")
        return self._values.get(key, 0.0)

    def updated(self, key: int, value: float) -> "SparseVector":
        """Return a copy with ``key`` set to ``value``."""

        data = dict(self._values)
        data[key] = value
        return SparseVector(self._dimension, data)

    def restricted_to(self, keys: AbstractSet[int]) -> "SparseVector":
        """Return a copy keeping only active entries whose key is in ``keys``."""

        return SparseVector(self._dimension, {k: v for k, v in self._values.items() if k in keys})

    def zeros_like(self) -> "SparseVector":
        return SparseVector(self._dimension)

    def to_dense(self) -> np.ndarray:
        out = np.zeros(self._dimension, dtype=np.float64)
        for key, value in self._values.items():
            out[key] = value
        return out

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseVector):
            return NotImplemented
        return self._dimension == other._dimension and dict(self._values) == dict(other._values)

    def __hash__(self) -> int:
        return hash((self._dimension, tuple(self._values.items())))

    def __repr__(self) -> str:
        return f"SparseVector(dimension={self._dimension}, values={dict(self._values)!r})"


__all__ = ["SparseVector"]
