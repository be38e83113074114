"""Projection onto the compact space of a dataset's active features."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Mapping

from glmshard.core.sparse import SparseVector
from glmshard.errors import InvalidArgumentError

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from glmshard.core.dataset import LocalDataset


class IndexMapProjector:
    """Renumber active keys to ``0..n-1`` in ascending key order.

    Keys the projector was not built with are dropped by :meth:`project`.
    """

    def __init__(self, original_dim: int, active_keys: Iterable[int]) -> None:
        keys = sorted(set(int(k) for k in active_keys))
        if keys and (keys[0] < 0 or keys[-1] >= original_dim):
            raise InvalidArgumentError(f"active keys must lie in [0, {original_dim})")
        self.original_dim = int(original_dim)
        self._forward: Mapping[int, int] = MappingProxyType({key: idx for idx, key in enumerate(keys)})
        self._backward: tuple[int, ...] = tuple(keys)

    @classmethod
    def build(cls, dataset: "LocalDataset") -> "IndexMapProjector":
        return cls(dataset.num_features, dataset.active_feature_keys())

    @property
    def projected_dim(self) -> int:
        return len(self._backward)

    def project(self, features: SparseVector) -> SparseVector:
        if features.dimension != self.original_dim:
            raise InvalidArgumentError(
                f"expected vector of dimension {self.original_dim}, got {features.dimension}"
            )
        return SparseVector(
            self.projected_dim,
            {self._forward[k]: v for k, v in features.active_items() if k in self._forward},
        )

    def project_back(self, features: SparseVector) -> SparseVector:
        """Map a vector in the projected space (e.g. coefficients) to the original space."""

        if features.dimension != self.projected_dim:
            raise InvalidArgumentError(
                f"expected vector of dimension {self.projected_dim}, got {features.dimension}"
            )
        return SparseVector(self.original_dim, {self._backward[k]: v for k, v in features.active_items()})


__all__ = ["IndexMapProjector"]
