"""Dense linear projection, typically to a lower dimension."""

from __future__ import annotations

from typing import Optional

import numpy as np

from glmshard.core.sparse import SparseVector
from glmshard.errors import InvalidArgumentError


class MatrixProjector:
    """Project with a ``(projected_dim, original_dim)`` matrix; exact zeros are dropped."""

    def __init__(self, matrix: np.ndarray) -> None:
        matrix = np.array(matrix, dtype=np.float64, copy=True)
        if matrix.ndim != 2:
            raise InvalidArgumentError("projection matrix must be 2-D")
        matrix.setflags(write=False)
        self.matrix = matrix

    @classmethod
    def gaussian(cls, original_dim: int, projected_dim: int, seed: Optional[int] = None) -> "MatrixProjector":
        if original_dim <= 0 or projected_dim <= 0:
            raise InvalidArgumentError("projection dimensions must be positive")
        rng = np.random.default_rng(seed)
        return cls(rng.standard_normal((projected_dim, original_dim)) / np.sqrt(projected_dim))

    @property
    def original_dim(self) -> int:
        return int(self.matrix.shape[1])

    @property
    def projected_dim(self) -> int:
        return int(self.matrix.shape[0])

    def project(self, features: SparseVector) -> SparseVector:
        if features.dimension != self.original_dim:
            raise InvalidArgumentError(
                f"expected vector of dimension {self.original_dim}, got {features.dimension}"
            )
        out = np.zeros(self.projected_dim, dtype=np.float64)
        for key, value in features.active_items():
            out += self.matrix[:, key] * value
        return SparseVector.from_dense(out)

    def project_back(self, features: SparseVector) -> SparseVector:
        if features.dimension != self.projected_dim:
            raise InvalidArgumentError(
                f"expected vector of dimension {self.projected_dim}, got {features.dimension}"
            )
        return SparseVector.from_dense(self.matrix.T @ features.to_dense())


__all__ = ["MatrixProjector"]
