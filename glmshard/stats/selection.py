"""Ranking of feature scores and application of a kept-key set."""

from __future__ import annotations

from typing import AbstractSet, FrozenSet, Mapping

import numpy as np

from glmshard.core.sparse import SparseVector
from glmshard.errors import InvalidArgumentError


def select_top_features(scores: Mapping[int, float], num_features_to_keep: int) -> FrozenSet[int]:
    """Return the ``num_features_to_keep`` keys with the largest ``|score|``.

    Keys are ranked by absolute score ascending with a stable sort and the
    tail is kept, so ties fall to the key seen later in ascending key order.
    """

    if num_features_to_keep < 0:
        raise InvalidArgumentError(f"num_features_to_keep must be non-negative, got {num_features_to_keep}")
    if num_features_to_keep == 0 or not scores:
        return frozenset()

    keys = np.fromiter(sorted(scores), dtype=np.int64, count=len(scores))
    magnitudes = np.abs(np.array([scores[int(k)] for k in keys], dtype=np.float64))
    order = np.argsort(magnitudes, kind="stable")
    return frozenset(int(k) for k in keys[order[-num_features_to_keep:]])


def filter_features_with_index_set(features: SparseVector, feature_index_set: AbstractSet[int]) -> SparseVector:
    return features.restricted_to(feature_index_set)


__all__ = ["filter_features_with_index_set", "select_top_features"]
