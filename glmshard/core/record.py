from __future__ import annotations

from dataclasses import dataclass, replace

from glmshard.core.sparse import SparseVector


@dataclass(frozen=True)
class LabeledRecord:
    """A training example: label, sparse features, additive offset and weight.

    ``weight`` should be positive for meaningful use; it is not checked here.
    """

    label: float
    features: SparseVector
    offset: float = 0.0
    weight: float = 1.0

    def with_offset(self, offset: float) -> "LabeledRecord":
        return replace(self, offset=float(offset))

    def with_features(self, features: SparseVector) -> "LabeledRecord":
        return replace(self, features=features)


__all__ = ["LabeledRecord"]
