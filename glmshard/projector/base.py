from __future__ import annotations

from typing import Protocol, runtime_checkable

from glmshard.core.sparse import SparseVector


@runtime_checkable
class Projector(Protocol):
    """Pure map from one sparse vector space to another."""

    def project(self, features: SparseVector) -> SparseVector:
        ...


class IdentityProjector:
    def project(self, features: SparseVector) -> SparseVector:
        return features


__all__ = ["IdentityProjector", "Projector"]
