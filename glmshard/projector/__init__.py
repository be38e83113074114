"""Feature-space projectors injected into :meth:`LocalDataset.project_features`."""

from .base import IdentityProjector, Projector
from .index_map import IndexMapProjector
from .matrix import MatrixProjector

__all__ = ["IdentityProjector", "IndexMapProjector", "MatrixProjector", "Projector"]
