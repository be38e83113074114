__version__ = "0.1.0"

from glmshard.core.dataset import LocalDataset
from glmshard.core.record import LabeledRecord
from glmshard.core.sparse import SparseVector

__all__ = ["LabeledRecord", "LocalDataset", "SparseVector", "__version__"]
