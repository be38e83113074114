from .index_map import DELIMITER, GLOBAL_NS, INTERCEPT_NAME, NULL_KEY, DefaultIndexMap, IndexMap, feature_key
from .loader import DefaultIndexMapLoader, IndexMapLoader, IndexMapParams

__all__ = [
    "DELIMITER",
    "DefaultIndexMap",
    "DefaultIndexMapLoader",
    "GLOBAL_NS",
    "INTERCEPT_NAME",
    "IndexMap",
    "IndexMapLoader",
    "IndexMapParams",
    "NULL_KEY",
    "feature_key",
]
