"""Feature statistics used for shard-local feature selection."""

from .selection import filter_features_with_index_set, select_top_features
from .streaming_correlation import EPSILON, StreamingCorrelationEstimator, compute_pearson_correlation_scores

__all__ = [
    "EPSILON",
    "StreamingCorrelationEstimator",
    "compute_pearson_correlation_scores",
    "filter_features_with_index_set",
    "select_top_features",
]
