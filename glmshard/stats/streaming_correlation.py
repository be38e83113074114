"""Single-pass Pearson correlation between sparse features and the label."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, Sequence, Tuple, Union

from glmshard.core.sparse import SparseVector
from glmshard.errors import InvalidArgumentError, InvariantViolationError

logger = logging.getLogger(__name__)

EPSILON = 1e-12

FeatureInput = Union[SparseVector, Iterable[Tuple[int, float]]]


def _active_items(features: FeatureInput) -> Iterable[Tuple[int, float]]:
    if isinstance(features, SparseVector):
        return features.active_items()
    seen: set[int] = set()
    items = []
    for key, value in features:
        key = int(key)
        if key in seen:
            raise InvalidArgumentError(
                f"feature key {key} appears more than once in a single record; "
                "running statistics for it would be corrupted"
            )
        seen.add(key)
        items.append((key, float(value)))
    return items


@dataclass
class StreamingCorrelationEstimator:
    """Welford-style running mean, variance and label covariance per feature key.

    Keys absent from a record are implicit zeros and leave that key's
    accumulators untouched for the record; ``sample_count`` still advances.
    """

    epsilon: float = EPSILON
    sample_count: int = 0
    label_mean: float = 0.0
    label_unscaled_var: float = 0.0
    feature_means: Dict[int, float] = field(default_factory=dict)
    feature_unscaled_vars: Dict[int, float] = field(default_factory=dict)
    unscaled_covariances: Dict[int, float] = field(default_factory=dict)

    def update(self, label: float, features: FeatureInput) -> None:
        self.sample_count += 1
        n = self.sample_count

        delta_label = label - self.label_mean
        self.label_mean += delta_label / n
        self.label_unscaled_var += delta_label * (label - self.label_mean)

        for key, value in _active_items(features):
            prev_mean = self.feature_means.get(key, 0.0)
            delta_feature = value - prev_mean
            mean = prev_mean + delta_feature / n

            self.feature_unscaled_vars[key] = self.feature_unscaled_vars.get(key, 0.0) + (value - prev_mean) * (
                value - mean
            )
            self.unscaled_covariances[key] = (
                self.unscaled_covariances.get(key, 0.0) + delta_feature * delta_label * (n - 1) / n
            )
            self.feature_means[key] = mean

    def update_many(self, label_and_features: Iterable[Tuple[float, FeatureInput]]) -> None:
        for label, features in label_and_features:
            self.update(label, features)

    def scores(self, stream: Sequence[Tuple[float, FeatureInput]] | None = None) -> Dict[int, float]:
        """Finalize into a ``{key: score}`` mapping.

        A near-constant feature (std below ``epsilon``) is treated as the
        intercept: the first one in ascending key order scores ``1.0`` and any
        later one scores ``0.0``. Which key wins is an arbitrary choice.

        ``stream`` is only used to enrich the diagnostics of an
        :class:`InvariantViolationError`.
        """

        if self.sample_count == 0:
            raise InvalidArgumentError("No samples processed")

        n = self.sample_count
        label_std = math.sqrt(self.label_unscaled_var / n)
        intercept_added = False
        result: Dict[int, float] = {}

        for key in sorted(self.feature_means):
            feature_std = math.sqrt(self.feature_unscaled_vars[key] / n)
            covariance = self.unscaled_covariances[key] / n

            if feature_std < self.epsilon:
                if intercept_added:
                    score = 0.0
                else:
                    intercept_added = True
                    score = 1.0
            else:
                score = covariance / (label_std * feature_std + self.epsilon)

            if not abs(score) <= 1 + self.epsilon:
                diagnostics = {
                    "feature_key": key,
                    "feature_std": feature_std,
                    "label_std": label_std,
                    "covariance": covariance,
                    "num_samples": n,
                }
                if stream is not None:
                    diagnostics["label_and_features"] = list(stream)
                raise InvariantViolationError(
                    f"Computed pearson correlation score is {score}, while the score's magnitude should be "
                    f"less than 1. (Diagnosis: {diagnostics})",
                    diagnostics,
                )
            result[key] = score

        logger.debug("scored %d feature keys over %d samples", len(result), n)
        return result


def compute_pearson_correlation_scores(
    label_and_features: Sequence[Tuple[float, FeatureInput]],
    *,
    epsilon: float = EPSILON,
) -> Dict[int, float]:
    """Score every observed feature key by its Pearson correlation with the label."""

    estimator = StreamingCorrelationEstimator(epsilon=epsilon)
    estimator.update_many(label_and_features)
    return estimator.scores(stream=label_and_features)


__all__ = [
    "EPSILON",
    "StreamingCorrelationEstimator",
    "compute_pearson_correlation_scores",
]
