"""Shard-local training data container."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, FrozenSet, Iterable, List, Sequence, Tuple

from glmshard.core.record import LabeledRecord
from glmshard.errors import InvalidArgumentError, MismatchedIdentifierError
from glmshard.stats.selection import filter_features_with_index_set, select_top_features
from glmshard.stats.streaming_correlation import EPSILON, compute_pearson_correlation_scores

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from glmshard.projector.base import Projector

logger = logging.getLogger(__name__)

UniqueSampleId = int
Entry = Tuple[UniqueSampleId, LabeledRecord]


@dataclass(frozen=True)
class LocalDataset:
    """Ordered ``(unique id, record)`` pairs for one partition.

    Entries are kept in a tuple sorted by id. The sort happens once, in
    :meth:`create`, and every per-id array produced or consumed by this class
    (labels, offsets, residual scores) follows that order. Every operator
    returns a new instance.
    """

    entries: Tuple[Entry, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.entries, tuple):
            object.__setattr__(self, "entries", tuple(self.entries))
        if len(self.entries) == 0:
            raise InvalidArgumentError("Cannot create LocalDataset with empty data array")

    @classmethod
    def create(cls, entries: Iterable[Entry], presorted: bool = False) -> "LocalDataset":
        """Build a dataset, sorting by id unless ``presorted`` is set."""

        entries = tuple(entries)
        if not presorted:
            entries = tuple(sorted(entries, key=lambda entry: entry[0]))
        return cls(entries)

    @property
    def num_data_points(self) -> int:
        return len(self.entries)

    @property
    def num_features(self) -> int:
        return self.entries[0][1].features.dimension

    def labels(self) -> List[Tuple[UniqueSampleId, float]]:
        return [(uid, record.label) for uid, record in self.entries]

    def weights(self) -> List[Tuple[UniqueSampleId, float]]:
        return [(uid, record.weight) for uid, record in self.entries]

    def offsets(self) -> List[Tuple[UniqueSampleId, float]]:
        return [(uid, record.offset) for uid, record in self.entries]

    def ids(self) -> List[UniqueSampleId]:
        return [uid for uid, _ in self.entries]

    def active_feature_keys(self) -> FrozenSet[int]:
        keys: set[int] = set()
        for _, record in self.entries:
            keys.update(record.features.active_keys())
        return frozenset(keys)

    def num_active_features(self) -> int:
        return len(self.active_feature_keys())

    def add_scores_to_offsets(self, residual_scores: Sequence[Tuple[UniqueSampleId, float]]) -> "LocalDataset":
        """Add residual scores to the offsets.

        The scores are matched by position, not looked up by id: the i-th
        score must carry the id of the i-th entry. Callers that reorder data
        between rounds must restore the dataset order first.

        Raises:
            InvalidArgumentError: if the lengths differ.
            MismatchedIdentifierError: at the first position whose ids differ.
        """

        if len(residual_scores) != len(self.entries):
            raise InvalidArgumentError(
                f"expected {len(self.entries)} residual scores, got {len(residual_scores)}"
            )

        updated = []
        for position, ((data_id, record), (score_id, score)) in enumerate(zip(self.entries, residual_scores)):
            if score_id != data_id:
                raise MismatchedIdentifierError(position=position, expected_id=data_id, actual_id=score_id)
            updated.append((data_id, record.with_offset(record.offset + score)))

        return LocalDataset(tuple(updated))

    def project_features(self, projector: "Projector") -> "LocalDataset":
        """Map every record's features into the projector's space."""

        projected = tuple(
            (uid, record.with_features(projector.project(record.features))) for uid, record in self.entries
        )
        logger.debug("projected %d records from dimension %d", len(projected), self.num_features)
        return LocalDataset(projected)

    def filter_features_by_score(self, num_features_to_keep: int, *, epsilon: float = EPSILON) -> "LocalDataset":
        """Keep the ``num_features_to_keep`` features most correlated with the label.

        Returns ``self`` when the dataset has no more active features than
        requested.
        """

        if num_features_to_keep < 0:
            raise InvalidArgumentError(f"num_features_to_keep must be non-negative, got {num_features_to_keep}")

        num_active = self.num_active_features()
        if num_features_to_keep >= num_active:
            return self

        label_and_features = [(record.label, record.features) for _, record in self.entries]
        scores = compute_pearson_correlation_scores(label_and_features, epsilon=epsilon)
        keep = select_top_features(scores, num_features_to_keep)
        logger.debug("keeping %d of %d active features", len(keep), num_active)

        filtered = tuple(
            (uid, record.with_features(filter_features_with_index_set(record.features, keep)))
            for uid, record in self.entries
        )
        return LocalDataset(filtered)


__all__ = ["LocalDataset", "UniqueSampleId"]
