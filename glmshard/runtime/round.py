"""Per-round preparation of a partition's local dataset."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from glmshard.core.dataset import Entry, LocalDataset, UniqueSampleId
from glmshard.errors import ConfigError
from glmshard.projector import IdentityProjector, IndexMapProjector, MatrixProjector, Projector
from glmshard.runtime.config import ProjectionConfig, ShardConfig
from glmshard.utils.imports import build_projector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShardRound:
    dataset: LocalDataset
    projector: Optional[Projector] = None
    meta: Dict[str, Any] = field(default_factory=dict)


def _build_projector(dataset: LocalDataset, cfg: ProjectionConfig) -> Optional[Projector]:
    if cfg.kind == "none":
        return None
    if cfg.kind == "identity":
        return IdentityProjector()
    if cfg.kind == "index_map":
        return IndexMapProjector.build(dataset)
    if cfg.kind == "matrix":
        if cfg.projected_dim is None:
            raise ConfigError("projection.projected_dim is required for kind=matrix")
        return MatrixProjector.gaussian(dataset.num_features, cfg.projected_dim, seed=cfg.seed)
    return build_projector(cfg.kind, dataset, cfg)


def prepare_shard(entries: Iterable[Entry], cfg: ShardConfig | None = None) -> ShardRound:
    """Build, select features for, and project one partition's dataset."""

    cfg = cfg or ShardConfig()
    dataset = LocalDataset.create(entries, presorted=cfg.presorted)
    active_before = dataset.num_active_features()

    keep = cfg.selection.num_features_to_keep
    if keep is not None:
        if keep == 0:
            logger.warning("num_features_to_keep is 0; every feature will be dropped")
        dataset = dataset.filter_features_by_score(keep, epsilon=cfg.selection.epsilon)
    active_after = dataset.num_active_features()

    projector = _build_projector(dataset, cfg.projection)
    if projector is not None:
        dataset = dataset.project_features(projector)

    meta = {
        "num_data_points": dataset.num_data_points,
        "num_active_features_before": active_before,
        "num_active_features_after": active_after,
        "projected_dim": dataset.num_features,
    }
    logger.info(
        "prepared shard: %d records, %d -> %d active features, dimension %d",
        meta["num_data_points"],
        active_before,
        active_after,
        meta["projected_dim"],
    )
    return ShardRound(dataset=dataset, projector=projector, meta=meta)


def advance_round(
    shard_round: ShardRound, residual_scores: Sequence[Tuple[UniqueSampleId, float]]
) -> ShardRound:
    """Fold the previous round's residual scores into the offsets."""

    return replace(shard_round, dataset=shard_round.dataset.add_scores_to_offsets(residual_scores))


__all__ = ["ShardRound", "advance_round", "prepare_shard"]
