from .config import FeatureSelectionConfig, ProjectionConfig, ShardConfig, load_shard_config, make_shard_config
from .round import ShardRound, advance_round, prepare_shard

__all__ = [
    "FeatureSelectionConfig",
    "ProjectionConfig",
    "ShardConfig",
    "ShardRound",
    "advance_round",
    "load_shard_config",
    "make_shard_config",
    "prepare_shard",
]
