import pytest

from glmshard.errors import ConfigError, MismatchedIdentifierError
from glmshard.projector import IndexMapProjector, MatrixProjector
from glmshard.runtime import advance_round, make_shard_config, prepare_shard


def test_prepare_shard_without_config_only_sorts(three_point_entries):
    shard = prepare_shard(reversed(three_point_entries))
    assert shard.dataset.ids() == [1, 2, 3]
    assert shard.projector is None
    assert shard.meta["num_active_features_before"] == shard.meta["num_active_features_after"] == 4


def test_prepare_shard_selects_and_projects(three_point_entries):
    cfg = make_shard_config({"selection": {"num_features_to_keep": 2}, "projection": {"kind": "index_map"}})
    shard = prepare_shard(three_point_entries, cfg)

    assert isinstance(shard.projector, IndexMapProjector)
    assert shard.meta["num_active_features_before"] == 4
    assert shard.meta["num_active_features_after"] == 2
    assert shard.meta["projected_dim"] == 2
    assert shard.dataset.num_features == 2
    assert shard.dataset.num_active_features() <= 2


def test_prepare_shard_with_matrix_projection(three_point_entries):
    cfg = make_shard_config({"projection": {"kind": "matrix", "projected_dim": 3, "seed": 0}})
    shard = prepare_shard(three_point_entries, cfg)
    assert isinstance(shard.projector, MatrixProjector)
    assert shard.dataset.num_features == 3


def test_prepare_shard_resolves_projector_factory(tmp_path, monkeypatch, three_point_entries):
    (tmp_path / "custom_projectors.py").write_text(
        "from glmshard.projector import IdentityProjector\n"
        "def make(dataset, cfg):\n"
        "    return IdentityProjector()\n"
        "def broken(dataset, cfg):\n"
        "    return object()\n",
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    shard = prepare_shard(three_point_entries, make_shard_config({"projection": {"kind": "custom_projectors:make"}}))
    assert shard.dataset.num_features == 8

    with pytest.raises(ConfigError):
        prepare_shard(three_point_entries, make_shard_config({"projection": {"kind": "custom_projectors:broken"}}))
    with pytest.raises(ConfigError):
        prepare_shard(three_point_entries, make_shard_config({"projection": {"kind": "no_such_module:make"}}))


def test_advance_round_folds_residuals(three_point_entries):
    shard = prepare_shard(three_point_entries)
    advanced = advance_round(shard, [(1, 0.5), (2, -0.2), (3, 1.0)])
    assert [o for _, o in advanced.dataset.offsets()] == pytest.approx([0.6, 0.0, 1.3])
    assert advanced.meta == shard.meta

    with pytest.raises(MismatchedIdentifierError):
        advance_round(shard, [(1, 0.5), (3, -0.2), (2, 1.0)])
