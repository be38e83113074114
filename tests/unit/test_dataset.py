import pytest

from glmshard.core.dataset import LocalDataset
from glmshard.core.record import LabeledRecord
from glmshard.core.sparse import SparseVector
from glmshard.errors import InvalidArgumentError, MismatchedIdentifierError
from glmshard.projector import IdentityProjector, IndexMapProjector


def test_empty_construction_fails():
    with pytest.raises(InvalidArgumentError):
        LocalDataset(())
    with pytest.raises(InvalidArgumentError):
        LocalDataset.create([])


def test_create_sorts_by_id_unless_presorted(three_point_entries):
    shuffled = [three_point_entries[2], three_point_entries[0], three_point_entries[1]]
    assert LocalDataset.create(shuffled).ids() == [1, 2, 3]
    assert LocalDataset.create(shuffled, presorted=True).ids() == [3, 1, 2]


def test_accessors_are_parallel(three_point_entries):
    ds = LocalDataset.create(three_point_entries)
    ids = ds.ids()
    assert [uid for uid, _ in ds.labels()] == ids
    assert [uid for uid, _ in ds.weights()] == ids
    assert [uid for uid, _ in ds.offsets()] == ids
    assert [label for _, label in ds.labels()] == [1.0, 0.0, 1.0]
    assert [w for _, w in ds.weights()] == [1.0, 2.0, 0.5]
    assert ds.num_data_points == 3
    assert ds.num_features == 8
    assert ds.active_feature_keys() == {0, 2, 3, 5}
    assert ds.num_active_features() == 4


def test_add_scores_to_offsets(three_point_entries):
    ds = LocalDataset.create(three_point_entries)
    updated = ds.add_scores_to_offsets([(1, 1.0), (2, 2.0), (3, 3.0)])

    assert [o for _, o in updated.offsets()] == pytest.approx([1.1, 2.2, 3.3])
    assert updated.labels() == ds.labels()
    assert updated.weights() == ds.weights()
    assert [r.features for _, r in updated.entries] == [r.features for _, r in ds.entries]
    # the source dataset is untouched
    assert [o for _, o in ds.offsets()] == pytest.approx([0.1, 0.2, 0.3])


def test_add_scores_to_offsets_detects_mismatched_ids(three_point_entries):
    ds = LocalDataset.create(three_point_entries)
    with pytest.raises(MismatchedIdentifierError) as excinfo:
        ds.add_scores_to_offsets([(2, 1.0), (1, 2.0), (3, 3.0)])
    assert excinfo.value.position == 0
    assert excinfo.value.expected_id == 1
    assert excinfo.value.actual_id == 2


def test_add_scores_to_offsets_rejects_length_mismatch(three_point_entries):
    ds = LocalDataset.create(three_point_entries)
    with pytest.raises(InvalidArgumentError):
        ds.add_scores_to_offsets([(1, 1.0), (2, 2.0)])


def test_project_features(three_point_entries):
    ds = LocalDataset.create(three_point_entries)
    assert ds.project_features(IdentityProjector()) == ds

    projector = IndexMapProjector.build(ds)
    projected = ds.project_features(projector)
    assert projected.num_features == 4
    assert projected.ids() == ds.ids()
    # keys {0, 2, 3, 5} -> {0, 1, 2, 3}
    assert projected.entries[2][1].features == SparseVector(4, {0: 1.0, 1: 1.5, 3: 4.0})


def _correlated_dataset():
    labels = [1.0, 0.0, 1.0, 0.0, 1.0, 0.0]
    noise = [0.3, 0.1, 0.2, 0.5, 0.1, 0.4]
    entries = []
    for i, (label, n) in enumerate(zip(labels, noise)):
        values = {0: 1.0, 1: 2.0 * label, 2: n, 3: 1.0 - label}
        entries.append((i, LabeledRecord(label=label, features=SparseVector(6, values))))
    return LocalDataset.create(entries)


def test_filter_is_noop_when_keeping_every_feature():
    ds = _correlated_dataset()
    assert ds.filter_features_by_score(4) is ds
    assert ds.filter_features_by_score(10) == ds


def test_filter_keeps_strongest_features():
    ds = _correlated_dataset()
    filtered = ds.filter_features_by_score(3)

    assert filtered.active_feature_keys() == {0, 1, 3}
    for (_, before), (_, after) in zip(ds.entries, filtered.entries):
        assert after.features.dimension == before.features.dimension
        for key, value in after.features.active_items():
            assert value == before.features.get(key)
        assert after.label == before.label
        assert after.offset == before.offset


def test_filter_never_exceeds_requested_count():
    ds = _correlated_dataset()
    for k in range(0, 4):
        assert ds.filter_features_by_score(k).num_active_features() <= k


def test_filter_rejects_negative_count():
    with pytest.raises(InvalidArgumentError):
        _correlated_dataset().filter_features_by_score(-1)
