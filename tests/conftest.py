"""
Ensure project root is on sys.path for test imports.

Pytest sometimes runs with a working directory that doesn't implicitly include
the repository root on sys.path, which can cause `ModuleNotFoundError: glmshard`.
"""

import sys
from pathlib import Path

import pytest

# tests/ -> repo root
REPO_ROOT = Path(__file__).resolve().parents[1]
repo_str = str(REPO_ROOT)
if repo_str not in sys.path:
    sys.path.insert(0, repo_str)


@pytest.fixture
def make_record():
    from glmshard.core.record import LabeledRecord
    from glmshard.core.sparse import SparseVector

    def _make(label, values, dimension=8, offset=0.0, weight=1.0):
        return LabeledRecord(label=label, features=SparseVector(dimension, values), offset=offset, weight=weight)

    return _make


@pytest.fixture
def three_point_entries(make_record):
    return [
        (1, make_record(1.0, {0: 1.0, 2: 3.0}, offset=0.1, weight=1.0)),
        (2, make_record(0.0, {0: 1.0, 3: -1.0}, offset=0.2, weight=2.0)),
        (3, make_record(1.0, {0: 1.0, 2: 1.5, 5: 4.0}, offset=0.3, weight=0.5)),
    ]
