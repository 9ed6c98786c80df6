"""
Shared fixtures: a synthetic 54-person gang dataset written to temporary CSV files.
"""

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))


def make_gang_weights(n=54, seed=0):
    """Symmetric tie matrix: a weight-1 ring keeps it connected, random ties on top."""
    rng = np.random.default_rng(seed)
    weights = np.zeros((n, n), dtype=int)
    for i in range(n):
        j = (i + 1) % n
        weights[i, j] = weights[j, i] = 1
    for _ in range(2 * n):
        i, j = rng.choice(n, size=2, replace=False)
        w = int(rng.integers(1, 5))
        weights[i, j] = weights[j, i] = w
    return weights


def make_gang_attributes(n=54, seed=0):
    rng = np.random.default_rng(seed)
    arrests = rng.integers(0, 25, n)
    return pd.DataFrame({
        'Age': rng.integers(16, 28, n),
        'Birthplace': np.arange(n) % 4 + 1,
        'Residence': np.arange(n) % 2,
        'Arrests': arrests,
        'Convictions': (arrests * rng.uniform(0, 1, n)).astype(int),
        'Prison': (np.arange(n) % 3 == 0).astype(int),
        'Music': (np.arange(n) % 5 == 0).astype(int),
        'Ranking': np.arange(n) % 5 + 1,
    }, index=[f'X{i}' for i in range(1, n + 1)])


@pytest.fixture
def gang_weights():
    return make_gang_weights()


@pytest.fixture
def gang_attributes():
    return make_gang_attributes()


@pytest.fixture
def gang_csv_files(tmp_path, gang_weights, gang_attributes):
    """Matrix and attribute CSVs laid out like the published dataset (row labels in a leading column)"""
    labels = [f'X{i}' for i in range(1, len(gang_weights) + 1)]
    matrix_path = tmp_path / 'LONDON_GANG.csv'
    attributes_path = tmp_path / 'LONDON_GANG_ATTR.csv'
    pd.DataFrame(gang_weights, index=labels, columns=labels).to_csv(matrix_path)
    gang_attributes.to_csv(attributes_path)
    return matrix_path, attributes_path
