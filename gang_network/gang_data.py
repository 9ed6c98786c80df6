"""
Loading and validation of the London gang co-offending data.

The dataset is two CSV files:
- a square tie-weight matrix, one row/column per person, cells in {0,1,2,3,4}
- a person attribute table, one row per matrix index

Persons are labelled by their 1-based matrix index everywhere downstream.
"""
import os
import sys

import numpy as np
import pandas as pd

from gang_network.config import (
    N_PERSONS, TIE_WEIGHTS, ID_COLUMN, ATTRIBUTE_COLUMNS, BIRTHPLACES,
    BINARY_COLUMNS, COUNT_COLUMNS, RANKINGS, MATRIX_FILE, ATTRIBUTES_FILE,
)


def read_weight_matrix(path, n_persons=N_PERSONS):
    """Read the tie-weight matrix CSV and return a validated integer array."""
    raw = pd.read_csv(path)
    # exporters usually write the row labels as a leading column
    if raw.shape[1] == raw.shape[0] + 1:
        raw = raw.iloc[:, 1:]
    try:
        numeric = raw.apply(pd.to_numeric)
    except ValueError as e:
        raise ValueError(f"Weight matrix {path} contains non-numeric cells: {e}") from e
    if numeric.isna().any().any():
        raise ValueError(f"Weight matrix {path} contains empty cells")

    return validate_weight_matrix(numeric.to_numpy(), n_persons=n_persons)


def validate_weight_matrix(weights, n_persons=None):
    weights = np.asarray(weights)
    if weights.ndim != 2 or weights.shape[0] != weights.shape[1]:
        raise ValueError(f"Weight matrix must be square, got shape {weights.shape}")
    if n_persons is not None and weights.shape != (n_persons, n_persons):
        raise ValueError(f"Weight matrix must be {n_persons}x{n_persons}, got "
                         f"{weights.shape[0]}x{weights.shape[1]}")

    allowed = [0] + list(TIE_WEIGHTS)
    bad = ~np.isin(weights, allowed)
    if bad.any():
        i, j = np.argwhere(bad)[0]
        raise ValueError(f"Invalid tie weight {weights[i, j]} at ({i + 1}, {j + 1}); "
                         f"expected one of {allowed}")

    asymmetric = weights != weights.T
    if asymmetric.any():
        i, j = np.argwhere(asymmetric)[0]
        raise ValueError(f"Weight matrix is not symmetric: ({i + 1}, {j + 1}) = {weights[i, j]} "
                         f"but ({j + 1}, {i + 1}) = {weights[j, i]}")

    diagonal = np.diag(weights)
    if diagonal.any():
        i = int(np.flatnonzero(diagonal)[0])
        raise ValueError(f"Weight matrix diagonal must be zero, found {diagonal[i]} at ({i + 1}, {i + 1})")

    return weights.astype(int)


def read_attributes(path, n_persons=N_PERSONS):
    """
    Read the person attribute table.

    The identifier column is often written without a header; it is renamed to
    'Person', or generated as 1..n when the file has none. The returned frame is
    indexed by node label (1..n) and carries a readable 'BirthplaceName' column.
    """
    persons = pd.read_csv(path)
    first = persons.columns[0]
    if first not in ATTRIBUTE_COLUMNS:
        persons = persons.rename(columns={first: ID_COLUMN})
    else:
        persons.insert(0, ID_COLUMN, range(1, len(persons) + 1))

    persons = validate_attributes(persons, n_persons=n_persons)
    persons.index = pd.RangeIndex(1, len(persons) + 1, name='node')
    persons['BirthplaceName'] = persons['Birthplace'].map(BIRTHPLACES)

    return persons


def validate_attributes(persons, n_persons=None):
    missing = [col for col in ATTRIBUTE_COLUMNS if col not in persons.columns]
    if missing:
        raise ValueError(f"Attribute table is missing columns: {missing}")
    if n_persons is not None and len(persons) != n_persons:
        raise ValueError(f"Attribute table must have {n_persons} rows, got {len(persons)}")

    persons = persons.copy()
    for col in ATTRIBUTE_COLUMNS:
        values = pd.to_numeric(persons[col], errors='coerce')
        if values.isna().any():
            row = int(values.isna().to_numpy().nonzero()[0][0])
            raise ValueError(f"Column '{col}' has a non-numeric value at row {row + 1}: "
                             f"{persons[col].iloc[row]!r}")
        fractional = (values % 1 != 0).to_numpy()
        if fractional.any():
            row = int(fractional.nonzero()[0][0])
            raise ValueError(f"Column '{col}' has a non-integer value at row {row + 1}: {values.iloc[row]!r}")
        persons[col] = values

    _check_codes(persons, 'Birthplace', BIRTHPLACES.keys())
    for col in BINARY_COLUMNS:
        _check_codes(persons, col, (0, 1))
    _check_codes(persons, 'Ranking', RANKINGS)
    for col in COUNT_COLUMNS:
        if (persons[col] < 0).any():
            raise ValueError(f"Column '{col}' must be non-negative")

    persons[ATTRIBUTE_COLUMNS] = persons[ATTRIBUTE_COLUMNS].astype(int)
    return persons


def _check_codes(persons, col, allowed):
    invalid = sorted(set(persons[col].unique()) - set(allowed))
    if invalid:
        raise ValueError(f"Column '{col}' has invalid codes {invalid}; expected {sorted(allowed)}")


def load_gang_data(matrix_path=MATRIX_FILE, attributes_path=ATTRIBUTES_FILE, n_persons=N_PERSONS):
    weights = read_weight_matrix(matrix_path, n_persons=n_persons)
    persons = read_attributes(attributes_path, n_persons=n_persons)
    if len(persons) != weights.shape[0]:
        raise ValueError(f"Attribute table has {len(persons)} rows but the weight matrix "
                         f"has {weights.shape[0]} persons")

    return weights, persons


if __name__ == "__main__":
    pd.set_option('display.max_columns', None)
    matrix_path, attributes_path = (sys.argv[1], sys.argv[2]) if len(sys.argv) > 2 else (MATRIX_FILE, ATTRIBUTES_FILE)
    weights, persons = load_gang_data(matrix_path, attributes_path)
    print(f"Loaded {weights.shape[0]}x{weights.shape[1]} weight matrix from "
          f"{os.path.abspath(matrix_path)}")
    print(persons.describe())
