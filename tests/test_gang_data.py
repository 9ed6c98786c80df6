"""
Test cases for gang_data.py module
"""

import pytest
import numpy as np
import pandas as pd

from gang_network.gang_data import (
    read_weight_matrix, validate_weight_matrix, read_attributes, validate_attributes, load_gang_data,
)
from gang_network.config import ID_COLUMN


class TestValidateWeightMatrix:
    """Test cases for validate_weight_matrix function"""

    def test_valid_matrix_returns_int_array(self):
        weights = np.array([[0, 2.0, 0], [2.0, 0, 4.0], [0, 4.0, 0]])
        validated = validate_weight_matrix(weights)
        assert validated.dtype.kind == 'i'
        assert validated[1, 2] == 4

    def test_non_square_rejected(self):
        with pytest.raises(ValueError, match='square'):
            validate_weight_matrix(np.zeros((3, 4)))

    def test_wrong_size_rejected(self):
        with pytest.raises(ValueError, match='54x54'):
            validate_weight_matrix(np.zeros((3, 3)), n_persons=54)

    def test_asymmetric_rejected(self):
        weights = np.zeros((3, 3))
        weights[0, 1] = 2
        with pytest.raises(ValueError, match='not symmetric'):
            validate_weight_matrix(weights)

    def test_nonzero_diagonal_rejected(self):
        weights = np.zeros((3, 3))
        weights[1, 1] = 1
        with pytest.raises(ValueError, match='diagonal'):
            validate_weight_matrix(weights)

    @pytest.mark.parametrize('bad', [5, -1, 2.5])
    def test_out_of_domain_weights_rejected(self, bad):
        weights = np.zeros((3, 3))
        weights[0, 2] = weights[2, 0] = bad
        with pytest.raises(ValueError, match='Invalid tie weight'):
            validate_weight_matrix(weights)


class TestReadWeightMatrix:
    """Test cases for reading the matrix CSV"""

    def test_reads_labelled_matrix(self, gang_csv_files, gang_weights):
        matrix_path, _ = gang_csv_files
        weights = read_weight_matrix(matrix_path)
        assert weights.shape == (54, 54)
        np.testing.assert_array_equal(weights, gang_weights)

    def test_reads_unlabelled_matrix(self, tmp_path, gang_weights):
        path = tmp_path / 'matrix.csv'
        pd.DataFrame(gang_weights).to_csv(path, index=False)
        np.testing.assert_array_equal(read_weight_matrix(path), gang_weights)

    def test_non_numeric_cell_rejected(self, tmp_path):
        path = tmp_path / 'matrix.csv'
        pd.DataFrame([[0, 'a'], ['a', 0]]).to_csv(path, index=False)
        with pytest.raises(ValueError, match='non-numeric'):
            read_weight_matrix(path, n_persons=2)

    def test_wrong_dimensions_rejected(self, tmp_path):
        path = tmp_path / 'matrix.csv'
        pd.DataFrame(np.zeros((10, 10), dtype=int)).to_csv(path, index=False)
        with pytest.raises(ValueError, match='54x54'):
            read_weight_matrix(path)


class TestReadAttributes:
    """Test cases for reading the attribute table"""

    def test_unnamed_identifier_column(self, gang_csv_files):
        _, attributes_path = gang_csv_files
        persons = read_attributes(attributes_path)
        assert len(persons) == 54
        assert list(persons.index[:3]) == [1, 2, 3]
        assert persons.index.name == 'node'
        assert persons.loc[1, ID_COLUMN] == 'X1'
        assert persons.loc[54, ID_COLUMN] == 'X54'

    def test_birthplace_names(self, gang_csv_files):
        _, attributes_path = gang_csv_files
        persons = read_attributes(attributes_path)
        # Birthplace codes cycle 1..4 in the fixture
        assert persons.loc[1, 'BirthplaceName'] == 'West Africa'
        assert persons.loc[3, 'BirthplaceName'] == 'UK'

    def test_identifier_generated_when_missing(self, tmp_path, gang_attributes):
        path = tmp_path / 'attrs.csv'
        gang_attributes.to_csv(path, index=False)
        persons = read_attributes(path)
        assert list(persons[ID_COLUMN].head(3)) == [1, 2, 3]


class TestValidateAttributes:
    """Test cases for validate_attributes function"""

    def test_valid_table(self, gang_attributes):
        validated = validate_attributes(gang_attributes, n_persons=54)
        assert len(validated) == 54

    def test_missing_column(self, gang_attributes):
        with pytest.raises(ValueError, match='missing columns'):
            validate_attributes(gang_attributes.drop(columns=['Music']))

    def test_wrong_row_count(self, gang_attributes):
        with pytest.raises(ValueError, match='54 rows'):
            validate_attributes(gang_attributes.head(50), n_persons=54)

    def test_invalid_birthplace(self, gang_attributes):
        gang_attributes.iloc[0, gang_attributes.columns.get_loc('Birthplace')] = 7
        with pytest.raises(ValueError, match='Birthplace'):
            validate_attributes(gang_attributes)

    def test_invalid_binary_flag(self, gang_attributes):
        gang_attributes.iloc[0, gang_attributes.columns.get_loc('Prison')] = 2
        with pytest.raises(ValueError, match='Prison'):
            validate_attributes(gang_attributes)

    def test_invalid_ranking(self, gang_attributes):
        gang_attributes.iloc[0, gang_attributes.columns.get_loc('Ranking')] = 0
        with pytest.raises(ValueError, match='Ranking'):
            validate_attributes(gang_attributes)

    def test_negative_arrests(self, gang_attributes):
        gang_attributes.iloc[0, gang_attributes.columns.get_loc('Arrests')] = -3
        with pytest.raises(ValueError, match='non-negative'):
            validate_attributes(gang_attributes)

    def test_non_numeric_value(self, gang_attributes):
        gang_attributes['Age'] = gang_attributes['Age'].astype(object)
        gang_attributes.iloc[4, gang_attributes.columns.get_loc('Age')] = 'unknown'
        with pytest.raises(ValueError, match='row 5'):
            validate_attributes(gang_attributes)

    @pytest.mark.parametrize('col', ['Age', 'Arrests', 'Birthplace'])
    def test_fractional_value_rejected(self, gang_attributes, col):
        gang_attributes[col] = gang_attributes[col].astype(float)
        gang_attributes.iloc[2, gang_attributes.columns.get_loc(col)] += 0.5
        with pytest.raises(ValueError, match='non-integer value at row 3'):
            validate_attributes(gang_attributes)


class TestLoadGangData:
    """Test cases for load_gang_data function"""

    def test_loads_both_files(self, gang_csv_files):
        weights, persons = load_gang_data(*gang_csv_files)
        assert weights.shape == (54, 54)
        assert len(persons) == weights.shape[0]

    def test_row_count_mismatch(self, tmp_path, gang_csv_files, gang_attributes):
        matrix_path, _ = gang_csv_files
        short = tmp_path / 'short.csv'
        gang_attributes.head(40).to_csv(short)
        with pytest.raises(ValueError, match='40 rows'):
            load_gang_data(matrix_path, short, n_persons=None)
