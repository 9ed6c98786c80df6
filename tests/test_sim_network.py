"""
Test cases for sim_network.py module
"""

import pytest
import numpy as np

from gang_network.sim_network import SimNetwork, pearson_similarity


@pytest.fixture
def two_blocks():
    """Persons 1,2 tied to 3,4 and vice versa: identical patterns within each pair"""
    return np.array([[0, 0, 1, 1],
                     [0, 0, 1, 1],
                     [1, 1, 0, 0],
                     [1, 1, 0, 0]])


class TestPearsonSimilarity:
    """Test cases for pearson_similarity function"""

    @pytest.mark.parametrize('seed', [0, 1, 2])
    def test_diagonal_is_zero_for_random_input(self, seed):
        rng = np.random.default_rng(seed)
        weights = rng.integers(0, 5, size=(12, 12))
        weights = np.triu(weights, 1)
        weights = weights + weights.T
        similarity = pearson_similarity(weights)
        assert np.all(np.diag(similarity) == 0.0)

    def test_diagonal_is_zero_for_empty_matrix(self):
        similarity = pearson_similarity(np.zeros((5, 5)))
        assert np.all(similarity == 0.0)

    def test_isolate_correlates_zero(self, gang_weights):
        weights = gang_weights.copy()
        weights[0, :] = 0
        weights[:, 0] = 0
        similarity = pearson_similarity(weights)
        assert np.all(similarity[0] == 0.0)
        assert not np.isnan(similarity).any()

    def test_symmetric_and_bounded(self, gang_weights):
        similarity = pearson_similarity(gang_weights)
        np.testing.assert_allclose(similarity, similarity.T)
        assert similarity.min() >= -1.0
        assert similarity.max() <= 1.0

    def test_identical_and_opposite_patterns(self, two_blocks):
        similarity = pearson_similarity(two_blocks)
        assert similarity[0, 1] == pytest.approx(1.0)
        assert similarity[0, 2] == pytest.approx(-1.0)

    def test_matches_numpy_corrcoef_off_diagonal(self, gang_weights):
        similarity = pearson_similarity(gang_weights)
        expected = np.corrcoef(gang_weights.astype(float))
        mask = ~np.eye(len(gang_weights), dtype=bool)
        np.testing.assert_allclose(similarity[mask], expected[mask])


class TestSimNetwork:
    """Test cases for the SimNetwork class"""

    def test_similarity_df_excludes_self_pairs(self, two_blocks):
        network = SimNetwork(two_blocks)
        assert len(network.similarity_df) == 4 * 3
        assert (network.similarity_df['person'] != network.similarity_df['neighbor']).all()

    def test_get_neighbors(self, two_blocks):
        network = SimNetwork(two_blocks)
        assert network.get_neighbors(1, threshold=0.99) == [2]
        assert network.get_neighbors(3, threshold=0.99) == [4]
        assert sorted(network.get_neighbors(1, threshold=-1.0)) == [2, 3, 4]

    def test_distance_matrix_has_zero_diagonal(self, two_blocks):
        distance = SimNetwork(two_blocks).distance_matrix()
        assert np.all(np.diag(distance) == 0.0)
        assert distance[0, 2] == pytest.approx(2.0)

    def test_cluster_labels_separate_blocks(self, two_blocks):
        labels = SimNetwork(two_blocks).cluster_labels(2)
        assert list(labels.index) == [1, 2, 3, 4]
        assert labels[1] == labels[2]
        assert labels[3] == labels[4]
        assert labels[1] != labels[3]

    def test_cluster_count(self, gang_weights):
        labels = SimNetwork(gang_weights).cluster_labels(4)
        assert labels.nunique() <= 4
        assert len(labels) == 54

    def test_linkage_is_cached(self, gang_weights):
        network = SimNetwork(gang_weights)
        assert network.dendrogram_linkage() is network.dendrogram_linkage()
        assert network.dendrogram_linkage().shape == (53, 4)

    def test_cophenetic_correlation(self, two_blocks, gang_weights):
        assert SimNetwork(two_blocks).cophenetic_correlation() == pytest.approx(1.0)
        assert -1.0 <= SimNetwork(gang_weights, linkage_method='complete').cophenetic_correlation() <= 1.0
