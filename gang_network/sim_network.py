import numpy as np
import pandas as pd

from scipy.cluster.hierarchy import linkage, fcluster, cophenet
from scipy.spatial.distance import squareform

from gang_network.config import LINKAGE_METHOD, SIMILARITY_THRESHOLD


def pearson_similarity(weights):
    """
    Pearson correlation between the adjacency rows of every pair of persons.

    Rows without variance (isolates) correlate 0 with everyone. The diagonal is
    always 0.
    """
    weights = np.asarray(weights, dtype=float)
    with np.errstate(divide='ignore', invalid='ignore'):
        similarity = np.corrcoef(weights)
    similarity = np.atleast_2d(np.nan_to_num(similarity, nan=0.0))
    np.clip(similarity, -1.0, 1.0, out=similarity)
    np.fill_diagonal(similarity, 0.0)
    return similarity


class SimNetwork:

    def __init__(self, weights, linkage_method=LINKAGE_METHOD):
        self.similarity = pearson_similarity(weights)
        self.linkage_method = linkage_method
        self.labels = list(range(1, self.similarity.shape[0] + 1))

        similarity_df = pd.DataFrame(self.similarity, index=self.labels, columns=self.labels)
        similarity_df.index.name = 'person'
        self.similarity_df = similarity_df.reset_index().melt(id_vars='person', var_name='neighbor',
                                                              value_name='similarity')
        self.similarity_df = self.similarity_df[self.similarity_df['person'] != self.similarity_df['neighbor']]
        self.similarity_df = self.similarity_df.reset_index(drop=True)
        self._linkage = None

    def get_neighbors(self, person, threshold=SIMILARITY_THRESHOLD):
        """ Persons whose tie pattern correlates with person's at or above threshold"""
        neighbors = self.similarity_df[self.similarity_df['person'] == person]
        return neighbors[neighbors['similarity'] >= threshold]['neighbor'].tolist()

    def distance_matrix(self):
        distance = 1.0 - self.similarity
        np.fill_diagonal(distance, 0.0)
        return distance

    def dendrogram_linkage(self):
        if self._linkage is None:
            condensed = squareform(self.distance_matrix(), checks=False)
            self._linkage = linkage(condensed, method=self.linkage_method)
        return self._linkage

    def cluster_labels(self, n_clusters):
        labels = fcluster(self.dendrogram_linkage(), n_clusters, criterion='maxclust')
        series = pd.Series(labels, index=self.labels, name='cluster')
        series.index.name = 'node'
        return series

    def cophenetic_correlation(self):
        # correlation between dendrogram heights and the original distances
        c, _ = cophenet(self.dendrogram_linkage(), squareform(self.distance_matrix(), checks=False))
        return float(c)
