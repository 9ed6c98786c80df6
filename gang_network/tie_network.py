import numpy as np
import pandas as pd
import networkx as nx

from networkx.algorithms import community as nx_community
from tqdm import tqdm

from gang_network.config import TIE_WEIGHTS, RANDOM_STATE, N_PERMUTATIONS


def extract_ties(weights, both_directions=True):
    """
    Flatten a weight matrix into a tie list with 1-based person labels.

    With both_directions=True every nonzero cell is a row, so a symmetric tie
    shows up as (i, j, w) and (j, i, w). Otherwise only the upper triangle is
    read and each unordered pair appears once.
    """
    weights = np.asarray(weights)
    n = weights.shape[0]
    rows = []
    for i in range(n):
        start = 0 if both_directions else i + 1
        for j in range(start, n):
            if weights[i, j] != 0:
                rows.append((i + 1, j + 1, int(weights[i, j])))

    return pd.DataFrame(rows, columns=['source', 'target', 'weight'])


def build_graph(weights, persons=None):
    weights = np.asarray(weights)
    G = nx.Graph()
    nodes = range(1, weights.shape[0] + 1)
    if persons is not None:
        G.add_nodes_from((node, persons.loc[node].to_dict()) for node in nodes)
    else:
        G.add_nodes_from(nodes)

    ties = extract_ties(weights, both_directions=False)
    G.add_weighted_edges_from(ties.itertuples(index=False, name=None))
    return G


def annotate_persons(persons, *frames):
    """Append derived per-node columns to the person table."""
    annotated = persons.copy()
    for frame in frames:
        annotated = annotated.join(frame, how='left')
    return annotated


class TieNetwork:

    def __init__(self, weights, persons=None):
        self.weights = np.asarray(weights)
        self.persons = persons
        self.ties = extract_ties(self.weights, both_directions=True)
        self.graph = build_graph(self.weights, persons)

    def weight_subgraph(self, min_weight):
        """ All persons, ties of at least min_weight only"""
        G = nx.Graph()
        G.add_nodes_from(self.graph.nodes(data=True))
        G.add_edges_from((u, v, d) for u, v, d in self.graph.edges(data=True) if d['weight'] >= min_weight)
        return G

    def describe(self):
        G = self.graph
        degrees = [d for _, d in G.degree()]
        strengths = [d for _, d in G.degree(weight='weight')]
        components = list(nx.connected_components(G))
        giant = G.subgraph(max(components, key=len)).copy()

        if giant.number_of_nodes() > 1:
            avg_path = nx.average_shortest_path_length(giant)
            diameter = nx.diameter(giant)
        else:
            avg_path = None
            diameter = None

        weight_counts = {w: int((self.ties['weight'] == w).sum() // 2) for w in TIE_WEIGHTS}

        return {
            'nodes': G.number_of_nodes(),
            'edges': G.number_of_edges(),
            'density': nx.density(G),
            'components': len(components),
            'giant_size': giant.number_of_nodes(),
            'isolates': nx.number_of_isolates(G),
            'mean_degree': float(np.mean(degrees)),
            'mean_strength': float(np.mean(strengths)),
            'avg_clustering': nx.average_clustering(G),
            'transitivity': nx.transitivity(G),
            'avg_path_length': avg_path,
            'diameter': diameter,
            'tie_weight_counts': weight_counts,
        }

    def centralities(self):
        G = self.graph
        degree = dict(G.degree())
        strength = dict(G.degree(weight='weight'))
        betweenness = nx.betweenness_centrality(G, normalized=False)
        closeness = nx.closeness_centrality(G)
        pagerank = nx.pagerank(G, weight='weight')

        df = pd.DataFrame({
            'degree': degree,
            'strength': strength,
            'betweenness': betweenness,
            'closeness': closeness,
            'pagerank': pagerank,
        })
        df.index.name = 'node'
        return df.sort_index()

    def communities(self, seed=RANDOM_STATE):
        """ Louvain communities on the weighted graph, returned as a node -> community Series"""
        communities = nx_community.louvain_communities(self.graph, weight='weight', seed=seed)
        modularity = nx_community.modularity(self.graph, communities, weight='weight')
        # largest community first
        communities = sorted(communities, key=len, reverse=True)
        labels = {node: i for i, members in enumerate(communities) for node in members}
        series = pd.Series(labels, name='community').sort_index()
        series.index.name = 'node'
        return series, modularity

    def assortativity(self, attribute, numeric=False, graph=None):
        G = self.graph if graph is None else graph
        if numeric:
            return nx.numeric_assortativity_coefficient(G, attribute)
        return nx.attribute_assortativity_coefficient(G, attribute)

    def assortativity_permutation_test(self, attribute, numeric=False, n_permutations=N_PERMUTATIONS,
                                       seed=RANDOM_STATE):
        """
        Compare observed assortativity with random relabelling of the attribute.

        The p-value is two-sided: the share of permutations at least as extreme as
        the observed coefficient, with the usual +1 correction. Permutations with an
        undefined coefficient are left out; a constant attribute has no defined
        coefficient and gets a NaN p-value.
        """
        observed = self.assortativity(attribute, numeric=numeric)
        rng = np.random.default_rng(seed)
        nodes = list(self.graph.nodes())
        values = [self.graph.nodes[node][attribute] for node in nodes]

        G = self.graph.copy()
        permuted = []
        for _ in tqdm(range(n_permutations), desc=f'Permuting {attribute}', leave=False):
            shuffled = rng.permutation(values)
            nx.set_node_attributes(G, dict(zip(nodes, shuffled.tolist())), attribute)
            permuted.append(self.assortativity(attribute, numeric=numeric, graph=G))

        permuted = np.array(permuted, dtype=float)
        permuted = permuted[~np.isnan(permuted)]
        if np.isnan(observed) or len(permuted) == 0:
            return {
                'attribute': attribute,
                'observed': float(observed),
                'permuted_mean': float(permuted.mean()) if len(permuted) else float('nan'),
                'permuted_std': float(permuted.std()) if len(permuted) else float('nan'),
                'p_value': float('nan'),
            }

        extreme = np.sum(np.abs(permuted) >= abs(observed))
        p_value = (extreme + 1) / (len(permuted) + 1)

        return {
            'attribute': attribute,
            'observed': observed,
            'permuted_mean': float(permuted.mean()),
            'permuted_std': float(permuted.std()),
            'p_value': float(p_value),
        }
