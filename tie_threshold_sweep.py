"""Quick check of how the network falls apart as weak ties are dropped"""
import sys

import networkx as nx

from gang_network.config import MATRIX_FILE, ATTRIBUTES_FILE, TIE_WEIGHTS, TIE_LABELS
from gang_network.gang_data import load_gang_data
from gang_network.tie_network import TieNetwork


def sweep(network):
    rows = []
    for min_weight in TIE_WEIGHTS:
        G = network.weight_subgraph(min_weight)
        isolated = nx.number_of_isolates(G)
        if G.number_of_edges() > 0:
            giant = max(nx.connected_components(G), key=len)
            giant_pct = len(giant) / G.number_of_nodes() * 100
        else:
            giant_pct = 0
        rows.append((min_weight, G.number_of_edges(), nx.density(G), isolated,
                     isolated / G.number_of_nodes() * 100, giant_pct))
    return rows


if __name__ == "__main__":
    print("Loading data...")
    if len(sys.argv) > 2:
        weights, persons = load_gang_data(sys.argv[1], sys.argv[2])
    else:
        weights, persons = load_gang_data(MATRIX_FILE, ATTRIBUTES_FILE)
    network = TieNetwork(weights, persons)

    print("\nTesting tie-weight thresholds:\n")
    print(f"{'Min weight':<12} {'Ties':<10} {'Density':<10} {'Isolated':<14} {'Giant %':<10} {'Meaning'}")
    print("-" * 90)
    for min_weight, edges, density, isolated, isolated_pct, giant_pct in sweep(network):
        print(f"{min_weight:<12} {edges:<10,} {density:<10.4f} {isolated:<5} ({isolated_pct:4.1f}%) "
              f"{giant_pct:<10.1f} {TIE_LABELS[min_weight]} or stronger")
