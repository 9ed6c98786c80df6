"""
Full analysis of the London gang co-offending network (2005-2009).

Usage:
    python run_gang_analysis.py [matrix.csv attributes.csv]

Results saved to a timestamped directory under results/:
    person_metrics.csv, ties.csv, similarity_matrix.csv, summary.txt, log.txt, *.png
"""
import os
import sys
import time
from datetime import datetime

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import networkx as nx

from gang_network import graphing
from gang_network.config import (
    MATRIX_FILE, ATTRIBUTES_FILE, RESULTS_ROOT, N_PERSONS, TIE_LABELS, CO_OFFENDING_WEIGHT,
    POWER_PRECISION, POWER_MAX_ITER, POWER_DAMPING, LINKAGE_METHOD, N_CLUSTERS, SIMILARITY_THRESHOLD,
    N_PERMUTATIONS, RANDOM_STATE, CLASSIFIER_TARGET, CLASSIFIER_FEATURES, TEST_SIZE, TREE_MAX_DEPTH, TOP_N,
)
from gang_network.gang_data import load_gang_data
from gang_network.tie_network import TieNetwork, annotate_persons
from gang_network.sim_network import SimNetwork
from gang_network.power import power_scores
from gang_network.classifiers import build_design_matrix, fit_logistic_regression, fit_decision_tree
from gang_network.reporting import log, open_log, close_log, format_top, build_summary_text

# ============================================================================
# CONFIGURATION
# ============================================================================
TIMESTAMP = datetime.now().strftime('%Y%m%d_%H%M%S')
RESULTS_DIR = f'{RESULTS_ROOT}/run_{TIMESTAMP}'
ASSORTATIVITY_ATTRIBUTES = [('Birthplace', False), ('Residence', False), ('Prison', False),
                            ('Music', False), ('Ranking', False), ('Age', True)]


def run_analysis(matrix_path=MATRIX_FILE, attributes_path=ATTRIBUTES_FILE, results_dir=RESULTS_DIR):
    os.makedirs(results_dir, exist_ok=True)
    open_log(f'{results_dir}/log.txt')
    try:
        return _run_steps(matrix_path, attributes_path, results_dir)
    finally:
        close_log()


def _run_steps(matrix_path, attributes_path, results_dir):
    start_time = time.time()

    log("=" * 70)
    log("LONDON GANG CO-OFFENDING NETWORK ANALYSIS")
    log("=" * 70)
    log(f"Matrix file: {os.path.abspath(matrix_path)}")
    log(f"Attribute file: {os.path.abspath(attributes_path)}")
    log(f"Power: t={POWER_PRECISION}, damping={POWER_DAMPING}, max_iter={POWER_MAX_ITER}")
    log(f"Clustering: {LINKAGE_METHOD} linkage, {N_CLUSTERS} clusters")
    log(f"Start time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    log("=" * 70)

    # ============================================================================
    # 1. LOAD DATA
    # ============================================================================
    log("\n1. Loading data...")
    try:
        weights, persons = load_gang_data(matrix_path, attributes_path, n_persons=N_PERSONS)
    except (OSError, ValueError) as e:
        log(f"   ERROR loading data: {e}")
        log("   Exiting.")
        sys.exit(1)

    log(f"   ✓ Weight matrix: {weights.shape[0]} × {weights.shape[1]}")
    log(f"   ✓ Persons: {len(persons)}")
    log(f"   Mean age: {persons['Age'].mean():.1f}, mean arrests: {persons['Arrests'].mean():.1f}, "
        f"mean convictions: {persons['Convictions'].mean():.1f}")
    log(f"   Birthplaces: {persons['BirthplaceName'].value_counts().to_dict()}")
    log(f"   Prior prison: {persons['Prison'].sum()} / {len(persons)}")

    graphing.plot_attribute_histograms(persons, ['Age', 'Arrests', 'Convictions', 'Ranking'],
                                       f'{results_dir}/attribute_distributions.png')
    graphing.plot_attribute_scatter(persons, 'Arrests', 'Convictions', f'{results_dir}/arrests_convictions.png',
                                    hue='BirthplaceName')
    graphing.plot_attribute_scatter(persons, 'Age', 'Arrests', f'{results_dir}/age_arrests.png', hue='Prison')

    # ============================================================================
    # 2. BUILD NETWORK
    # ============================================================================
    log("\n2. Extracting ties and building network...")
    network = TieNetwork(weights, persons)
    network.ties.to_csv(f'{results_dir}/ties.csv', index=False)
    stats = network.describe()

    log(f"   ✓ Tie list: {len(network.ties):,} entries (each tie listed in both directions)")
    log(f"   ✓ Network built: {stats['nodes']} nodes, {stats['edges']} ties")
    log(f"   Density: {stats['density']:.4f}")
    log(f"   Components: {stats['components']} (giant component: {stats['giant_size']} nodes)")
    log(f"   Average clustering: {stats['avg_clustering']:.4f}")
    if stats['avg_path_length'] is not None:
        log(f"   Average shortest path (giant component): {stats['avg_path_length']:.3f}, "
            f"diameter: {stats['diameter']}")
    for w, count in stats['tie_weight_counts'].items():
        log(f"   Weight {w} ({TIE_LABELS[w]}): {count}")

    co_offending = network.weight_subgraph(CO_OFFENDING_WEIGHT)
    log(f"   Co-offending subgraph (weight >= {CO_OFFENDING_WEIGHT}): {co_offending.number_of_edges()} ties, "
        f"{nx.number_of_isolates(co_offending)} isolates")

    graphing.plot_tie_weights(network.ties, f'{results_dir}/tie_weights.png')
    graphing.plot_network(network.graph, f'{results_dir}/network_birthplace.png', color_by='BirthplaceName',
                          title='Gang Network by Birthplace')
    graphing.plot_network(co_offending, f'{results_dir}/network_co_offending.png', color_by='Prison',
                          title=f'Co-offending Network (weight >= {CO_OFFENDING_WEIGHT})')
    log(f"   Time: {time.time() - start_time:.1f}s")

    # ============================================================================
    # 3. CENTRALITY
    # ============================================================================
    log("\n3. Computing centrality measures...")
    centrality = network.centralities()
    log("   ✓ Centrality computed")
    log(f"\n   Top {TOP_N} by degree:\n{format_top(centrality['degree'], TOP_N)}")
    log(f"\n   Top {TOP_N} by betweenness:\n{format_top(centrality['betweenness'], TOP_N)}")
    log(f"\n   Top {TOP_N} by PageRank:\n{format_top(centrality['pagerank'], TOP_N)}")

    communities, modularity = network.communities(seed=RANDOM_STATE)
    log(f"\n   Louvain communities: {communities.nunique()} (modularity Q = {modularity:.4f})")

    # ============================================================================
    # 4. POWER
    # ============================================================================
    log("\n4. Running power iteration...")
    power = power_scores(weights, damping=POWER_DAMPING, t=POWER_PRECISION, max_iter=POWER_MAX_ITER)
    if power['converged']:
        log(f"   ✓ Converged after {power['iterations']} iterations")
    else:
        log(f"   WARNING: no convergence after {power['iterations']} iterations; "
            f"using the last iterate")
    power_series = pd.Series(power['vector'], index=centrality.index, name='power')
    log(f"\n   Top {TOP_N} by power:\n{format_top(power_series, TOP_N)}")
    log(f"   Power vs PageRank correlation: {power_series.corr(centrality['pagerank']):.4f}")

    # ============================================================================
    # 5. SIMILARITY AND HIERARCHICAL CLUSTERING
    # ============================================================================
    log("\n5. Computing similarity matrix and clustering...")
    sim_network = SimNetwork(weights, linkage_method=LINKAGE_METHOD)
    off_diagonal = sim_network.similarity_df['similarity']
    log(f"   Similarity: mean {off_diagonal.mean():.4f}, min {off_diagonal.min():.4f}, "
        f"max {off_diagonal.max():.4f}")
    pd.DataFrame(sim_network.similarity, index=sim_network.labels, columns=sim_network.labels).to_csv(
        f'{results_dir}/similarity_matrix.csv')

    clusters = sim_network.cluster_labels(N_CLUSTERS)
    cophenetic = sim_network.cophenetic_correlation()
    log(f"   ✓ Cluster sizes: {clusters.value_counts().sort_index().to_dict()}")
    log(f"   Cophenetic correlation: {cophenetic:.4f}")
    most_similar = sim_network.similarity_df.sort_values('similarity', ascending=False).iloc[0]
    log(f"   Most similar pair: {int(most_similar['person'])} & {int(most_similar['neighbor'])} "
        f"(r = {most_similar['similarity']:.3f}); "
        f"{len(sim_network.get_neighbors(int(most_similar['person']), SIMILARITY_THRESHOLD))} neighbors "
        f"at r >= {SIMILARITY_THRESHOLD}")

    graphing.plot_similarity_heatmap(sim_network.similarity, f'{results_dir}/similarity_heatmap.png',
                                     labels=sim_network.labels)
    graphing.plot_dendrogram(sim_network.dendrogram_linkage(), f'{results_dir}/dendrogram.png',
                             labels=sim_network.labels, n_clusters=N_CLUSTERS)

    persons = annotate_persons(persons, centrality, power_series, clusters, communities)
    persons.to_csv(f'{results_dir}/person_metrics.csv')
    log(f"   ✓ Person metrics saved: {results_dir}/person_metrics.csv")

    graphing.plot_centrality_distributions(persons[['degree', 'strength', 'betweenness', 'closeness',
                                                    'pagerank', 'power']],
                                           f'{results_dir}/centrality_distributions.png')
    graphing.plot_network(network.graph, f'{results_dir}/network_power.png', color_by='Ranking',
                          size_by=power_series.to_dict(), title='Gang Network (size = power, colour = ranking)')
    graphing.plot_metric_vs_attribute(persons, ['degree', 'betweenness', 'power'], 'Arrests',
                                      f'{results_dir}/metrics_vs_arrests.png')

    # ============================================================================
    # 6. ASSORTATIVITY
    # ============================================================================
    log("\n6. Testing attribute assortativity...")
    log(f"   {N_PERMUTATIONS} permutations per attribute")
    assortativity = []
    for attribute, numeric in ASSORTATIVITY_ATTRIBUTES:
        result = network.assortativity_permutation_test(attribute, numeric=numeric,
                                                        n_permutations=N_PERMUTATIONS, seed=RANDOM_STATE)
        assortativity.append(result)
        log(f"   {attribute:<12} r = {result['observed']:.4f} (p = {result['p_value']:.3f})")

    # ============================================================================
    # 7. CLASSIFICATION
    # ============================================================================
    log(f"\n7. Classifying '{CLASSIFIER_TARGET}'...")
    X, y = build_design_matrix(persons, CLASSIFIER_FEATURES, CLASSIFIER_TARGET)
    log(f"   {X.shape[0]} persons × {X.shape[1]} features, class balance {y.value_counts().to_dict()}")

    logistic = fit_logistic_regression(X, y, test_size=TEST_SIZE, random_state=RANDOM_STATE)
    log(f"   ✓ Logistic regression accuracy: {logistic['accuracy']:.3f} "
        f"(CV {logistic['cv_accuracy']:.3f})")
    log(logistic['report'])

    tree = fit_decision_tree(X, y, max_depth=TREE_MAX_DEPTH, test_size=TEST_SIZE, random_state=RANDOM_STATE)
    log(f"   ✓ Decision tree accuracy: {tree['accuracy']:.3f} (CV {tree['cv_accuracy']:.3f})")
    log(tree['report'])

    graphing.plot_decision_tree(tree['model'], X.columns, f'{results_dir}/decision_tree.png',
                                class_names=[f'{CLASSIFIER_TARGET}={c}' for c in sorted(y.unique())])

    # ============================================================================
    # 8. SUMMARY
    # ============================================================================
    log("\n" + "=" * 70)
    log("8. GENERATING SUMMARY")
    log("=" * 70)
    summary_text = build_summary_text(stats, persons, power, modularity, communities.nunique(), cophenetic,
                                      assortativity, logistic, tree, CLASSIFIER_TARGET, results_dir, top_n=TOP_N)
    with open(f'{results_dir}/summary.txt', 'w', encoding='utf-8') as f:
        f.write(summary_text)
    log("\n" + summary_text)

    log(f"Total time: {time.time() - start_time:.1f}s")
    log(f"End time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    return persons


if __name__ == "__main__":
    pd.set_option('display.max_columns', None)
    np.set_printoptions(precision=4, suppress=True)
    if len(sys.argv) > 2:
        run_analysis(sys.argv[1], sys.argv[2])
    else:
        run_analysis()
