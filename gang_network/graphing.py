import matplotlib.pyplot as plt
import seaborn as sns
import networkx as nx
import numpy as np

from scipy.cluster.hierarchy import dendrogram
from sklearn.tree import plot_tree

from gang_network.config import TIE_LABELS, RANDOM_STATE


def _save(path):
    plt.tight_layout()
    plt.savefig(path, dpi=150, bbox_inches='tight')
    plt.close()
    return path


def plot_attribute_histograms(persons, columns, path):
    fig, axes = plt.subplots(1, len(columns), figsize=(5 * len(columns), 4), squeeze=False)
    for ax, col in zip(axes[0], columns):
        ax.hist(persons[col], bins=min(20, persons[col].nunique()), edgecolor='black', alpha=0.7)
        ax.axvline(persons[col].mean(), color='red', linestyle='--',
                   linewidth=2, label=f'Mean = {persons[col].mean():.1f}')
        ax.set_xlabel(col)
        ax.set_ylabel('Frequency')
        ax.set_title(f'Distribution of {col}')
        ax.legend()
        ax.grid(alpha=0.3)
    return _save(path)


def plot_attribute_scatter(persons, x, y, path, hue=None):
    plt.figure(figsize=(8, 6))
    sns.scatterplot(data=persons, x=x, y=y, hue=hue, palette='husl', s=60, alpha=0.8)
    r = persons[x].corr(persons[y])
    plt.title(f'{y} vs {x} (r={r:.3f})')
    plt.grid(alpha=0.3)
    return _save(path)


def plot_tie_weights(ties, path):
    # ties are enumerated in both directions
    counts = (ties['weight'].value_counts().sort_index() // 2).reindex(list(TIE_LABELS), fill_value=0)
    plt.figure(figsize=(10, 5))
    plt.bar([str(w) for w in counts.index], counts.values, alpha=0.7, edgecolor='black')
    plt.xlabel('Tie weight')
    plt.ylabel('Number of ties')
    plt.title('Tie Strength Distribution')
    plt.grid(alpha=0.3, axis='y')
    return _save(path)


def plot_network(G, path, color_by=None, size_by=None, title='Gang Network'):
    """
    Spring layout of the tie network.

    Nodes are coloured by a node attribute and sized by a {node: value} metric,
    edge width follows tie weight.
    """
    plt.figure(figsize=(12, 10))
    pos = nx.spring_layout(G, weight='weight', seed=RANDOM_STATE)

    if color_by is not None:
        values = [G.nodes[node].get(color_by) for node in G.nodes()]
        categories = sorted(set(values), key=str)
        palette = sns.color_palette('husl', len(categories))
        colors = [palette[categories.index(v)] for v in values]
    else:
        colors = 'steelblue'

    if size_by is not None:
        metric = np.array([size_by[node] for node in G.nodes()], dtype=float)
        span = metric.max() - metric.min()
        scaled = (metric - metric.min()) / span if span > 0 else np.zeros_like(metric)
        sizes = 100 + 900 * scaled
    else:
        sizes = 300

    widths = [0.5 * d['weight'] for _, _, d in G.edges(data=True)]
    nx.draw_networkx_edges(G, pos, width=widths, alpha=0.4)
    nx.draw_networkx_nodes(G, pos, node_color=colors, node_size=sizes, alpha=0.9)
    nx.draw_networkx_labels(G, pos, font_size=8)

    if color_by is not None:
        for category, color in zip(categories, palette):
            plt.scatter([], [], color=color, label=f'{color_by} = {category}')
        plt.legend(loc='best')

    plt.title(title)
    plt.axis('off')
    return _save(path)


def plot_centrality_distributions(centrality_df, path):
    columns = list(centrality_df.columns)
    n_cols = 3
    n_rows = int(np.ceil(len(columns) / n_cols))
    fig, axes = plt.subplots(n_rows, n_cols, figsize=(6 * n_cols, 5 * n_rows), squeeze=False)

    for ax, col in zip(axes.flat, columns):
        ax.hist(centrality_df[col], bins=20, edgecolor='black', alpha=0.7)
        ax.set_xlabel(col.capitalize())
        ax.set_ylabel('Frequency')
        ax.set_title(f'{col.capitalize()} Distribution')
        ax.grid(alpha=0.3)
    for ax in list(axes.flat)[len(columns):]:
        ax.axis('off')

    return _save(path)


def plot_similarity_heatmap(similarity, path, labels=None):
    plt.figure(figsize=(12, 10))
    sns.heatmap(similarity, cmap='RdBu_r', vmin=-1, vmax=1, center=0, square=True,
                xticklabels=labels if labels is not None else 'auto',
                yticklabels=labels if labels is not None else 'auto')
    plt.title('Pearson Similarity of Tie Patterns')
    return _save(path)


def colour_threshold(linkage_matrix, n_clusters):
    if n_clusters is None or not 1 < n_clusters <= len(linkage_matrix):
        return None
    # just below the (n_clusters - 1)-th highest merge, so the top merges stay uncoloured
    heights = linkage_matrix[:, 2]
    return heights[-(n_clusters - 1)] - 1e-9


def plot_dendrogram(linkage_matrix, path, labels=None, n_clusters=None):
    plt.figure(figsize=(14, 6))
    dendrogram(linkage_matrix, labels=labels, color_threshold=colour_threshold(linkage_matrix, n_clusters),
               leaf_font_size=8)
    plt.xlabel('Person')
    plt.ylabel('Distance (1 - similarity)')
    plt.title('Hierarchical Clustering of Tie Patterns')
    return _save(path)


def plot_decision_tree(model, feature_names, path, class_names=None):
    plt.figure(figsize=(16, 8))
    plot_tree(model, feature_names=list(feature_names), class_names=class_names, filled=True, rounded=True,
              fontsize=8)
    plt.title('Decision Tree')
    return _save(path)


def plot_metric_vs_attribute(persons, metrics, attribute, path):
    fig, axes = plt.subplots(1, len(metrics), figsize=(5 * len(metrics), 4), squeeze=False)
    for ax, metric in zip(axes[0], metrics):
        r = persons[metric].corr(persons[attribute])
        ax.scatter(persons[metric], persons[attribute], alpha=0.6, s=30)
        ax.set_xlabel(metric.capitalize())
        ax.set_ylabel(attribute)
        ax.set_title(f'{attribute} vs {metric} (r={r:.3f})')
        ax.grid(alpha=0.3)
    return _save(path)
