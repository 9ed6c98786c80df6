from datetime import datetime

# Logging (global for function access)
log_file = None


def open_log(path):
    global log_file
    log_file = open(path, 'w', encoding='utf-8')
    return log_file


def close_log():
    global log_file
    if log_file is not None:
        log_file.close()
    log_file = None


def log(msg):
    """Log message to both console and file"""
    timestamp = datetime.now().strftime('%H:%M:%S')
    full_msg = f"[{timestamp}] {msg}"
    print(full_msg)
    if log_file:
        log_file.write(full_msg + '\n')
        log_file.flush()


def format_top(series, n=10, label='Person'):
    """ Ranked lines for the n largest values of a per-person metric"""
    top = series.sort_values(ascending=False).head(n)
    return '\n'.join(f"  {i:2d}. {label} {node}: {value:.4f}" for i, (node, value) in enumerate(top.items(), 1))


def build_summary_text(stats, persons, power, modularity, n_communities, cophenetic, assortativity,
                       logistic, tree, target, results_dir, top_n=10):
    weight_lines = '\n'.join(f"      Weight {w}:           {count:,}" for w, count in stats['tie_weight_counts'].items())
    avg_path = f"{stats['avg_path_length']:.3f}" if stats['avg_path_length'] is not None else 'n/a'
    assort_lines = '\n'.join(
        f"      {a['attribute']:<14} r={a['observed']:7.4f}  (random {a['permuted_mean']:.4f} "
        f"± {a['permuted_std']:.4f}, p={a['p_value']:.3f})"
        for a in assortativity
    )
    power_status = 'converged' if power['converged'] else 'DID NOT CONVERGE'

    summary_text = f"""
================================================================================
GANG CO-OFFENDING NETWORK ANALYSIS
================================================================================
Completed: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}

NETWORK PROPERTIES:
  Nodes (N):            {stats['nodes']:,}
  Ties (E):             {stats['edges']:,}
  Density:              {stats['density']:.4f}
  Components:           {stats['components']} (giant: {stats['giant_size']} nodes, isolates: {stats['isolates']})
  Mean degree <k>:      {stats['mean_degree']:.2f}
  Mean strength:        {stats['mean_strength']:.2f}
  Avg clustering C:     {stats['avg_clustering']:.4f}
  Transitivity:         {stats['transitivity']:.4f}
  Avg path length L:    {avg_path}
  Diameter:             {stats['diameter'] if stats['diameter'] is not None else 'n/a'}

  Tie strengths:
{weight_lines}

CENTRALITY:
  Top {top_n} by degree:
{format_top(persons['degree'], top_n)}

  Top {top_n} by betweenness:
{format_top(persons['betweenness'], top_n)}

  Top {top_n} by PageRank:
{format_top(persons['pagerank'], top_n)}

POWER:
  Iterations:           {power['iterations']} ({power_status})
  Top {top_n} by power:
{format_top(persons['power'], top_n)}

COMMUNITIES AND CLUSTERS:
  Louvain communities:  {n_communities} (modularity Q = {modularity:.4f})
  Similarity clusters:  {persons['cluster'].nunique()} (cophenetic r = {cophenetic:.4f})

ASSORTATIVITY:
{assort_lines}

CLASSIFICATION (target: {target}):
  Logistic regression:  accuracy {logistic['accuracy']:.3f}, CV accuracy {logistic['cv_accuracy']:.3f}
  Decision tree:        accuracy {tree['accuracy']:.3f}, CV accuracy {tree['cv_accuracy']:.3f}

  Strongest logistic coefficients:
{logistic['coefficients'].head(5).to_string()}

  Tree feature importances:
{tree['importances'].head(5).to_string()}

FILES SAVED:
  - {results_dir}/person_metrics.csv
  - {results_dir}/ties.csv
  - {results_dir}/similarity_matrix.csv
  - {results_dir}/summary.txt
  - {results_dir}/log.txt
  - {results_dir}/*.png

================================================================================
"""
    return summary_text
