"""
Analyze the saved person metrics from a previous run.

Usage:
    python analyze_results.py results/run_20240101_120000
"""
import os
import sys
import pandas as pd
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from datetime import datetime

METRICS = ['degree', 'strength', 'betweenness', 'closeness', 'pagerank', 'power']
OUTCOMES = ['Arrests', 'Convictions', 'Ranking', 'Prison']


def metric_outcome_correlations(persons, metrics=METRICS, outcomes=OUTCOMES):
    """ Pearson correlation of every network metric with every criminal-record outcome"""
    return pd.DataFrame({
        outcome: [persons[metric].corr(persons[outcome]) for metric in metrics]
        for outcome in outcomes
    }, index=metrics)


def rank_agreement(persons, metrics=METRICS, top_n=10):
    """ Share of each metric's top-n persons that are also in the power top-n"""
    power_top = set(persons['power'].nlargest(top_n).index)
    return pd.Series({
        metric: len(set(persons[metric].nlargest(top_n).index) & power_top) / top_n
        for metric in metrics
    }, name=f'overlap_with_power_top{top_n}')


def analyze_existing_results(results_dir='results'):
    """
    Analyze an existing person_metrics.csv and write a summary + plots.
    """
    print(f"\n{'='*70}")
    print(f"ANALYZING RESULTS FROM: {results_dir}")
    print(f"{'='*70}\n")

    # Check if directory exists
    if not os.path.exists(results_dir):
        print(f"ERROR: Directory '{results_dir}' not found!")
        return None

    metrics_file = f'{results_dir}/person_metrics.csv'
    if not os.path.exists(metrics_file):
        print(f"ERROR: CSV file not found in '{results_dir}'!")
        print(f"  Looking for: {metrics_file}")
        return None

    print("Loading data files...")
    persons = pd.read_csv(metrics_file, index_col='node')
    print(f"  ✓ Person metrics: {len(persons)} rows")

    correlations = metric_outcome_correlations(persons)
    agreement = rank_agreement(persons)
    strongest = correlations['Arrests'].abs().idxmax()

    summary_text = f"""
================================================================================
                    GANG NETWORK METRICS (Post-Run Analysis)
================================================================================

ANALYSIS DIRECTORY: {results_dir}
ANALYSIS TIME: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}

CORRELATIONS OF NETWORK METRICS WITH CRIMINAL RECORD:
{correlations.round(4).to_string()}

TOP-10 OVERLAP WITH POWER:
{agreement.round(2).to_string()}

KEY FINDINGS:
  Metric most associated with arrests:
    → {strongest} (r = {correlations.loc[strongest, 'Arrests']:.4f})

FILES SAVED:
  - {results_dir}/post_run_summary.txt
  - {results_dir}/post_run_plots.png

================================================================================
"""

    print(f"\nSaving summary to: {results_dir}/post_run_summary.txt")
    with open(f'{results_dir}/post_run_summary.txt', 'w', encoding='utf-8') as f:
        f.write(summary_text)
    print("  ✓ Summary saved")

    print("\nGenerating plots...")
    fig, axes = plt.subplots(2, 2, figsize=(14, 12))

    axes[0, 0].scatter(persons['power'], persons['Arrests'], alpha=0.6, s=30)
    axes[0, 0].set_xlabel('Power')
    axes[0, 0].set_ylabel('Arrests')
    axes[0, 0].set_title(f"Arrests vs Power (r={correlations.loc['power', 'Arrests']:.3f})")
    axes[0, 0].grid(alpha=0.3)

    axes[0, 1].scatter(persons['pagerank'], persons['power'], alpha=0.6, s=30)
    axes[0, 1].set_xlabel('PageRank')
    axes[0, 1].set_ylabel('Power')
    axes[0, 1].set_title(f"Power vs PageRank (r={persons['pagerank'].corr(persons['power']):.3f})")
    axes[0, 1].grid(alpha=0.3)

    persons.boxplot(column='betweenness', by='Ranking', ax=axes[1, 0])
    axes[1, 0].set_xlabel('Ranking')
    axes[1, 0].set_ylabel('Betweenness')
    axes[1, 0].set_title('Betweenness by Ranking')

    axes[1, 1].bar(agreement.index, agreement.values, alpha=0.7, edgecolor='black')
    axes[1, 1].set_ylabel('Overlap')
    axes[1, 1].set_title('Top-10 Overlap with Power')
    axes[1, 1].grid(alpha=0.3, axis='y')

    plt.suptitle('')
    plt.tight_layout()
    plt.savefig(f'{results_dir}/post_run_plots.png', dpi=150, bbox_inches='tight')
    plt.close()
    print(f"  ✓ Plots saved: {results_dir}/post_run_plots.png")

    print(f"\n{'='*70}")
    print("ANALYSIS COMPLETE")
    print(f"{'='*70}")
    print(summary_text)

    return correlations


if __name__ == "__main__":
    if len(sys.argv) > 1:
        analyze_existing_results(sys.argv[1])
    else:
        print("Usage: python analyze_results.py <results_directory>")
        print("Example: python analyze_results.py results/run_20240101_120000")
