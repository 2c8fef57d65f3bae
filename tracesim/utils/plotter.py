import os

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt


def plot_breakdown(stats, outpath, title="Cache Access Breakdown"):
    """Save a bar chart of hit/miss counters and dirty evictions."""
    directory = os.path.dirname(outpath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    labels = ['Load hits', 'Load misses', 'Store hits', 'Store misses', 'Dirty evictions']
    values = [stats.load_hits, stats.load_misses, stats.store_hits,
              stats.store_misses, stats.dirty_evictions]
    colors = ['tab:green', 'tab:red', 'tab:green', 'tab:red', 'tab:orange']

    plt.figure(figsize=(8, 4))
    plt.bar(labels, values, color=colors)
    miss_rate = stats.miss_rate
    if miss_rate is not None:
        title = f"{title} (miss rate {miss_rate:.2%})"
    plt.title(title)
    plt.ylabel('Count')
    plt.grid(True, axis='y', alpha=0.3)
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()
    return outpath
