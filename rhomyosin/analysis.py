"""
analysis.py
Post-run analysis of a sample table: trajectory plots, conservation drift
and comparison against the scipy reference integration.
"""
import os

import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib import pyplot as plt

from rhomyosin.config import CONSERVED_MOIETIES, SPECIES_GROUPS, SPECIES_NAMES
from rhomyosin.logger import get_logger
from rhomyosin.simulation import simulate_reference

logger = get_logger()


def load_samples(path):
    """Read a sample table written by SampleTableWriter."""
    return pd.read_csv(path, float_precision="round_trip")


def conservation_drift(samples, x0):
    """
    Track every conserved moiety along the sampled trajectory.

    Args:
        samples (pd.DataFrame): Sample table (t + species columns).
        x0 (np.ndarray): Initial state the run started from.

    Returns:
        pd.DataFrame: One row per moiety with its initial total, the largest
        absolute deviation from it over all samples, and that deviation
        relative to the initial total.
    """
    rows = []
    for name, weights in CONSERVED_MOIETIES.items():
        total0 = sum(coef * x0[species] for species, coef in weights.items())
        totals = sum(coef * samples[species.name].to_numpy() for species, coef in weights.items())
        if len(samples):
            max_dev = float(np.max(np.abs(totals - total0)))
        else:
            max_dev = 0.0
        rel_dev = max_dev / abs(total0) if total0 != 0.0 else np.nan
        rows.append({
            "moiety": name,
            "initial_total": total0,
            "max_abs_drift": max_dev,
            "max_rel_drift": rel_dev,
        })
    return pd.DataFrame(rows)


def compare_with_reference(samples, x0, tolerance):
    """
    Re-integrate with scipy's RK23 at the sampled times and measure the gap.

    Args:
        samples (pd.DataFrame): Sample table (t + species columns).
        x0 (np.ndarray): Initial state the run started from.
        tolerance (float): Tolerance handed to the reference solver.

    Returns:
        pd.DataFrame: Per species, the maximum absolute difference between
        the adaptive run and the reference, sorted largest first.
    """
    t = samples["t"].to_numpy()
    ref = simulate_reference(x0, t, tolerance=tolerance)
    ours = samples[list(SPECIES_NAMES)].to_numpy()
    diff = np.max(np.abs(ours - ref), axis=0)
    df = pd.DataFrame({"species": SPECIES_NAMES, "max_abs_diff": diff})
    return df.sort_values("max_abs_diff", ascending=False).reset_index(drop=True)


def plot_trajectories(samples, outdir):
    """
    Plots one panel per kinetics module with every species of that module.

    Args:
        samples (pd.DataFrame): Sample table.
        outdir (str): Output directory path.

    Returns:
        str: Path of the saved figure.
    """
    os.makedirs(outdir, exist_ok=True)
    t = samples["t"].to_numpy()

    fig, axes = plt.subplots(len(SPECIES_GROUPS), 1, figsize=(12, 3.2 * len(SPECIES_GROUPS)), sharex=True)
    for ax, (group, names) in zip(axes, SPECIES_GROUPS.items()):
        for name in names:
            ax.plot(t, samples[name].to_numpy(), label=name, linewidth=1.5)
        ax.set_title(group)
        ax.set_ylabel("Concentration (uM)")
        ax.grid(True, alpha=0.3)
        ax.legend(bbox_to_anchor=(1.01, 1), loc="upper left", fontsize=7)
    axes[-1].set_xlabel("Time (s)")
    fig.tight_layout()

    path = os.path.join(outdir, "trajectories.png")
    fig.savefig(path, dpi=200)
    plt.close(fig)
    return path


def plot_sampling_heatmap(samples, outdir):
    """
    Heatmap of min-max normalised trajectories, species in enumeration order.

    Columns are sample rows, not evenly spaced times.
    """
    os.makedirs(outdir, exist_ok=True)
    data = samples[list(SPECIES_NAMES)].to_numpy().T
    lo = data.min(axis=1, keepdims=True)
    span = data.max(axis=1, keepdims=True) - lo
    span[span == 0.0] = 1.0
    norm = (data - lo) / span

    plt.figure(figsize=(12, 10))
    sns.heatmap(norm, cmap="viridis", xticklabels=False, yticklabels=list(SPECIES_NAMES))
    plt.xlabel(f"Sample (t = {samples['t'].iloc[0]:.2f} to {samples['t'].iloc[-1]:.2f})")
    plt.ylabel("Species")
    plt.title("Normalised species trajectories")
    plt.tight_layout()

    path = os.path.join(outdir, "heatmap_trajectories.png")
    plt.savefig(path, dpi=200)
    plt.close()
    return path


def run_post_analysis(samples, x0, outdir, reference=False, tolerance=None):
    """
    Plots, conservation drift and (optionally) the reference comparison,
    each written under outdir.
    """
    os.makedirs(outdir, exist_ok=True)

    if samples.empty:
        logger.warning("[!] Sample table is empty; skipping analysis.")
        return

    drift = conservation_drift(samples, x0)
    drift.to_csv(os.path.join(outdir, "conservation_drift.tsv"), sep="\t", index=False)
    worst = drift.loc[drift["max_abs_drift"].idxmax()]
    logger.info(f"   -> Largest conservation drift: {worst['moiety']} ({worst['max_abs_drift']:.3e})")

    plot_trajectories(samples, outdir)
    plot_sampling_heatmap(samples, outdir)

    if reference:
        logger.info("[*] Comparing against scipy RK23 reference...")
        cmp = compare_with_reference(samples, x0, tolerance)
        cmp.to_csv(os.path.join(outdir, "reference_comparison.tsv"), sep="\t", index=False)
        logger.info(f"   -> Max deviation: {cmp['species'].iloc[0]} ({cmp['max_abs_diff'].iloc[0]:.3e})")

    logger.success(f"Analysis written to {outdir}")
