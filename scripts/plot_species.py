#!/usr/bin/env python3
"""
Create one figure per species from a sample table, plus the module overview
and normalised heatmap.

Input: data.csv written by a rhomyosin run.
Output: folder of PNGs, one per species.
"""

import argparse
import os

import matplotlib.pyplot as plt
import pandas as pd

from rhomyosin.analysis import load_samples, plot_sampling_heatmap, plot_trajectories
from rhomyosin.config import SPECIES_GROUPS


def main(argv=None):
    parser = argparse.ArgumentParser(description="Plot every species trajectory from a sample table")
    parser.add_argument("--samples", default="data.csv", help="Path to the sample table CSV")
    parser.add_argument("--outdir", default="species_plots", help="Output directory for PNGs")
    args = parser.parse_args(argv)

    # --------------------------
    # Load
    # --------------------------
    if not os.path.exists(args.samples):
        print(f"[!] File not found: {args.samples}")
        return 1

    df = load_samples(args.samples)
    print(f"[*] Loaded {len(df)} samples")
    if df.empty:
        print("[!] No samples to plot")
        return 1

    os.makedirs(args.outdir, exist_ok=True)
    t = df["t"].to_numpy()

    # --------------------------
    # Per-species plotting
    # --------------------------
    n_plots = 0
    for group, names in SPECIES_GROUPS.items():
        for name in names:
            y = df[name].to_numpy()

            fig, ax = plt.subplots(figsize=(6, 3.5))
            ax.plot(t, y, linewidth=2)
            ax.set_title(f"{name} ({group})")
            ax.set_xlabel("Time (s)")
            ax.set_ylabel("Concentration (uM)")
            ax.grid(True, alpha=0.3)
            fig.tight_layout()

            fig.savefig(os.path.join(args.outdir, f"{group}_{name}.png"), dpi=150)
            plt.close(fig)
            n_plots += 1

    # --------------------------
    # Overview figures
    # --------------------------
    plot_trajectories(df, args.outdir)
    plot_sampling_heatmap(df, args.outdir)

    # Final values, handy for eyeballing steady states
    final = pd.DataFrame({"species": df.columns[1:], "final": df.iloc[-1, 1:].to_numpy()})
    final.to_csv(os.path.join(args.outdir, "final_values.tsv"), sep="\t", index=False)

    print(f"[*] Saved {n_plots} species plots to {args.outdir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
