import numpy as np
import pandas as pd

from rhomyosin.analysis import (
    compare_with_reference, conservation_drift, plot_sampling_heatmap, plot_trajectories,
    run_post_analysis,
)
from rhomyosin.config import CONSERVED_MOIETIES, SPECIES_NAMES, Species, output_columns
from rhomyosin.simulation import integrate


def _frame(times, states):
    return pd.DataFrame(np.column_stack([times, states]), columns=output_columns())


def _short_run(x0, t_end=1.0):
    times, states = [], []

    def collect(t, x):
        times.append(t)
        states.append(x.copy())

    integrate(x0, t_end=t_end, on_sample=collect)
    return _frame(np.array(times), np.vstack(states))


def test_conservation_drift_is_zero_for_a_constant_trajectory(x0):
    samples = _frame(np.array([0.1, 0.2]), np.vstack([x0, x0]))
    drift = conservation_drift(samples, x0)
    assert list(drift["moiety"]) == list(CONSERVED_MOIETIES)
    assert (drift["max_abs_drift"] == 0.0).all()


def test_conservation_drift_detects_a_leak(x0):
    leaked = x0.copy()
    leaked[Species.MLC] -= 0.5
    samples = _frame(np.array([0.1, 0.2]), np.vstack([x0, leaked]))
    drift = conservation_drift(samples, x0).set_index("moiety")
    assert drift.loc["MLC_total", "max_abs_drift"] == 0.5
    assert drift.loc["MLC_total", "max_rel_drift"] == 0.1


def test_integration_keeps_moieties_nearly_constant(x0):
    drift = conservation_drift(_short_run(x0), x0)
    assert drift["max_abs_drift"].max() < 1e-6


def test_reference_comparison_is_small(x0):
    cmp = compare_with_reference(_short_run(x0), x0, tolerance=1e-6)
    assert set(cmp["species"]) == set(SPECIES_NAMES)
    assert cmp["max_abs_diff"].is_monotonic_decreasing
    assert cmp["max_abs_diff"].iloc[0] < 1e-2


def test_plots_are_written(tmp_path, x0):
    samples = _short_run(x0)
    assert (tmp_path / "trajectories.png").samefile(plot_trajectories(samples, str(tmp_path)))
    assert (tmp_path / "heatmap_trajectories.png").samefile(plot_sampling_heatmap(samples, str(tmp_path)))


def test_run_post_analysis_writes_tables(tmp_path, x0):
    outdir = tmp_path / "analysis"
    run_post_analysis(_short_run(x0), x0, str(outdir), reference=True, tolerance=1e-6)
    assert (outdir / "conservation_drift.tsv").exists()
    assert (outdir / "reference_comparison.tsv").exists()
    assert (outdir / "trajectories.png").exists()


def test_run_post_analysis_skips_empty_table(tmp_path, x0):
    outdir = tmp_path / "analysis"
    run_post_analysis(pd.DataFrame(columns=output_columns()), x0, str(outdir))
    assert not (outdir / "conservation_drift.tsv").exists()


def test_plot_species_script(tmp_path, x0):
    import runpy
    from pathlib import Path

    script = Path(__file__).resolve().parents[1] / "scripts" / "plot_species.py"
    plot_species = runpy.run_path(str(script))

    samples_path = tmp_path / "data.csv"
    _short_run(x0, t_end=0.5).to_csv(samples_path, index=False)
    outdir = tmp_path / "plots"

    assert plot_species["main"](["--samples", str(samples_path), "--outdir", str(outdir)]) == 0
    assert (outdir / "actin_Fnewactin.png").exists()
    assert (outdir / "final_values.tsv").exists()
    assert plot_species["main"](["--samples", str(tmp_path / "nope.csv")]) == 1
