import json

import pandas as pd
import pytest

from rhomyosin.config import RunSettings, output_columns
from rhomyosin.main import build_parser, main


@pytest.fixture(autouse=True)
def _restore_run_settings():
    saved = RunSettings.as_dict()
    yield
    RunSettings.set_run(**saved)


def test_defaults_reproduce_the_fixed_run():
    args = build_parser().parse_args([])
    assert args.output == "data.csv"
    assert args.t_end == 300.0
    assert args.tolerance == 1e-6
    assert not args.reference and args.plot_dir is None


def test_short_run_writes_table_and_summary(tmp_path, capsys):
    out = tmp_path / "data.csv"
    assert main(["--output", str(out), "--t-end", "1.0"]) == 0

    df = pd.read_csv(out, float_precision="round_trip")
    assert list(df.columns) == output_columns()
    assert len(df) > 0
    assert df["t"].is_monotonic_increasing

    stdout = capsys.readouterr().out
    assert "integration complete." in stdout
    assert "number of steps:" in stdout
    assert "average step size:" in stdout


def test_unwritable_output_fails_before_integration(tmp_path, capsys):
    out = tmp_path / "missing" / "data.csv"
    assert main(["--output", str(out), "--t-end", "1.0"]) == 1
    captured = capsys.readouterr()
    assert "unable to open" in captured.err
    assert "integration complete." not in captured.out
    assert not out.exists()


def test_step_size_underflow_exits_nonzero(tmp_path, capsys):
    out = tmp_path / "data.csv"
    assert main(["--output", str(out), "--tolerance", "1e-30"]) == 1
    captured = capsys.readouterr()
    assert "underflow" in captured.err
    assert "integration complete." not in captured.out
    # header is still written for the partial run
    assert list(pd.read_csv(out).columns) == output_columns()


def test_unwritable_parameter_table_fails_before_integration(tmp_path, capsys):
    out = tmp_path / "data.csv"
    params = tmp_path / "missing" / "params.tsv"
    assert main(["--output", str(out), "--t-end", "0.5", "--export-parameters", str(params)]) == 1
    captured = capsys.readouterr()
    assert "parameter table" in captured.err
    assert "integration complete." not in captured.out
    assert not out.exists()


def test_unwritable_metadata_only_warns(tmp_path, capsys):
    out = tmp_path / "data.csv"
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    meta = blocker / "run.json"
    assert main(["--output", str(out), "--t-end", "0.5", "--metadata", str(meta)]) == 0
    captured = capsys.readouterr()
    assert "Could not save run metadata" in captured.err
    assert "integration complete." in captured.out
    assert len(pd.read_csv(out)) > 0


@pytest.mark.parametrize("argv", [
    ["--t-end", "0"],
    ["--t-end", "abc"],
    ["--tolerance", "-1"],
    ["--t-end", "inf"],
    ["--tolerance", "nan"],
    ["--reference"],
])
def test_invalid_arguments_are_usage_errors(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2


def test_extras_write_their_artifacts(tmp_path):
    out = tmp_path / "data.csv"
    plots = tmp_path / "plots"
    meta = tmp_path / "run.json"
    params = tmp_path / "params.tsv"
    log = tmp_path / "run.log"

    status = main([
        "--output", str(out), "--t-end", "0.5",
        "--plot-dir", str(plots), "--reference",
        "--metadata", str(meta), "--export-parameters", str(params),
        "--log-file", str(log), "--verbose",
    ])
    assert status == 0

    assert (plots / "trajectories.png").exists()
    assert (plots / "heatmap_trajectories.png").exists()
    assert (plots / "conservation_drift.tsv").exists()
    assert (plots / "reference_comparison.tsv").exists()
    assert len(pd.read_csv(params, sep="\t")) > 0
    assert log.read_text()

    info = json.loads(meta.read_text())
    assert info["run"]["t_end"] == 0.5
    assert info["statistics"]["n_steps"] > 0
