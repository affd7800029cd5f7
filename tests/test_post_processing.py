import json
from argparse import Namespace

import numpy as np
import pandas as pd
import pytest

from rhomyosin.config import SPECIES_NAMES, output_columns
from rhomyosin.post_processing import (
    SampleTableWriter, export_parameter_table, report_statistics, save_run_metadata,
)
from rhomyosin.simulation import StepStatistics


def test_output_columns_are_time_then_species_in_enum_order():
    columns = output_columns()
    assert len(columns) == 47
    assert columns[0] == "t"
    assert tuple(columns[1:]) == SPECIES_NAMES
    assert all(c == c.strip() for c in columns)


def test_writer_round_trips_samples(tmp_path, x0):
    path = tmp_path / "data.csv"
    with SampleTableWriter(path) as writer:
        writer.write_sample(0.1034, x0)
        writer.write_sample(0.2101, x0 * 0.5)
        assert writer.n_rows == 2
    assert writer.closed

    df = pd.read_csv(path, float_precision="round_trip")
    assert list(df.columns) == output_columns()
    assert df["t"].tolist() == [0.1034, 0.2101]
    np.testing.assert_array_equal(df[list(SPECIES_NAMES)].to_numpy(), np.vstack([x0, x0 * 0.5]))


def test_writer_copies_the_live_state(tmp_path, x0):
    path = tmp_path / "data.csv"
    buf = x0.copy()
    with SampleTableWriter(path) as writer:
        writer.write_sample(0.1, buf)
        buf[:] = 0.0
    df = pd.read_csv(path, float_precision="round_trip")
    np.testing.assert_array_equal(df[list(SPECIES_NAMES)].to_numpy()[0], x0)


def test_writer_header_only_when_no_samples(tmp_path):
    path = tmp_path / "empty.csv"
    SampleTableWriter(path).close()
    df = pd.read_csv(path, float_precision="round_trip")
    assert df.empty
    assert list(df.columns) == output_columns()


def test_writer_fails_on_unopenable_destination(tmp_path):
    with pytest.raises(OSError):
        SampleTableWriter(tmp_path / "missing" / "data.csv")


def test_writer_flushes_rows_when_block_raises(tmp_path, x0):
    path = tmp_path / "data.csv"
    with pytest.raises(RuntimeError):
        with SampleTableWriter(path) as writer:
            writer.write_sample(0.1, x0)
            raise RuntimeError("boom")
    assert len(pd.read_csv(path, float_precision="round_trip")) == 1


def test_writer_rejects_samples_after_close(tmp_path, x0):
    writer = SampleTableWriter(tmp_path / "data.csv")
    writer.close()
    writer.close()
    with pytest.raises(ValueError):
        writer.write_sample(0.1, x0)


def test_report_statistics_prints_one_line_per_quantity(capsys):
    stats = StepStatistics(t_end=300.0, n_steps=1000, n_accepted=900, h_min=1e-4, h_max=0.5)
    report_statistics(stats)
    out = capsys.readouterr().out
    assert "integration complete." in out
    assert "number of steps: 1000" in out
    assert "proportion bad steps:" in out
    assert "average step size: 0.3" in out
    assert "min step size: 0.0001" in out
    assert "max step size: 0.5" in out


def test_save_run_metadata(tmp_path):
    stats = StepStatistics(t_end=10.0, n_steps=20, n_accepted=18, h_min=0.01, h_max=1.0)
    path = tmp_path / "meta" / "run.json"
    save_run_metadata(str(path), Namespace(output="data.csv"), stats, execution_time=1.5)

    meta = json.loads(path.read_text())
    assert meta["args"]["output"] == "data.csv"
    assert meta["statistics"]["n_steps"] == 20
    assert meta["statistics"]["mean_step"] == 0.5
    assert meta["execution_time_seconds"] == 1.5
    assert set(meta["run"]) == {"t_end", "dt0", "dt_save", "tolerance"}


def test_export_parameter_table(tmp_path):
    path = tmp_path / "params.tsv"
    df = export_parameter_table(path)
    back = pd.read_csv(path, sep="\t")
    assert len(back) == len(df) > 0
    assert back.loc[back["name"] == "ACTIN_BARBED_YIELD", "value"].item() == 106.0
