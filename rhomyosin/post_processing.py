"""
post_processing.py
Sample table output, run summary and provenance tracking.
"""
import json
import os

import numpy as np
import pandas as pd

from rhomyosin.config import N_SPECIES, RunSettings, output_columns
from rhomyosin.logger import get_logger
from rhomyosin.parameters import parameter_table

logger = get_logger()


class SampleTableWriter:
    """
    Collects sampled states and writes them as one CSV table.

    The destination is opened on construction so an unwritable path fails
    before any integration work starts. Rows are buffered and written,
    with the header, when the writer is closed; rows sampled before an
    aborted run are still written.
    """

    def __init__(self, path):
        self.path = path
        self._handle = open(path, "w", newline="")
        self._times = []
        self._states = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @property
    def closed(self):
        return self._handle is None

    @property
    def n_rows(self):
        return len(self._times)

    def write_sample(self, t, x):
        if self._handle is None:
            raise ValueError(f"Sample table {self.path} is already closed")
        self._times.append(float(t))
        self._states.append(np.array(x, dtype=np.float64))

    def to_frame(self):
        columns = output_columns()
        if self._states:
            data = np.column_stack([np.asarray(self._times), np.vstack(self._states)])
        else:
            data = np.empty((0, N_SPECIES + 1))
        return pd.DataFrame(data, columns=columns)

    def close(self):
        if self._handle is None:
            return
        try:
            self.to_frame().to_csv(self._handle, index=False)
        finally:
            self._handle.close()
            self._handle = None
        logger.info(f"[*] Wrote {self.n_rows} samples to {self.path}")


def report_statistics(statistics):
    """
    Print the integration summary, one quantity per line.

    Args:
        statistics (StepStatistics): Counters collected by the driver.
    """
    console = logger.get_console()
    console.print("integration complete.", markup=False)
    console.print(f"number of steps: {statistics.n_steps}", markup=False)
    console.print(f"proportion bad steps: {statistics.rejected_fraction}", markup=False)
    console.print(f"average step size: {statistics.mean_step}", markup=False)
    console.print(f"min step size: {statistics.h_min}", markup=False)
    console.print(f"max step size: {statistics.h_max}", markup=False)


def save_run_metadata(path, args=None, statistics=None, execution_time=None):
    """
    Saves a JSON file containing the run settings, CLI arguments and step
    statistics. Crucial for reproducibility.
    """
    config_dict = {"run": RunSettings.as_dict()}

    if args is not None:
        config_dict["args"] = vars(args).copy()

    if statistics is not None:
        config_dict["statistics"] = statistics.as_dict()

    if execution_time is not None:
        config_dict["execution_time_seconds"] = execution_time

    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    with open(path, "w") as f:
        json.dump(config_dict, f, indent=4, sort_keys=True, default=str)

    logger.info(f"[*] Saved run metadata to {path}")


def export_parameter_table(path):
    """Write the rate-constant table as TSV and return it."""
    df = parameter_table()
    df.to_csv(path, sep="\t", index=False)
    logger.info(f"[*] Exported {len(df)} rate constants to {path}")
    return df
