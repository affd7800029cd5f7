#!/usr/bin/env python3
"""
main.py
Entry point for a Rho-Myosin spine signaling simulation run.

With no arguments this integrates the fixed initial condition to t=300 and
writes data.csv in the working directory.
"""
import argparse
import logging
import math
import sys
import time

from rhomyosin.config import (
    DEFAULT_OUTPUT, DT0, DT_SAVE, T_END, TOLERANCE, RunSettings, initial_state,
)
from rhomyosin.logger import get_logger
from rhomyosin.post_processing import (
    SampleTableWriter, export_parameter_table, report_statistics, save_run_metadata,
)
from rhomyosin.simulation import StepSizeUnderflow, integrate

logger = get_logger()


def _positive_float(value):
    try:
        f = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number")
    if not math.isfinite(f) or not f > 0.0:
        raise argparse.ArgumentTypeError(f"{value!r} must be a positive finite number")
    return f


def build_parser():
    parser = argparse.ArgumentParser(
        prog="rhomyosin",
        description=(
            "Integrate the 46-species CaMKII / actin / Rho-ROCK-myosin spine "
            "signaling network with an adaptive Bogacki-Shampine 3(2) scheme "
            "and write the sampled trajectory as CSV."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # ------------------------------------------------------------------
    # RUN
    # ------------------------------------------------------------------
    parser.add_argument(
        "--output",
        default=DEFAULT_OUTPUT,
        help="CSV file receiving one row per sample."
    )
    parser.add_argument(
        "--t-end",
        type=_positive_float,
        default=T_END,
        help="End of the simulated interval."
    )
    parser.add_argument(
        "--tolerance",
        type=_positive_float,
        default=TOLERANCE,
        help="Absolute local error tolerance per step."
    )

    # ------------------------------------------------------------------
    # EXTRAS
    # ------------------------------------------------------------------
    parser.add_argument(
        "--plot-dir",
        help="Directory for trajectory figures and conservation-drift table."
    )
    parser.add_argument(
        "--reference",
        action="store_true",
        help="Also compare the run against scipy's RK23 (needs --plot-dir)."
    )
    parser.add_argument(
        "--export-parameters",
        help="Write the rate-constant table to this TSV file."
    )
    parser.add_argument(
        "--metadata",
        help="Write run settings and step statistics to this JSON file."
    )

    # ------------------------------------------------------------------
    # META OPTIONS
    # ------------------------------------------------------------------
    parser.add_argument(
        "--log-file",
        help="Also write log records to this file."
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar over simulated time."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every rejected step."
    )
    parser.add_argument(
        "--version",
        action="version",
        version="rhomyosin 1.0.0",
    )
    return parser


def main(argv=None):
    """
    Run one simulation.

    Returns:
        int: Process exit status (0 on success, 1 on failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.reference and not args.plot_dir:
        parser.error("--reference requires --plot-dir")

    if args.log_file:
        get_logger(log_file=args.log_file)
    if args.verbose:
        logger.set_level(logging.DEBUG)

    RunSettings.set_run(t_end=args.t_end, dt0=DT0, dt_save=DT_SAVE, tolerance=args.tolerance)

    try:
        return _run(args)
    finally:
        if args.log_file:
            logger.close_file_handlers()
        if args.verbose:
            logger.set_level(logging.INFO)


def _run(args):
    if args.export_parameters:
        try:
            export_parameter_table(args.export_parameters)
        except OSError as e:
            logger.error(f"error: unable to write parameter table {args.export_parameters}: {e}")
            return 1

    # 1. Open data file
    try:
        writer = SampleTableWriter(args.output)
    except OSError as e:
        logger.error(f"error: unable to open file {args.output}: {e}")
        return 1

    # 2. Integrate
    x0 = initial_state()
    start = time.time()
    with writer:
        result = integrate(
            x0,
            t_end=RunSettings.t_end,
            h0=RunSettings.dt0,
            dt_save=RunSettings.dt_save,
            tolerance=RunSettings.tolerance,
            on_sample=writer.write_sample,
            progress=args.progress,
        )
    elapsed = time.time() - start

    if isinstance(result, StepSizeUnderflow):
        logger.error(f"error: {result.message()}")
        return 1

    # 3. Report
    report_statistics(result.statistics)

    if args.metadata:
        try:
            save_run_metadata(args.metadata, args, result.statistics, execution_time=elapsed)
        except OSError as e:
            logger.warning(f"[!] Could not save run metadata: {e}")

    if args.plot_dir:
        # imported here so plain runs do not pay for matplotlib/seaborn
        from rhomyosin.analysis import load_samples, run_post_analysis
        try:
            run_post_analysis(load_samples(args.output), x0, args.plot_dir,
                              reference=args.reference, tolerance=RunSettings.tolerance)
        except (OSError, ValueError, RuntimeError) as e:
            logger.warning(f"[!] Post-run analysis failed: {e}")

    return 0


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
