#!/usr/bin/env python3
"""
Inspect and check FIR tap files.

CLI examples
------------
# Table statistics and a symmetry check:
ringfir lowpass.npz --verify-symmetry

# Impulse response through the ring filter:
ringfir taps.txt --impulse

# Cross-check 4096 random samples against scipy.signal.lfilter, with a plot:
ringfir taps.txt --check 4096 --plot

# Convert a plain text tap list into the .txt/.npy/.npz trio:
ringfir taps.txt --name smoother --sample-type float32 --save smoother
"""

import argparse
import datetime
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from .coefficients import CoefficientTable
from .errors import FilterError, SymmetryError
from .samples import SAMPLE_TYPES
from .tapfile import load_spec, load_table, save_table
from .verification import impulse_response, verify_filter_output


def print_table_stats(table: CoefficientTable, log: logging.Logger) -> None:
    taps = table.coefficients()
    mismatches = table.mirror_mismatches()
    log.info("Table %s: %d taps (%s)", table.name, table.size(), taps.dtype)
    log.info("  sum of taps (DC gain): %.12g", float(np.sum(taps)))
    log.info("  largest |tap|: %.12g at index %d",
             float(np.max(np.abs(taps))), int(np.argmax(np.abs(taps))))
    log.info("  symmetric: %s%s", not mismatches,
             f" ({len(mismatches)} mismatched pairs)" if mismatches else "")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ringfir",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description="Inspect FIR coefficient tables and check the ring-buffer filter built from them.",
    )
    p.add_argument("taps", type=Path,
                   help="Tap file: .txt (one tap per line), .npy, or .npz with spec.")

    # ─── Table ───
    g = p.add_argument_group("Table")
    g.add_argument("--name",
                   help="Table name. Defaults to the name stored in an .npz, else the file stem.")
    g.add_argument("--sample-type", choices=sorted(SAMPLE_TYPES), default=None,
                   help="Sample type for the filter. Defaults to the .npz spec, else float64.")

    # ─── Checks ───
    g = p.add_argument_group("Checks")
    g.add_argument("--verify-symmetry", action="store_true",
                   help="Fail unless the table is palindromic (linear phase).")
    g.add_argument("--impulse", action="store_true",
                   help="Print the impulse response of the ring filter.")
    g.add_argument("--check", type=int, metavar="N", default=0,
                   help="Cross-check N random samples against scipy.signal.lfilter.")
    g.add_argument("--seed", type=int, default=0,
                   help="Seed for the --check signal.")
    g.add_argument("--plot", action="store_true",
                   help="Plot the --check output against the reference.")

    # ─── Output ───
    g = p.add_argument_group("Output")
    g.add_argument("--save", metavar="STEM",
                   help="Write STEM.txt, STEM.npy and STEM.npz.")

    # ─── Misc ───
    g = p.add_argument_group("Misc")
    g.add_argument("--debug", action="store_true",
                   help="Enable DEBUG-level logging for extra detail.")
    g.add_argument("--log-file", type=str,
                   help="Also write log output to this file ('auto' picks a timestamped name).")
    return p


def setup_logging(debug: bool, log_file: Optional[str]) -> logging.Logger:
    log_handlers = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_format = "%(asctime)s - %(levelname)s - %(message)s"
        if log_file == 'auto':
            timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file = f"ringfir_{timestamp}.log"
        log_handlers.append(logging.FileHandler(log_file, mode='w'))
    else:
        log_format = "%(levelname)s %(message)s"

    logging.basicConfig(
        handlers=log_handlers,
        level=logging.DEBUG if debug else logging.INFO,
        format=log_format,
        force=True,
    )
    log = logging.getLogger("ringfir")
    if log_file:
        log.info("Logging to file: %s", log_file)
    return log


def main(argv: Optional[List[str]] = None) -> int:
    a = build_parser().parse_args(argv)
    log = setup_logging(a.debug, a.log_file)

    table = load_table(a.taps, name=a.name)

    sample_type_name = a.sample_type
    if sample_type_name is None and a.taps.suffix.lower() == ".npz":
        sample_type_name = load_spec(a.taps).sample_type
    sample_type = SAMPLE_TYPES.get(sample_type_name or "float64")
    if sample_type is None:
        log.error("Unknown sample type %s", sample_type_name)
        return 1

    print_table_stats(table, log)
    ok = True

    if a.verify_symmetry:
        try:
            table.verify_symmetry()
        except SymmetryError as e:
            log.error("Symmetry check failed: %s", e)
            ok = False

    if a.impulse:
        for k, value in enumerate(impulse_response(table, sample_type)):
            print(f"{k}\t{value.item():.12g}")

    if a.check > 0:
        rng = np.random.default_rng(a.seed)
        results = verify_filter_output(table, rng.standard_normal(a.check),
                                       sample_type=sample_type, plot=a.plot)
        if not (results['matches_reference'] and results['impulse_matches']):
            log.error("Ring filter output disagrees with the reference (max error %.3e)",
                      results['max_abs_error'])
            ok = False

    if a.save:
        save_table(table, a.save, sample_type)

    return 0 if ok else 1


def run() -> None:
    try:
        sys.exit(main())
    except FilterError as e:
        logging.error("Fatal: %s", e)
        logging.debug("Traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
