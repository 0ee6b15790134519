#!/usr/bin/env python
from __future__ import annotations
import sys
import os
from multiprocessing import Pool
import argparse
from typing import Optional, List, Tuple
from hllcount.lib.hyperloglog import (
    HyperLogLog,
    InvalidConfiguration,
    DEFAULT_ERROR_RATE,
)
from hllcount.lib.abstractsketch import DEFAULT_SEED
from hllcount.lib.exact import ExactCounter
from hllcount.lib.utils import read_tokens

SketchResult = Tuple[str, HyperLogLog, Optional[ExactCounter]]


def sketch_file(filepath: str, error_rate: float = DEFAULT_ERROR_RATE,
                seed: int = DEFAULT_SEED, exact: bool = False,
                debug: bool = False) -> SketchResult:
    """Sketch every token of a file.

    Args:
        filepath: Text file (optionally gzipped) to read
        error_rate: Target standard error for the HyperLogLog
        seed: Hash seed; must be shared by sketches that will be merged
        exact: Also count tokens exactly for comparison
        debug: Whether to print debug information

    Returns:
        Tuple of (filepath, HyperLogLog, ExactCounter or None)
    """
    hll = HyperLogLog(error_rate=error_rate, seed=seed, debug=debug)
    counter = ExactCounter() if exact else None
    for token in read_tokens(filepath):
        hll.add_string(token)
        if counter is not None:
            counter.add(token)
    if debug:
        print(f"DEBUG: {filepath}: {hll.item_count} tokens")
    return filepath, hll, counter


def _sketch_file_star(args: tuple) -> SketchResult:
    return sketch_file(*args)


def sketch_files(filepaths: List[str], error_rate: float = DEFAULT_ERROR_RATE,
                 seed: int = DEFAULT_SEED, exact: bool = False,
                 threads: int = 1, debug: bool = False) -> List[SketchResult]:
    """Sketch several files, one independent estimator per file.

    With threads > 1 the files are sketched in a process pool; each worker
    owns its estimators and the caller merges them once the pool is done.
    """
    pool_args = [(filepath, error_rate, seed, exact, debug) for filepath in filepaths]
    if threads > 1 and len(filepaths) > 1:
        with Pool(processes=min(threads, len(filepaths))) as pool:
            return pool.map(_sketch_file_star, pool_args)
    return [sketch_file(*pool_arg) for pool_arg in pool_args]


def format_report(hll: HyperLogLog, counter: Optional[ExactCounter] = None,
                  label: Optional[str] = None) -> List[str]:
    """Format the estimate (and exact count, if available) for printing."""
    prefix = f"{label}: " if label else ""
    estimated = hll.count()
    lines = [f"{prefix}Estimated {estimated} err({hll.error():.5f})"]
    if counter is not None:
        lines.append(f"{prefix}Actual {counter.count()} err({counter.relative_error(estimated):.5f})")
    return lines


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    arg_parser = argparse.ArgumentParser(
        description="""Estimate the number of distinct whitespace-separated tokens in text files
        using HyperLogLog. When several files are given, each is sketched separately and
        the sketches are merged to estimate the distinct count of their union.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    arg_parser.add_argument('filepaths', nargs='+',
                            help='Text files to count (.gz files are decompressed)')
    arg_parser.add_argument("--error-rate", "-e", type=float, default=DEFAULT_ERROR_RATE,
                            dest="error_rate",
                            help=f"Target standard error of the estimate (default: {DEFAULT_ERROR_RATE})")
    arg_parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Random seed for hashing")
    arg_parser.add_argument("--exact", action="store_true",
                            help="Also count distinct tokens exactly and report the empirical error")
    arg_parser.add_argument("--threads", type=int, default=1,
                            help="Number of worker processes used to sketch files")
    arg_parser.add_argument("--verbose", action="store_true", help="Print per-file results")
    arg_parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    return arg_parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for hllcount."""
    args = parse_args(argv)

    missing = [filepath for filepath in args.filepaths if not os.path.isfile(filepath)]
    for filepath in missing:
        print(f"Error: File {filepath} does not exist or is not a regular file", file=sys.stderr)
    if missing:
        sys.exit(2)

    # Validate configuration before spawning any workers
    try:
        total = HyperLogLog(error_rate=args.error_rate, seed=args.seed, debug=args.debug)
    except InvalidConfiguration as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"bits: {total.precision}")
    print(f"m_counters: {total.num_registers}")

    results = sketch_files(args.filepaths, error_rate=args.error_rate, seed=args.seed,
                           exact=args.exact, threads=args.threads, debug=args.debug)

    total_counter = ExactCounter() if args.exact else None
    for filepath, hll, counter in results:
        if args.verbose and len(results) > 1:
            for line in format_report(hll, counter, label=os.path.basename(filepath)):
                print(line)
        total.merge(hll)
        if total_counter is not None:
            total_counter.merge(counter)

    for line in format_report(total, total_counter):
        print(line)


if __name__ == "__main__":
    main()
