#!/usr/bin/env python3
"""
Benchmark script for the Jump Flood fill - Reproducible Performance Testing
==========================================================================

Runs JFA on random seed grids of several sizes with a deterministic seed and reports:
- Mean / best execute() time per size and backend
- Number of levels
- Validation status of every run

Usage:
    python scripts/bench.py [--sizes 32 64 128] [--backends python taichi] [--repeats N]

Example:
    python scripts/bench.py --sizes 64 256 --backends taichi --repeats 5
"""

import sys
import os
import time
import argparse
import numpy as np

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import BENCH_REPEATS, BENCH_SEEDS, BENCH_SIZES, JFA_BACKENDS
from jfa import JFA, validate_jfa


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Benchmark Jump Flood fill performance')
    parser.add_argument('--sizes', type=int, nargs='+', default=list(BENCH_SIZES),
                        help=f'Square grid sizes (default: {list(BENCH_SIZES)})')
    parser.add_argument('--backends', nargs='+', choices=JFA_BACKENDS, default=['python'],
                        help='Backends to time (default: python)')
    parser.add_argument('--seeds', type=int, default=BENCH_SEEDS,
                        help=f'Inside markers per grid (default: {BENCH_SEEDS})')
    parser.add_argument('--repeats', type=int, default=BENCH_REPEATS,
                        help=f'Runs per size and backend (default: {BENCH_REPEATS})')
    parser.add_argument('--seed', type=int, default=42,
                        help='Random seed for reproducibility (default: 42)')
    return parser.parse_args()


def make_seed_grid(size, n_seeds, seed):
    """
    Zero grid with n_seeds distinct positive markers at random cells.

    Args:
        size: Grid side length
        n_seeds: Number of markers (capped at size * size)
        seed: Random seed for reproducibility

    Returns:
        Row-major list of ints
    """
    rng = np.random.default_rng(seed)
    n_seeds = min(n_seeds, size * size)
    cells = rng.choice(size * size, size=n_seeds, replace=False)

    values = [0] * (size * size)
    for marker, cell in enumerate(cells, start=1):
        values[int(cell)] = marker
    return values


def is_marker(value):
    return value > 0


def run_benchmark(size, backend, n_seeds, repeats, seed):
    values = make_seed_grid(size, n_seeds, seed)
    times = []
    passed = True
    num_levels = 0

    for _ in range(repeats):
        jfa = JFA(size, size, values, sentinel=0, backend=backend)
        t0 = time.time()
        result = jfa.execute(is_marker)
        times.append(time.time() - t0)
        num_levels = jfa.stats["num_levels"]
        passed = passed and validate_jfa(values, result, is_marker, sentinel=0)["passed"]

    return {
        "size": size,
        "backend": backend,
        "levels": num_levels,
        "mean_ms": 1000.0 * float(np.mean(times)),
        "best_ms": 1000.0 * float(np.min(times)),
        "passed": passed,
    }


def main():
    args = parse_args()

    print("=" * 70)
    print(f"[Bench] sizes={args.sizes} backends={args.backends} "
          f"seeds={args.seeds} repeats={args.repeats} seed={args.seed}")
    print("=" * 70)

    for backend in args.backends:
        for size in args.sizes:
            r = run_benchmark(size, backend, args.seeds, args.repeats, args.seed)
            status = "OK" if r["passed"] else "INVALID"
            print(f"[Bench] {r['backend']:>6s} {r['size']:5d}² | levels={r['levels']:2d} | "
                  f"mean={r['mean_ms']:9.1f} ms | best={r['best_ms']:9.1f} ms | {status}")


if __name__ == "__main__":
    main()
