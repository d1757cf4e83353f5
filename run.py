"""
Demo entry point for the Jump Flood nearest-boundary fill.

This script:
1. Builds a zero-filled grid (default 32×32)
2. Seeds five positive markers (four corners and one on the left edge)
3. Runs JFA with predicate `v > 0 or v == sentinel` (markers and the
   off-grid sentinel are "inside", zeros are "outside")
4. Prints |value| of every cell, one row per line

Usage:
    python run.py [--width 32] [--height 32] [--sentinel -1] [--backend python] [--stats]
"""

import argparse

from config import DEMO_HEIGHT, DEMO_MARKERS, DEMO_SENTINEL, DEMO_WIDTH, JFA_BACKEND, JFA_BACKENDS
from jfa import JFA, print_jfa_config, print_jfa_stats, validate_jfa


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Jump Flood nearest-boundary fill demo')
    parser.add_argument('--width', type=int, default=DEMO_WIDTH,
                        help=f'Grid width (default: {DEMO_WIDTH})')
    parser.add_argument('--height', type=int, default=DEMO_HEIGHT,
                        help=f'Grid height (default: {DEMO_HEIGHT})')
    parser.add_argument('--sentinel', type=int, default=DEMO_SENTINEL,
                        help=f'Value read outside the grid (default: {DEMO_SENTINEL})')
    parser.add_argument('--backend', choices=JFA_BACKENDS, default=JFA_BACKEND,
                        help=f'Propagation backend (default: {JFA_BACKEND})')
    parser.add_argument('--stats', action='store_true',
                        help='Print configuration, run statistics and validation')
    return parser.parse_args(argv)


def build_demo_grid(width, height, markers=DEMO_MARKERS):
    """
    Zero grid with the demo markers placed.

    Marker coordinates are clamped to the grid; negative coordinates count
    from the far edge (-1 = last column/row).

    Returns:
        Row-major list of width * height ints
    """
    values = [0] * (width * height)
    for mx, my, value in markers:
        x = mx % width if mx < 0 else min(mx, width - 1)
        y = my % height if my < 0 else min(my, height - 1)
        values[y * width + x] = value
    return values


def demo_predicate(sentinel):
    """Markers (> 0) and the sentinel are inside."""
    def inside(value):
        return value > 0 or value == sentinel
    return inside


def format_rows(result, width):
    rows = []
    for start in range(0, len(result), width):
        rows.append(" ".join(str(abs(v)) for v in result[start:start + width]) + " ")
    return rows


def main(argv=None):
    args = parse_args(argv)

    values = build_demo_grid(args.width, args.height)
    jfa = JFA(args.width, args.height, values, sentinel=args.sentinel, backend=args.backend)
    inside = demo_predicate(args.sentinel)

    if args.stats:
        print_jfa_config(jfa)

    result = jfa.execute(inside)

    for row in format_rows(result, args.width):
        print(row)

    if args.stats:
        print_jfa_stats(jfa.stats)
        report = validate_jfa(values, result, inside, sentinel=args.sentinel)
        status = "OK" if report["passed"] else "FAILED"
        print(f"[Validate] {status}: inside violations={report['inside_violations']}, "
              f"closure violations={report['closure_violations']}, "
              f"sentinel fills={report['sentinel_fills']}")

    return result


if __name__ == "__main__":
    main()
