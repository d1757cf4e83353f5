"""
Configuration parameters for the Jump Flood nearest-boundary fill.

This module defines all tunable parameters:
- Propagation backend (pure Python or Taichi kernels)
- Taichi runtime settings
- Demo grid (size, sentinel, seed markers)
- Benchmark defaults

Grids are addressed as (x, y) with row-major linear index y * width + x.
"""

# ==============================================================================
# Propagation backend
# ==============================================================================

JFA_BACKEND = "python"      # "python" | "taichi"
                            # python: per-cell scan in plain Python, predicate called inline
                            # taichi: predicate evaluated once per cell, levels run as kernels
JFA_BACKENDS = ("python", "taichi")

# Default sentinel returned for reads outside the grid (type zero value)
DEFAULT_SENTINEL = 0

# ==============================================================================
# Taichi runtime (only used by the "taichi" backend)
# ==============================================================================

TAICHI_ARCH = "cpu"         # Kernel loops are serialized, so the CPU arch is enough
TAICHI_DEBUG = False        # ti.init(debug=True) adds out-of-bounds checks on field access

# ==============================================================================
# Demo grid (run.py)
# ==============================================================================

DEMO_WIDTH = 32
DEMO_HEIGHT = 32
DEMO_SENTINEL = -1          # Classified "inside" by the demo predicate

# Seed markers as (x, y, value); negative coordinates count from the far edge
DEMO_MARKERS = (
    (0, 0, 6),
    (0, -1, 2),
    (-1, -1, 3),
    (-1, 0, 4),
    (0, 15, 5),
)

# ==============================================================================
# Benchmark (scripts/bench.py)
# ==============================================================================

BENCH_SIZES = (32, 64, 128)
BENCH_SEEDS = 8             # Number of random inside markers per grid
BENCH_REPEATS = 3
