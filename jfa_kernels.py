"""
Taichi kernels for Jump Flood propagation.

Backend for JFA(backend="taichi"). The classification predicate is a Python
callable, so it cannot run inside a kernel; instead the driver classifies every
cell once, and the kernels propagate nearest-point records over that inside
mask. Semantics match the pure-Python scan exactly:
- 3×3 samples at ±step, dx outer / dy inner, zero offset included
- Candidate = sample itself on a class change, else the sample's record
- Strict < on squared distance, each improvement written immediately
- Write buffer is never cleared between levels

Loops are serialized (ti.loop_config) so a level runs as a single-threaded pass.
Buffer layout: present[b, x, y] (0/1) and point[b, x, y] (ivec2), b = buffer index.
"""

import numpy as np
import taichi as ti

from config import TAICHI_ARCH, TAICHI_DEBUG
from grid import NearestPoint

_taichi_initialized = False

# One NearestPointKernels per (width, height), allocated on first use and reused
_kernels_cache = {}


def init_taichi(arch=TAICHI_ARCH):
    """
    Initialize the Taichi runtime once per process.

    Args:
        arch: Name of a Taichi arch attribute ("cpu", "gpu", "vulkan", ...)
    """
    global _taichi_initialized
    if _taichi_initialized:
        return

    ti.init(arch=getattr(ti, arch), debug=TAICHI_DEBUG)
    _taichi_initialized = True


@ti.data_oriented
class NearestPointKernels:
    """Taichi fields and kernels for one W×H record propagation."""

    def __init__(self, width, height):
        self.width = width
        self.height = height

        self.inside = ti.field(dtype=ti.i32, shape=(width, height))
        # Ping-pong buffers: index 0/1 on the leading axis
        self.present = ti.field(dtype=ti.i32, shape=(2, width, height))
        self.point = ti.Vector.field(2, dtype=ti.i32, shape=(2, width, height))
        self.active = 0

    def load(self, inside_mask):
        """
        Upload the classification mask and clear both record buffers.

        Args:
            inside_mask: (height, width) boolean array, True = inside
        """
        mask = np.ascontiguousarray(np.asarray(inside_mask, dtype=np.int32).T)
        self.inside.from_numpy(mask)
        self.present.fill(0)
        self.point.fill(0)
        self.active = 0

    @ti.func
    def in_bounds(self, x, y):
        result = 0
        if x >= 0 and x < self.width and y >= 0 and y < self.height:
            result = 1
        return result

    @ti.func
    def classify_at(self, x, y, sentinel_inside):
        result = sentinel_inside
        if self.in_bounds(x, y) == 1:
            result = self.inside[x, y]
        return result

    @ti.kernel
    def search_level(self, step: ti.i32, active: ti.i32, sentinel_inside: ti.i32):
        """
        One JFA level: read records from buffer 1-active, write to buffer active.

        Args:
            step: Sample distance for this level (2**level)
            active: Index of the write buffer
            sentinel_inside: Classification of out-of-range samples (0/1)
        """
        ti.loop_config(serialize=True)
        for x, y in ti.ndrange(self.width, self.height):
            previous = 1 - active
            current = self.classify_at(x, y, sentinel_inside)
            best = ti.cast(-1, ti.i64)  # -1 = no candidate yet

            for dx in ti.static(range(-1, 2)):
                for dy in ti.static(range(-1, 2)):
                    sx = x + dx * step
                    sy = y + dy * step
                    found = 0
                    px = sx
                    py = sy

                    if current != self.classify_at(sx, sy, sentinel_inside):
                        found = 1
                    elif self.in_bounds(sx, sy) == 1:
                        if self.present[previous, sx, sy] == 1:
                            found = 1
                            px = self.point[previous, sx, sy][0]
                            py = self.point[previous, sx, sy][1]

                    if found == 1:
                        ddx = ti.cast(px - x, ti.i64)
                        ddy = ti.cast(py - y, ti.i64)
                        distance = ddx * ddx + ddy * ddy
                        if best < 0 or distance < best:
                            best = distance
                            self.present[active, x, y] = 1
                            self.point[active, x, y] = ti.Vector([px, py])

    def propagate(self, levels, sentinel_inside):
        """
        Run every level in order, flipping the active buffer after each.

        Returns:
            Number of passes executed
        """
        passes = 0
        for level in levels:
            self.search_level(2 ** level, self.active, int(bool(sentinel_inside)))
            self.active = (self.active + 1) % 2
            passes += 1
        ti.sync()
        return passes

    def committed_records(self):
        """
        Records of the last completed level, as row-major NearestPoint/None.

        Returns:
            List of length width * height
        """
        previous = (self.active + 1) % 2
        present = self.present.to_numpy()[previous]   # (W, H)
        points = self.point.to_numpy()[previous]      # (W, H, 2)

        records = []
        for y in range(self.height):
            for x in range(self.width):
                if present[x, y]:
                    records.append(NearestPoint(int(points[x, y, 0]), int(points[x, y, 1])))
                else:
                    records.append(None)
        return records


def get_kernels(width, height):
    """
    Fields and compiled kernels for a W×H grid.

    Allocated once per shape and reused; load() clears both record buffers
    before every run.
    """
    init_taichi()

    key = (int(width), int(height))
    kernels = _kernels_cache.get(key)
    if kernels is None:
        kernels = NearestPointKernels(*key)
        _kernels_cache[key] = kernels
    return kernels


def compute_nearest_points(inside_mask, sentinel_inside, levels):
    """
    Execute the full propagation on Taichi and return the committed records.

    Args:
        inside_mask: (height, width) boolean array from the classification predicate
        sentinel_inside: Classification of the out-of-range sentinel
        levels: Levels to run, largest first (e.g. [5, 4, 3, 2, 1, 0])

    Returns:
        records: Row-major list of NearestPoint (or None where no boundary was found)
        passes: Number of levels actually executed
    """
    inside_mask = np.asarray(inside_mask, dtype=bool)
    height, width = inside_mask.shape

    kernels = get_kernels(width, height)
    kernels.load(inside_mask)
    passes = kernels.propagate(levels, sentinel_inside)
    return kernels.committed_records(), passes
