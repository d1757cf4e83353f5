"""
Dense 2D grids for the Jump Flood nearest-boundary fill.

This module provides the storage used by the JFA driver:
- Grid: fixed-size W×H store with a sentinel for out-of-range reads
- NearestPoint: per-cell record of the closest cell of the other class
- DoubleBufferedGrid: two record grids alternated by swap() (ping-pong)

Cells are addressed as (x, y), stored at linear index y * width + x.
Reads outside [0, W)×[0, H) never fail; they return the sentinel, which is
what lets the propagation scan step past the grid edge without bounds checks.
"""

import numbers
from typing import NamedTuple

import numpy as np


class NearestPoint(NamedTuple):
    """Coordinates of the closest known cell of a different classification.

    May lie outside the grid when the nearest boundary is the sentinel.
    A missing record is None, never NearestPoint(0, 0).
    """
    x: int
    y: int


# ==============================================================================
# Grid
# ==============================================================================

class Grid:
    """
    Fixed-size 2D grid of arbitrary values.

    Args:
        width: Number of columns (> 0)
        height: Number of rows (> 0)
        sentinel: Value returned by read() for coordinates outside the grid
        fill: Initial value of every cell
    """

    def __init__(self, width, height, sentinel=0, fill=0):
        if not isinstance(width, numbers.Integral) or not isinstance(height, numbers.Integral):
            raise ValueError(f"Grid dimensions must be integers, got {width!r}x{height!r}")
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

        self._width = int(width)
        self._height = int(height)
        self._sentinel = sentinel

        # Object dtype keeps caller values as-is (ints, tuples, strings, None)
        self._values = np.empty(self._width * self._height, dtype=object)
        for i in range(self._values.size):
            self._values[i] = fill

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    @property
    def sentinel(self):
        return self._sentinel

    def __len__(self):
        return self._values.size

    def contains(self, x, y):
        return 0 <= x < self._width and 0 <= y < self._height

    def index(self, x, y):
        """Linear index of (x, y), or -1 if outside the grid."""
        if not self.contains(x, y):
            return -1
        return y * self._width + x

    def read(self, x, y):
        if not self.contains(x, y):
            return self._sentinel
        return self._values[y * self._width + x]

    def write(self, x, y, value):
        """
        Store a value at (x, y).

        Callers only pass coordinates already known to be inside the grid;
        out-of-range writes are not checked.
        """
        self._values[y * self._width + x] = value

    def load(self, values):
        """
        Replace the whole store with row-major values.

        Args:
            values: Sequence or numpy array with exactly width * height elements

        Raises:
            ValueError: If the element count does not match the grid size
        """
        if isinstance(values, np.ndarray):
            values = values.ravel().tolist()
        else:
            values = list(values)

        if len(values) != self._values.size:
            raise ValueError(
                f"Expected {self._values.size} values for a {self._width}x{self._height} grid, "
                f"got {len(values)}")

        for i, value in enumerate(values):
            self._values[i] = value

    def to_list(self):
        return self._values.tolist()

    def to_numpy(self):
        """Copy of the store as a (height, width) object array."""
        return self._values.reshape(self._height, self._width).copy()

    def __getitem__(self, xy):
        x, y = xy
        return self.read(x, y)

    def __setitem__(self, xy, value):
        x, y = xy
        self.write(x, y, value)

    def __repr__(self):
        return f"Grid({self._width}x{self._height}, sentinel={self._sentinel!r})"


# ==============================================================================
# Double-buffered grid (ping-pong)
# ==============================================================================

class DoubleBufferedGrid:
    """
    Two grids of identical size with alternating read/write roles.

    Writes go to the active buffer, reads come from the other one, so a pass
    never observes its own writes. swap() flips the roles without moving data.
    """

    def __init__(self, width, height, sentinel=None):
        self._buffers = [
            Grid(width, height, sentinel=sentinel, fill=None),
            Grid(width, height, sentinel=sentinel, fill=None),
        ]
        self._active_index = 0

    @property
    def width(self):
        return self._buffers[0].width

    @property
    def height(self):
        return self._buffers[0].height

    @property
    def active_index(self):
        return self._active_index

    def swap(self):
        self._active_index = (self._active_index + 1) % 2

    def contains(self, x, y):
        return self._buffers[0].contains(x, y)

    def read(self, x, y):
        return self._buffers[(self._active_index + 1) % 2].read(x, y)

    def write(self, x, y, value):
        self._buffers[self._active_index].write(x, y, value)

    def load(self, values):
        """Bulk-replace the active (write) buffer."""
        self._buffers[self._active_index].load(values)

    def __getitem__(self, xy):
        x, y = xy
        return self.read(x, y)

    def __setitem__(self, xy, value):
        x, y = xy
        self.write(x, y, value)
