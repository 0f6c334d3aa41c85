"""Cellular automata smoothing pass."""

import numpy as np
from scipy.ndimage import convolve

from .grid import CellState, TileGrid


def neighbor_sums(cells: np.ndarray, radius: int) -> np.ndarray:
    """
    Sum of cell values over the (2R+1)x(2R+1) window around every cell.

    The center cell is included. Cells outside the grid contribute 0.
    """
    size = 2 * radius + 1
    kernel = np.ones((size, size), dtype=np.int32)
    return convolve(cells.astype(np.int32), kernel, mode='constant', cval=0)


def neighbor_ratios(cells: np.ndarray, radius: int) -> np.ndarray:
    """
    Window sums divided by the full window area (2R+1)^2.

    The denominator does not shrink near the border, so border cells
    are biased towards OPEN.
    """
    area = (2 * radius + 1) ** 2
    return neighbor_sums(cells, radius) / area


def cellular_automata(grid: TileGrid, radius: int, threshold: float) -> TileGrid:
    """
    Apply one synchronous smoothing sweep to ``grid`` and return it.

    Every output cell is computed from the input grid, so the result is
    written back in a single assignment after all ratios are known.
    A cell becomes BLOCKED when its ratio is strictly greater than
    ``threshold``, otherwise OPEN.
    """
    ratios = neighbor_ratios(grid.cells, radius)
    grid.cells[:] = np.where(ratios > threshold,
                             CellState.BLOCKED, CellState.OPEN)
    return grid


class CellularAutomataPass:
    """Stateless smoothing transform with a fixed radius and threshold."""

    def __init__(self, radius: int = 1, threshold: float = 0.5):
        if radius < 0:
            raise ValueError(f"radius must be >= 0, got {radius}")
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1], got {threshold}")
        self.radius = radius
        self.threshold = threshold

    def apply(self, grid: TileGrid) -> TileGrid:
        return cellular_automata(grid, self.radius, self.threshold)

    def __repr__(self) -> str:
        return (f"CellularAutomataPass(radius={self.radius}, "
                f"threshold={self.threshold})")
