"""Tile grid management for rule-based map generation."""

from enum import IntEnum
from typing import List, Optional

import numpy as np


class CellState(IntEnum):
    """Binary cell values shared by both generation passes."""
    OPEN = 0
    BLOCKED = 1


class TileGrid:
    """
    Fixed-size 2D matrix of cell states.

    Coordinate convention: (x, y) for API, [y, x] for array indexing.
    x is the column in [0, width), y is the row in [0, height).
    """

    def __init__(self, width: int, height: int,
                 cells: Optional[np.ndarray] = None):
        if width <= 0 or height <= 0:
            raise ValueError(
                f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height

        if cells is None:
            self.cells = np.zeros((height, width), dtype=np.int8)
        else:
            if cells.shape != (height, width):
                raise ValueError(
                    f"Cell array shape {cells.shape} does not match "
                    f"{height}x{width}")
            self.cells = cells

    @classmethod
    def random(cls, width: int, height: int, rng: np.random.Generator,
               fill_probability: float = 0.5) -> "TileGrid":
        """Create a grid with each cell BLOCKED with ``fill_probability``."""
        grid = cls(width, height)
        grid.cells = (rng.random((height, width)) < fill_probability).astype(np.int8)
        return grid

    @classmethod
    def from_array(cls, array) -> "TileGrid":
        """Wrap a copy of a 2D array of 0/1 values."""
        cells = np.array(array, dtype=np.int8)
        if cells.ndim != 2:
            raise ValueError(f"Expected a 2D array, got {cells.ndim}D")
        if not np.isin(cells, (0, 1)).all():
            raise ValueError("Cell values must be 0 or 1")
        height, width = cells.shape
        return cls(width, height, cells)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> CellState:
        """Return the state at (x, y)."""
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) outside {self.width}x{self.height} grid")
        return CellState(int(self.cells[y, x]))

    def set(self, x: int, y: int, state: CellState) -> None:
        """Write a state at (x, y)."""
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) outside {self.width}x{self.height} grid")
        self.cells[y, x] = state

    def fill_rect(self, x0: int, y0: int, x1: int, y1: int,
                  state: CellState) -> int:
        """
        Fill the inclusive rectangle [x0, x1] x [y0, y1], clamped to the grid.

        Returns the number of cells covered after clamping.
        """
        x0 = max(0, x0)
        y0 = max(0, y0)
        x1 = min(self.width - 1, x1)
        y1 = min(self.height - 1, y1)
        if x0 > x1 or y0 > y1:
            return 0
        self.cells[y0:y1 + 1, x0:x1 + 1] = state
        return (x1 - x0 + 1) * (y1 - y0 + 1)

    def copy(self) -> "TileGrid":
        return TileGrid(self.width, self.height, self.cells.copy())

    def count(self, state: CellState) -> int:
        return int(np.count_nonzero(self.cells == state))

    def open_ratio(self) -> float:
        """Fraction of cells that are OPEN."""
        return self.count(CellState.OPEN) / self.cells.size

    def to_rows(self) -> List[List[int]]:
        return self.cells.astype(int).tolist()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TileGrid):
            return NotImplemented
        return np.array_equal(self.cells, other.cells)

    def __repr__(self) -> str:
        return (f"TileGrid({self.width}x{self.height}, "
                f"open={self.count(CellState.OPEN)})")
