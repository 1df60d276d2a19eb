from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


Coordinate = Tuple[int, int]


@dataclass
class ClearResult:
    lines_cleared: int
    origin_row: Optional[int] = None


class GameGrid:
    """Discrete 2D grid of locked cells.

    The grid uses 0 for empty cells and the piece identifier (1-7) for locked
    cells. Row 0 is the top of the board.
    """

    def __init__(self, width: int = 10, height: int = 20) -> None:
        self.width = int(width)
        self.height = int(height)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {self.width}x{self.height}")
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def collides(self, shape: np.ndarray, anchor: Coordinate) -> bool:
        """Return True if ``shape`` placed with its top-left at ``anchor`` overlaps
        a wall, the floor, or a locked cell.

        Cells above the board (negative y) only have to respect the side walls.
        """
        ax, ay = anchor
        ys, xs = np.nonzero(shape)
        for dy, dx in zip(ys, xs):
            x = ax + int(dx)
            y = ay + int(dy)
            if x < 0 or x >= self.width or y >= self.height:
                return True
            if y >= 0 and self.grid[y, x] != 0:
                return True
        return False

    def stamp(self, shape: np.ndarray, anchor: Coordinate, value: int) -> None:
        """Write ``value`` into every occupied shape cell that lies on the board."""
        ax, ay = anchor
        ys, xs = np.nonzero(shape)
        for dy, dx in zip(ys, xs):
            x = ax + int(dx)
            y = ay + int(dy)
            if self.is_inside(x, y):
                self.grid[y, x] = value

    def is_row_full(self, y: int) -> bool:
        return bool(np.all(self.grid[y] != 0))

    def clear_full_rows(self) -> ClearResult:
        """Remove full rows, shifting everything above them down.

        Rows are scanned bottom to top. After a removal the same index is
        checked again since the row above has moved into it.
        """
        lines = 0
        origin_row: Optional[int] = None
        y = self.height - 1
        while y >= 0:
            if self.is_row_full(y):
                if origin_row is None:
                    origin_row = y
                self.grid[1 : y + 1] = self.grid[0:y].copy()
                self.grid[0] = 0
                lines += 1
            else:
                y -= 1
        return ClearResult(lines_cleared=lines, origin_row=origin_row)

    def stack_height(self) -> int:
        """Rows from the floor up to the highest locked cell."""
        filled = np.flatnonzero(self.grid.any(axis=1))
        return self.height - int(filled[0]) if filled.size else 0

    def count_holes(self) -> int:
        """Empty cells with a locked cell somewhere above them in the same column."""
        occupied = self.grid != 0
        covered = np.logical_or.accumulate(occupied, axis=0)
        return int(np.count_nonzero(covered & ~occupied))

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
