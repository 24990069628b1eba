from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .pieces import Piece


class Board:
    """Fixed-size well holding locked cells.

    The grid uses 0 for empty cells and the shape id (1..7) of the piece that
    locked there otherwise. Row 0 is the top of the well.
    """

    def __init__(self, width: int, height: int) -> None:
        for value in (width, height):
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"board dimensions must be positive integers, got {width}x{height}")
        self.width = width
        self.height = height
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> int:
        # numpy would silently wrap negative indices
        if not self.is_inside(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} board")
        return int(self.grid[y, x])

    def collides(self, piece: "Piece") -> bool:
        for x, y, _ in piece.cells():
            if not self.is_inside(x, y):
                return True
            if self.grid[y, x] != 0:
                return True
        return False

    def lock(self, piece: "Piece") -> None:
        """Copy the piece's ids into the grid. The position must be legal."""
        if self.collides(piece):
            raise ValueError(f"cannot lock {piece.kind.name} at ({piece.x}, {piece.y}): position collides")
        for x, y, value in piece.cells():
            self.grid[y, x] = value

    def full_rows(self) -> np.ndarray:
        return np.where(np.all(self.grid != 0, axis=1))[0]

    def sweep_full_rows(self) -> int:
        full_rows = self.full_rows()
        if full_rows.size == 0:
            return 0
        num = int(full_rows.size)
        # Remove full rows and add empty rows at the top
        kept = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, kept))
        return num

    def filled_cells(self) -> int:
        return int(np.count_nonzero(self.grid))

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        return self.height - int(non_empty_rows[0])

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
