from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Iterator, Tuple

import numpy as np

if TYPE_CHECKING:
    from .board import Board


class TetrominoType(IntEnum):
    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7


Shape = np.ndarray


BASE_SHAPES = {
    TetrominoType.I: np.array([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]], dtype=np.int8),
    TetrominoType.J: np.array([[1, 0, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 1], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0], [0, 0, 0]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 1, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1], [0, 0, 0]], dtype=np.int8),
}


def shape_for(kind: TetrominoType) -> Shape:
    """Spawn-orientation matrix for `kind`, cells carrying the shape id."""
    return BASE_SHAPES[kind] * np.int8(int(kind))


def rotate_matrix(shape: Shape, direction: int) -> Shape:
    """Rotate a square matrix a quarter turn.

    Positive `direction` is clockwise (transpose, then reverse each row),
    negative is counter-clockwise (transpose, then reverse the row order).
    """
    if direction == 0:
        raise ValueError("rotation direction must be non-zero")
    if direction > 0:
        return np.ascontiguousarray(shape.T[:, ::-1])
    return np.ascontiguousarray(shape.T[::-1, :])


def kick_offsets(width: int) -> Iterator[int]:
    """Horizontal shifts tried after a rotation, in order.

    The shift walks 0, +1, -1, +2, ... and the search stops once the next
    step would be longer than the matrix width.
    """
    yield 0
    shift, step = 0, 1
    while True:
        shift += step
        step = -(step + (1 if step > 0 else -1))
        if step > width:
            return
        yield shift


@dataclass(eq=False)
class Piece:
    kind: TetrominoType
    matrix: Shape
    x: int = 0
    y: int = 0

    @classmethod
    def spawn(cls, kind: TetrominoType, board_width: int) -> "Piece":
        matrix = shape_for(kind)
        return cls(kind=kind, matrix=matrix, x=(board_width - matrix.shape[1]) // 2, y=0)

    @property
    def size(self) -> int:
        return int(self.matrix.shape[1])

    def copy(self) -> "Piece":
        return Piece(self.kind, self.matrix.copy(), self.x, self.y)

    def cells(self) -> Iterator[Tuple[int, int, int]]:
        """Yield (board_x, board_y, value) for every occupied matrix cell."""
        for dy, dx in zip(*np.nonzero(self.matrix)):
            yield self.x + int(dx), self.y + int(dy), int(self.matrix[dy, dx])

    def rotate(self, direction: int, board: "Board") -> bool:
        """Rotate in place, kicking sideways if needed.

        Returns False and leaves the piece untouched when no kick resolves
        the collision.
        """
        original_matrix, original_x = self.matrix, self.x
        self.matrix = rotate_matrix(self.matrix, direction)
        for offset in kick_offsets(self.size):
            self.x = original_x + offset
            if not board.collides(self):
                return True
        self.matrix, self.x = original_matrix, original_x
        return False

    def ghost_position(self, board: "Board") -> Tuple[int, int]:
        probe = Piece(self.kind, self.matrix, self.x, self.y)
        while not board.collides(probe):
            probe.y += 1
        return probe.x, probe.y - 1

    def ghost(self, board: "Board") -> "Piece":
        x, y = self.ghost_position(board)
        return Piece(self.kind, self.matrix.copy(), x, y)
