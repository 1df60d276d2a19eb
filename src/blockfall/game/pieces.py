from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import numpy as np

if TYPE_CHECKING:
    from .grid import GameGrid


class TetrominoType(IntEnum):
    T = 1
    I = 2
    O = 3
    L = 4
    J = 5
    S = 6
    Z = 7


Shape = np.ndarray
Color = Tuple[int, int, int]


def _as_shape(rows: List[List[int]]) -> Shape:
    shape = np.array(rows, dtype=np.int8)
    if shape.ndim != 2 or shape.shape[0] != shape.shape[1]:
        raise ValueError(f"Piece shapes must be square, got {shape.shape}")
    return shape


def rotate_cw(shape: Shape) -> Shape:
    """Rotate a square shape 90 degrees clockwise.

    Equivalent to ``new[x][N-1-y] = old[y][x]``; always returns a fresh array.
    """
    return np.ascontiguousarray(np.rot90(shape, 1, axes=(1, 0)))


BASE_SHAPES = {
    TetrominoType.T: _as_shape([[0, 1, 0], [1, 1, 1], [0, 0, 0]]),
    TetrominoType.I: _as_shape([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]]),
    TetrominoType.O: _as_shape([[1, 1], [1, 1]]),
    TetrominoType.L: _as_shape([[0, 0, 1], [1, 1, 1], [0, 0, 0]]),
    TetrominoType.J: _as_shape([[1, 0, 0], [1, 1, 1], [0, 0, 0]]),
    TetrominoType.S: _as_shape([[0, 1, 1], [1, 1, 0], [0, 0, 0]]),
    TetrominoType.Z: _as_shape([[1, 1, 0], [0, 1, 1], [0, 0, 0]]),
}

PIECE_COLORS: Dict[TetrominoType, Color] = {
    TetrominoType.T: (160, 32, 240),  # purple
    TetrominoType.I: (0, 240, 240),   # cyan
    TetrominoType.O: (240, 240, 0),   # yellow
    TetrominoType.L: (255, 165, 0),   # orange
    TetrominoType.J: (0, 0, 240),     # blue
    TetrominoType.S: (0, 200, 0),     # green
    TetrominoType.Z: (240, 0, 0),     # red
}


@dataclass(frozen=True, eq=False)
class PieceDefinition:
    kind: TetrominoType
    shape: Shape
    color: Color

    def copy(self) -> "PieceDefinition":
        return PieceDefinition(self.kind, self.shape.copy(), self.color)


class PieceCatalog:
    """Read-only table of the seven piece definitions plus a random source.

    Stored shapes are flagged non-writeable; ``draw`` hands out copies so that
    callers can never alter the catalog.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self._definitions: Dict[TetrominoType, PieceDefinition] = {}
        for kind, shape in BASE_SHAPES.items():
            stored = shape.copy()
            stored.setflags(write=False)
            self._definitions[kind] = PieceDefinition(kind, stored, PIECE_COLORS[kind])

    def __len__(self) -> int:
        return len(self._definitions)

    def kinds(self) -> List[TetrominoType]:
        return list(self._definitions)

    def definition(self, kind: TetrominoType) -> PieceDefinition:
        return self._definitions[TetrominoType(kind)]

    def seed(self, seed: Optional[int]) -> None:
        self.rng.seed(seed)

    def draw(self) -> PieceDefinition:
        kind = self.rng.choice(self.kinds())
        return self._definitions[kind].copy()


@dataclass(frozen=True, eq=False)
class ActivePiece:
    kind: TetrominoType
    shape: Shape
    x: int
    y: int

    @classmethod
    def from_definition(cls, definition: PieceDefinition, x: int, y: int) -> "ActivePiece":
        return cls(definition.kind, definition.shape.copy(), int(x), int(y))

    @property
    def anchor(self) -> Tuple[int, int]:
        return self.x, self.y

    def moved(self, dx: int, dy: int) -> "ActivePiece":
        return ActivePiece(self.kind, self.shape, self.x + dx, self.y + dy)

    def rotated(self) -> "ActivePiece":
        return ActivePiece(self.kind, rotate_cw(self.shape), self.x, self.y)

    def cells(self) -> List[Tuple[int, int]]:
        ys, xs = np.nonzero(self.shape)
        return [(self.x + int(dx), self.y + int(dy)) for dy, dx in zip(ys, xs)]


def leftmost_column(shape: Shape) -> int:
    cols = np.flatnonzero(np.any(shape != 0, axis=0))
    return int(cols[0]) if cols.size else shape.shape[1]


def spawn_x(shape: Shape, width: int) -> int:
    # Center the matrix, then shift so the occupied columns start near center
    return width // 2 - shape.shape[1] // 2 - leftmost_column(shape)


WALL_KICKS = (0, 1, -1)


def resolve_rotation(grid: "GameGrid", piece: ActivePiece) -> Optional[ActivePiece]:
    """Rotate ``piece`` clockwise, kicking sideways by one column if needed.

    Returns the rotated piece at its committed anchor, or ``None`` when the
    rotation collides at every kick offset.
    """
    shape = rotate_cw(piece.shape)
    for dx in WALL_KICKS:
        anchor = (piece.x + dx, piece.y)
        if not grid.collides(shape, anchor):
            return ActivePiece(piece.kind, shape, anchor[0], anchor[1])
    return None
