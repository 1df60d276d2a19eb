from __future__ import annotations

import random

import numpy as np
import pytest

from blockfall.game import ActivePiece, GameGrid, PieceCatalog, TetrominoType, rotate_cw
from blockfall.game.pieces import BASE_SHAPES, resolve_rotation, spawn_x


@pytest.mark.parametrize("kind", list(TetrominoType))
def test_four_rotations_restore_shape(kind):
    shape = BASE_SHAPES[kind]
    rotated = shape
    for _ in range(4):
        rotated = rotate_cw(rotated)
    assert np.array_equal(rotated, shape)


def test_rotate_cw_follows_transpose_then_mirror():
    t = BASE_SHAPES[TetrominoType.T]
    expected = np.array([[0, 1, 0], [0, 1, 1], [0, 1, 0]], dtype=np.int8)
    assert np.array_equal(rotate_cw(t), expected)
    n = t.shape[0]
    out = rotate_cw(t)
    for y in range(n):
        for x in range(n):
            assert out[x][n - 1 - y] == t[y][x]


def test_catalog_has_seven_square_pieces_with_ids():
    catalog = PieceCatalog(random.Random(1))
    assert len(catalog) == 7
    sizes = {kind: catalog.definition(kind).shape.shape[0] for kind in catalog.kinds()}
    assert sizes[TetrominoType.I] == 4
    assert sizes[TetrominoType.O] == 2
    assert all(size == 3 for kind, size in sizes.items() if kind not in (TetrominoType.I, TetrominoType.O))
    for kind in catalog.kinds():
        assert int(np.count_nonzero(catalog.definition(kind).shape)) == 4


def test_draw_returns_independent_copy():
    catalog = PieceCatalog(random.Random(3))
    drawn = catalog.draw()
    stored = catalog.definition(drawn.kind)
    original = stored.shape.copy()
    drawn.shape[:] = 0
    assert np.array_equal(stored.shape, original)
    with pytest.raises(ValueError):
        stored.shape[0, 0] = 1


def test_draw_is_reproducible_with_seed():
    a = PieceCatalog(random.Random(42))
    b = PieceCatalog(random.Random(0))
    b.seed(42)
    assert [a.draw().kind for _ in range(20)] == [b.draw().kind for _ in range(20)]


def test_spawn_x_centers_occupied_columns():
    assert spawn_x(BASE_SHAPES[TetrominoType.T], 10) == 4
    assert spawn_x(BASE_SHAPES[TetrominoType.I], 10) == 3
    assert spawn_x(BASE_SHAPES[TetrominoType.O], 10) == 4
    # Vertical I occupies only matrix column 2
    vertical_i = rotate_cw(BASE_SHAPES[TetrominoType.I])
    assert spawn_x(vertical_i, 10) == 1


def test_active_piece_moves_and_rotates_without_mutating():
    piece = ActivePiece(TetrominoType.T, BASE_SHAPES[TetrominoType.T].copy(), 4, 0)
    before = piece.shape.copy()
    moved = piece.moved(1, 2)
    turned = piece.rotated()
    assert (moved.x, moved.y) == (5, 2)
    assert (piece.x, piece.y) == (4, 0)
    assert np.array_equal(piece.shape, before)
    assert turned.shape is not piece.shape
    assert sorted(piece.cells()) == [(4, 1), (5, 0), (5, 1), (6, 1)]


def _t_orientation(turns: int) -> np.ndarray:
    shape = BASE_SHAPES[TetrominoType.T]
    for _ in range(turns):
        shape = rotate_cw(shape)
    return shape


def test_rotation_without_collision_keeps_anchor():
    grid = GameGrid()
    piece = ActivePiece(TetrominoType.T, _t_orientation(0), 4, 5)
    result = resolve_rotation(grid, piece)
    assert result is not None
    assert result.anchor == (4, 5)
    assert np.array_equal(result.shape, _t_orientation(1))


def test_rotation_kicks_right_off_left_wall():
    grid = GameGrid()
    piece = ActivePiece(TetrominoType.T, _t_orientation(1), -1, 5)
    result = resolve_rotation(grid, piece)
    assert result is not None
    assert result.anchor == (0, 5)


def test_rotation_kicks_left_off_right_wall():
    grid = GameGrid()
    piece = ActivePiece(TetrominoType.T, _t_orientation(3), 8, 5)
    result = resolve_rotation(grid, piece)
    assert result is not None
    assert result.anchor == (7, 5)


def test_rotation_rejected_when_every_kick_collides():
    grid = GameGrid()
    grid.grid[6, 2] = 1
    piece = ActivePiece(TetrominoType.T, _t_orientation(1), -1, 5)
    assert resolve_rotation(grid, piece) is None
