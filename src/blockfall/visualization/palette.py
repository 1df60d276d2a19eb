from __future__ import annotations

from typing import Tuple

from blockfall.game.pieces import PIECE_COLORS, TetrominoType


EMPTY_COLOR = (51, 51, 51)
BACKGROUND_COLOR = (10, 10, 14)
TEXT_COLOR = (230, 230, 230)


def color_for_value(v: int) -> Tuple[int, int, int]:
    # Negative values are the falling piece overlay
    if v == 0:
        return EMPTY_COLOR
    try:
        return PIECE_COLORS[TetrominoType(abs(v))]
    except ValueError:
        return (200, 200, 200)
