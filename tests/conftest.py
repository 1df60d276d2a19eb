from __future__ import annotations

import os
import random
from typing import Callable, Iterable, List

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from blockfall.game import (
    BlockfallGame,
    GameEvent,
    GameGrid,
    PieceCatalog,
    PieceDefinition,
    TetrominoType,
)


class ScriptedCatalog(PieceCatalog):
    """Hands out pieces in a fixed order, then ``default`` forever."""

    def __init__(self, kinds: Iterable[TetrominoType], default: TetrominoType = TetrominoType.O) -> None:
        super().__init__(random.Random(0))
        self.queue: List[TetrominoType] = list(kinds)
        self.default = default

    def draw(self) -> PieceDefinition:
        kind = self.queue.pop(0) if self.queue else self.default
        return self.definition(kind).copy()


class EventRecorder:
    def __init__(self, game: BlockfallGame) -> None:
        self.log: list = []
        for event in GameEvent:
            game.events.register(event, self._recorder(event))

    def _recorder(self, event: GameEvent) -> Callable[..., None]:
        def record(*args) -> None:
            self.log.append((event, args))
        return record

    def of(self, event: GameEvent) -> list:
        return [args for e, args in self.log if e is event]

    def clear(self) -> None:
        self.log.clear()


def fill_rows(grid: GameGrid, rows: Iterable[int], gap_cols: Iterable[int], value: int = 1) -> None:
    gaps = set(gap_cols)
    for y in rows:
        for x in range(grid.width):
            if x not in gaps:
                grid.grid[y, x] = value


def drop(game: BlockfallGame) -> None:
    """Soft-drop the active piece until it locks."""
    while game.move(0, 1):
        pass


@pytest.fixture
def make_game():
    def factory(*kinds: TetrominoType, default: TetrominoType = TetrominoType.O):
        game = BlockfallGame(catalog=ScriptedCatalog(kinds, default=default))
        return game, EventRecorder(game)
    return factory
