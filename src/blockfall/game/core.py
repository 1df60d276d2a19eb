from __future__ import annotations

import logging
import math
import numbers
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

import numpy as np

from .events import EventBus, GameEvent
from .grid import GameGrid
from .pieces import ActivePiece, PieceCatalog, PieceDefinition, resolve_rotation, spawn_x
from .rules import ScoringRules, SpeedRules
from .scheduler import FrameScheduler, TimerHandle


logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    NONE = 4
    RESTART = 5


class GamePhase(Enum):
    FALLING = "falling"
    LOCKING = "locking"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None


@dataclass
class GameSession:
    grid: GameGrid
    fall_interval_ms: int
    active: Optional[ActivePiece] = None
    next_piece: Optional[PieceDefinition] = None
    score: int = 0
    combo: int = 0
    lines_cleared_total: int = 0
    phase: GamePhase = GamePhase.FALLING

    @property
    def game_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER


def _as_delta(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real) and math.isfinite(value) and float(value).is_integer():
        return int(value)
    return None


class BlockfallGame:
    """Falling-block game engine.

    Owns one ``GameSession`` and the repeating fall timer. Every intent and
    every tick runs to completion on the caller's thread; state changes are
    reported through ``events``.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        speed: Optional[SpeedRules] = None,
        scheduler: Optional[FrameScheduler] = None,
        catalog: Optional[PieceCatalog] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.speed = speed or SpeedRules()
        self.scheduler = scheduler or FrameScheduler()
        self.catalog = catalog or PieceCatalog(random.Random(self.config.random_seed))
        self.events = EventBus()
        self.session = GameSession(
            grid=GameGrid(self.config.width, self.config.height),
            fall_interval_ms=self.speed.initial_interval_ms,
        )
        self._timer: Optional[TimerHandle] = None
        self.restart()

    @property
    def grid(self) -> GameGrid:
        return self.session.grid

    @property
    def score(self) -> int:
        return self.session.score

    @property
    def game_over(self) -> bool:
        return self.session.game_over

    @property
    def timer(self) -> Optional[TimerHandle]:
        return self._timer

    def restart(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        s = self.session
        s.grid.reset()
        s.active = None
        s.score = 0
        s.combo = 0
        s.lines_cleared_total = 0
        s.fall_interval_ms = self.speed.initial_interval_ms
        s.phase = GamePhase.FALLING
        s.next_piece = self.catalog.draw()
        logger.debug("Session restarted (%dx%d board)", s.grid.width, s.grid.height)
        self.events.emit(GameEvent.SCORE_CHANGED, s.score, 0, None)
        self.events.emit(GameEvent.COMBO_CHANGED, s.combo)
        self.events.emit(GameEvent.SPEED_CHANGED, s.fall_interval_ms)
        self._timer = self.scheduler.call_every(s.fall_interval_ms, self.tick)
        self._spawn_piece()

    def move(self, dx, dy) -> bool:
        """Translate the active piece; a blocked downward move locks it.

        Returns True if the piece moved.
        """
        s = self.session
        if s.game_over or s.active is None:
            return False
        dx = _as_delta(dx)
        dy = _as_delta(dy)
        if dx is None or dy is None or dy < 0 or (dx == 0 and dy == 0):
            return False
        candidate = s.active.moved(dx, dy)
        if not s.grid.collides(candidate.shape, candidate.anchor):
            s.active = candidate
            self._emit_board()
            return True
        if dy > 0:
            self._lock_piece()
        return False

    def rotate(self) -> bool:
        s = self.session
        if s.game_over or s.active is None:
            return False
        rotated = resolve_rotation(s.grid, s.active)
        if rotated is None:
            return False
        s.active = rotated
        self._emit_board()
        return True

    def tick(self) -> None:
        self.move(0, 1)

    def handle(self, action) -> bool:
        """Dispatch an ``Action``; anything unrecognized is ignored."""
        try:
            action = Action(action)
        except ValueError:
            return False
        if action == Action.LEFT:
            return self.move(-1, 0)
        if action == Action.RIGHT:
            return self.move(1, 0)
        if action == Action.ROTATE:
            return self.rotate()
        if action == Action.SOFT_DROP:
            return self.move(0, 1)
        if action == Action.RESTART:
            self.restart()
            return True
        return False

    def _lock_piece(self) -> None:
        s = self.session
        piece = s.active
        assert piece is not None
        s.phase = GamePhase.LOCKING
        s.grid.stamp(piece.shape, piece.anchor, int(piece.kind))
        s.active = None

        result = s.grid.clear_full_rows()
        lines = result.lines_cleared
        if lines > 0:
            s.combo += 1
            self.events.emit(GameEvent.COMBO_CHANGED, s.combo)
            self.events.emit(GameEvent.LINES_CLEARED, lines, result.origin_row)
        elif s.combo != 0:
            s.combo = 0
            self.events.emit(GameEvent.COMBO_CHANGED, s.combo)

        points = self.rules.score_for_lines(lines)
        if points > 0:
            s.score += points
            self.events.emit(GameEvent.SCORE_CHANGED, s.score, points, result.origin_row)

        old_total = s.lines_cleared_total
        s.lines_cleared_total += lines
        interval = self.speed.interval_after(old_total, s.lines_cleared_total, s.fall_interval_ms)
        if interval != s.fall_interval_ms:
            s.fall_interval_ms = interval
            if self._timer is not None:
                self._timer.interval_ms = interval
            logger.info("Speed up: fall interval now %d ms", interval)
            self.events.emit(GameEvent.SPEED_CHANGED, interval)

        if self.rules.is_reward(lines, s.combo):
            self.events.emit(GameEvent.REWARD_CUE)

        self._spawn_piece()

    def _spawn_piece(self) -> None:
        s = self.session
        definition = s.next_piece if s.next_piece is not None else self.catalog.draw()
        s.next_piece = self.catalog.draw()
        self.events.emit(GameEvent.NEXT_PIECE_CHANGED, s.next_piece)

        piece = ActivePiece.from_definition(definition, spawn_x(definition.shape, s.grid.width), 0)
        s.active = piece
        # Immediate collision check: if overlaps, game over
        if s.grid.collides(piece.shape, piece.anchor):
            self._enter_game_over()
            return
        s.phase = GamePhase.FALLING
        logger.debug("Spawned %s at x=%d", piece.kind.name, piece.x)
        self._emit_board()

    def _enter_game_over(self) -> None:
        s = self.session
        s.phase = GamePhase.GAME_OVER
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        logger.info("Game over: score=%d lines=%d", s.score, s.lines_cleared_total)
        self.events.emit(GameEvent.BOARD_CHANGED, s.grid.clone_state(), None)
        self.events.emit(GameEvent.GAME_OVER)

    def _emit_board(self) -> None:
        self.events.emit(GameEvent.BOARD_CHANGED, self.session.grid.clone_state(), self.session.active)

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        s = self.session
        state = s.grid.clone_state()
        if s.active is not None and not s.game_over:
            for x, y in s.active.cells():
                if s.grid.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -int(s.active.kind)
        return state
