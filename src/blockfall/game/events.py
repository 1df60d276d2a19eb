from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List


class GameEvent(Enum):
    """Notifications pushed from the engine to the presentation layer.

    Callback arguments per event:
      BOARD_CHANGED       (board: np.ndarray, active_piece: ActivePiece | None)
      SCORE_CHANGED       (score: int, delta: int, origin_row: int | None)
      COMBO_CHANGED       (combo: int)
      LINES_CLEARED       (count: int, origin_row: int | None)
      SPEED_CHANGED       (interval_ms: int)
      NEXT_PIECE_CHANGED  (definition: PieceDefinition)
      REWARD_CUE          ()
      GAME_OVER           ()
    """

    BOARD_CHANGED = "board_changed"
    SCORE_CHANGED = "score_changed"
    COMBO_CHANGED = "combo_changed"
    LINES_CLEARED = "lines_cleared"
    SPEED_CHANGED = "speed_changed"
    NEXT_PIECE_CHANGED = "next_piece_changed"
    REWARD_CUE = "reward_cue"
    GAME_OVER = "game_over"


class EventBus:
    def __init__(self) -> None:
        self.callbacks: Dict[GameEvent, List[Callable[..., None]]] = {}

    def register(self, event: GameEvent, callback: Callable[..., None]) -> None:
        """Registers a function to be called every time ``event`` is emitted."""
        if event not in self.callbacks:
            self.callbacks[event] = []
        self.callbacks[event].append(callback)

    def unregister(self, event: GameEvent, callback: Callable[..., None]) -> None:
        if callback in self.callbacks.get(event, []):
            self.callbacks[event].remove(callback)

    def emit(self, event: GameEvent, *args) -> None:
        for callback in list(self.callbacks.get(event, [])):
            callback(*args)
