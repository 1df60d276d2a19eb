"""Game module for Blockfall.

Exports the falling-block engine and supporting classes:
- GameGrid: Grid representation, collision and line clearing
- PieceCatalog, PieceDefinition, ActivePiece: Piece shapes and rotation
- ScoringRules, SpeedRules: Score table and fall-speed progression
- FrameScheduler: Cancellable repeating timers on a host-driven clock
- EventBus, GameEvent: Notifications for the presentation layer
- BlockfallGame: Main state machine and session management
"""

from .grid import ClearResult, GameGrid
from .pieces import ActivePiece, PieceCatalog, PieceDefinition, TetrominoType, rotate_cw
from .rules import ScoringRules, SpeedRules
from .scheduler import FrameScheduler, TimerHandle
from .events import EventBus, GameEvent
from .core import Action, BlockfallGame, GameConfig, GamePhase, GameSession

__all__ = [
    "ClearResult",
    "GameGrid",
    "ActivePiece",
    "PieceCatalog",
    "PieceDefinition",
    "TetrominoType",
    "rotate_cw",
    "ScoringRules",
    "SpeedRules",
    "FrameScheduler",
    "TimerHandle",
    "EventBus",
    "GameEvent",
    "Action",
    "BlockfallGame",
    "GameConfig",
    "GamePhase",
    "GameSession",
]
