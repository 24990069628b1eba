"""Game module for tetris_engine.

Exports the core game engine and supporting classes:
- Board: Locked-cell well with collision and line sweeping
- Piece: Tetromino piece with rotation and wall kicks
- TetrominoType: Enum of available piece types
- BagRandomizer: 7-bag piece generator
- ScoringRules: Line-clear scoring and level/speed progression
- TetrisGame: State machine driving spawn, gravity, locking and scoring
- TickDriver: Adapts a wall clock into tick deltas
"""

from .board import Board
from .pieces import Piece, TetrominoType, kick_offsets, rotate_matrix, shape_for
from .randomizer import BagRandomizer
from .rules import ClearResult, ScoringRules
from .core import Action, GameConfig, GameSession, GameSnapshot, GameState, TetrisGame
from .clock import TickDriver

__all__ = [
    "Board",
    "Piece",
    "TetrominoType",
    "kick_offsets",
    "rotate_matrix",
    "shape_for",
    "BagRandomizer",
    "ClearResult",
    "ScoringRules",
    "Action",
    "GameConfig",
    "GameSession",
    "GameSnapshot",
    "GameState",
    "TetrisGame",
    "TickDriver",
]
