from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, List, Optional, Tuple

import numpy as np

from .board import Board
from .pieces import Piece
from .randomizer import BagRandomizer
from .rules import ScoringRules

logger = logging.getLogger(__name__)

GameOverListener = Callable[[int], None]


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6


class GameState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")


@dataclass
class GameSession:
    """Everything one game mutates. Replaced wholesale on restart."""

    board: Board
    randomizer: BagRandomizer
    drop_interval_ms: int
    active_piece: Optional[Piece] = None
    next_piece: Optional[Piece] = None
    score: int = 0
    level: int = 1
    lines_cleared_total: int = 0
    drop_accumulator_ms: float = 0.0
    is_over: bool = False


@dataclass(frozen=True, eq=False)
class GameSnapshot:
    board: np.ndarray
    active_piece: Optional[Piece]
    ghost_piece: Optional[Piece]
    next_piece: Optional[Piece]
    score: int
    level: int
    lines_cleared_total: int
    state: GameState
    is_over: bool


class TetrisGame:
    """Falling-block state machine.

    Hosts feed it elapsed time through `tick` and player intents through
    `apply_move`, `apply_rotate`, `soft_drop` and `hard_drop`. Every intent is
    a silent no-op unless the game is running, and returns whether it changed
    anything.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.session: Optional[GameSession] = None
        self._paused = False
        self._generation = 0
        self._game_over_listeners: List[GameOverListener] = []

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> GameState:
        if self.session is None:
            return GameState.IDLE
        if self.session.is_over:
            return GameState.GAME_OVER
        if self._paused:
            return GameState.PAUSED
        return GameState.RUNNING

    @property
    def running(self) -> bool:
        return self.state is GameState.RUNNING

    @property
    def generation(self) -> int:
        return self._generation

    def add_game_over_listener(self, listener: GameOverListener) -> None:
        """Register a callback receiving the final score of games ending above zero."""
        self._game_over_listeners.append(listener)

    # -------------------------------------------------------------- lifecycle

    def _new_session(self) -> None:
        self._generation += 1
        self._paused = False
        self.session = GameSession(
            board=Board(self.config.width, self.config.height),
            randomizer=BagRandomizer(self.rng),
            drop_interval_ms=self.rules.drop_interval_for(1),
        )
        self.spawn()

    def start(self) -> None:
        if self.state in (GameState.RUNNING, GameState.PAUSED):
            return
        logger.info("Starting game (generation %d)", self.generation + 1)
        self._new_session()

    def restart(self) -> None:
        logger.info("Restarting game (generation %d)", self.generation + 1)
        self._new_session()

    def pause(self) -> None:
        if self.state is GameState.RUNNING:
            self._paused = True
            logger.info("Game paused")

    def resume(self) -> None:
        if self.state is GameState.PAUSED:
            self._paused = False
            logger.info("Game resumed")

    def toggle_pause(self) -> None:
        if self.state is GameState.PAUSED:
            self.resume()
        else:
            self.pause()

    # ----------------------------------------------------------------- pieces

    def spawn(self) -> None:
        s = self.session
        if s is None or s.is_over:
            return
        if s.next_piece is None:
            s.next_piece = Piece.spawn(s.randomizer.next(), s.board.width)
        s.active_piece = s.next_piece
        s.next_piece = Piece.spawn(s.randomizer.next(), s.board.width)
        s.active_piece.y = 0
        if s.board.collides(s.active_piece):
            self._game_over()

    def _game_over(self) -> None:
        s = self.session
        assert s is not None
        s.is_over = True
        logger.info("Game over: score=%d level=%d lines=%d", s.score, s.level, s.lines_cleared_total)
        if s.score > 0:
            for listener in list(self._game_over_listeners):
                listener(s.score)

    def _lock_active(self) -> int:
        s = self.session
        assert s is not None and s.active_piece is not None
        s.board.lock(s.active_piece)
        rows = s.board.sweep_full_rows()
        result = self.rules.apply_clear(rows, s.level, s.lines_cleared_total)
        logger.debug("Locked %s at (%d, %d), cleared %d rows",
                     s.active_piece.kind.name, s.active_piece.x, s.active_piece.y, rows)
        if result.level != s.level:
            logger.debug("Level up: %d -> %d (interval %d ms)", s.level, result.level, result.drop_interval_ms)
        s.score += result.score_delta
        s.level = result.level
        s.lines_cleared_total = result.lines_cleared_total
        s.drop_interval_ms = result.drop_interval_ms
        self.spawn()
        return rows

    # ---------------------------------------------------------------- intents

    def tick(self, elapsed_ms: float) -> bool:
        """Advance gravity. Returns True when an automatic drop happened."""
        if not self.running:
            return False
        s = self.session
        assert s is not None
        s.drop_accumulator_ms += elapsed_ms
        if s.drop_accumulator_ms > s.drop_interval_ms:
            self.soft_drop()
            return True
        return False

    def tick_callback(self) -> Callable[[float], bool]:
        """A tick function that goes inert once this session is replaced."""
        generation = self.generation

        def _tick(elapsed_ms: float) -> bool:
            if generation != self._generation:
                return False
            return self.tick(elapsed_ms)

        return _tick

    def apply_move(self, dx: int) -> bool:
        if not self.running:
            return False
        piece = self.session.active_piece
        piece.x += dx
        if self.session.board.collides(piece):
            piece.x -= dx
            return False
        return dx != 0

    def apply_rotate(self, direction: int) -> bool:
        if not self.running:
            return False
        return self.session.active_piece.rotate(direction, self.session.board)

    def soft_drop(self) -> bool:
        """Move down one row, locking the piece if it cannot move.

        Returns True if the piece moved, False if it locked or the game is
        not running.
        """
        if not self.running:
            return False
        s = self.session
        s.drop_accumulator_ms = 0.0
        piece = s.active_piece
        piece.y += 1
        if s.board.collides(piece):
            piece.y -= 1
            self._lock_active()
            return False
        return True

    def hard_drop(self) -> int:
        """Drop to the ghost position and lock. Returns rows dropped."""
        if not self.running:
            return 0
        s = self.session
        s.drop_accumulator_ms = 0.0
        piece = s.active_piece
        _, ghost_y = piece.ghost_position(s.board)
        distance = ghost_y - piece.y
        piece.y = ghost_y
        self._lock_active()
        return distance

    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, dict]:
        if self.session is None:
            self.start()
        s = self.session
        if s.is_over:
            return self.get_state(), 0, True, {}

        score_before = s.score
        if action == Action.LEFT:
            self.apply_move(-1)
        elif action == Action.RIGHT:
            self.apply_move(1)
        elif action == Action.ROTATE_CW:
            self.apply_rotate(1)
        elif action == Action.ROTATE_CCW:
            self.apply_rotate(-1)
        elif action == Action.SOFT_DROP:
            self.soft_drop()
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.NONE:
            pass

        info = {
            "score": s.score,
            "level": s.level,
            "lines_cleared_total": s.lines_cleared_total,
        }
        return self.get_state(), s.score - score_before, s.is_over, info

    # -------------------------------------------------------------- snapshots

    def get_state(self) -> np.ndarray:
        if self.session is None:
            return np.zeros((self.config.height, self.config.width), dtype=np.int8)
        # Overlay current piece on a copy of the grid for observation
        state = self.session.board.clone_state()
        piece = self.session.active_piece
        if piece is not None and not self.session.is_over:
            for x, y, value in piece.cells():
                if self.session.board.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -value
        return state

    def snapshot(self) -> GameSnapshot:
        s = self.session
        if s is None:
            board = np.zeros((self.config.height, self.config.width), dtype=np.int8)
            board.setflags(write=False)
            return GameSnapshot(board, None, None, None, 0, 1, 0, GameState.IDLE, False)
        board = s.board.clone_state()
        board.setflags(write=False)
        active = ghost = None
        if s.active_piece is not None and not s.is_over:
            active = s.active_piece.copy()
            ghost = s.active_piece.ghost(s.board)
        next_piece = s.next_piece.copy() if s.next_piece is not None else None
        return GameSnapshot(
            board=board,
            active_piece=active,
            ghost_piece=ghost,
            next_piece=next_piece,
            score=s.score,
            level=s.level,
            lines_cleared_total=s.lines_cleared_total,
            state=self.state,
            is_over=s.is_over,
        )
