from __future__ import annotations

import time
from typing import Callable, Optional

from .core import GameState, TetrisGame


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class TickDriver:
    """Turns a millisecond clock into tick deltas for a `TetrisGame`.

    Nothing is delivered while the game is not running, and resuming or
    starting a session takes the current time as the new baseline, so a
    pause never produces a burst of catch-up drops.
    """

    def __init__(self, game: TetrisGame, time_fn: Optional[Callable[[], float]] = None) -> None:
        self.game = game
        self.time_fn = time_fn or monotonic_ms
        self._last = self.time_fn()
        self._tick = game.tick_callback()

    def _rebase(self) -> None:
        self._last = self.time_fn()
        self._tick = self.game.tick_callback()

    def start(self) -> None:
        self.game.start()
        self._rebase()

    def restart(self) -> None:
        self.game.restart()
        self._rebase()

    def pause(self) -> None:
        self.game.pause()

    def resume(self) -> None:
        self.game.resume()
        self._rebase()

    def toggle_pause(self) -> None:
        if self.game.state is GameState.PAUSED:
            self.resume()
        else:
            self.pause()

    def pump(self) -> bool:
        """Deliver the time elapsed since the last pump. Returns True on an auto-drop."""
        if self.game.state is not GameState.RUNNING:
            return False
        now = self.time_fn()
        elapsed = now - self._last
        self._last = now
        return self._tick(elapsed)
