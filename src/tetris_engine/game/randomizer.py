from __future__ import annotations

import random
from typing import List, Optional

from .pieces import TetrominoType


class BagRandomizer:
    """7-bag piece generator.

    Every run of seven draws starting at a bag boundary holds each
    tetromino exactly once, so a type never waits more than 12 pieces.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self.bag: List[TetrominoType] = []

    def _refill(self) -> None:
        self.bag = list(TetrominoType)
        # Fisher-Yates
        for i in range(len(self.bag) - 1, 0, -1):
            j = self.rng.randint(0, i)
            self.bag[i], self.bag[j] = self.bag[j], self.bag[i]

    def next(self) -> TetrominoType:
        if not self.bag:
            self._refill()
        return self.bag.pop()
