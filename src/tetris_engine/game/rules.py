from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class ClearResult(NamedTuple):
    score_delta: int
    level: int
    lines_cleared_total: int
    drop_interval_ms: int


@dataclass(frozen=True)
class ScoringRules:
    line_clear_scores: tuple[int, ...] = (0, 100, 300, 500, 800)
    lines_per_level: int = 10
    base_drop_interval_ms: int = 1000
    drop_interval_step_ms: int = 100
    min_drop_interval_ms: int = 100

    def __post_init__(self) -> None:
        scores = self.line_clear_scores
        if len(scores) < 5 or scores[0] != 0:
            raise ValueError("line_clear_scores must start at 0 and cover clears of 0 to 4 rows")
        if any(b < a for a, b in zip(scores, scores[1:])):
            raise ValueError("line_clear_scores must be non-decreasing")
        if self.lines_per_level <= 0:
            raise ValueError("lines_per_level must be positive")
        if self.min_drop_interval_ms <= 0:
            raise ValueError("min_drop_interval_ms must be positive")
        if self.base_drop_interval_ms < self.min_drop_interval_ms:
            raise ValueError("base_drop_interval_ms must not be below min_drop_interval_ms")
        if self.drop_interval_step_ms < 0:
            raise ValueError("drop_interval_step_ms must not be negative")

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        if lines < len(self.line_clear_scores):
            return self.line_clear_scores[lines]
        # Exaggerate beyond the table just in case of variants
        return self.line_clear_scores[-1] + (lines - (len(self.line_clear_scores) - 1)) * 400

    def drop_interval_for(self, level: int) -> int:
        interval = self.base_drop_interval_ms - (level - 1) * self.drop_interval_step_ms
        return max(self.min_drop_interval_ms, interval)

    def apply_clear(self, rows_cleared: int, level: int, lines_cleared_total: int) -> ClearResult:
        """Score a sweep and advance the level at most one step."""
        total = lines_cleared_total + rows_cleared
        score_delta = self.score_for_lines(rows_cleared) * level
        if rows_cleared > 0 and total >= level * self.lines_per_level:
            level += 1
        return ClearResult(score_delta, level, total, self.drop_interval_for(level))
