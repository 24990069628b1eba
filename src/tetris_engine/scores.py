"""High score bookkeeping for hosts.

The engine only reports a final score; this table is what the pygame front
end uses to rank and persist them.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from datetime import date
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Anonymous"


@dataclass
class HighScoreEntry:
    name: str
    score: int
    date: str


class HighScoreTable:
    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path
        self.entries: List[HighScoreEntry] = []

    def add(self, name: Optional[str], score: int, when: Optional[date] = None) -> HighScoreEntry:
        entry = HighScoreEntry(
            name=(name or "").strip() or DEFAULT_NAME,
            score=int(score),
            date=(when or date.today()).isoformat(),
        )
        self.entries.append(entry)
        # Stable sort keeps earlier entries ahead on ties
        self.entries.sort(key=lambda e: e.score, reverse=True)
        return entry

    def top(self, n: int = 5) -> List[HighScoreEntry]:
        return self.entries[:n]

    def is_high_score(self, score: int, n: int = 5) -> bool:
        return len(self.entries) < n or score > self.entries[n - 1].score

    def load(self) -> None:
        if self.path is None or not os.path.exists(self.path):
            self.entries = []
            return
        with open(self.path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        self.entries = [HighScoreEntry(str(e["name"]), int(e["score"]), str(e["date"])) for e in raw]
        self.entries.sort(key=lambda e: e.score, reverse=True)
        logger.debug("Loaded %d high scores from %s", len(self.entries), self.path)

    def save(self) -> None:
        if self.path is None:
            return
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([asdict(e) for e in self.entries], f, indent=2)


class ScoreRecorder:
    """Game-over listener that files final scores into a `HighScoreTable`."""

    def __init__(self, table: HighScoreTable, name: Optional[str] = None, top_n: int = 5) -> None:
        self.table = table
        self.name = name
        self.top_n = top_n
        self.last_entry: Optional[HighScoreEntry] = None
        self.last_was_high = False

    def __call__(self, score: int) -> None:
        self.last_was_high = self.table.is_high_score(score, self.top_n)
        self.last_entry = self.table.add(self.name, score)
        self.table.save()
        logger.info("Recorded score %d for %s%s", self.last_entry.score, self.last_entry.name,
                    " (new high score)" if self.last_was_high else "")

    def clear(self) -> None:
        self.last_entry = None
        self.last_was_high = False
