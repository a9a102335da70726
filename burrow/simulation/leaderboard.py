"""Leaderboard — best colonies, kept in a small YAML file.

Entries are ranked by score (descending), then by days lived, and only
the top ten are kept.  A missing or unreadable file reads as an
empty board.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

MAX_ENTRIES = 10


@dataclass
class LeaderboardEntry:
    """One finished colony.

    Attributes:
        name: Colony name.
        score: Final score, see ``calculate_score``.
        days_lived: Days the colony survived.
        max_colonists: Largest population reached.
        tiles_built: Structures completed.
        date: ISO date string of the run.
    """

    name: str
    score: int
    days_lived: int
    max_colonists: int
    tiles_built: int
    date: str


def calculate_score(
    days_lived: int,
    max_colonists: int,
    tiles_built: int,
    items_stockpiled: int,
) -> int:
    """Score a colony run.

    ``days * 10 + max_colonists * 100 + tiles_built * 5 + items_stockpiled * 2``
    """
    return days_lived * 10 + max_colonists * 100 + tiles_built * 5 + items_stockpiled * 2


class Leaderboard:
    """Ranked list of colony runs persisted to ``path``."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def entries(self) -> list[LeaderboardEntry]:
        """Load every stored entry, best first."""
        if not self.path.exists():
            return []
        try:
            with self.path.open("r") as f:
                data = yaml.safe_load(f) or []
            return [LeaderboardEntry(**row) for row in data]
        except (OSError, yaml.YAMLError, TypeError) as exc:
            logger.warning("Could not read leaderboard %s: %s", self.path, exc)
            return []

    def _save(self, entries: list[LeaderboardEntry]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w") as f:
                yaml.safe_dump([asdict(e) for e in entries], f, sort_keys=False)
        except OSError as exc:
            logger.warning("Could not write leaderboard %s: %s", self.path, exc)

    def add_entry(self, entry: LeaderboardEntry) -> list[LeaderboardEntry]:
        """Insert an entry, re-rank, trim to the top ten and save.

        Returns:
            The stored entries after insertion.
        """
        entries = self.entries()
        entries.append(entry)
        entries.sort(key=lambda e: (-e.score, -e.days_lived))
        trimmed = entries[:MAX_ENTRIES]
        self._save(trimmed)
        return trimmed

    def top(self, n: int = MAX_ENTRIES) -> list[LeaderboardEntry]:
        return self.entries()[:n]

    def would_rank(self, score: int) -> int | None:
        """Return the 1-based rank ``score`` would take, or None if it misses the board."""
        entries = self.entries()
        position = next((i for i, e in enumerate(entries) if score > e.score), None)
        if position is not None:
            return position + 1
        if len(entries) < MAX_ENTRIES:
            return len(entries) + 1
        return None

    def rank(self, score: int) -> int | None:
        """Return the 1-based rank of the first entry with exactly ``score``."""
        entries = self.entries()
        return next((i + 1 for i, e in enumerate(entries) if e.score == score), None)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
