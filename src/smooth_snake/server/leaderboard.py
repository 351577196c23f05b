"""In-memory score store backing the leaderboard API."""

from __future__ import annotations

import logging
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

_MAX_RETAINED_SCORES = 10_000


@dataclass
class ScoreRecord:
    """One submitted game result."""

    player_id: str
    score: int
    food_count: int
    game_time: int
    score_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Leaderboard:
    """Keeps the most recent scores, oldest evicted first."""

    def __init__(self, max_scores: int = _MAX_RETAINED_SCORES) -> None:
        if max_scores < 1:
            raise ValueError("max_scores must be at least 1.")
        self._scores: deque[ScoreRecord] = deque(maxlen=max_scores)

    def __len__(self) -> int:
        return len(self._scores)

    def submit(
        self,
        player_id: str,
        score: int,
        food_count: int = 0,
        game_time: int = 0,
    ) -> ScoreRecord:
        """Record a result. Raises ``ValueError`` on invalid values."""
        if not player_id:
            raise ValueError("player_id must not be empty.")
        if score < 0:
            raise ValueError("Score cannot be negative.")
        if food_count < 0 or game_time < 0:
            raise ValueError("food_count and game_time must be >= 0.")

        record = ScoreRecord(
            player_id=player_id,
            score=score,
            food_count=food_count,
            game_time=game_time,
        )
        self._scores.append(record)
        logger.info("Recorded score %d for player %s.", score, player_id)
        return record

    def top(self, limit: int = 10) -> list[ScoreRecord]:
        """Highest scores first; ties go to the earlier submission."""
        ranked = sorted(self._scores, key=lambda r: (-r.score, r.timestamp))
        return ranked[:limit]

    def for_player(self, player_id: str, limit: int = 20) -> list[ScoreRecord]:
        """Newest scores for *player_id*. Raises ``KeyError`` if unknown."""
        records = [r for r in self._scores if r.player_id == player_id]
        if not records:
            raise KeyError(f"Player {player_id} not found.")
        records.reverse()
        return records[:limit]

    def clear(self) -> None:
        self._scores.clear()
