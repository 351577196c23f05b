"""Score reporting collaborators.

The game hands a :class:`ScoreReport` to a reporter once per finished
game and never waits on the result. Every reporter here logs and swallows
its own failures.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import httpx

if TYPE_CHECKING:
    from smooth_snake.server.leaderboard import Leaderboard

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 2.0


@dataclass(frozen=True)
class ScoreReport:
    """Final result of one game."""

    player_id: str
    score: int
    food_count: int
    game_time_seconds: int

    def to_payload(self) -> dict:
        """JSON body accepted by ``POST /scores``."""
        return {
            "playerId": self.player_id,
            "score": self.score,
            "foodCount": self.food_count,
            "gameTime": self.game_time_seconds,
        }


class ScoreReporter(Protocol):
    def submit(self, report: ScoreReport) -> None: ...


class LoggingScoreReporter:
    """Writes reports to the log and keeps them in memory."""

    def __init__(self) -> None:
        self.reports: list[ScoreReport] = []

    def submit(self, report: ScoreReport) -> None:
        self.reports.append(report)
        logger.info(
            "Game over for %s: score=%d food=%d time=%ds.",
            report.player_id,
            report.score,
            report.food_count,
            report.game_time_seconds,
        )


class LeaderboardScoreReporter:
    """Records reports straight into an in-process leaderboard."""

    def __init__(self, leaderboard: Leaderboard) -> None:
        self.leaderboard = leaderboard

    def submit(self, report: ScoreReport) -> None:
        try:
            self.leaderboard.submit(
                player_id=report.player_id,
                score=report.score,
                food_count=report.food_count,
                game_time=report.game_time_seconds,
            )
        except ValueError:
            logger.warning("Leaderboard rejected score for %s.", report.player_id)


class HttpScoreReporter:
    """Talks to the leaderboard HTTP service.

    :meth:`submit` never blocks the caller. With a running event loop the
    POST is scheduled as a task; otherwise it runs on a single background
    worker thread. Call :meth:`close` (or ``await drain()``) before exit
    to let pending submissions finish.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._async_transport = async_transport
        self._pending: set[asyncio.Task] = set()
        self._executor: ThreadPoolExecutor | None = None

    def submit(self, report: ScoreReport) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="score-reporter",
                )
            self._executor.submit(self._post_sync, report)
            return
        task = loop.create_task(self._post_async(report))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _post_sync(self, report: ScoreReport) -> None:
        try:
            with httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = client.post("/scores", json=report.to_payload())
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Failed to submit score for %s: %s", report.player_id, exc)
            return
        except Exception:
            logger.exception("Unexpected error submitting score for %s.", report.player_id)
            return
        logger.info("Score submitted for %s.", report.player_id)

    async def _post_async(self, report: ScoreReport) -> None:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._async_transport,
            ) as client:
                resp = await client.post("/scores", json=report.to_payload())
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Failed to submit score for %s: %s", report.player_id, exc)
            return
        except Exception:
            logger.exception("Unexpected error submitting score for %s.", report.player_id)
            return
        logger.info("Score submitted for %s.", report.player_id)

    async def drain(self) -> None:
        """Wait for scheduled submissions; used on shutdown and in tests."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def close(self, wait: bool = True) -> None:
        """Stop the background worker, by default after pending posts finish."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def top_scores(self, limit: int = 10) -> dict:
        """Fetch the leaderboard. Raises ``httpx.HTTPError`` on failure."""
        with httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            resp = client.get("/scores/top", params={"limit": limit})
            resp.raise_for_status()
            return resp.json()
