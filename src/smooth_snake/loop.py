"""Frame driver: clamped delta time, rendering hand-off and error state."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Protocol

from smooth_snake.game import Game

logger = logging.getLogger(__name__)

_DEFAULT_FRAME_INTERVAL = 1 / 60  # seconds


class Renderer(Protocol):
    def render(self, snapshot: dict) -> None: ...


def _monotonic_ms() -> float:
    return time.perf_counter() * 1000


class GameLoop:
    """Drives a :class:`Game` one frame at a time.

    The delta passed to the game is the wall-clock time since the previous
    frame, capped at ``max_delta_time`` so a stalled frame cannot move the
    worm through food or its own body. An exception escaping a frame is
    logged once and parks the loop in an error state until
    :meth:`restart`.
    """

    def __init__(
        self,
        game: Game,
        renderer: Renderer | None = None,
        max_delta_time: float | None = None,
        clock: Callable[[], float] = _monotonic_ms,
    ) -> None:
        self.game = game
        self.renderer = renderer
        self.max_delta_time = (
            max_delta_time if max_delta_time is not None
            else game.config.max_delta_time
        )
        self.clock = clock
        self.running = False
        self.frames = 0
        self.error: Exception | None = None
        self._last_frame: float | None = None

    def start(self, now: float | None = None) -> None:
        if self.running:
            return
        self.running = True
        self._last_frame = self.clock() if now is None else now

    def stop(self) -> None:
        self.running = False

    def clamp_delta(self, now: float) -> float:
        if self._last_frame is None:
            return 0.0
        return min(max(now - self._last_frame, 0.0), self.max_delta_time)

    def frame(self, now: float | None = None) -> bool:
        """Run one update + render. Returns False if nothing ran."""
        if not self.running or self.error is not None:
            return False
        now = self.clock() if now is None else now
        delta = self.clamp_delta(now)
        self._last_frame = now

        try:
            self.game.update(delta)
            if self.renderer is not None:
                self.renderer.render(self.game.snapshot())
        except Exception as exc:
            logger.exception("Frame %d failed; loop halted.", self.frames)
            self.error = exc
            return False

        self.frames += 1
        return True

    def restart(self) -> None:
        """Clear the error state and begin a fresh game."""
        self.error = None
        self.game.reset_game()
        self._last_frame = None
        self.running = False
        self.start()

    async def run(
        self,
        max_frames: int | None = None,
        frame_interval: float = _DEFAULT_FRAME_INTERVAL,
    ) -> None:
        """Run frames until stopped, errored, or *max_frames* is reached."""
        self.start()
        try:
            while self.running and self.error is None:
                if max_frames is not None and self.frames >= max_frames:
                    break
                self.frame()
                await asyncio.sleep(frame_interval)
        except asyncio.CancelledError:
            logger.info("Game loop cancelled after %d frames.", self.frames)
        finally:
            self.running = False
