"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from smooth_snake.server.leaderboard import Leaderboard
from smooth_snake.server.routes import health_router, router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    logger.info(
        "Leaderboard shutting down with %d scores.", len(app.state.leaderboard),
    )


def create_app(leaderboard: Leaderboard | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Smooth Snake Leaderboard", version="0.1.0", lifespan=_lifespan,
    )
    app.state.leaderboard = leaderboard if leaderboard is not None else Leaderboard()
    app.include_router(router)
    app.include_router(health_router)
    return app
