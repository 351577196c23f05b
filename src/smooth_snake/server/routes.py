"""REST API route handlers for score submission and the leaderboard."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request

from smooth_snake.server.leaderboard import Leaderboard, ScoreRecord
from smooth_snake.server.models import (
    ErrorResponse,
    HealthResponse,
    LeaderboardResponse,
    PlayerScoresResponse,
    ScoreEntry,
    ScoreSubmission,
)

router = APIRouter(prefix="/scores", tags=["scores"])
health_router = APIRouter(tags=["health"])

_MAX_LIMIT = 100
_DEFAULT_TOP_LIMIT = 10
_DEFAULT_PLAYER_LIMIT = 20


def _get_leaderboard(request: Request) -> Leaderboard:
    return request.app.state.leaderboard


def _entry(record: ScoreRecord, rank: int | None = None) -> ScoreEntry:
    return ScoreEntry(
        rank=rank,
        score_id=record.score_id,
        player_id=record.player_id,
        score=record.score,
        food_count=record.food_count,
        game_time=record.game_time,
        timestamp=record.timestamp,
    )


def _sanitize_limit(limit: int, default: int) -> int:
    """Out-of-range limits fall back to the endpoint default."""
    return limit if 1 <= limit <= _MAX_LIMIT else default


@router.post(
    "", status_code=201, responses={400: {"model": ErrorResponse}},
)
async def submit_score(body: ScoreSubmission, request: Request) -> ScoreEntry:
    """Record a finished game."""
    try:
        record = _get_leaderboard(request).submit(
            player_id=body.player_id,
            score=body.score,
            food_count=body.food_count,
            game_time=body.game_time,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _entry(record)


@router.get("/top")
async def top_scores(
    request: Request, limit: int = _DEFAULT_TOP_LIMIT,
) -> LeaderboardResponse:
    """Highest scores across all players."""
    limit = _sanitize_limit(limit, _DEFAULT_TOP_LIMIT)
    records = _get_leaderboard(request).top(limit)
    scores = [_entry(r, rank=i) for i, r in enumerate(records, start=1)]
    return LeaderboardResponse(scores=scores, total=len(scores))


@router.get(
    "/user/{player_id}", responses={404: {"model": ErrorResponse}},
)
async def player_scores(
    player_id: str, request: Request, limit: int = _DEFAULT_PLAYER_LIMIT,
) -> PlayerScoresResponse:
    """A single player's most recent scores."""
    limit = _sanitize_limit(limit, _DEFAULT_PLAYER_LIMIT)
    try:
        records = _get_leaderboard(request).for_player(player_id, limit)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Player not found.") from exc
    scores = [_entry(r, rank=i) for i, r in enumerate(records, start=1)]
    return PlayerScoresResponse(
        player_id=player_id, scores=scores, total=len(scores),
    )


@health_router.get("/health")
async def health() -> HealthResponse:
    return HealthResponse(timestamp=datetime.now(timezone.utc))
