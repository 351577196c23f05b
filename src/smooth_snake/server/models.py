"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Accepts and emits camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScoreSubmission(_CamelModel):
    """Request body for POST /scores."""

    player_id: str = Field(min_length=1, max_length=64)
    score: int = Field(ge=0)
    food_count: int = Field(default=0, ge=0)
    game_time: int = Field(default=0, ge=0)


class ScoreEntry(_CamelModel):
    """A recorded score, optionally ranked within a listing."""

    rank: int | None = None
    score_id: str
    player_id: str
    score: int
    food_count: int
    game_time: int
    timestamp: datetime


class LeaderboardResponse(_CamelModel):
    """Response for GET /scores/top."""

    scores: list[ScoreEntry]
    total: int


class PlayerScoresResponse(_CamelModel):
    """Response for GET /scores/user/{player_id}."""

    player_id: str
    scores: list[ScoreEntry]
    total: int


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Body of rejected submissions (400) and unknown players (404)."""

    detail: str
