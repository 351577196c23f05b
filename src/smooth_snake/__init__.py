"""Smooth Snake: continuous-space worm game core."""

from smooth_snake.collision import CollisionDetector, CollisionResult, SpatialGrid
from smooth_snake.config import BoundaryMode, FoodType, GameConfig
from smooth_snake.food import Food, FoodManager
from smooth_snake.game import Game, GameEvent, GameState
from smooth_snake.input import InputHandler, InputState, Key
from smooth_snake.loop import GameLoop
from smooth_snake.reporting import ScoreReport
from smooth_snake.vector import Rectangle, Vector2D
from smooth_snake.worm import Worm

__all__ = [
    "BoundaryMode",
    "CollisionDetector",
    "CollisionResult",
    "Food",
    "FoodManager",
    "FoodType",
    "Game",
    "GameConfig",
    "GameEvent",
    "GameLoop",
    "GameState",
    "InputHandler",
    "InputState",
    "Key",
    "Rectangle",
    "ScoreReport",
    "SpatialGrid",
    "Vector2D",
    "Worm",
]
