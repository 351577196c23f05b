"""Food items and the manager that spawns and retires them."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from smooth_snake import math_utils
from smooth_snake.config import (
    FOOD_COLORS,
    FOOD_RADIUS_SCALE,
    FOOD_VALUES,
    FoodType,
)
from smooth_snake.vector import Rectangle, Vector2D

if TYPE_CHECKING:
    from smooth_snake.config import GameConfig

logger = logging.getLogger(__name__)

__all__ = ["Food", "FoodManager", "FoodType", "MAX_SPAWN_ATTEMPTS"]

# Upper bound on position samples per spawn. When exhausted the last
# sample is used even if it is too close to something.
MAX_SPAWN_ATTEMPTS = 50

# Length of one pulse animation cycle, in milliseconds.
ANIMATION_PERIOD = 2000.0
PULSE_AMPLITUDE = 0.2

# Rotation rates in radians per second.
_ROTATION_RATES: dict[FoodType, float] = {
    FoodType.NORMAL: 0.0,
    FoodType.BONUS: math.pi,
    FoodType.SPEED: 2 * math.pi,
}

# Cumulative thresholds for ``Food.create_random``.
_RANDOM_MIX: tuple[tuple[float, FoodType], ...] = (
    (0.7, FoodType.NORMAL),
    (0.9, FoodType.SPEED),
    (1.0, FoodType.BONUS),
)


class Food:
    """A single piece of food.

    Food starts inactive, becomes active on :meth:`spawn` and inactive
    again on :meth:`consume`.
    """

    def __init__(
        self,
        food_type: FoodType = FoodType.NORMAL,
        base_radius: float = 6.0,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.type = food_type
        self.value = FOOD_VALUES[food_type]
        self.radius = base_radius * FOOD_RADIUS_SCALE[food_type]
        self.rng = rng if rng is not None else np.random.default_rng()

        self.position = Vector2D.zero()
        self.is_active = False
        self.animation_time = 0.0
        self.pulse_scale = 1.0
        self.rotation_angle = 0.0

    @classmethod
    def create_normal(cls, **kwargs) -> Food:
        return cls(FoodType.NORMAL, **kwargs)

    @classmethod
    def create_bonus(cls, **kwargs) -> Food:
        return cls(FoodType.BONUS, **kwargs)

    @classmethod
    def create_speed(cls, **kwargs) -> Food:
        return cls(FoodType.SPEED, **kwargs)

    @classmethod
    def create_random(
        cls, rng: np.random.Generator | None = None, **kwargs,
    ) -> Food:
        """70% normal, 20% speed, 10% bonus."""
        rng = rng if rng is not None else np.random.default_rng()
        roll = float(rng.random())
        food_type = _RANDOM_MIX[-1][1]
        for threshold, candidate in _RANDOM_MIX:
            if roll < threshold:
                food_type = candidate
                break
        return cls(food_type, rng=rng, **kwargs)

    def spawn(
        self,
        bounds: Rectangle,
        existing_positions: Sequence[Vector2D] = (),
    ) -> int:
        """Place the food somewhere clear of *existing_positions* and activate it.

        Returns the number of position samples taken.
        """
        for attempts in range(1, MAX_SPAWN_ATTEMPTS + 1):
            self.position = self._random_position(bounds)
            if not self._too_close(existing_positions):
                break
        else:
            logger.debug(
                "No clear spot after %d attempts; using %s.",
                attempts, self.position,
            )

        self.is_active = True
        self.animation_time = math_utils.random_float(
            self.rng, 0.0, ANIMATION_PERIOD,
        )
        self.rotation_angle = math_utils.random_float(self.rng, 0.0, 2 * math.pi)
        return attempts

    def _random_position(self, bounds: Rectangle) -> Vector2D:
        padding = self.radius * 2
        return Vector2D(
            self._sample_axis(bounds.x, bounds.width, padding),
            self._sample_axis(bounds.y, bounds.height, padding),
        )

    def _sample_axis(self, start: float, size: float, padding: float) -> float:
        lo = start + padding
        hi = start + size - padding
        if hi <= lo:
            return start + size / 2
        return math_utils.random_float(self.rng, lo, hi)

    def _too_close(self, positions: Sequence[Vector2D]) -> bool:
        min_distance = self.radius * 4
        return any(self.position.distance(p) < min_distance for p in positions)

    def update(self, delta_time: float) -> None:
        """Advance the pulse and rotation animation by *delta_time* ms."""
        if not self.is_active:
            return
        self.animation_time = (self.animation_time + delta_time) % ANIMATION_PERIOD
        progress = self.animation_time / ANIMATION_PERIOD
        self.pulse_scale = 1 + math.sin(progress * math.pi * 4) * PULSE_AMPLITUDE
        rate = _ROTATION_RATES[self.type]
        if rate:
            self.rotation_angle = (
                self.rotation_angle + rate * delta_time / 1000
            ) % (2 * math.pi)

    def effective_radius(self) -> float:
        """Radius including the current pulse; used for collisions."""
        return self.radius * self.pulse_scale

    def check_collision(self, point: Vector2D, radius: float) -> bool:
        if not self.is_active:
            return False
        return self.position.distance(point) <= self.effective_radius() + radius

    def consume(self) -> None:
        self.is_active = False

    def color(self) -> str:
        return FOOD_COLORS[self.type][0]

    def secondary_color(self) -> str:
        return FOOD_COLORS[self.type][1]

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "position": self.position.to_list(),
            "radius": self.radius,
            "effective_radius": self.effective_radius(),
            "value": self.value,
            "active": self.is_active,
            "rotation": self.rotation_angle,
            "color": self.color(),
            "secondary_color": self.secondary_color(),
        }


class FoodManager:
    """Owns all food in the arena and spawns new food on a timer.

    At most one food is spawned per elapsed ``spawn_interval``, and never
    more than ``max_food_count`` are active at once.
    """

    def __init__(
        self,
        bounds: Rectangle,
        spawn_interval: float = 3000.0,
        max_food_count: int = 3,
        food_radius: float = 6.0,
        rng: np.random.Generator | None = None,
    ) -> None:
        if max_food_count < 1:
            raise ValueError("max_food_count must be at least 1.")
        self.bounds = bounds
        self.spawn_interval = spawn_interval
        self.max_food_count = max_food_count
        self.food_radius = food_radius
        self.rng = rng if rng is not None else np.random.default_rng()
        self._foods: list[Food] = []
        self._since_spawn = 0.0

    @classmethod
    def from_config(
        cls,
        config: GameConfig,
        bounds: Rectangle,
        rng: np.random.Generator | None = None,
    ) -> FoodManager:
        return cls(
            bounds,
            spawn_interval=config.spawn_interval,
            max_food_count=config.max_food_count,
            food_radius=config.food_radius,
            rng=rng,
        )

    @property
    def foods(self) -> tuple[Food, ...]:
        """Read-only view of the current food."""
        return tuple(self._foods)

    def update(
        self, delta_time: float, worm_segments: Sequence[Vector2D] = (),
    ) -> None:
        for food in self._foods:
            food.update(delta_time)
        self._foods = [f for f in self._foods if f.is_active]

        self._since_spawn += delta_time
        if (
            self._since_spawn >= self.spawn_interval
            and len(self._foods) < self.max_food_count
        ):
            self._spawn_new(worm_segments)
            self._since_spawn = 0.0

    def _spawn_new(self, worm_segments: Sequence[Vector2D]) -> Food:
        food = Food.create_random(self.rng, base_radius=self.food_radius)
        existing = [*worm_segments, *(f.position for f in self._foods)]
        food.spawn(self.bounds, existing)
        self._foods.append(food)
        logger.debug("Spawned %s food at %s.", food.type.value, food.position)
        return food

    def force_spawn(
        self, worm_segments: Sequence[Vector2D] = (),
    ) -> Food | None:
        """Spawn immediately, ignoring the timer but not the cap."""
        if len(self._foods) >= self.max_food_count:
            return None
        return self._spawn_new(worm_segments)

    def add(self, food: Food) -> bool:
        """Adopt an already spawned *food*. Returns False when full."""
        if len(self._foods) >= self.max_food_count:
            return False
        self._foods.append(food)
        return True

    def check_collisions(self, point: Vector2D, radius: float) -> Food | None:
        """Consume and return the first active food touching the circle."""
        for food in self._foods:
            if food.check_collision(point, radius):
                food.consume()
                return food
        return None

    def active_count(self) -> int:
        return sum(1 for f in self._foods if f.is_active)

    def reset(self) -> None:
        self._foods.clear()
        self._since_spawn = 0.0

    def set_bounds(self, bounds: Rectangle) -> None:
        self.bounds = bounds

    def to_dict(self) -> dict:
        return {
            "foods": [f.to_dict() for f in self._foods if f.is_active],
            "max_food_count": self.max_food_count,
        }
