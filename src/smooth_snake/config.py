"""Game configuration and tuning constants."""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class BoundaryMode(enum.Enum):
    """What happens when the worm's head leaves the arena."""

    DEATH = "death"
    WRAP = "wrap"


class FoodType(enum.Enum):
    """Food variants; each has its own size, value and colour."""

    NORMAL = "normal"
    BONUS = "bonus"
    SPEED = "speed"


FOOD_VALUES: dict[FoodType, int] = {
    FoodType.NORMAL: 10,
    FoodType.BONUS: 50,
    FoodType.SPEED: 25,
}

# Radius multiplier applied to the configured base food radius.
FOOD_RADIUS_SCALE: dict[FoodType, float] = {
    FoodType.NORMAL: 1.0,
    FoodType.BONUS: 1.3,
    FoodType.SPEED: 0.8,
}

# (primary, secondary) colour hints for renderers.
FOOD_COLORS: dict[FoodType, tuple[str, str]] = {
    FoodType.NORMAL: ("#ff6b6b", "#ff5252"),
    FoodType.BONUS: ("#ffd93d", "#ffcc02"),
    FoodType.SPEED: ("#6bcf7f", "#4caf50"),
}

WORM_COLORS: dict[str, str] = {
    "head": "#00ff88",
    "body": "#00cc66",
    "tail": "#008844",
}


@dataclass(frozen=True)
class GameConfig:
    """Tunable parameters for a single-player game.

    Distances are pixels, speeds pixels per second, turning speed radians
    per second and all durations milliseconds.
    """

    # Arena
    width: float = 800.0
    height: float = 600.0
    boundary_mode: BoundaryMode = BoundaryMode.DEATH

    # Worm
    initial_speed: float = 100.0
    segment_radius: float = 8.0
    initial_length: int = 5
    growth_rate: int = 2
    turning_speed: float = 5.0

    # Food
    food_radius: float = 6.0
    spawn_interval: float = 3000.0
    max_food_count: int = 3

    # Gameplay tweaks
    speed_food_bonus: float = 10.0
    debug_speed_step: float = 20.0
    eat_flash_duration: float = 500.0

    # Physics
    collision_tolerance: float = 0.1
    max_delta_time: float = 1000.0 / 30.0

    seed: int | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be positive.")
        if self.segment_radius <= 0:
            raise ValueError("segment_radius must be positive.")
        if self.initial_length < 1:
            raise ValueError("initial_length must be at least 1.")
        if self.growth_rate < 0:
            raise ValueError("growth_rate must be >= 0.")
        if self.initial_speed < 0:
            raise ValueError("initial_speed must be >= 0.")
        if self.turning_speed <= 0:
            raise ValueError("turning_speed must be positive.")
        if self.food_radius <= 0:
            raise ValueError("food_radius must be positive.")
        if self.spawn_interval < 0:
            raise ValueError("spawn_interval must be >= 0.")
        if self.max_food_count < 1:
            raise ValueError("max_food_count must be at least 1.")
        if self.max_delta_time <= 0:
            raise ValueError("max_delta_time must be positive.")

    def to_dict(self) -> dict:
        """Serialize to a plain dict (enums become their values)."""
        d = asdict(self)
        d["boundary_mode"] = self.boundary_mode.value
        return d

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def from_dict(cls, raw: dict) -> GameConfig:
        data = dict(raw)
        if "boundary_mode" in data:
            data["boundary_mode"] = BoundaryMode(data["boundary_mode"])
        return cls(**data)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))
