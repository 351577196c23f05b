"""Continuous-space worm: heading smoothing and segment following."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from smooth_snake import math_utils
from smooth_snake.vector import Vector2D

if TYPE_CHECKING:
    from smooth_snake.config import GameConfig

logger = logging.getLogger(__name__)

# Segments closer to the head than this index are never tested for
# self-collision; the neck always curls within reach of the head.
SELF_COLLISION_SKIP = 3

# Turn requests whose dot product with the reversed heading reaches this
# value are treated as a reversal and ignored.
REVERSAL_DOT_THRESHOLD = 0.8

# After a wrap, followers farther than this many spacings from their
# leader are snapped back behind it.
WRAP_STRETCH_FACTOR = 3


class Worm:
    """A worm made of equally spaced circular segments.

    ``segments[0]`` is the head. The head moves along ``direction``, which
    turns towards ``target_direction`` at no more than ``turning_speed``
    radians per second. Every other segment is pulled towards its leader
    whenever it drifts farther than ``segment_spacing`` away.
    """

    def __init__(
        self,
        start_position: Vector2D,
        speed: float = 100.0,
        radius: float = 8.0,
        initial_length: int = 5,
        growth_rate: int = 2,
        turning_speed: float = 5.0,
    ) -> None:
        if initial_length < 1:
            raise ValueError("Worm length must be at least 1.")
        if radius <= 0:
            raise ValueError("Worm radius must be positive.")
        self.initial_speed = speed
        self.radius = radius
        self.initial_length = initial_length
        self.growth_rate = growth_rate
        self.turning_speed = turning_speed
        self.segment_spacing = radius * 2

        self.segments: list[Vector2D] = []
        self.direction = Vector2D.right()
        self.target_direction = Vector2D.right()
        self.speed = speed
        self.is_alive = True
        self._initialize_segments(start_position)

    @classmethod
    def from_config(cls, config: GameConfig, start_position: Vector2D) -> Worm:
        return cls(
            start_position,
            speed=config.initial_speed,
            radius=config.segment_radius,
            initial_length=config.initial_length,
            growth_rate=config.growth_rate,
            turning_speed=config.turning_speed,
        )

    def _initialize_segments(self, start_position: Vector2D) -> None:
        """Lay the initial body out in a line behind the head."""
        behind = Vector2D.left()
        self.segments = [
            start_position.add(behind.multiply(i * self.segment_spacing))
            for i in range(self.initial_length)
        ]

    @property
    def head(self) -> Vector2D:
        return self.segments[0] if self.segments else Vector2D.zero()

    @property
    def length(self) -> int:
        return len(self.segments)

    def update(self, delta_time: float) -> None:
        """Advance the worm by *delta_time* milliseconds."""
        if not self.is_alive:
            return
        self._update_direction(delta_time)
        self._move_segments(delta_time)
        self.check_self_collision()

    def _update_direction(self, delta_time: float) -> None:
        current = self.direction.angle()
        angle_diff = math_utils.angle_distance(
            current, self.target_direction.angle(),
        )
        max_turn = self.turning_speed * delta_time / 1000
        turn = math_utils.clamp(angle_diff, -max_turn, max_turn)
        self.direction = Vector2D.from_angle(current + turn)

    def _move_segments(self, delta_time: float) -> None:
        distance = self.speed * delta_time / 1000
        self.segments[0] = self.segments[0].add(self.direction.multiply(distance))

        spacing = self.segment_spacing
        for i in range(1, len(self.segments)):
            leader = self.segments[i - 1]
            follower = self.segments[i]
            to_leader = leader.subtract(follower)
            gap = to_leader.magnitude()
            # Pull only; a follower inside the spacing stays where it is.
            if gap > spacing:
                self.segments[i] = leader.subtract(
                    to_leader.normalize().multiply(spacing),
                )

    def turn(self, new_direction: Vector2D) -> bool:
        """Request a new heading. Returns False if rejected as a reversal.

        Only ``target_direction`` changes; ``update`` applies the turn
        gradually.
        """
        wanted = new_direction.normalize()
        if wanted.magnitude_squared() == 0:
            return False
        reverse = self.direction.multiply(-1).normalize()
        if wanted.dot(reverse) >= REVERSAL_DOT_THRESHOLD:
            return False
        self.target_direction = wanted
        return True

    def grow(self) -> None:
        """Append ``growth_rate`` segments behind the tail."""
        if not self.segments:
            return
        tail = self.segments[-1]
        trailing = Vector2D.zero()
        if len(self.segments) > 1:
            trailing = tail.subtract(self.segments[-2]).normalize()
        if trailing.magnitude_squared() == 0:
            trailing = self.direction.multiply(-1).normalize()

        for i in range(self.growth_rate):
            self.segments.append(
                tail.add(trailing.multiply(self.segment_spacing * (i + 1))),
            )

    def check_self_collision(self) -> bool:
        """Kill the worm if its head overlaps its own body."""
        if len(self.segments) <= SELF_COLLISION_SKIP:
            return False
        head = self.segments[0]
        limit = self.radius * 2
        for segment in self.segments[SELF_COLLISION_SKIP:]:
            if head.distance(segment) < limit:
                self._kill("self collision")
                return True
        return False

    def check_boundary_collision(self, width: float, height: float) -> bool:
        """Kill the worm if its head circle crosses an arena edge."""
        head = self.head
        r = self.radius
        if (
            head.x - r < 0
            or head.x + r > width
            or head.y - r < 0
            or head.y + r > height
        ):
            self._kill("boundary collision")
            return True
        return False

    def wrap_around_bounds(self, width: float, height: float) -> bool:
        """Teleport the head to the opposite edge once it fully leaves.

        Returns True if the head wrapped.
        """
        head = self.head
        r = self.radius
        x, y = head.x, head.y
        if x < -r:
            x = width + r
        elif x > width + r:
            x = -r
        if y < -r:
            y = height + r
        elif y > height + r:
            y = -r

        if (x, y) == (head.x, head.y):
            return False
        self.segments[0] = Vector2D(x, y)
        self._reconcile_after_wrap()
        return True

    def _reconcile_after_wrap(self) -> None:
        """Lay stretched followers out behind their leader on its heading."""
        spacing = self.segment_spacing
        for i in range(1, len(self.segments)):
            leader = self.segments[i - 1]
            follower = self.segments[i]
            if leader.distance(follower) <= spacing * WRAP_STRETCH_FACTOR:
                continue
            heading = self.direction
            if i > 1:
                trailing = self.segments[i - 2].subtract(leader).normalize()
                if trailing.magnitude_squared() > 0:
                    heading = trailing
            self.segments[i] = leader.subtract(heading.multiply(spacing))

    def reset(self, start_position: Vector2D) -> None:
        """Restore the freshly constructed state at *start_position*."""
        self.is_alive = True
        self.direction = Vector2D.right()
        self.target_direction = Vector2D.right()
        self.speed = self.initial_speed
        self._initialize_segments(start_position)

    def increase_speed(self, amount: float) -> None:
        """Adjust speed by *amount* (may be negative); never below zero."""
        self.speed = max(0.0, self.speed + amount)

    def score(self) -> int:
        """Length-derived score. Informational; Game keeps the real score."""
        return max(0, len(self.segments) - self.initial_length) * 10

    def _kill(self, reason: str) -> None:
        self.is_alive = False
        logger.debug("Worm died (%s) at %s.", reason, self.head)

    def to_dict(self) -> dict:
        """Serialize worm state to a dictionary."""
        return {
            "segments": [s.to_list() for s in self.segments],
            "direction": self.direction.to_list(),
            "target_direction": self.target_direction.to_list(),
            "speed": self.speed,
            "radius": self.radius,
            "alive": self.is_alive,
        }
