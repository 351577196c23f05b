"""Stateless geometric collision queries and a broad-phase bucket grid."""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING

from smooth_snake import math_utils
from smooth_snake.vector import Rectangle, Vector2D
from smooth_snake.worm import SELF_COLLISION_SKIP

if TYPE_CHECKING:
    from smooth_snake.food import Food
    from smooth_snake.worm import Worm

DEFAULT_TOLERANCE = 0.1

# Relative speeds below this are treated as stationary in swept tests.
_MIN_RELATIVE_SPEED = 1e-3


@dataclass(frozen=True)
class CollisionResult:
    """Outcome of a single collision query.

    Truthy when a collision occurred, so callers can write
    ``if detector.circle_to_circle(...):``.
    """

    occurred: bool
    point: Vector2D | None = None
    normal: Vector2D | None = None
    distance: float | None = None

    def __bool__(self) -> bool:
        return self.occurred


NO_COLLISION = CollisionResult(occurred=False)


class CollisionDetector:
    """Collision predicates sharing one contact tolerance.

    The tolerance is added to every radius sum so that shapes exactly
    touching count as colliding.
    """

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE) -> None:
        if tolerance < 0:
            raise ValueError("tolerance must be >= 0.")
        self.tolerance = tolerance

    def circle_to_circle(
        self,
        center1: Vector2D,
        radius1: float,
        center2: Vector2D,
        radius2: float,
    ) -> CollisionResult:
        """Contact point lies on circle 1, normal points from 1 to 2."""
        distance = center1.distance(center2)
        if distance > radius1 + radius2 + self.tolerance:
            return NO_COLLISION
        normal = center2.subtract(center1).normalize()
        return CollisionResult(
            occurred=True,
            point=center1.add(normal.multiply(radius1)),
            normal=normal,
            distance=distance,
        )

    def point_in_circle(
        self, point: Vector2D, center: Vector2D, radius: float,
    ) -> CollisionResult:
        distance = point.distance(center)
        if distance > radius + self.tolerance:
            return NO_COLLISION
        return CollisionResult(
            occurred=True,
            point=point,
            normal=point.subtract(center).normalize(),
            distance=distance,
        )

    def circle_to_rectangle(
        self, center: Vector2D, radius: float, rect: Rectangle,
    ) -> CollisionResult:
        """Test against the rectangle point closest to the circle centre."""
        closest = Vector2D(
            math_utils.clamp(center.x, rect.x, rect.right),
            math_utils.clamp(center.y, rect.y, rect.bottom),
        )
        distance = center.distance(closest)
        if distance > radius + self.tolerance:
            return NO_COLLISION
        return CollisionResult(
            occurred=True,
            point=closest,
            normal=closest.subtract(center).normalize(),
            distance=distance,
        )

    def point_to_line_segment(
        self,
        point: Vector2D,
        start: Vector2D,
        end: Vector2D,
        threshold: float = 1.0,
    ) -> CollisionResult:
        """Normal points from the closest segment point towards *point*."""
        closest = math_utils.closest_point_on_segment(point, start, end)
        distance = point.distance(closest)
        if distance > threshold + self.tolerance:
            return NO_COLLISION
        return CollisionResult(
            occurred=True,
            point=closest,
            normal=point.subtract(closest).normalize(),
            distance=distance,
        )

    def moving_circle_to_circle(
        self,
        center1: Vector2D,
        velocity1: Vector2D,
        radius1: float,
        center2: Vector2D,
        velocity2: Vector2D,
        radius2: float,
        delta_time: float,
    ) -> CollisionResult:
        """Swept circle test over one frame.

        Velocities are pixels per second and *delta_time* is milliseconds.
        Solves ``|p + v t| = r1 + r2`` for the earliest ``t`` inside the
        frame.
        """
        rel_velocity = velocity1.subtract(velocity2)
        if rel_velocity.magnitude() < _MIN_RELATIVE_SPEED:
            return self.circle_to_circle(center1, radius1, center2, radius2)

        rel_position = center1.subtract(center2)
        total_radius = radius1 + radius2
        a = rel_velocity.magnitude_squared()
        b = 2 * rel_position.dot(rel_velocity)
        c = rel_position.magnitude_squared() - total_radius * total_radius

        discriminant = b * b - 4 * a * c
        if discriminant < 0:
            return NO_COLLISION

        root = math.sqrt(discriminant)
        frame = delta_time / 1000
        hit_time = None
        for t in ((-b - root) / (2 * a), (-b + root) / (2 * a)):
            if 0 <= t <= frame:
                hit_time = t
                break
        if hit_time is None:
            return NO_COLLISION

        at1 = center1.add(velocity1.multiply(hit_time))
        at2 = center2.add(velocity2.multiply(hit_time))
        normal = at2.subtract(at1).normalize()
        return CollisionResult(
            occurred=True,
            point=at1.add(normal.multiply(radius1)),
            normal=normal,
            distance=0.0,
        )

    def snake_to_food(self, worm: Worm, food: Food) -> CollisionResult:
        if not food.is_active:
            return NO_COLLISION
        return self.circle_to_circle(
            worm.head, worm.radius, food.position, food.effective_radius(),
        )

    def snake_self_collision(
        self, worm: Worm, spatial_grid: SpatialGrid | None = None,
    ) -> CollisionResult:
        """Test the head against every segment from index 3 onward.

        When *spatial_grid* is given it is rebuilt from the body and used
        to discard far-away segments first; the answer is the same.
        """
        if len(worm.segments) <= SELF_COLLISION_SKIP:
            return NO_COLLISION

        head = worm.head
        radius = worm.radius
        body = worm.segments[SELF_COLLISION_SKIP:]

        candidates: set[Vector2D] | None = None
        if spatial_grid is not None:
            spatial_grid.clear()
            for segment in body:
                spatial_grid.insert(segment)
            candidates = set(
                spatial_grid.nearby_points(head, 2 * radius + self.tolerance),
            )

        for segment in body:
            if candidates is not None and segment not in candidates:
                continue
            result = self.circle_to_circle(head, radius, segment, radius)
            if result.occurred:
                return result
        return NO_COLLISION

    def snake_to_boundary(
        self, worm: Worm, bounds: Rectangle,
    ) -> CollisionResult:
        """Detect the head circle touching or crossing any arena edge."""
        head = worm.head
        radius = worm.radius
        top_left = Vector2D(bounds.x, bounds.y)
        top_right = Vector2D(bounds.right, bounds.y)
        bottom_right = Vector2D(bounds.right, bounds.bottom)
        bottom_left = Vector2D(bounds.x, bounds.bottom)
        edges = (
            (top_left, top_right),
            (top_right, bottom_right),
            (bottom_right, bottom_left),
            (top_left, bottom_left),
        )
        for start, end in edges:
            result = self.point_to_line_segment(head, start, end, radius)
            if result.occurred:
                return result

        if (
            head.x - radius < bounds.x
            or head.x + radius > bounds.right
            or head.y - radius < bounds.y
            or head.y + radius > bounds.bottom
        ):
            return CollisionResult(
                occurred=True,
                point=head,
                normal=bounds.center.subtract(head).normalize(),
                distance=0.0,
            )
        return NO_COLLISION

    def create_spatial_grid(
        self, bounds: Rectangle, cell_size: float,
    ) -> SpatialGrid:
        return SpatialGrid(bounds, cell_size)


class SpatialGrid:
    """Uniform bucket grid for broad-phase neighbour lookups.

    Points outside *bounds* are still bucketed (cells may have negative
    indices), so queries never miss a point.
    """

    def __init__(self, bounds: Rectangle, cell_size: float) -> None:
        if cell_size <= 0:
            raise ValueError("cell_size must be positive.")
        self.bounds = bounds
        self.cell_size = cell_size
        self._cells: defaultdict[tuple[int, int], list[Vector2D]] = (
            defaultdict(list)
        )

    def cell_of(self, position: Vector2D) -> tuple[int, int]:
        return (
            math.floor((position.x - self.bounds.x) / self.cell_size),
            math.floor((position.y - self.bounds.y) / self.cell_size),
        )

    def clear(self) -> None:
        self._cells.clear()

    def insert(self, position: Vector2D) -> None:
        self._cells[self.cell_of(position)].append(position)

    def __len__(self) -> int:
        return sum(len(points) for points in self._cells.values())

    def nearby_points(self, position: Vector2D, radius: float) -> list[Vector2D]:
        """Return every point in the cells overlapping *radius* of *position*.

        This is a superset of the points actually within *radius*.
        """
        ring = math.ceil(radius / self.cell_size)
        cx, cy = self.cell_of(position)
        nearby: list[Vector2D] = []
        for dx in range(-ring, ring + 1):
            for dy in range(-ring, ring + 1):
                points = self._cells.get((cx + dx, cy + dy))
                if points:
                    nearby.extend(points)
        return nearby
