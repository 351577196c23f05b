"""Immutable 2D vector and rectangle value types."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, slots=True)
class Vector2D:
    """Immutable 2D vector in screen coordinates (+y points down).

    Every operation returns a new instance, so vectors can be shared
    freely between the worm, food and collision code.
    """

    x: float = 0.0
    y: float = 0.0

    def add(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x + other.x, self.y + other.y)

    def subtract(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x - other.x, self.y - other.y)

    def multiply(self, scalar: float) -> Vector2D:
        return Vector2D(self.x * scalar, self.y * scalar)

    def divide(self, scalar: float) -> Vector2D:
        """Divide by *scalar*; raises ``ZeroDivisionError`` on zero."""
        if scalar == 0:
            raise ZeroDivisionError("Cannot divide a vector by zero.")
        return Vector2D(self.x / scalar, self.y / scalar)

    __add__ = add
    __sub__ = subtract
    __mul__ = multiply
    __rmul__ = multiply
    __truediv__ = divide

    def __neg__(self) -> Vector2D:
        return Vector2D(-self.x, -self.y)

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def normalize(self) -> Vector2D:
        """Return the unit vector, or the zero vector for zero input."""
        mag = self.magnitude()
        if mag == 0:
            return Vector2D(0.0, 0.0)
        return self.divide(mag)

    def distance(self, other: Vector2D) -> float:
        return self.subtract(other).magnitude()

    def distance_squared(self, other: Vector2D) -> float:
        return self.subtract(other).magnitude_squared()

    def dot(self, other: Vector2D) -> float:
        return self.x * other.x + self.y * other.y

    def angle(self) -> float:
        """Heading in radians, via ``atan2(y, x)``."""
        return math.atan2(self.y, self.x)

    def rotate(self, angle: float) -> Vector2D:
        cos = math.cos(angle)
        sin = math.sin(angle)
        return Vector2D(self.x * cos - self.y * sin, self.x * sin + self.y * cos)

    def lerp(self, other: Vector2D, t: float) -> Vector2D:
        """Linear interpolation; ``t=0`` gives self, ``t=1`` gives *other*."""
        if t == 1:
            return other
        return self.add(other.subtract(self).multiply(t))

    def equals(self, other: Vector2D, tolerance: float = 1e-4) -> bool:
        return (
            abs(self.x - other.x) < tolerance
            and abs(self.y - other.y) < tolerance
        )

    def to_list(self) -> list[float]:
        return [self.x, self.y]

    def __str__(self) -> str:
        return f"Vector2D({self.x:.2f}, {self.y:.2f})"

    @staticmethod
    def zero() -> Vector2D:
        return Vector2D(0.0, 0.0)

    @staticmethod
    def one() -> Vector2D:
        return Vector2D(1.0, 1.0)

    @staticmethod
    def up() -> Vector2D:
        return Vector2D(0.0, -1.0)

    @staticmethod
    def down() -> Vector2D:
        return Vector2D(0.0, 1.0)

    @staticmethod
    def left() -> Vector2D:
        return Vector2D(-1.0, 0.0)

    @staticmethod
    def right() -> Vector2D:
        return Vector2D(1.0, 0.0)

    @staticmethod
    def from_angle(angle: float, magnitude: float = 1.0) -> Vector2D:
        return Vector2D(math.cos(angle) * magnitude, math.sin(angle) * magnitude)

    @staticmethod
    def random(rng: np.random.Generator | None = None) -> Vector2D:
        """Return a random unit vector."""
        rng = rng if rng is not None else np.random.default_rng()
        return Vector2D.from_angle(float(rng.uniform(0.0, 2 * math.pi)))


@dataclass(frozen=True, slots=True)
class Rectangle:
    """Axis-aligned rectangle anchored at its top-left corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Vector2D:
        return Vector2D(self.x + self.width / 2, self.y + self.height / 2)

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }
