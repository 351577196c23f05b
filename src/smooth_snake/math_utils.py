"""Scalar and small geometric helpers shared by the simulation."""

from __future__ import annotations

import math

import numpy as np

from smooth_snake.vector import Vector2D


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* into ``[lo, hi]``."""
    return min(max(value, lo), hi)


def lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


def map_range(
    value: float,
    from_min: float,
    from_max: float,
    to_min: float,
    to_max: float,
) -> float:
    """Remap *value* from one range onto another (no clamping)."""
    normalized = (value - from_min) / (from_max - from_min)
    return to_min + normalized * (to_max - to_min)


def random_float(
    rng: np.random.Generator, lo: float = 0.0, hi: float = 1.0,
) -> float:
    """Uniform float in ``[lo, hi)``."""
    return float(rng.uniform(lo, hi)) if hi > lo else float(lo)


def random_int(rng: np.random.Generator, lo: int, hi: int) -> int:
    """Uniform integer in ``[lo, hi]`` (both ends inclusive)."""
    return int(rng.integers(lo, hi, endpoint=True))


def wrap(value: float, lo: float, hi: float) -> float:
    """Wrap *value* into ``[lo, hi)``. An empty range yields *lo*."""
    span = hi - lo
    if span <= 0:
        return lo
    wrapped = (value - lo) % span + lo
    # Float modulo can round up to exactly ``hi`` for tiny negatives.
    return lo if wrapped >= hi else wrapped


def angle_between(p1: Vector2D, p2: Vector2D) -> float:
    """Angle of the line from *p1* towards *p2*."""
    return math.atan2(p2.y - p1.y, p2.x - p1.x)


def angle_distance(angle1: float, angle2: float) -> float:
    """Shortest signed rotation from *angle1* to *angle2*, in (-pi, pi]."""
    diff = math.remainder(angle2 - angle1, 2 * math.pi)
    if diff <= -math.pi:
        diff += 2 * math.pi
    return diff


def smooth_step(t: float) -> float:
    t = clamp(t, 0.0, 1.0)
    return t * t * (3 - 2 * t)


def sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def deg_to_rad(degrees: float) -> float:
    return degrees * (math.pi / 180)


def rad_to_deg(radians: float) -> float:
    return radians * (180 / math.pi)


def approximately(a: float, b: float, tolerance: float = 1e-4) -> bool:
    return abs(a - b) < tolerance


def closest_point_on_segment(
    point: Vector2D, start: Vector2D, end: Vector2D,
) -> Vector2D:
    """Project *point* onto the segment, clamped to its endpoints.

    A zero-length segment returns *start*.
    """
    seg = end.subtract(start)
    length_sq = seg.magnitude_squared()
    if length_sq == 0:
        return start
    t = clamp(point.subtract(start).dot(seg) / length_sq, 0.0, 1.0)
    return start.add(seg.multiply(t))


def point_to_line_distance(
    point: Vector2D, start: Vector2D, end: Vector2D,
) -> float:
    """Distance from *point* to the segment ``start``–``end``."""
    return point.distance(closest_point_on_segment(point, start, end))


def point_in_circle(point: Vector2D, center: Vector2D, radius: float) -> bool:
    return point.distance_squared(center) <= radius * radius


def circles_intersect(
    center1: Vector2D, radius1: float, center2: Vector2D, radius2: float,
) -> bool:
    return center1.distance(center2) <= radius1 + radius2


def point_in_rectangle(
    point: Vector2D, x: float, y: float, width: float, height: float,
) -> bool:
    return x <= point.x <= x + width and y <= point.y <= y + height
