from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pygame.math import Vector2

if TYPE_CHECKING:
    from ..core.rng import RandomSource

TWO_PI = 2.0 * math.pi


def add(a: Vector2, b: Vector2) -> Vector2:
    return Vector2(a.x + b.x, a.y + b.y)


def sub(a: Vector2, b: Vector2) -> Vector2:
    return Vector2(a.x - b.x, a.y - b.y)


def scale(vector: Vector2, factor: float) -> Vector2:
    return Vector2(vector.x * factor, vector.y * factor)


def magnitude(vector: Vector2) -> float:
    return math.sqrt(vector.x * vector.x + vector.y * vector.y)


def unit(vector: Vector2) -> Vector2:
    mag = magnitude(vector)
    if mag == 0.0:
        raise ValueError("Can't normalize a zero-length vector")
    return Vector2(vector.x / mag, vector.y / mag)


def distance(a: Vector2, b: Vector2) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def direction(origin: Vector2, target: Vector2) -> Vector2:
    """Unit vector pointing from ``origin`` towards ``target``.

    Raises ``ValueError`` when both points coincide.
    """
    return unit(sub(target, origin))


def angle_between(a: Vector2, b: Vector2) -> float:
    """Signed rotation from the heading of ``a`` to the heading of ``b``, in ``[0, 2π)``."""
    angle = math.atan2(b.y, b.x) - math.atan2(a.y, a.x)
    if angle < 0.0:
        angle += TWO_PI
    # atan2 rounding can land exactly on 2π after the shift
    if angle >= TWO_PI:
        angle -= TWO_PI
    return angle


def random_unit(rng: RandomSource) -> Vector2:
    # Square-sampled components, so headings along the diagonals are slightly favoured.
    while True:
        candidate = Vector2(rng.next_float() - 0.5, rng.next_float() - 0.5)
        if candidate.x != 0.0 or candidate.y != 0.0:
            return unit(candidate)
