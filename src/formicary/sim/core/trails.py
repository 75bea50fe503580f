from __future__ import annotations

from typing import Iterable, Iterator, List

from pygame.math import Vector2

from ..utils.math2d import distance
from .entities import Trail


def select_trail(candidates: Iterable[Trail]) -> Trail | None:
    """Pick the trail an ant should follow.

    The farthest trail from the nest wins; among equally distant trails the
    one with the most remaining lifetime wins. Both sorts are stable, so a
    complete tie goes to the later trail in registry order.
    """
    ordered = sorted(candidates, key=lambda trail: trail.lifetime)
    ordered.sort(key=lambda trail: trail.nest_distance)
    if not ordered:
        return None
    return ordered[-1]


class TrailRegistry:
    def __init__(self, nest_position: Vector2, lifetime: float = 10.0, size: float = 1.0):
        self._nest_position = Vector2(nest_position)
        self._lifetime = lifetime
        self._size = size
        self._trails: List[Trail] = []

    def __iter__(self) -> Iterator[Trail]:
        return iter(self._trails)

    def __len__(self) -> int:
        return len(self._trails)

    def clear(self) -> None:
        self._trails.clear()

    def deposit(self, position: Vector2) -> Trail:
        pos = Vector2(position)
        trail = Trail(
            position=pos,
            lifetime=self._lifetime,
            nest_distance=distance(pos, self._nest_position),
            size=self._size,
        )
        self._trails.append(trail)
        return trail

    def tick(self, dt: float) -> None:
        for trail in self._trails:
            trail.lifetime -= dt

    def cull(self) -> int:
        before = len(self._trails)
        self._trails = [trail for trail in self._trails if trail.lifetime > 0.0]
        return before - len(self._trails)

    def query_near(self, position: Vector2, radius: float) -> List[Trail]:
        return [trail for trail in self._trails if distance(position, trail.position) < radius]

    def select_near(self, position: Vector2, radius: float) -> Trail | None:
        return select_trail(self.query_near(position, radius))
