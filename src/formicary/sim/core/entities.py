from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from pygame.math import Vector2

NEST_COLOR = "nest"
ANT_COLOR = "ant"
SNACK_COLOR = "snack"
TRAIL_COLOR = "trail"


class Renderable(Protocol):
    """Anything a presentation layer can draw as a centred square."""

    @property
    def position(self) -> Vector2: ...

    @property
    def size(self) -> float: ...

    @property
    def color(self) -> str: ...


@dataclass(frozen=True, slots=True)
class Nest:
    position: Vector2
    size: float = 10.0

    @property
    def color(self) -> str:
        return NEST_COLOR


@dataclass(slots=True)
class Snack:
    position: Vector2
    value: int
    size: float = 6.0

    @property
    def color(self) -> str:
        return SNACK_COLOR

    @property
    def depleted(self) -> bool:
        return self.value <= 0


@dataclass(slots=True)
class Trail:
    position: Vector2
    lifetime: float
    nest_distance: float
    size: float = 1.0

    @property
    def color(self) -> str:
        return TRAIL_COLOR

    @property
    def expired(self) -> bool:
        return self.lifetime <= 0.0
