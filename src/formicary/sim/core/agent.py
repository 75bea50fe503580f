from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pygame.math import Vector2

from .entities import ANT_COLOR


class AntState(str, Enum):
    SEARCHING = "Searching"
    CARRYING = "Carrying"


@dataclass(slots=True)
class Ant:
    id: int
    position: Vector2
    velocity: Vector2
    speed: float = 25.0
    sensor_range: float = 20.0
    size: float = 3.0
    state: AntState = AntState.SEARCHING

    @property
    def carries_snack(self) -> bool:
        return self.state is AntState.CARRYING

    @property
    def color(self) -> str:
        return ANT_COLOR
