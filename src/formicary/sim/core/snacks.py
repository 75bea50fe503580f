from __future__ import annotations

from typing import Callable, Iterator, List

from pygame.math import Vector2

from .entities import Snack
from .rng import RandomSource


class SnackRegistry:
    def __init__(self, rng: RandomSource, max_value: int = 25, size: float = 6.0):
        self._rng = rng
        self._max_value = max_value
        self._size = size
        self._snacks: List[Snack] = []

    def __iter__(self) -> Iterator[Snack]:
        return iter(self._snacks)

    def __len__(self) -> int:
        return len(self._snacks)

    def clear(self) -> None:
        self._snacks.clear()

    def spawn_at(self, position: Vector2, value: int | None = None) -> Snack:
        if value is None:
            value = 1 + self._rng.next_int(self._max_value - 1)
        snack = Snack(position=Vector2(position), value=value, size=self._size)
        self._snacks.append(snack)
        return snack

    def decrement(self, snack: Snack) -> None:
        if snack.value > 0:
            snack.value -= 1

    def cull(self) -> int:
        before = len(self._snacks)
        self._snacks = [snack for snack in self._snacks if snack.value > 0]
        return before - len(self._snacks)

    def replenish(self, target_count: int, random_position: Callable[[], Vector2]) -> Snack | None:
        """Add one snack if the registry is below ``target_count``."""
        if len(self._snacks) >= target_count:
            return None
        return self.spawn_at(random_position())

    def total_value(self) -> int:
        return sum(snack.value for snack in self._snacks)
