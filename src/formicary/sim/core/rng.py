from __future__ import annotations

import random
from typing import Protocol


class RandomSource(Protocol):
    def next_float(self) -> float: ...

    def next_int(self, max_value: int) -> int: ...

    def reset(self) -> None: ...


class DeterministicRng:
    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_float(self) -> float:
        return self._random.random()

    def next_int(self, max_value: int) -> int:
        """Integer in ``[0, max_value]``, both ends inclusive."""
        return self._random.randint(0, max_value)
