from __future__ import annotations

import math


class FrameClock:
    """Turns host frame timestamps (milliseconds) into simulation steps (seconds)."""

    def __init__(self, start_ms: float = 0.0):
        self._last_ms = start_ms

    def tick(self, timestamp_ms: float) -> float:
        if timestamp_ms < self._last_ms:
            raise ValueError(
                f"frame timestamp went backwards: {timestamp_ms} < {self._last_ms}"
            )
        delta_ms = timestamp_ms - self._last_ms
        self._last_ms = timestamp_ms
        return delta_ms / 1000.0


class FrameRateEstimate:
    def __init__(self, initial: float = 60.0):
        self._initial = initial
        self.value = initial

    def reset(self) -> None:
        self.value = self._initial

    def update(self, dt: float) -> float:
        if dt > 0.0:
            rate = 1.0 / dt
            # subnormal steps overflow to inf
            if math.isfinite(rate):
                self.value = (self.value + math.floor(rate)) / 2.0
        return self.value
