from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    dt: float
    ants: int
    carrying: int
    snacks: int
    snack_value: int
    trails: int
    pickups: int
    deliveries: int
    trails_laid: int
    recoveries: int
    snacks_spawned: int
    snacks_depleted: int
    trails_expired: int
    fps: float
    tick_duration_ms: float = 0.0
