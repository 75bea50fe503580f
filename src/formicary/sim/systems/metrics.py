from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from ..types.metrics import TickMetrics
from .foraging import Action

if TYPE_CHECKING:
    from ..core.world import World


def create_metrics(
    world: World,
    tick: int,
    dt: float,
    actions: Counter,
    snacks_spawned: int,
    snacks_depleted: int,
    trails_expired: int,
    duration_ms: float,
) -> TickMetrics:
    carrying = sum(1 for ant in world.ants if ant.carries_snack)
    return TickMetrics(
        tick=tick,
        dt=dt,
        ants=len(world.ants),
        carrying=carrying,
        snacks=len(world.snacks),
        snack_value=world.snacks.total_value(),
        trails=len(world.trails),
        pickups=actions[Action.PICKED_UP],
        deliveries=actions[Action.DELIVERED],
        trails_laid=actions[Action.LAID_TRAIL],
        recoveries=actions[Action.RECOVER],
        snacks_spawned=snacks_spawned,
        snacks_depleted=snacks_depleted,
        trails_expired=trails_expired,
        fps=world.fps,
        tick_duration_ms=duration_ms,
    )
