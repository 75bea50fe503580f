from __future__ import annotations

import logging
import math
from collections import Counter
from time import perf_counter
from typing import Any, Dict, List

from pygame.math import Vector2

from ..systems import foraging, metrics as metrics_system
from ..types.metrics import TickMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata, SnapshotWorld
from ..utils.math2d import random_unit
from .agent import Ant, AntState
from .clock import FrameClock, FrameRateEstimate
from .config import SimulationConfig
from .entities import Nest
from .rng import DeterministicRng, RandomSource
from .snacks import SnackRegistry
from .trails import TrailRegistry

logger = logging.getLogger(__name__)


class World:
    """Owns the nest, the colony and both registries, and advances them one tick at a time."""

    def __init__(self, config: SimulationConfig, rng: RandomSource | None = None):
        config.validate()
        self._config = config
        self._rng = rng if rng is not None else DeterministicRng(config.seed)
        nest_x, nest_y = config.nest_position()
        self._nest = Nest(position=Vector2(nest_x, nest_y), size=config.nest.size)
        self._snacks = SnackRegistry(self._rng, max_value=config.snacks.max_value, size=config.snacks.size)
        self._trails = TrailRegistry(self._nest.position, lifetime=config.trails.lifetime, size=config.trails.size)
        self._ants: List[Ant] = []
        self._fps = FrameRateEstimate()
        self._clock = FrameClock()
        self._tick = 0
        self._elapsed = 0.0
        self._metrics: TickMetrics | None = None
        self._bootstrap()

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def rng(self) -> RandomSource:
        return self._rng

    @property
    def nest(self) -> Nest:
        return self._nest

    @property
    def ants(self) -> List[Ant]:
        return self._ants

    @property
    def snacks(self) -> SnackRegistry:
        return self._snacks

    @property
    def trails(self) -> TrailRegistry:
        return self._trails

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def fps(self) -> float:
        return self._fps.value

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    def reset(self) -> None:
        self._rng.reset()
        self._ants.clear()
        self._snacks.clear()
        self._trails.clear()
        self._fps.reset()
        self._clock = FrameClock()
        self._tick = 0
        self._elapsed = 0.0
        self._metrics = None
        self._bootstrap()

    def random_position(self) -> Vector2:
        return Vector2(
            self._rng.next_int(int(self._config.world_width)),
            self._rng.next_int(int(self._config.world_height)),
        )

    def add_ant(self, position: Vector2, velocity: Vector2 | None = None) -> Ant:
        colony = self._config.colony
        ant = Ant(
            id=len(self._ants),
            position=Vector2(position),
            velocity=Vector2(velocity) if velocity is not None else random_unit(self._rng),
            speed=colony.speed,
            sensor_range=colony.sensor_range,
            size=colony.ant_size,
            state=AntState.SEARCHING,
        )
        self._ants.append(ant)
        return ant

    def step(self) -> TickMetrics:
        return self.advance(self._config.time_step)

    def advance_frame(self, timestamp_ms: float) -> TickMetrics:
        """Advance by the time elapsed since the previous host frame timestamp."""
        return self.advance(self._clock.tick(timestamp_ms))

    def advance(self, dt: float) -> TickMetrics:
        if not math.isfinite(dt) or dt < 0:
            raise ValueError(f"dt must be a finite non-negative number, got {dt}")
        start = perf_counter()

        actions: Counter = Counter()
        for ant in self._ants:
            actions[foraging.update(self, ant, dt)] += 1

        self._trails.tick(dt)
        snacks_depleted = self._snacks.cull()
        spawned = self._snacks.replenish(self._config.snacks.target_count, self.random_position)
        trails_expired = self._trails.cull()
        self._fps.update(dt)

        self._elapsed += dt
        tick = self._tick
        self._tick += 1
        duration_ms = (perf_counter() - start) * 1000.0
        self._metrics = metrics_system.create_metrics(
            self,
            tick,
            dt,
            actions,
            snacks_spawned=0 if spawned is None else 1,
            snacks_depleted=snacks_depleted,
            trails_expired=trails_expired,
            duration_ms=duration_ms,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "tick %d dt=%.4f carrying=%d snacks=%d trails=%d pickups=%d deliveries=%d",
                tick,
                dt,
                self._metrics.carrying,
                self._metrics.snacks,
                self._metrics.trails,
                self._metrics.pickups,
                self._metrics.deliveries,
            )
        return self._metrics

    def snapshot(self) -> Snapshot:
        metrics = self._metrics if self._metrics is not None else self._idle_metrics()
        time_step = self._config.time_step
        metadata = SnapshotMetadata(
            sim_dt=time_step,
            tick_rate=0.0 if time_step <= 0 else 1.0 / time_step,
            seed=self._config.seed,
            config_version=self._config.config_version,
        )
        nest = self._nest
        return Snapshot(
            tick=self._tick,
            elapsed=self._elapsed,
            metrics=metrics,
            nest={"x": nest.position.x, "y": nest.position.y, "size": nest.size, "color": nest.color},
            ants=[self._ant_snapshot(ant) for ant in self._ants],
            snacks=[
                {
                    "x": snack.position.x,
                    "y": snack.position.y,
                    "size": snack.size,
                    "color": snack.color,
                    "value": snack.value,
                }
                for snack in self._snacks
            ],
            trails=[
                {
                    "x": trail.position.x,
                    "y": trail.position.y,
                    "size": trail.size,
                    "color": trail.color,
                    "lifetime": trail.lifetime,
                    "nest_distance": trail.nest_distance,
                }
                for trail in self._trails
            ],
            world=SnapshotWorld(width=self._config.world_width, height=self._config.world_height),
            metadata=metadata,
        )

    def _ant_snapshot(self, ant: Ant) -> Dict[str, Any]:
        return {
            "id": ant.id,
            "x": ant.position.x,
            "y": ant.position.y,
            "vx": ant.velocity.x,
            "vy": ant.velocity.y,
            "size": ant.size,
            "color": ant.color,
            "carrying": ant.carries_snack,
        }

    def _idle_metrics(self) -> TickMetrics:
        return metrics_system.create_metrics(
            self,
            self._tick,
            0.0,
            Counter(),
            snacks_spawned=0,
            snacks_depleted=0,
            trails_expired=0,
            duration_ms=0.0,
        )

    def _bootstrap(self) -> None:
        for _ in range(self._config.colony.ant_count):
            self.add_ant(self._nest.position)
        for _ in range(self._config.snacks.target_count):
            self._snacks.spawn_at(self.random_position())
        logger.info(
            "world ready: %d ants, %d snacks, nest at (%.1f, %.1f), seed=%d",
            len(self._ants),
            len(self._snacks),
            self._nest.position.x,
            self._nest.position.y,
            self._config.seed,
        )
