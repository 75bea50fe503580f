from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Union

from pygame.math import Vector2

from ..core.agent import Ant, AntState
from ..core.entities import Snack, Trail
from ..utils.math2d import add, angle_between, direction, distance, random_unit, scale

if TYPE_CHECKING:
    from ..core.world import World

# Trail approach is treated as "from behind" when the two headings are this close to opposite.
_BEHIND_LOW = 0.8 * math.pi
_BEHIND_HIGH = 1.2 * math.pi


class ScanKind(str, Enum):
    SNACK = "snack"
    TRAIL = "trail"
    NOTHING = "nothing"


@dataclass(frozen=True, slots=True)
class ScanResult:
    kind: ScanKind
    target: Union[Snack, Trail, None] = None


class Action(str, Enum):
    DELIVERED = "delivered"
    LAID_TRAIL = "laid_trail"
    PICKED_UP = "picked_up"
    TO_SNACK = "to_snack"
    ALONG_TRAIL = "along_trail"
    TO_TRAIL = "to_trail"
    RECOVER = "recover"
    KEEP_HEADING = "keep_heading"


NOTHING = ScanResult(ScanKind.NOTHING)


def scan(world: World, ant: Ant) -> ScanResult:
    position = ant.position
    sensor_range = ant.sensor_range
    for snack in world.snacks:
        if snack.value > 0 and distance(position, snack.position) < sensor_range:
            return ScanResult(ScanKind.SNACK, snack)
    trail = world.trails.select_near(position, sensor_range)
    if trail is not None:
        return ScanResult(ScanKind.TRAIL, trail)
    return NOTHING


def _heading(world: World, origin: Vector2, target: Vector2) -> Vector2:
    if origin == target:
        return random_unit(world.rng)
    return direction(origin, target)


def decide(world: World, ant: Ant) -> Action:
    """Sense once and update the ant's carry state and heading."""
    found = scan(world, ant)
    nest = world.nest.position

    if ant.state is AntState.CARRYING:
        if distance(ant.position, nest) < ant.size:
            ant.state = AntState.SEARCHING
            ant.velocity = random_unit(world.rng)
            return Action.DELIVERED
        if found.kind is ScanKind.NOTHING:
            world.trails.deposit(ant.position)
            return Action.LAID_TRAIL
        return Action.KEEP_HEADING

    if found.kind is ScanKind.SNACK:
        snack = found.target
        if distance(ant.position, snack.position) < ant.size:
            ant.state = AntState.CARRYING
            ant.velocity = _heading(world, ant.position, nest)
            world.snacks.decrement(snack)
            return Action.PICKED_UP
        ant.velocity = _heading(world, ant.position, snack.position)
        return Action.TO_SNACK

    if found.kind is ScanKind.TRAIL:
        trail = found.target
        nest_to_trail = _heading(world, nest, trail.position)
        if distance(ant.position, trail.position) < ant.size:
            ant.velocity = nest_to_trail
            return Action.ALONG_TRAIL
        this_to_trail = _heading(world, ant.position, trail.position)
        angle = angle_between(this_to_trail, nest_to_trail)
        if _BEHIND_LOW < angle < _BEHIND_HIGH:
            ant.velocity = nest_to_trail
        else:
            ant.velocity = this_to_trail
        return Action.TO_TRAIL

    if distance(ant.position, nest) > world.config.colony.far_from_home_radius:
        ant.velocity = _heading(world, ant.position, world.random_position())
        return Action.RECOVER
    return Action.KEEP_HEADING


def move(ant: Ant, dt: float) -> None:
    ant.position = add(ant.position, scale(ant.velocity, ant.speed * dt))


def update(world: World, ant: Ant, dt: float) -> Action:
    action = decide(world, ant)
    move(ant, dt)
    return action
