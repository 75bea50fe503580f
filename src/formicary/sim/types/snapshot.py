from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from .metrics import TickMetrics


@dataclass(slots=True)
class Snapshot:
    tick: int
    elapsed: float
    metrics: TickMetrics
    nest: Dict[str, Any]
    ants: List[Dict[str, Any]]
    snacks: List[Dict[str, Any]]
    trails: List[Dict[str, Any]]
    world: "SnapshotWorld"
    metadata: "SnapshotMetadata"


@dataclass(slots=True)
class SnapshotWorld:
    width: float
    height: float


@dataclass(slots=True)
class SnapshotMetadata:
    sim_dt: float
    tick_rate: float
    seed: int
    config_version: str
