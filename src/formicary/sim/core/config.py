from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml


class ConfigError(ValueError):
    pass


@dataclass
class ColonyConfig:
    ant_count: int = 50
    speed: float = 25.0
    sensor_range: float = 20.0
    ant_size: float = 3.0
    # Ants that see nothing beyond this radius head for a random point.
    far_from_home_radius: float = 333.0


@dataclass
class SnackConfig:
    target_count: int = 25
    max_value: int = 25
    size: float = 6.0


@dataclass
class TrailConfig:
    lifetime: float = 10.0
    size: float = 1.0


@dataclass
class NestConfig:
    size: float = 10.0
    position: Optional[tuple[float, float]] = None


@dataclass
class SimulationConfig:
    time_step: float = 1.0 / 60.0
    world_width: float = 800.0
    world_height: float = 600.0
    seed: int = 42
    config_version: str = "v1"
    colony: ColonyConfig = field(default_factory=ColonyConfig)
    snacks: SnackConfig = field(default_factory=SnackConfig)
    trails: TrailConfig = field(default_factory=TrailConfig)
    nest: NestConfig = field(default_factory=NestConfig)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)

    def nest_position(self) -> tuple[float, float]:
        if self.nest.position is not None:
            return self.nest.position
        return (self.world_width / 2.0, self.world_height / 2.0)

    def validate(self) -> None:
        colony = self.colony
        _require_int("colony.ant_count", colony.ant_count)
        _require_int("snacks.target_count", self.snacks.target_count)
        _require_int("snacks.max_value", self.snacks.max_value)
        _require_non_negative("colony.ant_count", colony.ant_count)
        _require_non_negative("colony.speed", colony.speed)
        _require_non_negative("colony.sensor_range", colony.sensor_range)
        _require_non_negative("colony.ant_size", colony.ant_size)
        _require_non_negative("colony.far_from_home_radius", colony.far_from_home_radius)
        _require_non_negative("snacks.target_count", self.snacks.target_count)
        _require_non_negative("snacks.size", self.snacks.size)
        if self.snacks.max_value < 1:
            raise ConfigError(f"snacks.max_value must be at least 1, got {self.snacks.max_value}")
        _require_non_negative("trails.lifetime", self.trails.lifetime)
        _require_non_negative("trails.size", self.trails.size)
        _require_non_negative("nest.size", self.nest.size)
        _require_non_negative("time_step", self.time_step)
        if self.world_width <= 0 or self.world_height <= 0:
            raise ConfigError(
                f"world bounds must be positive, got {self.world_width}x{self.world_height}"
            )


def _require_int(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")


def _require_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ConfigError(f"{name} must be non-negative, got {value}")


def _section(cls: type, raw: Any, name: str) -> Any:
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise ConfigError(f"{name} must be a mapping, got {type(raw).__name__}")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"unknown keys in {name}: {', '.join(unknown)}")
    return cls(**raw)


def _pair(value: Any, name: str) -> Optional[tuple[float, float]]:
    if value is None:
        return None
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return (float(value[0]), float(value[1]))
    raise ConfigError(f"{name} must be a pair of numbers, got {value!r}")


def load_config(raw: dict) -> SimulationConfig:
    sections = {"colony", "snacks", "trails", "nest"}
    colony = _section(ColonyConfig, raw.get("colony"), "colony")
    snacks = _section(SnackConfig, raw.get("snacks"), "snacks")
    trails = _section(TrailConfig, raw.get("trails"), "trails")
    nest_raw = raw.get("nest")
    if isinstance(nest_raw, dict) and "position" in nest_raw:
        nest_raw = {**nest_raw, "position": _pair(nest_raw["position"], "nest.position")}
    nest = _section(NestConfig, nest_raw, "nest")

    sim_values = {k: v for k, v in raw.items() if k not in sections}
    known = {f.name for f in fields(SimulationConfig)} - sections
    unknown = sorted(set(sim_values) - known)
    if unknown:
        raise ConfigError(f"unknown keys in simulation config: {', '.join(unknown)}")

    config = SimulationConfig(colony=colony, snacks=snacks, trails=trails, nest=nest, **sim_values)
    config.validate()
    return config
