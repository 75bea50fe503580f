from __future__ import annotations

import argparse
import csv
import json
import logging
import math
from pathlib import Path
from typing import Optional

from ..sim.core.config import SimulationConfig
from ..sim.core.world import World
from ..sim.types.metrics import TickMetrics

logger = logging.getLogger(__name__)

_BASIC_HEADER = [
    "tick",
    "ants",
    "carrying",
    "snacks",
    "trails",
    "pickups",
    "deliveries",
    "tick_ms",
]

_DETAILED_HEADER = [
    "tick",
    "ants",
    "carrying",
    "snacks",
    "trails",
    "pickups",
    "deliveries",
    "tick_ms",
    "elapsed",
    "snack_value",
    "trails_laid",
    "trails_expired",
    "snacks_spawned",
    "snacks_depleted",
    "recoveries",
    "carrying_ratio",
    "avg_nest_distance",
    "max_nest_distance",
    "ants_out_of_bounds",
    "avg_trail_lifetime",
    "fps",
]


def _format_basic_row(metrics: TickMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.tick,
        metrics.ants,
        metrics.carrying,
        metrics.snacks,
        metrics.trails,
        metrics.pickups,
        metrics.deliveries,
        f"{tick_ms:.3f}",
    ]


def _format_detailed_row(world: World, metrics: TickMetrics, tick_ms: float) -> list[object]:
    ants = metrics.ants
    config = world.config
    nest = world.nest.position
    if ants <= 0:
        carrying_ratio = 0.0
        avg_nest_distance = 0.0
        max_nest_distance = 0.0
        out_of_bounds = 0
    else:
        carrying_ratio = metrics.carrying / ants
        distance_sum = 0.0
        max_nest_distance = 0.0
        out_of_bounds = 0
        for ant in world.ants:
            dist = math.hypot(ant.position.x - nest.x, ant.position.y - nest.y)
            distance_sum += dist
            if dist > max_nest_distance:
                max_nest_distance = dist
            if not (0.0 <= ant.position.x <= config.world_width and 0.0 <= ant.position.y <= config.world_height):
                out_of_bounds += 1
        avg_nest_distance = distance_sum / ants

    trail_count = len(world.trails)
    avg_trail_lifetime = (
        sum(trail.lifetime for trail in world.trails) / trail_count if trail_count > 0 else 0.0
    )

    return _format_basic_row(metrics, tick_ms) + [
        f"{world.elapsed:.4f}",
        metrics.snack_value,
        metrics.trails_laid,
        metrics.trails_expired,
        metrics.snacks_spawned,
        metrics.snacks_depleted,
        metrics.recoveries,
        f"{carrying_ratio:.4f}",
        f"{avg_nest_distance:.4f}",
        f"{max_nest_distance:.4f}",
        out_of_bounds,
        f"{avg_trail_lifetime:.4f}",
        f"{metrics.fps:.2f}",
    ]


def _percentile(sorted_values: list[float], percentile: float) -> float:
    if not sorted_values:
        return 0.0
    if len(sorted_values) == 1:
        return float(sorted_values[0])
    pos = (len(sorted_values) - 1) * percentile
    low = int(math.floor(pos))
    high = int(math.ceil(pos))
    if low == high:
        return float(sorted_values[low])
    weight = pos - low
    return float(sorted_values[low] + (sorted_values[high] - sorted_values[low]) * weight)


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0, "p50": 0.0, "p90": 0.0, "p95": 0.0, "p99": 0.0}
    sorted_values = sorted(values)
    total = sum(values)
    count = len(values)
    return {
        "min": float(sorted_values[0]),
        "max": float(sorted_values[-1]),
        "avg": float(total / count),
        "p50": _percentile(sorted_values, 0.50),
        "p90": _percentile(sorted_values, 0.90),
        "p95": _percentile(sorted_values, 0.95),
        "p99": _percentile(sorted_values, 0.99),
    }


def _load_config(config_path: Optional[Path], seed: Optional[int], dt: Optional[float]) -> SimulationConfig:
    config = SimulationConfig.from_yaml(config_path) if config_path else SimulationConfig()
    if seed is not None:
        config.seed = seed
    if dt is not None:
        config.time_step = dt
    return config


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    log_format: str = "detailed",
    summary_path: Optional[Path] = None,
    summary_window: int = 5000,
    dt: Optional[float] = None,
    config_path: Optional[Path] = None,
) -> World:
    log_mode = log_format.lower().strip()
    if log_mode not in {"basic", "detailed"}:
        raise ValueError(f"Unknown log format: {log_format}")

    config = _load_config(config_path, seed, dt)
    world = World(config)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_DETAILED_HEADER if log_mode == "detailed" else _BASIC_HEADER)

    tick_ms_series: list[float] = []
    carrying_series: list[float] = []
    trail_series: list[float] = []
    total_pickups = 0
    total_deliveries = 0
    total_trails_laid = 0
    max_trails = (-1, -1)
    max_carrying = (-1, -1)

    try:
        for _ in range(steps):
            metrics = world.step()
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
            total_pickups += metrics.pickups
            total_deliveries += metrics.deliveries
            total_trails_laid += metrics.trails_laid

            if summary_path:
                tick_ms_series.append(tick_ms)
                carrying_series.append(float(metrics.carrying))
                trail_series.append(float(metrics.trails))
                if metrics.trails > max_trails[0]:
                    max_trails = (metrics.trails, metrics.tick)
                if metrics.carrying > max_carrying[0]:
                    max_carrying = (metrics.carrying, metrics.tick)

            if writer:
                if log_mode == "detailed":
                    writer.writerow(_format_detailed_row(world, metrics, tick_ms))
                else:
                    writer.writerow(_format_basic_row(metrics, tick_ms))
    finally:
        if csv_file:
            csv_file.close()

    logger.info(
        "ran %d steps: %d pickups, %d deliveries, %d trails laid",
        steps,
        total_pickups,
        total_deliveries,
        total_trails_laid,
    )

    if summary_path:
        window = max(1, int(summary_window))
        tail_slice = slice(max(0, len(tick_ms_series) - window), len(tick_ms_series))
        summary = {
            "steps": steps,
            "seed": config.seed,
            "dt": config.time_step,
            "log_format": log_mode,
            "deterministic_log": deterministic_log,
            "totals": {
                "pickups": total_pickups,
                "deliveries": total_deliveries,
                "trails_laid": total_trails_laid,
            },
            "tick_ms": _summary_stats(tick_ms_series),
            "carrying": _summary_stats(carrying_series),
            "trails": _summary_stats(trail_series),
            "peaks": {
                "carrying": {"value": max_carrying[0], "tick": max_carrying[1]},
                "trails": {"value": max_trails[0], "tick": max_trails[1]},
            },
            "tail_window": {
                "window": window,
                "tick_ms": _summary_stats(tick_ms_series[tail_slice]),
                "carrying": _summary_stats(carrying_series[tail_slice]),
                "trails": _summary_stats(trail_series[tail_slice]),
            },
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))

    return world


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless ant colony simulation")
    parser.add_argument("--steps", type=int, default=3000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--dt", type=float, default=None, help="Fixed time step in seconds (default 1/60).")
    parser.add_argument("--config", type=Path, default=None, help="YAML file with simulation settings")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument(
        "--log-format",
        choices=["basic", "detailed"],
        default="detailed",
        help="CSV format to write when --log is provided.",
    )
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Optional JSON file to write summary stats for the run.",
    )
    parser.add_argument(
        "--summary-window",
        type=int,
        default=5000,
        help="Tail window size (ticks) for summary stats.",
    )
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_headless(
        args.steps,
        args.seed,
        args.log,
        deterministic_log=args.deterministic_log,
        log_format=args.log_format,
        summary_path=args.summary,
        summary_window=args.summary_window,
        dt=args.dt,
        config_path=args.config,
    )


if __name__ == "__main__":
    main()
