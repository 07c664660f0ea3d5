import math
import random
import time
from typing import Iterable, List, Optional, Sequence

import numpy as np

from highway_ca.config import SimulationConfig
from highway_ca.io.logging_utils import logger
from highway_ca.io.render import render_road
from highway_ca.metrics.timers import Timer
from highway_ca.metrics.types import IterationInfo
from highway_ca.model.pipeline import build_rules, step
from highway_ca.model.road import Road, create_road
from highway_ca.model.rules import Transformer


CLEAR_SCREEN = "\x1b[2J\x1b[1;1H"
PRETTY_PRINT_DELAY = 0.15  # [s] between rendered ticks


def float_range_step(start: float, end: float, step_size: float) -> List[float]:
    """start, start + step, ... strictly below end."""
    if step_size <= 0:
        raise ValueError(f"Step must be positive, got {step_size}")
    count = max(0, math.ceil((end - start) / step_size - 1e-9))
    return [float(v) for v in start + step_size * np.arange(count)]


def run_iterations(
    sim_nr: int,
    iterations: int,
    road: Road,
    rng: random.Random,
    rules: Sequence[Transformer],
    pretty_print: bool = False,
) -> IterationInfo:
    """Run a number of ticks and summarise the final road."""
    with Timer() as t:
        for _ in range(iterations):
            road = step(road, rng, rules)

            if pretty_print:
                print(CLEAR_SCREEN + render_road(road), flush=True)
                time.sleep(PRETTY_PRINT_DELAY)

    return IterationInfo.from_road(sim_nr, t.elapsed, road)


def build_sweep_road(config: SimulationConfig, value: float, rng: random.Random) -> Road:
    """Road for one sweep point: the swept value replaces its base value."""
    density = config.density
    deceleration = config.deceleration_probability
    lane_change = config.lane_change_probability

    kind = config.sweep.kind
    if kind == "density":
        density = value
    elif kind == "lane_change":
        lane_change = value
    elif kind == "deceleration":
        deceleration = value
    else:
        raise ValueError(f"Unknown sweep '{kind}'")

    return create_road(
        config.road_length,
        density,
        config.speed_per_lane,
        deceleration,
        lane_change,
        config.random_start_position,
        config.random_start_speed,
        rng=rng,
        lane_count=config.lane_count,
    )


def run_sweep(
    config: SimulationConfig,
    rng: random.Random,
    rules: Optional[Sequence[Transformer]] = None,
) -> List[IterationInfo]:
    """One simulation over every sweep point, one IterationInfo per point."""
    if rules is None:
        rules = build_rules(tie_break=config.lane_change_tie_break)

    sweep = config.sweep
    infos: List[IterationInfo] = []
    for iteration, value in enumerate(
        float_range_step(sweep.start, sweep.end, sweep.step), start=1
    ):
        road = build_sweep_road(config, value, rng)
        infos.append(
            run_iterations(
                iteration,
                config.iterations,
                road,
                rng,
                rules,
                pretty_print=config.pretty_print,
            )
        )
    return infos


def average_runs(runs: Sequence[Sequence[IterationInfo]]) -> List[IterationInfo]:
    """
    Row-wise average of several runs of the same sweep.

    Time, average speed, speed per lane and flow are averaged; the other
    fields are taken from the first run.
    """
    if not runs:
        return []

    rows = len(runs[0])
    if any(len(r) != rows for r in runs):
        raise ValueError("All runs must cover the same sweep points")

    averaged: List[IterationInfo] = []
    for i in range(rows):
        column = [r[i] for r in runs]
        averaged.append(
            column[0].with_averages(
                time=float(np.mean([info.time for info in column])),
                average_speed=float(np.mean([info.average_speed for info in column])),
                average_speed_per_lane=np.mean(
                    [info.average_speed_per_lane for info in column], axis=0
                ).tolist(),
                flow=float(np.mean([info.flow for info in column])),
            )
        )
    return averaged


def run_simulations(
    config: SimulationConfig,
    rules: Sequence[Transformer],
    indices: Optional[Iterable[int]] = None,
) -> List[List[IterationInfo]]:
    """
    Run simulations of a batch; simulation i is seeded with random_seed + i.
    """
    if indices is None:
        indices = range(config.num_simulations)

    runs: List[List[IterationInfo]] = []
    for i in indices:
        logger.info(f"Running simulation {i + 1} of {config.num_simulations}")
        rng = random.Random(config.random_seed + i)
        runs.append(run_sweep(config, rng, rules))
    return runs


