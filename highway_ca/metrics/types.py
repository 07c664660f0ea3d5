from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List

from highway_ca.config import SimulationConfig, SweepConfig
from highway_ca.model.road import Road

from . import traffic


@dataclass
class IterationInfo:
    """Summary of one road snapshot, one row of the output table."""

    iteration: int
    time: float                          # wall time of the run [s]
    average_speed: float
    average_speed_per_lane: List[float]
    vehicle_count: int
    density: float
    lane_change_probability: float
    deceleration_probability: float
    max_speed_per_lane: List[int]
    flow: float

    @classmethod
    def from_road(cls, iteration: int, time: float, road: Road) -> "IterationInfo":
        return cls(
            iteration=iteration,
            time=time,
            average_speed=traffic.average_speed(road),
            average_speed_per_lane=traffic.average_speed_per_lane(road),
            vehicle_count=len(road.vehicles),
            density=traffic.density(road),
            lane_change_probability=road.lane_change_probability,
            deceleration_probability=road.deceleration_probability,
            max_speed_per_lane=list(road.speed_per_lane),
            flow=traffic.flow(road),
        )

    def with_averages(
        self,
        time: float,
        average_speed: float,
        average_speed_per_lane: List[float],
        flow: float,
    ) -> "IterationInfo":
        return replace(
            self,
            time=time,
            average_speed=average_speed,
            average_speed_per_lane=list(average_speed_per_lane),
            flow=flow,
        )


@dataclass
class MetaData:
    """What a batch of simulations swept over; written next to the CSV."""

    road_length: int
    num_simulations: int
    iterations_per_simulation: int
    sweep: SweepConfig
    speed_per_lane: List[int]

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "MetaData":
        return cls(
            road_length=config.road_length,
            num_simulations=config.num_simulations,
            iterations_per_simulation=config.iterations,
            sweep=config.sweep,
            speed_per_lane=list(config.speed_per_lane[: config.lane_count]),
        )


@dataclass
class SimulationResult:
    backend: str
    config: Dict[str, Any]

    # total time
    wall_time_seconds: float

    # one averaged row per sweep point
    iteration_infos: List[IterationInfo]

    # anything backend specific (ranks, threads, ...)
    extra_stats: Dict[str, Any] = field(default_factory=dict)
