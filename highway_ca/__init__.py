from highway_ca.config import SimulationConfig, SweepConfig
from highway_ca.metrics.types import IterationInfo, MetaData, SimulationResult
from highway_ca.model.pipeline import step, step_parallel
from highway_ca.model.road import Road, create_road
from highway_ca.model.vehicles import Position, Vehicle


__all__ = [
    "IterationInfo",
    "MetaData",
    "Position",
    "Road",
    "SimulationConfig",
    "SimulationResult",
    "SweepConfig",
    "Vehicle",
    "create_road",
    "step",
    "step_parallel",
]
