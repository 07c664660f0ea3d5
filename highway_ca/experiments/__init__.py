from highway_ca.config import SimulationConfig, SweepConfig
from highway_ca.experiments.batch import (
    average_runs,
    float_range_step,
    run_iterations,
    run_simulations,
    run_sweep,
)


__all__ = [
    "SimulationConfig",
    "SweepConfig",
    "average_runs",
    "float_range_step",
    "run_iterations",
    "run_simulations",
    "run_sweep",
]
