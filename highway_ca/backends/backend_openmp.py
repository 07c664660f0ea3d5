import random

from numba import set_num_threads

from highway_ca.backends.base_backend import SimulationBackend
from highway_ca.config import SimulationConfig
from highway_ca.experiments.batch import average_runs, run_simulations
from highway_ca.io.logging_utils import logger
from highway_ca.metrics.timers import Timer
from highway_ca.metrics.types import SimulationResult
from highway_ca.model.pipeline import build_rules, step
from highway_ca.model.road import Road
from highway_ca.model.vehicles import Position, Vehicle


class OpenMPBackend(SimulationBackend):
    """
    OpenMP-like backend using Numba's parallel CPU execution.
    It runs the same rules as the sequential backend, but the speed update
    (acceleration + random braking) is done by a Numba @njit(parallel=True)
    kernel. Lane changes stay sequential.
    """

    name = "openmp"

    def __init__(self, config: SimulationConfig):
        super().__init__(config)

        # Configure the number of threads used by Numba
        if self.config.num_threads > 0:
            set_num_threads(self.config.num_threads)

        self.rules = build_rules(
            parallel=True, tie_break=self.config.lane_change_tie_break
        )

    def warm_up(self) -> None:
        """Trigger Numba JIT compilation on a tiny road (not measured)."""
        road = Road(10, 0.5, [Vehicle(Position(0, 0)), Vehicle(Position(3, 0))], [5])
        step(road, random.Random(0), self.rules)

    def run(self) -> SimulationResult:
        cfg: SimulationConfig = self.config

        self.warm_up()

        with Timer() as t:
            runs = run_simulations(cfg, self.rules)
            logger.info("Calculating averages of simulations")
            infos = average_runs(runs)

        return SimulationResult(
            backend=self.name,
            config=cfg.to_dict(),
            wall_time_seconds=t.elapsed,
            iteration_infos=infos,
            extra_stats={
                "num_runs": len(runs),
                "sweep_points": len(infos),
                "num_threads": cfg.num_threads,
            },
        )
