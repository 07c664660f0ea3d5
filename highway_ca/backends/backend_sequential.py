from highway_ca.backends.base_backend import SimulationBackend
from highway_ca.config import SimulationConfig
from highway_ca.experiments.batch import average_runs, run_simulations
from highway_ca.io.logging_utils import logger
from highway_ca.metrics.timers import Timer
from highway_ca.metrics.types import SimulationResult
from highway_ca.model.pipeline import build_rules


class SequentialBackend(SimulationBackend):
    """
    Sequential implementation of the simulation.
    Used as a reference for speedup measurements.
    """

    name = "sequential"

    def __init__(self, config: SimulationConfig):
        super().__init__(config)
        self.rules = build_rules(
            parallel=False, tie_break=self.config.lane_change_tie_break
        )

    def run(self) -> SimulationResult:
        cfg: SimulationConfig = self.config

        with Timer() as t:
            runs = run_simulations(cfg, self.rules)
            logger.info("Calculating averages of simulations")
            infos = average_runs(runs)

        return SimulationResult(
            backend=self.name,
            config=cfg.to_dict(),
            wall_time_seconds=t.elapsed,
            iteration_infos=infos,
            extra_stats={"num_runs": len(runs), "sweep_points": len(infos)},
        )
