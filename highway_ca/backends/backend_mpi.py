from mpi4py import MPI

from highway_ca.backends.base_backend import SimulationBackend
from highway_ca.config import SimulationConfig
from highway_ca.experiments.batch import average_runs, run_simulations
from highway_ca.metrics.timers import Timer
from highway_ca.metrics.types import SimulationResult
from highway_ca.model.pipeline import build_rules


class MPIBackend(SimulationBackend):
    """
    MPI backend distributing independent simulations over ranks.

    Simulation i of the batch runs on rank i % size with seed
    random_seed + i, so the averaged rows match the sequential backend.
    Runs are gathered on rank 0, averaged there and broadcast back to all
    ranks.
    """

    name = "mpi"

    def __init__(self, config: SimulationConfig):
        super().__init__(config)

        self.comm = MPI.COMM_WORLD
        self.rank = self.comm.Get_rank()
        self.size = self.comm.Get_size()

        # If there are more ranks than simulations, some ranks run nothing
        self.indices = list(range(self.rank, self.config.num_simulations, self.size))

        self.rules = build_rules(
            parallel=False, tie_break=self.config.lane_change_tie_break
        )

    def run(self) -> SimulationResult:
        cfg: SimulationConfig = self.config
        comm = self.comm

        with Timer() as t:
            local_runs = list(zip(self.indices, run_simulations(cfg, self.rules, self.indices)))

        gathered = comm.gather(local_runs, root=0)
        global_wall = comm.reduce(t.elapsed, op=MPI.MAX, root=0)  # max wall time across ranks

        if self.rank == 0:
            ordered = sorted(
                (pair for rank_runs in gathered for pair in rank_runs),
                key=lambda pair: pair[0],
            )
            infos = average_runs([run for _, run in ordered])
        else:
            infos = None

        infos, wall_time = comm.bcast((infos, global_wall), root=0)

        debug_stats = {
            "num_ranks": self.size,
            "rank": self.rank,
            "local_runs": len(local_runs),
            "num_runs": cfg.num_simulations,
        }

        return SimulationResult(
            backend=self.name,
            config=cfg.to_dict(),
            wall_time_seconds=wall_time,
            iteration_infos=infos,
            extra_stats=debug_stats,
        )
