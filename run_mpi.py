from __future__ import annotations

from mpi4py import MPI

from highway_ca.config import SimulationConfig, SweepConfig
from highway_ca.io.logging_utils import setup_logging, logger
from highway_ca.io.results_writer import (
    save_csv_and_metadata,
    save_result_as_json,
    timestamped_csv_name,
)
from highway_ca.backends.backend_mpi import MPIBackend
from highway_ca.metrics.types import MetaData


def main() -> None:
    # Initialize logging (each rank gets the same config; we will log only on rank 0)
    setup_logging()

    comm = MPI.COMM_WORLD
    rank = comm.Get_rank()

    # Hard-coded config for MPI experiments
    cfg = SimulationConfig(
        backend="mpi",
        road_length=100,
        speed_per_lane=[5, 5, 5],
        iterations=1000,          # ticks per simulation
        num_simulations=32,       # spread over ranks
        sweep=SweepConfig(kind="density", start=0.01, end=0.5, step=0.01),
        random_seed=42,
    )

    # Create MPI backend directly, do NOT use run_single / get_backend
    backend = MPIBackend(cfg)
    result = backend.run()

    # Only rank 0 prints and saves results
    if rank == 0:
        logger.info("=== MPI run finished ===")
        logger.info(f"Backend: {result.backend}")
        logger.info(f"Config: {cfg.to_dict()}")
        logger.info(f"Ranks: {result.extra_stats['num_ranks']}")
        logger.info(f"Wall time: {result.wall_time_seconds:.4f} s")
        logger.info(f"Sweep points: {len(result.iteration_infos)}")

        path = save_csv_and_metadata(
            result.iteration_infos,
            MetaData.from_config(cfg),
            cfg.output_dir,
            timestamped_csv_name(cfg.sweep.kind),
        )
        logger.info(f"Results saved to {path}")
        logger.info(f"Run summary saved to {save_result_as_json(result, cfg.output_dir)}")


if __name__ == "__main__":
    main()
