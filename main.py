import argparse
import logging
from typing import List, Optional

from highway_ca.backends import BACKENDS
from highway_ca.config import SWEEP_KINDS, SimulationConfig, SweepConfig
from highway_ca.experiments.runner import run_single
from highway_ca.io.logging_utils import setup_logging, logger
from highway_ca.io.results_writer import (
    save_csv_and_metadata,
    save_result_as_json,
    timestamped_csv_name,
)
from highway_ca.metrics.types import MetaData


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Multi-lane Nagel-Schreckenberg highway simulation with parameter sweeps."
    )
    p.add_argument("--sweep", choices=SWEEP_KINDS, default="density",
                   help="Parameter varied across the batch")
    p.add_argument("--start", type=float, default=0.01)
    p.add_argument("--end", type=float, default=0.5, help="Exclusive")
    p.add_argument("--step", type=float, default=0.01)
    p.add_argument("-n", "--simulations", type=int, default=1,
                   help="Simulations averaged per sweep point")
    p.add_argument("-i", "--iterations", type=int, default=100,
                   help="Ticks per simulation")
    p.add_argument("--lane-speeds", type=int, nargs="+", default=[5, 5, 5])
    p.add_argument("--length", type=int, default=100, help="Road length [cells]")
    p.add_argument("--backend", choices=list(BACKENDS.keys()) + ["mpi"], default="sequential")
    p.add_argument("--threads", type=int, default=1, help="Numba threads (openmp backend)")
    p.add_argument("--seed", type=int, default=42)
    p.add_argument("--output-dir", default="data")
    p.add_argument("-v", "--verbose", action="store_true")
    p.add_argument("--pretty-print", action="store_true",
                   help="Draw the road in the terminal after every tick")
    return p


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    return SimulationConfig(
        road_length=args.length,
        speed_per_lane=args.lane_speeds,
        iterations=args.iterations,
        num_simulations=args.simulations,
        sweep=SweepConfig(kind=args.sweep, start=args.start, end=args.end, step=args.step),
        random_seed=args.seed,
        backend=args.backend,
        num_threads=args.threads,
        output_dir=args.output_dir,
        pretty_print=args.pretty_print,
    )


def main(argv: Optional[List[str]] = None) -> None:
    args = build_argparser().parse_args(argv)
    setup_logging(logging.INFO, verbose=args.verbose)

    cfg = config_from_args(args)

    logger.info(f"Running {cfg.num_simulations} simulation(s) sweeping '{cfg.sweep.kind}' "
                f"with backend='{cfg.backend}'")
    result = run_single(cfg)

    logger.info("Simulation finished.")
    logger.info(f"Wall time: {result.wall_time_seconds:.4f} s")
    logger.info(f"Sweep points: {len(result.iteration_infos)}")

    logger.info("Writing simulation results to csv")
    path = save_csv_and_metadata(
        result.iteration_infos,
        MetaData.from_config(cfg),
        cfg.output_dir,
        timestamped_csv_name(cfg.sweep.kind),
    )
    logger.info(f"Results saved to {path}")

    summary = save_result_as_json(result, cfg.output_dir)
    logger.info(f"Run summary saved to {summary}")


if __name__ == "__main__":
    main()
