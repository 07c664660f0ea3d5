from dataclasses import replace
from typing import Iterable, List

from highway_ca.backends import get_backend
from highway_ca.config import SimulationConfig
from highway_ca.metrics.types import SimulationResult


def run_single(config: SimulationConfig) -> SimulationResult:
    BackendCls = get_backend(config.backend)
    backend = BackendCls(config)
    return backend.run()


def run_scaling_experiment(
    base_config: SimulationConfig,
    backend_name: str,
    param_name: str,
    values: Iterable[int | float]
) -> List[SimulationResult]:
    """
    Helper: changes one parameter (e.g num_threads) and runs backend

    :param base_config: configuration shared by all runs
    :param backend_name: backend used for every run
    :param param_name: SimulationConfig field to vary
    :param values: values assigned to param_name, one run each
    :return: one result per value
    """

    results: List[SimulationResult] = []
    for v in values:
        cfg = replace(base_config, backend=backend_name, **{param_name: v})
        res = run_single(cfg)
        results.append(res)
    return results
