from abc import ABC, abstractmethod

from highway_ca.config import SimulationConfig
from highway_ca.metrics.types import SimulationResult


class SimulationBackend(ABC):
    """
    Abstract base for all backends (Sequential, OpenMP, MPI).
    """

    name: str = "base"

    def __init__(self, config: SimulationConfig):
        self.config = config


    @abstractmethod
    def run(self) -> SimulationResult:
        """
        Runs every simulation of the batch and returns the averaged rows.

        :return: result holding one averaged IterationInfo per sweep point
        :rtype: SimulationResult
        """
        raise NotImplementedError
