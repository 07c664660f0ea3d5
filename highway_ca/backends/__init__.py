from typing import Dict, Type

from highway_ca.backends.base_backend import SimulationBackend
from highway_ca.backends.backend_sequential import SequentialBackend
from highway_ca.backends.backend_openmp import OpenMPBackend

# IMPORTANT
# MPIBackend is intentionally NOT loaded here
# run_mpi.py will import it directly when needed

BACKENDS: Dict[str, Type[SimulationBackend]] = {
    SequentialBackend.name: SequentialBackend,
    OpenMPBackend.name: OpenMPBackend,
}


def get_backend(name: str) -> Type[SimulationBackend]:
    if name == "mpi":
        from highway_ca.backends.backend_mpi import MPIBackend
        return MPIBackend
    try:
        return BACKENDS[name]
    except KeyError:
        raise ValueError(
            f"Unknown backend '{name}'. Available: {', '.join(list(BACKENDS.keys()) + ['mpi'])}"
        )
