from dataclasses import dataclass, asdict, field
from typing import List, Literal, Optional


BackendName = Literal["sequential", "openmp", "mpi"]
SweepKind = Literal["density", "lane_change", "deceleration"]
TieBreak = Literal["left", "right"]

SWEEP_KINDS = ("density", "lane_change", "deceleration")


@dataclass
class SweepConfig:
    """Which scalar parameter varies across a batch, and over which range."""

    kind: SweepKind = "density"
    start: float = 0.01
    # exclusive
    end: float = 0.5
    step: float = 0.01

    def __post_init__(self) -> None:
        if self.kind not in SWEEP_KINDS:
            raise ValueError(
                f"Unknown sweep '{self.kind}'. Available: {', '.join(SWEEP_KINDS)}"
            )
        if self.step <= 0:
            raise ValueError(f"Sweep step must be positive, got {self.step}")
        if self.end < self.start:
            raise ValueError(f"Sweep end {self.end} is below start {self.start}")


@dataclass
class SimulationConfig:
    # road
    road_length: int = 100
    density: float = 0.3
    speed_per_lane: List[int] = field(default_factory=lambda: [5, 5, 5])
    lane_count: int = 3

    # driver behaviour
    deceleration_probability: float = 0.4
    lane_change_probability: float = 0.8
    lane_change_tie_break: TieBreak = "left"

    # initial state
    random_start_position: bool = True
    random_start_speed: bool = True

    # ticks per simulation and simulations averaged per sweep point
    iterations: int = 100
    num_simulations: int = 1
    sweep: SweepConfig = field(default_factory=SweepConfig)
    random_seed: int = 42

    backend: BackendName = "sequential"
    # openMP
    num_threads: int = 1

    output_dir: str = "data"
    pretty_print: bool = False
    # scenario desc
    label: Optional[str] = None

    def __post_init__(self) -> None:
        if self.iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {self.iterations}")
        if self.num_simulations < 1:
            raise ValueError(f"num_simulations must be >= 1, got {self.num_simulations}")
        if len(self.speed_per_lane) < self.lane_count:
            raise ValueError(
                f"Speed per lane must have at least {self.lane_count} speeds"
            )

    def to_dict(self) -> dict:
        return asdict(self)
