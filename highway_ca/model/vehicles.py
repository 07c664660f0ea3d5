from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, order=True)
class Position:
    x: int    # cell along the road, taken modulo road length
    y: int    # lane index

    def wrapped(self, length: int) -> "Position":
        """Bring x back into [0, length)."""
        return Position(self.x % length, self.y)

    def advanced(self, cells: int, length: int) -> "Position":
        return Position((self.x + cells) % length, self.y)

    def in_lane(self, lane: int) -> "Position":
        return Position(self.x, lane)


@dataclass
class Vehicle:
    position: Position
    velocity: int = 0                           # [cells/tick]
    lane_change_left_probability: float = 0.0   # towards lane + 1
    lane_change_right_probability: float = 0.0  # towards lane - 1
    origin_lane: Optional[int] = None           # lane the vehicle started in

    def __post_init__(self) -> None:
        if self.velocity < 0:
            raise ValueError(f"Negative velocity {self.velocity} at {self.position}")
        if self.origin_lane is None:
            self.origin_lane = self.position.y

    @property
    def lane(self) -> int:
        return self.position.y
