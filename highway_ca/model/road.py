from __future__ import annotations

import random
from functools import cached_property
from typing import Dict, List, Optional, Sequence

from highway_ca.io.logging_utils import logger

from .occupancy import LaneOccupancy, distance_between
from .vehicles import Position, Vehicle


DEFAULT_LANE_COUNT = 3
DEFAULT_LANE_SPEED = 5


class Road:
    """
    Straight multi-lane ring road divided into cells.

    Owns the vehicles and the per-lane speed limits. A Road is treated as
    an immutable snapshot: rules build a new Road through with_vehicles()
    instead of editing this one, so every query answers for the state the
    tick started from.
    """

    def __init__(
        self,
        length: int,
        deceleration_probability: float,
        vehicles: Sequence[Vehicle],
        speed_per_lane: Sequence[int],
        lane_change_probability: float = 0.0,
    ) -> None:
        if length <= 0:
            raise ValueError(f"Road length must be positive, got {length}")
        if not speed_per_lane:
            raise ValueError("Road needs at least one lane")

        self.length = length
        self.deceleration_probability = deceleration_probability
        self.lane_change_probability = lane_change_probability
        self.vehicles: List[Vehicle] = list(vehicles)
        self.speed_per_lane: List[int] = list(speed_per_lane)

        # builds the cell index; raises on two vehicles in one cell
        self.occupancy

    @property
    def lane_count(self) -> int:
        return len(self.speed_per_lane)

    @cached_property
    def occupancy(self) -> LaneOccupancy:
        return LaneOccupancy(
            self.length,
            self.lane_count,
            ((v.position.wrapped(self.length), v.velocity) for v in self.vehicles),
        )

    @cached_property
    def _by_position(self) -> Dict[Position, Vehicle]:
        return {v.position.wrapped(self.length): v for v in self.vehicles}

    def with_vehicles(self, vehicles: Sequence[Vehicle]) -> "Road":
        """Return a new road with the same parameters and the given vehicles."""
        return Road(
            self.length,
            self.deceleration_probability,
            vehicles,
            self.speed_per_lane,
            self.lane_change_probability,
        )

    # ------------------------ SPATIAL QUERIES ------------------------

    def distance_between(self, x_front: int, x_back: int) -> int:
        return distance_between(x_front, x_back, self.length)

    def speed_limit(self, lane: int) -> int:
        self.occupancy.check_lane(lane)
        return self.speed_per_lane[lane]

    def vehicles_in_lane(self, lane: int) -> List[Vehicle]:
        """Vehicles in the lane, ordered by position."""
        self.occupancy.check_lane(lane)
        return sorted(
            (v for v in self.vehicles if v.position.y == lane),
            key=lambda v: v.position,
        )

    def vehicle_at(self, position: Position) -> Optional[Vehicle]:
        return self._by_position.get(position)

    def nearest_vehicle_ahead(self, position: Position) -> int:
        """
        Gap from position to the nearest vehicle ahead in its lane.

        A vehicle standing on position itself is ignored. Returns
        MAX_DISTANCE when the lane holds no other vehicle.
        """
        return self.occupancy.gap_ahead(position)

    def nearest_vehicle_behind(self, position: Position) -> Optional[Vehicle]:
        back = self.occupancy.position_behind(position)
        if back is None:
            return None
        return self._by_position[back]

    def max_speed_at(self, position: Position) -> int:
        """Legal speed ceiling at position: lane limit capped by the gap ahead."""
        return min(self.speed_limit(position.y), self.nearest_vehicle_ahead(position))

    def __repr__(self) -> str:
        return (
            f"Road(length={self.length}, lanes={self.lane_count}, "
            f"vehicles={len(self.vehicles)})"
        )


def create_road(
    length: int,
    density: float,
    speed_per_lane: Optional[Sequence[int]],
    deceleration_probability: float,
    lane_change_probability: float,
    random_position: bool,
    random_speed: bool,
    rng: Optional[random.Random] = None,
    lane_count: int = DEFAULT_LANE_COUNT,
    max_placement_attempts: Optional[int] = None,
) -> Road:
    """
    Build a road holding round(length * density * lane_count) vehicles.

    Without random_position vehicles are laid out round-robin across lanes
    with increasing x. With it, cells are drawn until a free one turns up;
    the number of draws is capped by max_placement_attempts.
    Initial velocity is 0, or uniform in [0, lane speed limit) with
    random_speed.
    """
    if rng is None:
        rng = random.Random()

    if length <= 0:
        raise ValueError(f"Road length must be positive, got {length}")
    if not 0.0 <= density <= 1.0:
        raise ValueError(f"Density must be in [0, 1], got {density}")
    for name, p in (
        ("deceleration_probability", deceleration_probability),
        ("lane_change_probability", lane_change_probability),
    ):
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"{name} must be in [0, 1], got {p}")

    if speed_per_lane is None:
        logger.warning(
            f"No speeds provided, defaulting to {DEFAULT_LANE_SPEED} for all lanes"
        )
        speed_per_lane = [DEFAULT_LANE_SPEED] * lane_count

    if len(speed_per_lane) < lane_count:
        raise ValueError(
            f"Speed per lane must have at least {lane_count} speeds, "
            f"got {len(speed_per_lane)}"
        )
    speeds = [int(s) for s in speed_per_lane[:lane_count]]

    cells = length * lane_count
    amount = int(round(length * density * lane_count))
    if max_placement_attempts is None:
        max_placement_attempts = 1000 * cells

    occupied = set()
    attempts = 0
    vehicles: List[Vehicle] = []

    for i in range(amount):
        lane = i % lane_count
        x = i // lane_count
        if random_position:
            while True:
                attempts += 1
                if attempts > max_placement_attempts:
                    raise RuntimeError(
                        f"Could not place {amount} vehicles on {cells} cells "
                        f"within {max_placement_attempts} attempts"
                    )
                lane = rng.randrange(lane_count)
                x = rng.randrange(length)
                if (x, lane) not in occupied:
                    break
        occupied.add((x, lane))

        velocity = rng.randrange(speeds[lane]) if random_speed and speeds[lane] > 0 else 0

        vehicles.append(
            Vehicle(
                position=Position(x, lane),
                velocity=velocity,
                lane_change_left_probability=lane_change_probability,
                lane_change_right_probability=lane_change_probability,
            )
        )

    logger.debug(
        f"Created road: length={length}, lanes={lane_count}, vehicles={amount}, "
        f"density={density:.3f}"
    )

    return Road(
        length,
        deceleration_probability,
        vehicles,
        speeds,
        lane_change_probability,
    )
