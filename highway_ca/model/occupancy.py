from __future__ import annotations

import sys
from bisect import bisect_left, bisect_right, insort
from typing import Dict, Iterable, List, Optional, Tuple

from .vehicles import Position


# gap reported when nothing limits a vehicle (lane otherwise empty)
MAX_DISTANCE = sys.maxsize


def distance_between(x_front: int, x_back: int, length: int) -> int:
    """
    Toroidal forward distance from x_back to x_front, counted in empty
    cells: adjacent vehicles are 0 apart.
    """
    return (x_front - x_back + length - 1) % length


class LaneOccupancy:
    """
    Index of occupied cells on a ring road.

    Keeps, per lane, the sorted x coordinates of occupied cells and, per
    cell, the velocity of the vehicle standing there. Used read-only by
    Road queries and as the mutable working set of the lane-change pass.
    """

    def __init__(
        self,
        length: int,
        lane_count: int,
        cells: Iterable[Tuple[Position, int]] = (),
    ) -> None:
        self.length = length
        self.lane_count = lane_count
        self._velocity: Dict[Position, int] = {}
        self._lanes: List[List[int]] = [[] for _ in range(lane_count)]

        for pos, velocity in cells:
            self.add(pos, velocity)

    def copy(self) -> "LaneOccupancy":
        other = LaneOccupancy(self.length, self.lane_count)
        other._velocity = dict(self._velocity)
        other._lanes = [list(xs) for xs in self._lanes]
        return other

    def check_lane(self, lane: int) -> None:
        if not 0 <= lane < self.lane_count:
            raise IndexError(
                f"Lane {lane} out of range, road has {self.lane_count} lanes"
            )

    # ------------------------ MUTATION ------------------------

    def add(self, pos: Position, velocity: int) -> None:
        self.check_lane(pos.y)
        if pos in self._velocity:
            raise ValueError(f"Cell {pos} is already occupied")
        self._velocity[pos] = velocity
        insort(self._lanes[pos.y], pos.x)

    def remove(self, pos: Position) -> int:
        velocity = self._velocity.pop(pos)
        xs = self._lanes[pos.y]
        del xs[bisect_left(xs, pos.x)]
        return velocity

    def move(self, src: Position, dst: Position) -> None:
        """Relocate the vehicle in src to dst, keeping its velocity."""
        velocity = self.remove(src)
        self.add(dst, velocity)

    # ------------------------ QUERIES ------------------------

    def __len__(self) -> int:
        return len(self._velocity)

    def __contains__(self, pos: Position) -> bool:
        return pos in self._velocity

    def is_occupied(self, pos: Position) -> bool:
        self.check_lane(pos.y)
        return pos in self._velocity

    def velocity_at(self, pos: Position) -> int:
        return self._velocity[pos]

    def lane_positions(self, lane: int) -> List[int]:
        self.check_lane(lane)
        return list(self._lanes[lane])

    def position_ahead(self, pos: Position) -> Optional[Position]:
        """Nearest occupied cell ahead in the same lane, pos itself excluded."""
        self.check_lane(pos.y)
        xs = self._lanes[pos.y]
        idx = bisect_right(xs, pos.x)
        if idx == len(xs):
            idx = 0
        if not xs or xs[idx] == pos.x:
            return None
        return Position(xs[idx], pos.y)

    def position_behind(self, pos: Position) -> Optional[Position]:
        """Nearest occupied cell behind in the same lane, pos itself excluded."""
        self.check_lane(pos.y)
        xs = self._lanes[pos.y]
        # index -1 wraps to the last cell of the lane
        idx = bisect_left(xs, pos.x) - 1
        if not xs or xs[idx] == pos.x:
            return None
        return Position(xs[idx], pos.y)

    def gap_ahead(self, pos: Position) -> int:
        front = self.position_ahead(pos)
        if front is None:
            return MAX_DISTANCE
        return distance_between(front.x, pos.x, self.length)

    def gap_behind(self, pos: Position) -> int:
        back = self.position_behind(pos)
        if back is None:
            return MAX_DISTANCE
        return distance_between(pos.x, back.x, self.length)
