"""
Per-tick rules of the multi-lane Nagel-Schreckenberg model.

Every rule maps a Road to a new Road and reads only the road it was given,
so all vehicles are updated simultaneously from the same snapshot. The
order in which rules are chained is part of the model (see pipeline.py).
"""
from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import List, Optional, Tuple

from highway_ca.config import TieBreak

from .occupancy import LaneOccupancy
from .road import Road
from .vehicles import Position, Vehicle


class Transformer(ABC):
    """
    Base for all rules.
    """

    name: str = "base"

    @abstractmethod
    def apply(self, road: Road, rng: random.Random) -> Road:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Accelerate(Transformer):
    """v = min(v + 1, max_speed_at(position))"""

    name = "accelerate"

    def apply(self, road: Road, rng: random.Random) -> Road:
        return road.with_vehicles([
            replace(v, velocity=min(v.velocity + 1, road.max_speed_at(v.position)))
            for v in road.vehicles
        ])


class Decelerate(Transformer):
    """
    Stochastic braking: each vehicle independently loses one unit of
    velocity with the road's deceleration probability.

    One draw is consumed per vehicle, in list order, standing or not.
    """

    name = "decelerate"

    def apply(self, road: Road, rng: random.Random) -> Road:
        p = road.deceleration_probability
        vehicles: List[Vehicle] = []
        for v in road.vehicles:
            brake = rng.random() < p
            if brake and v.velocity > 0:
                v = replace(v, velocity=v.velocity - 1)
            vehicles.append(v)
        return road.with_vehicles(vehicles)


class LaneChange(Transformer):
    """
    Shift vehicles by at most one lane when the neighbour lane lets them
    go strictly faster.

    A shift into a neighbour lane needs:
    - the lane to exist,
    - a free target cell,
    - a higher achievable speed there than in the current lane,
    - a gap to the next vehicle behind in the target lane larger than
      that vehicle's velocity,
    - a successful draw against the vehicle's probability for that side.

    Vehicles are processed in list order against a working copy of the
    occupied cells, so each committed shift is visible to the vehicles
    evaluated after it and no two vehicles end up in the same cell.
    """

    name = "lane_change"

    def __init__(self, tie_break: TieBreak = "left") -> None:
        if tie_break not in ("left", "right"):
            raise ValueError(f"Unknown tie break '{tie_break}', use 'left' or 'right'")
        self.tie_break = tie_break

    def __repr__(self) -> str:
        return f"LaneChange(tie_break={self.tie_break!r})"

    def apply(self, road: Road, rng: random.Random) -> Road:
        occupancy = road.occupancy.copy()
        vehicles: List[Vehicle] = []

        for v in road.vehicles:
            target = self._choose_lane(road, occupancy, v)
            if target is not None:
                lane, probability = target
                if rng.random() < probability:
                    new_pos = v.position.in_lane(lane)
                    occupancy.move(v.position, new_pos)
                    v = replace(v, position=new_pos)
            vehicles.append(v)

        return road.with_vehicles(vehicles)

    def _achievable_speed(self, road: Road, occupancy: LaneOccupancy, pos: Position) -> int:
        return min(road.speed_limit(pos.y), occupancy.gap_ahead(pos))

    def _candidates(self, road: Road, v: Vehicle) -> List[Tuple[int, float]]:
        """Neighbour lanes with their probability, preferred side first."""
        lane = v.lane
        left = (lane + 1, v.lane_change_left_probability)
        right = (lane - 1, v.lane_change_right_probability)
        ordered = [left, right] if self.tie_break == "left" else [right, left]
        return [c for c in ordered if 0 <= c[0] < road.lane_count]

    def _choose_lane(
        self, road: Road, occupancy: LaneOccupancy, v: Vehicle
    ) -> Optional[Tuple[int, float]]:
        current = self._achievable_speed(road, occupancy, v.position)

        scored = []
        for lane, probability in self._candidates(road, v):
            target = v.position.in_lane(lane)
            if target in occupancy:
                continue
            speed = self._achievable_speed(road, occupancy, target)
            if speed > current:
                scored.append((speed, lane, probability))

        # stable sort keeps the tie-break order between equal speeds
        scored.sort(key=lambda s: s[0], reverse=True)

        for _, lane, probability in scored:
            if self._is_safe(occupancy, v.position.in_lane(lane)):
                return lane, probability
        return None

    @staticmethod
    def _is_safe(occupancy: LaneOccupancy, target: Position) -> bool:
        """The vehicle behind target must not need to brake below its velocity."""
        back = occupancy.position_behind(target)
        if back is None:
            return True
        return occupancy.gap_behind(target) > occupancy.velocity_at(back)


class Move(Transformer):
    """x = (x + v) mod length"""

    name = "move"

    def apply(self, road: Road, rng: random.Random) -> Road:
        return road.with_vehicles([
            replace(v, position=v.position.advanced(v.velocity, road.length))
            for v in road.vehicles
        ])


class Recycle(Transformer):
    """
    Fold positions that left [0, length) back onto the ring.

    A no-op after Move, which already wraps.
    """

    name = "recycle"

    def apply(self, road: Road, rng: random.Random) -> Road:
        if all(0 <= v.position.x < road.length for v in road.vehicles):
            return road
        return road.with_vehicles([
            replace(v, position=v.position.wrapped(road.length))
            for v in road.vehicles
        ])
