import random
from typing import Iterable, Sequence, Tuple

import pytest

from highway_ca.model.road import Road
from highway_ca.model.vehicles import Position, Vehicle


VehicleRow = Tuple  # (x, lane, velocity[, left_probability, right_probability])


def build_road(
    length: int,
    rows: Iterable[VehicleRow],
    speed_per_lane: Sequence[int] = (5, 5, 5),
    deceleration_probability: float = 0.0,
    lane_change_probability: float = 0.0,
) -> Road:
    vehicles = []
    for row in rows:
        x, lane, velocity = row[:3]
        left, right = row[3:5] if len(row) >= 5 else (lane_change_probability,) * 2
        vehicles.append(Vehicle(Position(x, lane), velocity, left, right))
    return Road(
        length,
        deceleration_probability,
        vehicles,
        list(speed_per_lane),
        lane_change_probability,
    )


@pytest.fixture
def make_road():
    return build_road


@pytest.fixture
def rng():
    return random.Random(1234)


def snapshot(road: Road):
    return [(v.position, v.velocity) for v in road.vehicles]
