from typing import List

from highway_ca.model.road import Road


def average_speed(road: Road) -> float:
    """Mean velocity over all vehicles, 0.0 for an empty road."""
    if not road.vehicles:
        return 0.0
    return sum(v.velocity for v in road.vehicles) / len(road.vehicles)


def average_speed_per_lane(road: Road) -> List[float]:
    """Mean velocity per lane, 0.0 for lanes without vehicles."""
    sums = [0] * road.lane_count
    counts = [0] * road.lane_count
    for v in road.vehicles:
        sums[v.position.y] += v.velocity
        counts[v.position.y] += 1
    return [s / c if c else 0.0 for s, c in zip(sums, counts)]


def density(road: Road) -> float:
    return len(road.vehicles) / (road.length * road.lane_count)


def flow(road: Road) -> float:
    return density(road) * average_speed(road)
