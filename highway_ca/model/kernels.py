from __future__ import annotations

import random
from dataclasses import replace

import numpy as np
from numba import njit, prange

from .occupancy import MAX_DISTANCE
from .road import Road
from .rules import Transformer


@njit(parallel=True)
def update_speeds_kernel(
    xs: np.ndarray,
    lanes: np.ndarray,
    velocities: np.ndarray,
    lane_limits: np.ndarray,
    draws: np.ndarray,
    deceleration_probability: float,
    length: int,
) -> np.ndarray:
    """
    Numba-parallel kernel fusing acceleration and random braking.

    Every vehicle reads only the input arrays, so iterations of the prange
    loop are independent. draws[i] is the uniform value that decides
    whether vehicle i brakes.
    """
    n = xs.shape[0]
    out = np.empty(n, dtype=np.int64)

    for i in prange(n):
        lane = lanes[i]

        # gap to the nearest vehicle ahead in the same lane
        gap = MAX_DISTANCE
        for j in range(n):
            if j == i or lanes[j] != lane:
                continue
            d = (xs[j] - xs[i] + length - 1) % length
            if d < gap:
                gap = d

        ceiling = min(lane_limits[lane], gap)
        v = min(velocities[i] + 1, ceiling)

        if draws[i] < deceleration_probability and v > 0:
            v -= 1

        out[i] = v

    return out


class ParallelSpeedUpdate(Transformer):
    """
    Accelerate followed by Decelerate, computed by update_speeds_kernel.

    Takes one draw per vehicle in list order before the kernel runs, the
    same draws Decelerate would take, so both paths give the same road.
    """

    name = "parallel_speed_update"

    def apply(self, road: Road, rng: random.Random) -> Road:
        n = len(road.vehicles)
        if n == 0:
            return road

        xs = np.fromiter((v.position.x for v in road.vehicles), dtype=np.int64, count=n)
        lanes = np.fromiter((v.position.y for v in road.vehicles), dtype=np.int64, count=n)
        velocities = np.fromiter((v.velocity for v in road.vehicles), dtype=np.int64, count=n)
        lane_limits = np.asarray(road.speed_per_lane, dtype=np.int64)
        draws = np.fromiter((rng.random() for _ in range(n)), dtype=np.float64, count=n)

        new_velocities = update_speeds_kernel(
            xs,
            lanes,
            velocities,
            lane_limits,
            draws,
            float(road.deceleration_probability),
            int(road.length),
        )

        return road.with_vehicles([
            replace(v, velocity=int(new_v))
            for v, new_v in zip(road.vehicles, new_velocities)
        ])
