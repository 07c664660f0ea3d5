from __future__ import annotations

import random
from typing import Optional, Sequence, Tuple

from .kernels import ParallelSpeedUpdate
from .road import Road
from .rules import Accelerate, Decelerate, LaneChange, Move, Recycle, TieBreak, Transformer


Rules = Tuple[Transformer, ...]

# Order is part of the model: speed update, lane change, then movement.
DEFAULT_RULES: Rules = (Accelerate(), Decelerate(), LaneChange(), Move(), Recycle())
PARALLEL_RULES: Rules = (ParallelSpeedUpdate(), LaneChange(), Move(), Recycle())


def build_rules(parallel: bool = False, tie_break: TieBreak = "left") -> Rules:
    """Rule chain with the given lane-change tie break."""
    speed: Tuple[Transformer, ...] = (
        (ParallelSpeedUpdate(),) if parallel else (Accelerate(), Decelerate())
    )
    return speed + (LaneChange(tie_break), Move(), Recycle())


def apply_rules(
    road: Road, rng: random.Random, rules: Sequence[Transformer]
) -> Road:
    for rule in rules:
        road = rule.apply(road, rng)
    return road


def step(
    road: Road,
    rng: Optional[random.Random] = None,
    rules: Sequence[Transformer] = DEFAULT_RULES,
) -> Road:
    """
    Advance the road by one tick:
    1) accelerate towards the speed ceiling
    2) brake at random
    3) change lanes
    4) move and wrap around the ring
    """
    if rng is None:
        rng = random.Random()
    return apply_rules(road, rng, rules)


def step_parallel(
    road: Road,
    rng: Optional[random.Random] = None,
    rules: Sequence[Transformer] = PARALLEL_RULES,
) -> Road:
    """Same tick as step(), with the speed update run by the numba kernel."""
    if rng is None:
        rng = random.Random()
    return apply_rules(road, rng, rules)
