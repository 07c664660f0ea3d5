import math

import pytest

from highway_ca.config import SimulationConfig, SweepConfig
from highway_ca.metrics import traffic
from highway_ca.metrics.timers import Timer
from highway_ca.metrics.types import IterationInfo, MetaData
from highway_ca.model.road import Road


def test_average_speed(make_road):
    road = make_road(10, [(0, 0, 1), (2, 0, 3), (5, 1, 2)])
    assert traffic.average_speed(road) == pytest.approx(2.0)


def test_average_speed_of_empty_road_is_zero():
    road = Road(10, 0.0, [], [5, 5, 5])
    assert traffic.average_speed(road) == 0.0
    assert traffic.average_speed_per_lane(road) == [0.0, 0.0, 0.0]
    assert traffic.flow(road) == 0.0


def test_empty_lane_reports_zero_not_nan(make_road):
    road = make_road(10, [(0, 0, 1), (2, 0, 3), (5, 2, 4)])
    per_lane = traffic.average_speed_per_lane(road)
    assert per_lane == [2.0, 0.0, 4.0]
    assert not any(math.isnan(s) for s in per_lane)


def test_density_and_flow(make_road):
    road = make_road(10, [(0, 0, 2), (5, 1, 4), (7, 2, 0)])
    assert traffic.density(road) == pytest.approx(3 / 30)
    assert traffic.flow(road) == pytest.approx(0.1 * 2.0)


def test_iteration_info_from_road(make_road):
    road = make_road(10, [(0, 0, 2), (5, 1, 4)], speed_per_lane=[5, 4, 3],
                     deceleration_probability=0.3, lane_change_probability=0.6)
    info = IterationInfo.from_road(7, 1.5, road)

    assert info.iteration == 7
    assert info.time == 1.5
    assert info.vehicle_count == 2
    assert info.average_speed == pytest.approx(3.0)
    assert info.average_speed_per_lane == [2.0, 4.0, 0.0]
    assert info.density == pytest.approx(2 / 30)
    assert info.flow == pytest.approx(2 / 30 * 3.0)
    assert info.deceleration_probability == 0.3
    assert info.lane_change_probability == 0.6
    assert info.max_speed_per_lane == [5, 4, 3]


def test_with_averages_replaces_only_averaged_fields(make_road):
    info = IterationInfo.from_road(1, 1.0, make_road(10, [(0, 0, 2)]))
    averaged = info.with_averages(2.0, 1.5, [1.0, 2.0, 3.0], 0.25)

    assert averaged.time == 2.0
    assert averaged.average_speed == 1.5
    assert averaged.average_speed_per_lane == [1.0, 2.0, 3.0]
    assert averaged.flow == 0.25
    assert averaged.vehicle_count == info.vehicle_count
    assert info.time == 1.0


def test_metadata_from_config():
    cfg = SimulationConfig(
        road_length=80,
        speed_per_lane=[3, 4, 5, 6],
        iterations=10,
        num_simulations=4,
        sweep=SweepConfig("deceleration", 0.0, 0.5, 0.1),
    )
    meta = MetaData.from_config(cfg)
    assert meta.road_length == 80
    assert meta.num_simulations == 4
    assert meta.iterations_per_simulation == 10
    assert meta.sweep.kind == "deceleration"
    assert meta.speed_per_lane == [3, 4, 5]


def test_timer_measures_with_injected_clock():
    ticks = iter([10.0, 12.5])
    with Timer(clock=lambda: next(ticks)) as t:
        pass
    assert t.start == 10.0
    assert t.elapsed == pytest.approx(2.5)
