import pytest

from highway_ca.config import SimulationConfig, SweepConfig


def test_defaults_match_base_sweep_values():
    cfg = SimulationConfig()
    assert cfg.road_length == 100
    assert cfg.density == 0.3
    assert cfg.deceleration_probability == 0.4
    assert cfg.lane_change_probability == 0.8
    assert cfg.speed_per_lane == [5, 5, 5]
    assert cfg.sweep.kind == "density"


def test_to_dict_includes_sweep():
    d = SimulationConfig(sweep=SweepConfig("lane_change", 0.0, 1.0, 0.5)).to_dict()
    assert d["sweep"] == {"kind": "lane_change", "start": 0.0, "end": 1.0, "step": 0.5}
    assert d["backend"] == "sequential"


@pytest.mark.parametrize("kwargs", [
    {"kind": "speed"},
    {"step": 0.0},
    {"step": -0.1},
    {"start": 0.5, "end": 0.1},
])
def test_invalid_sweep(kwargs):
    with pytest.raises(ValueError):
        SweepConfig(**kwargs)


def test_too_few_speeds_is_a_configuration_error():
    with pytest.raises(ValueError):
        SimulationConfig(speed_per_lane=[5, 5])


def test_needs_at_least_one_simulation():
    with pytest.raises(ValueError):
        SimulationConfig(num_simulations=0)
