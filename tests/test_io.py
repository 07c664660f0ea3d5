import csv
import json
import os

from highway_ca.config import SimulationConfig, SweepConfig
from highway_ca.io.render import render_lane, render_road
from highway_ca.io.results_writer import (
    csv_header,
    metadata_path,
    save_csv_and_metadata,
    save_result_as_json,
    timestamped_csv_name,
    write_iteration_infos_to_csv,
)
from highway_ca.metrics.types import IterationInfo, MetaData, SimulationResult

import main


def sample_infos(make_road):
    road = make_road(10, [(0, 0, 2), (5, 1, 4)], deceleration_probability=0.4,
                     lane_change_probability=0.8)
    return [IterationInfo.from_road(1, 0.5, road), IterationInfo.from_road(2, 0.25, road)]


def test_csv_header_per_lane_columns():
    header = csv_header(3)
    assert header[:4] == ["iteration", "time", "density", "average_speed"]
    assert "average_speed_lane_2" in header
    assert "max_speed_lane_3" in header
    assert header[-2:] == ["flow", "vehicle_count"]
    assert len(header) == 14


def test_write_iteration_infos_to_csv(tmp_path, make_road):
    path = write_iteration_infos_to_csv(sample_infos(make_road), str(tmp_path / "out.csv"))

    with open(path, newline="") as f:
        rows = list(csv.DictReader(f))

    assert len(rows) == 2
    assert rows[0]["iteration"] == "1"
    assert float(rows[0]["average_speed"]) == 3.0
    assert float(rows[0]["average_speed_lane_2"]) == 0.0
    assert rows[1]["vehicle_count"] == "2"
    assert float(rows[1]["deceleration_probability"]) == 0.4


def test_save_csv_and_metadata(tmp_path, make_road):
    cfg = SimulationConfig(road_length=10, iterations=7, num_simulations=2,
                           sweep=SweepConfig("lane_change", 0.0, 0.5, 0.1))
    out_dir = str(tmp_path / "data")
    path = save_csv_and_metadata(sample_infos(make_road), MetaData.from_config(cfg),
                                 out_dir, "lane_change_1.csv")

    assert os.path.exists(path)
    meta = metadata_path(path)
    assert meta.endswith("lane_change_1.metadata")
    with open(meta) as f:
        text = f.read()
    assert "Road Length: 10" in text
    assert "Number of Simulations: 2" in text
    assert "Iterations per Simulation: 7" in text
    assert "Simulation Type: lane_change(0.0, 0.5, 0.1)" in text
    assert "Speeds per lane: 5 5 5" in text


def test_timestamped_csv_name():
    name = timestamped_csv_name("density")
    assert name.startswith("density_")
    assert name.endswith(".csv")
    assert len(name) == len("density_") + 12 + len(".csv")


def test_save_result_as_json(tmp_path, make_road):
    result = SimulationResult(
        backend="sequential",
        config=SimulationConfig().to_dict(),
        wall_time_seconds=0.1,
        iteration_infos=sample_infos(make_road),
    )
    path = save_result_as_json(result, str(tmp_path))
    with open(path) as f:
        data = json.load(f)
    assert data["backend"] == "sequential"
    assert len(data["iteration_infos"]) == 2
    assert data["config"]["sweep"]["kind"] == "density"


def test_render_road(make_road):
    road = make_road(8, [(0, 0, 2), (3, 2, 4)], speed_per_lane=[5, 4, 3])
    text = render_road(road)
    lines = text.split("\n")

    assert lines[0] == "#" * 8
    assert lines[1] == "   4    \t3"
    assert lines[2] == "-   -   "
    assert lines[5] == "2       \t5"
    assert lines[6] == "#" * 8
    assert "Total vehicles: \t\t2" in text
    assert render_lane(road, 1) == " " * 8


def test_main_writes_results(tmp_path):
    main.main([
        "--start", "0.1", "--end", "0.2", "--step", "0.1",
        "-i", "3", "-n", "2", "--length", "20",
        "--output-dir", str(tmp_path),
    ])
    files = sorted(os.listdir(tmp_path))
    assert any(f.startswith("density_") and f.endswith(".csv") for f in files)
    assert any(f.endswith(".metadata") for f in files)
    assert any(f.startswith("sequential_") and f.endswith(".json") for f in files)
