import csv
import json
import os
from dataclasses import asdict
from datetime import datetime
from typing import List, Sequence

from highway_ca.metrics.types import IterationInfo, MetaData, SimulationResult


CSV_DELIMITER = ","


def _ensure_dir(path: str):
    os.makedirs(path, exist_ok=True)


def csv_header(lane_count: int) -> List[str]:
    return (
        ["iteration", "time", "density", "average_speed"]
        + [f"average_speed_lane_{i}" for i in range(lane_count)]
        + ["lane_change_probability", "deceleration_probability"]
        + [f"max_speed_lane_{i + 1}" for i in range(lane_count)]
        + ["flow", "vehicle_count"]
    )


def csv_row(info: IterationInfo) -> List[object]:
    return (
        [info.iteration, info.time, info.density, info.average_speed]
        + list(info.average_speed_per_lane)
        + [info.lane_change_probability, info.deceleration_probability]
        + list(info.max_speed_per_lane)
        + [info.flow, info.vehicle_count]
    )


def write_iteration_infos_to_csv(infos: Sequence[IterationInfo], path: str) -> str:
    lane_count = len(infos[0].max_speed_per_lane) if infos else 0
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, delimiter=CSV_DELIMITER)
        writer.writerow(csv_header(lane_count))
        for info in infos:
            writer.writerow(csv_row(info))
    return path


def metadata_path(csv_path: str) -> str:
    return os.path.splitext(csv_path)[0] + ".metadata"


def write_metadata_to_file(metadata: MetaData, path: str) -> str:
    sweep = metadata.sweep
    lines = [
        f"Road Length: {metadata.road_length}",
        f"Number of Simulations: {metadata.num_simulations}",
        f"Iterations per Simulation: {metadata.iterations_per_simulation}",
        f"Simulation Type: {sweep.kind}({sweep.start}, {sweep.end}, {sweep.step})",
        "Speeds per lane: " + " ".join(str(s) for s in metadata.speed_per_lane),
    ]
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))
    return path


def save_csv_and_metadata(
    infos: Sequence[IterationInfo],
    metadata: MetaData,
    output_dir: str,
    filename: str,
) -> str:
    """Write the table and its .metadata sidecar; returns the CSV path."""
    _ensure_dir(output_dir)
    path = os.path.join(output_dir, filename)
    write_iteration_infos_to_csv(infos, path)
    write_metadata_to_file(metadata, metadata_path(path))
    return path


def timestamped_csv_name(prefix: str) -> str:
    return f"{prefix}_{datetime.now().strftime('%y%m%d%H%M%S')}.csv"


def save_result_as_json(result: SimulationResult, output_dir: str) -> str:
    _ensure_dir(output_dir)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    filename = f"{result.backend}_{ts}.json"
    path = os.path.join(output_dir, filename)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(asdict(result), f, indent=2, ensure_ascii=False)

    return path
