from highway_ca.metrics import traffic
from highway_ca.model.road import Road


SIDE_OF_ROAD = "#"
STRIDE = 4


def render_lane(road: Road, lane: int) -> str:
    """One lane as text: the velocity digit in occupied cells, blanks elsewhere."""
    cells = [" "] * road.length
    for v in road.vehicles_in_lane(lane):
        cells[v.position.x] = str(v.velocity)[-1]
    return "".join(cells)


def render_strides(length: int) -> str:
    return "".join("-" if i % STRIDE == 0 else " " for i in range(length))


def render_road(road: Road) -> str:
    """
    Road drawn from the highest lane down to lane 0, each lane followed by
    its speed limit, then the speed averages.
    """
    rows = [SIDE_OF_ROAD * road.length]
    for lane in reversed(range(road.lane_count)):
        rows.append(f"{render_lane(road, lane)}\t{road.speed_limit(lane)}")
        if lane > 0:
            rows.append(render_strides(road.length))
    rows.append(SIDE_OF_ROAD * road.length)

    rows.append(f"Average speed:\t\t\t{traffic.average_speed(road):.2f}")
    for lane, avg in enumerate(traffic.average_speed_per_lane(road)):
        rows.append(f"Average speed per lane {lane + 1}:\t{avg:.2f}")
    rows.append(f"Total vehicles: \t\t{len(road.vehicles)}")

    return "\n".join(rows)
