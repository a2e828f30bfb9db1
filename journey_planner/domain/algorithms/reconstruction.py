from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from journey_planner.domain.exceptions import RoutingError
from journey_planner.domain.models import (
    DESTINATION,
    ORIGIN,
    GeoPoint,
    Itinerary,
    Segment,
    SegmentKind,
    Stop,
)

from .geo_utils import DEFAULT_WALKING_SPEED_MPS, haversine_distance_m, walk_seconds
from .network_graph import NetworkGraph
from .raptor import ArrivalLabel
from .service_time import seconds_since_midnight, service_datetime_from_seconds


@dataclass(frozen=True, slots=True)
class JourneyEndpoints:
    """The literal request coordinates and departure around a label chain."""

    origin: GeoPoint
    destination: GeoPoint
    depart_at: datetime
    walking_speed_mps: float = DEFAULT_WALKING_SPEED_MPS


def reconstruct_single_ride(
    graph: NetworkGraph, label: ArrivalLabel, endpoints: JourneyEndpoints
) -> Itinerary:
    """Walk, at most one ride, walk.

    Only the last boarding recorded for the destination is shown: the ride
    runs from that boarding stop to its alighting stop and covers everything
    between reaching the origin stop and getting off. A walking transfer
    made after that ride is kept. The transfer count is the label's round.
    """

    root = _chain_root(label)
    segments = [_access_walk(graph, root, endpoints)]

    ride = _last_ride(label)
    if ride is not None:
        segments.append(
            _ride_segment(
                graph,
                ride,
                endpoints,
                start_s=root.arrival_s,
                end_s=ride.arrival_s,
                alight=graph.stops[ride.stop],
            )
        )
        walks: list[tuple[ArrivalLabel, ArrivalLabel]] = []
        cur = label
        while cur is not ride and cur.previous is not None:
            walks.append((cur.previous, cur))
            cur = cur.previous
        for prev, step in reversed(walks):
            segments.append(_transfer_walk(graph, prev, step, endpoints))

    segments.append(_egress_walk(graph, label, endpoints))
    return Itinerary(
        segments=tuple(segments),
        transfer_count=label.round if ride is not None else 0,
        origin_stop_id=graph.stops[root.stop].id,
        destination_stop_id=graph.stops[label.stop].id,
    )


def reconstruct_full_chain(
    graph: NetworkGraph, label: ArrivalLabel, endpoints: JourneyEndpoints
) -> Itinerary:
    """Walk the label backpointers and emit one segment per ride or footpath."""

    steps: list[tuple[ArrivalLabel, ArrivalLabel]] = []
    cur = label
    while cur.previous is not None:
        steps.append((cur.previous, cur))
        cur = cur.previous
    steps.reverse()
    root = cur

    segments = [_access_walk(graph, root, endpoints)]
    rides = 0
    for prev, step in steps:
        if step.is_ride:
            rides += 1
            segments.append(
                _ride_segment(
                    graph,
                    step,
                    endpoints,
                    start_s=prev.arrival_s,
                    end_s=step.arrival_s,
                    alight=graph.stops[step.stop],
                )
            )
        else:
            segments.append(_transfer_walk(graph, prev, step, endpoints))
    segments.append(_egress_walk(graph, label, endpoints))

    return Itinerary(
        segments=tuple(segments),
        transfer_count=max(0, rides - 1),
        origin_stop_id=graph.stops[root.stop].id,
        destination_stop_id=graph.stops[label.stop].id,
    )


def _chain_root(label: ArrivalLabel) -> ArrivalLabel:
    cur = label
    while cur.previous is not None:
        cur = cur.previous
    return cur


def _last_ride(label: ArrivalLabel) -> ArrivalLabel | None:
    cur: ArrivalLabel | None = label
    while cur is not None and not cur.is_ride:
        cur = cur.previous
    return cur


def _at(endpoints: JourneyEndpoints, seconds: int) -> datetime:
    return service_datetime_from_seconds(endpoints.depart_at, seconds)


def _distance_m(a: GeoPoint, stop: Stop) -> float:
    if stop.location is None:
        raise RoutingError(f"Stop {stop.id} has no coordinates")
    return float(haversine_distance_m(a, stop.location))


def _access_walk(
    graph: NetworkGraph, root: ArrivalLabel, endpoints: JourneyEndpoints
) -> Segment:
    stop = graph.stops[root.stop]
    dist_m = _distance_m(endpoints.origin, stop)
    start_s = seconds_since_midnight(endpoints.depart_at)
    end_s = max(start_s, root.arrival_s)
    return Segment(
        kind=SegmentKind.WALK,
        from_id=ORIGIN,
        to_id=stop.id,
        to_name=stop.name,
        depart_at=_at(endpoints, start_s),
        arrive_at=_at(endpoints, end_s),
        distance_m=dist_m,
        instruction=f"Walk {round(dist_m)} m to {stop.name}",
    )


def _egress_walk(
    graph: NetworkGraph, label: ArrivalLabel, endpoints: JourneyEndpoints
) -> Segment:
    stop = graph.stops[label.stop]
    dist_m = _distance_m(endpoints.destination, stop)
    dur_s = walk_seconds(dist_m, endpoints.walking_speed_mps)
    return Segment(
        kind=SegmentKind.WALK,
        from_id=stop.id,
        to_id=DESTINATION,
        from_name=stop.name,
        depart_at=_at(endpoints, label.arrival_s),
        arrive_at=_at(endpoints, label.arrival_s + dur_s),
        distance_m=dist_m,
        instruction=f"Walk {round(dist_m)} m to your destination",
    )


def _transfer_walk(
    graph: NetworkGraph,
    prev: ArrivalLabel,
    step: ArrivalLabel,
    endpoints: JourneyEndpoints,
) -> Segment:
    a = graph.stops[prev.stop]
    b = graph.stops[step.stop]
    dist_m = float(step.walk_m or 0.0)
    return Segment(
        kind=SegmentKind.WALK,
        from_id=a.id,
        to_id=b.id,
        from_name=a.name,
        to_name=b.name,
        depart_at=_at(endpoints, prev.arrival_s),
        arrive_at=_at(endpoints, step.arrival_s),
        distance_m=dist_m,
        instruction=f"Walk {round(dist_m)} m to {b.name} to change routes",
    )


def _ride_segment(
    graph: NetworkGraph,
    ride: ArrivalLabel,
    endpoints: JourneyEndpoints,
    *,
    start_s: int,
    end_s: int,
    alight: Stop,
) -> Segment:
    if ride.route is None or ride.board_pos is None or ride.alight_pos is None:
        raise RoutingError("Label does not describe a ride")

    route = graph.routes[ride.route]
    pattern = graph.route_stops[ride.route]
    board = graph.stops[pattern[ride.board_pos]]
    stops = tuple(
        graph.stops[i] for i in pattern[ride.board_pos : ride.alight_pos + 1]
    )
    line = route.name or "Bus"
    return Segment(
        kind=SegmentKind.RIDE,
        from_id=board.id,
        to_id=alight.id,
        from_name=board.name,
        to_name=alight.name,
        depart_at=_at(endpoints, start_s),
        arrive_at=_at(endpoints, end_s),
        route_id=route.id,
        route_name=route.name,
        stops=stops,
        instruction=f"Take {line} from {board.name} to {alight.name}",
    )
