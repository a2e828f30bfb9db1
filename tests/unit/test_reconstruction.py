from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from journey_planner.domain.algorithms.network_graph import build_network_graph
from journey_planner.domain.algorithms.raptor import earliest_arrival_label, propagate
from journey_planner.domain.algorithms.reconstruction import (
    JourneyEndpoints,
    reconstruct_full_chain,
    reconstruct_single_ride,
)
from journey_planner.domain.models import GeoPoint, SegmentKind

DEPART = datetime(2026, 1, 8, 8, 0, 0)
T = 8 * 3600


def _endpoints() -> JourneyEndpoints:
    return JourneyEndpoints(
        origin=GeoPoint(lat=0.0, lon=0.0),
        destination=GeoPoint(lat=0.0, lon=0.02),
        depart_at=DEPART,
    )


def _assert_chained(segments) -> None:
    for a, b in zip(segments, segments[1:]):
        assert a.arrive_at == b.depart_at
        assert a.depart_at <= a.arrive_at


def test_single_ride_emits_walk_ride_walk(line_network) -> None:
    graph = build_network_graph(*line_network)
    label = earliest_arrival_label(
        propagate(graph, origin_stop_id="A", board_time_s=T), "C"
    )

    it = reconstruct_single_ride(graph, label, _endpoints())

    assert [s.kind for s in it.segments] == [
        SegmentKind.WALK,
        SegmentKind.RIDE,
        SegmentKind.WALK,
    ]
    walk_in, ride, walk_out = it.segments
    assert (walk_in.from_id, walk_in.to_id) == ("origin", "A")
    assert (ride.from_id, ride.to_id, ride.route_id) == ("A", "C", "R1")
    assert (walk_out.from_id, walk_out.to_id) == ("C", "destination")
    assert ride.duration_s == 540
    assert ride.depart_at == DEPART
    assert [s.id for s in ride.stops] == ["A", "B", "C"]
    assert ride.instruction == "Take Line 1 from Stop A to Stop C"
    assert walk_in.distance_m == 0.0 and walk_out.distance_m == 0.0
    assert it.total_duration_s == 540
    assert it.transfer_count == 0
    assert (it.origin_stop_id, it.destination_stop_id) == ("A", "C")
    _assert_chained(it.segments)


def test_full_chain_matches_single_ride_without_transfers(line_network) -> None:
    graph = build_network_graph(*line_network)
    label = earliest_arrival_label(
        propagate(graph, origin_stop_id="A", board_time_s=T), "C"
    )

    assert reconstruct_full_chain(graph, label, _endpoints()) == (
        reconstruct_single_ride(graph, label, _endpoints())
    )


def test_full_chain_emits_one_ride_per_boarding(transfer_network) -> None:
    graph = build_network_graph(*transfer_network)
    label = earliest_arrival_label(
        propagate(graph, origin_stop_id="A", board_time_s=T), "C"
    )

    it = reconstruct_full_chain(graph, label, _endpoints())

    rides = [s for s in it.segments if s.kind is SegmentKind.RIDE]
    assert [(r.route_id, r.from_id, r.to_id) for r in rides] == [
        ("R1", "A", "B"),
        ("R2", "B", "C"),
    ]
    assert rides[0].arrive_at == DEPART + timedelta(seconds=420)
    assert rides[1].arrive_at == DEPART + timedelta(seconds=840)
    assert it.transfer_count == 1
    assert it.total_duration_s == 840
    _assert_chained(it.segments)


def test_single_ride_keeps_only_the_last_boarding(transfer_network) -> None:
    graph = build_network_graph(*transfer_network)
    label = earliest_arrival_label(
        propagate(graph, origin_stop_id="A", board_time_s=T), "C"
    )

    it = reconstruct_single_ride(graph, label, _endpoints())

    assert len(it.segments) == 3
    ride = it.segments[1]
    assert (ride.route_id, ride.from_id, ride.to_id) == ("R2", "B", "C")
    assert ride.depart_at == DEPART
    assert ride.arrive_at == DEPART + timedelta(seconds=840)
    assert it.transfer_count == 1
    _assert_chained(it.segments)


def test_origin_stop_label_yields_walk_only_itinerary(line_network) -> None:
    graph = build_network_graph(*line_network)
    endpoints = JourneyEndpoints(
        origin=GeoPoint(lat=0.0, lon=0.001),
        destination=GeoPoint(lat=0.0, lon=0.002),
        depart_at=DEPART,
    )
    # ~111 m walk to A at 1.4 m/s.
    label = earliest_arrival_label(
        propagate(graph, origin_stop_id="A", board_time_s=T + 79), "A"
    )

    for reconstruct in (reconstruct_single_ride, reconstruct_full_chain):
        it = reconstruct(graph, label, endpoints)
        assert [s.kind for s in it.segments] == [SegmentKind.WALK, SegmentKind.WALK]
        assert it.transfer_count == 0
        assert it.total_walk_m == pytest.approx(111.19 + 222.39, abs=0.1)
        assert it.segments[1].instruction == "Walk 222 m to your destination"
        _assert_chained(it.segments)


def test_footpath_transfer_becomes_a_walk_segment() -> None:
    from journey_planner.domain.models import Route, Stop

    stops = [
        Stop(id="A", name="A", location=GeoPoint(lat=0.0, lon=0.0)),
        Stop(id="B", name="B", location=GeoPoint(lat=0.0, lon=0.01)),
        Stop(id="B2", name="B2", location=GeoPoint(lat=0.0, lon=0.0102)),
        Stop(id="C", name="C", location=GeoPoint(lat=0.0, lon=0.03)),
    ]
    routes = [
        Route(id="R1", name="1", stop_ids=("A", "B")),
        Route(id="R2", name="2", stop_ids=("B2", "C")),
    ]
    graph = build_network_graph(stops, routes, transfer_radius_m=100.0)
    label = earliest_arrival_label(
        propagate(graph, origin_stop_id="A", board_time_s=T), "C"
    )
    endpoints = JourneyEndpoints(
        origin=GeoPoint(lat=0.0, lon=0.0),
        destination=GeoPoint(lat=0.0, lon=0.03),
        depart_at=DEPART,
    )

    it = reconstruct_full_chain(graph, label, endpoints)

    kinds = [s.kind.value for s in it.segments]
    assert kinds == ["walk", "ride", "walk", "ride", "walk"]
    transfer = it.segments[2]
    assert (transfer.from_id, transfer.to_id) == ("B", "B2")
    assert transfer.duration_s == 16
    assert transfer.instruction == "Walk 22 m to B2 to change routes"
    assert it.transfer_count == 1
    assert it.total_walk_m == pytest.approx(22.24, abs=0.01)
    _assert_chained(it.segments)


def test_single_ride_alights_where_the_ride_ends_and_keeps_the_walk() -> None:
    from journey_planner.domain.models import Route, Stop

    stops = [
        Stop(id="A", name="A", location=GeoPoint(lat=0.0, lon=0.0)),
        Stop(id="B", name="B", location=GeoPoint(lat=0.0, lon=0.01)),
        Stop(id="B2", name="B2", location=GeoPoint(lat=0.0, lon=0.0102)),
    ]
    routes = [Route(id="R1", name="1", stop_ids=("A", "B"))]
    graph = build_network_graph(stops, routes, transfer_radius_m=100.0)
    label = earliest_arrival_label(
        propagate(graph, origin_stop_id="A", board_time_s=T), "B2"
    )
    endpoints = JourneyEndpoints(
        origin=GeoPoint(lat=0.0, lon=0.0),
        destination=GeoPoint(lat=0.0, lon=0.0102),
        depart_at=DEPART,
    )

    it = reconstruct_single_ride(graph, label, endpoints)

    assert [s.kind.value for s in it.segments] == ["walk", "ride", "walk", "walk"]
    ride, transfer = it.segments[1], it.segments[2]
    assert ride.to_id == "B"
    assert [s.id for s in ride.stops] == ["A", "B"]
    assert ride.arrive_at == DEPART + timedelta(seconds=420)
    assert (transfer.from_id, transfer.to_id) == ("B", "B2")
    assert transfer.arrive_at == DEPART + timedelta(seconds=436)
    assert it.destination_stop_id == "B2"
    assert it.transfer_count == 0
    assert it.total_walk_m == pytest.approx(22.24, abs=0.01)
    _assert_chained(it.segments)
