from __future__ import annotations

from datetime import datetime

import pytest

from journey_planner.domain.models import GeoPoint, Route, Stop

# Stops along the equator; 0.01 deg of longitude is ~1112 m.
A = Stop(id="A", name="Stop A", location=GeoPoint(lat=0.0, lon=0.0))
B = Stop(id="B", name="Stop B", location=GeoPoint(lat=0.0, lon=0.01))
C = Stop(id="C", name="Stop C", location=GeoPoint(lat=0.0, lon=0.02))


@pytest.fixture
def depart_at() -> datetime:
    return datetime(2026, 1, 8, 8, 0, 0)


@pytest.fixture
def line_network() -> tuple[list[Stop], list[Route]]:
    """One route A -> B -> C."""

    return [A, B, C], [Route(id="R1", name="Line 1", stop_ids=("A", "B", "C"))]


@pytest.fixture
def transfer_network() -> tuple[list[Stop], list[Route]]:
    """Line 1 A -> B, Line 2 B -> C: reaching C needs one transfer at B."""

    return [A, B, C], [
        Route(id="R1", name="Line 1", stop_ids=("A", "B")),
        Route(id="R2", name="Line 2", stop_ids=("B", "C")),
    ]


@pytest.fixture
def corridor_network() -> tuple[list[Stop], list[Route]]:
    """Seven stops ~445 m apart with a local, a feeder and an express line."""

    stops = [
        Stop(id=f"S{k}", name=f"Stop {k}", location=GeoPoint(lat=0.0, lon=0.004 * k))
        for k in range(7)
    ]
    routes = [
        Route(id="L1", name="Local 1", stop_ids=("S0", "S1", "S2", "S3")),
        Route(id="L2", name="Local 2", stop_ids=("S3", "S4", "S5", "S6")),
        Route(id="X1", name="Express", stop_ids=("S1", "S5")),
    ]
    return stops, routes
