from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Iterable, Mapping

from journey_planner.domain.exceptions import UnknownStop
from journey_planner.domain.models import Route, Stop

from .geo_utils import DEFAULT_WALKING_SPEED_MPS, haversine_distance_m, walk_seconds

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Footpath:
    """Walking transfer edge towards another stop (graph indices)."""

    to_stop: int
    walk_s: int
    distance_m: float


@dataclass(frozen=True, slots=True)
class NetworkGraph:
    """Immutable, integer-indexed view over a network snapshot.

    - `stops[i]` / `routes[j]` are the arena; everything else refers to them by index.
    - `routes` only holds routes that can carry a rider (>= 2 usable stops) and
      their `stop_ids` are reduced to those usable stops.
    - `route_stops[j]` is the ordered stop-index pattern of route j.
    - `stop_routes[i]` lists the routes serving stop i.
    """

    stops: tuple[Stop, ...]
    routes: tuple[Route, ...]
    stop_index: Mapping[str, int]
    route_index: Mapping[str, int]
    route_stops: tuple[tuple[int, ...], ...]
    stop_routes: tuple[tuple[int, ...], ...]
    footpaths: tuple[tuple[Footpath, ...], ...] = ()
    skipped_route_ids: tuple[str, ...] = field(default_factory=tuple)

    def stop_position(self, stop_id: str) -> int:
        try:
            return self.stop_index[stop_id]
        except KeyError:
            raise UnknownStop(f"Unknown stop: {stop_id}") from None

    def stop(self, stop_id: str) -> Stop:
        return self.stops[self.stop_position(stop_id)]

    def route(self, route_id: str) -> Route:
        return self.routes[self.route_index[route_id]]

    def routes_serving(self, stop_id: str) -> tuple[Route, ...]:
        return tuple(
            self.routes[j] for j in self.stop_routes[self.stop_position(stop_id)]
        )

    @property
    def has_footpaths(self) -> bool:
        return any(self.footpaths)


def build_network_graph(
    stops: Iterable[Stop],
    routes: Iterable[Route],
    *,
    transfer_radius_m: float = 0.0,
    walking_speed_mps: float = DEFAULT_WALKING_SPEED_MPS,
) -> NetworkGraph:
    """Index stops and routes once; O(stops + sum of route lengths).

    Routes with fewer than two usable stops (known id, valid coordinates) are
    skipped with a warning. With `transfer_radius_m > 0`, walking footpaths
    are added between every pair of usable stops within that radius.
    """

    stop_list: list[Stop] = []
    stop_index: dict[str, int] = {}
    for stop in stops:
        if stop.id in stop_index:
            logger.warning("Duplicate stop id %r ignored", stop.id)
            continue
        stop_index[stop.id] = len(stop_list)
        stop_list.append(stop)

    route_list: list[Route] = []
    route_index: dict[str, int] = {}
    route_stops: list[tuple[int, ...]] = []
    stop_routes: list[list[int]] = [[] for _ in stop_list]
    skipped: list[str] = []

    for route in routes:
        if route.id in route_index:
            logger.warning("Duplicate route id %r ignored", route.id)
            continue

        pattern: list[int] = []
        for stop_id in route.stop_ids:
            i = stop_index.get(stop_id)
            if i is None or not stop_list[i].is_routable:
                logger.warning(
                    "Route %r references unusable stop %r; dropped from its pattern",
                    route.id,
                    stop_id,
                )
                continue
            pattern.append(i)

        if len(pattern) < 2:
            logger.warning(
                "Route %r has fewer than 2 usable stops; skipped", route.id
            )
            skipped.append(route.id)
            continue

        j = len(route_list)
        route_index[route.id] = j
        route_list.append(
            replace(route, stop_ids=tuple(stop_list[i].id for i in pattern))
        )
        route_stops.append(tuple(pattern))
        for i in pattern:
            # Loop routes visit a stop twice; list the route once.
            if not stop_routes[i] or stop_routes[i][-1] != j:
                stop_routes[i].append(j)

    footpaths: tuple[tuple[Footpath, ...], ...] = ()
    if transfer_radius_m > 0:
        footpaths = _build_footpaths(
            stop_list, radius_m=transfer_radius_m, speed_mps=walking_speed_mps
        )

    return NetworkGraph(
        stops=tuple(stop_list),
        routes=tuple(route_list),
        stop_index=MappingProxyType(stop_index),
        route_index=MappingProxyType(route_index),
        route_stops=tuple(route_stops),
        stop_routes=tuple(tuple(r) for r in stop_routes),
        footpaths=footpaths,
        skipped_route_ids=tuple(skipped),
    )


def _build_footpaths(
    stops: list[Stop], *, radius_m: float, speed_mps: float
) -> tuple[tuple[Footpath, ...], ...]:
    # Pairwise scan; fine at city scale (hundreds of stops).
    out: list[list[Footpath]] = [[] for _ in stops]
    for i, a in enumerate(stops):
        if a.location is None:
            continue
        for k in range(i + 1, len(stops)):
            b = stops[k]
            if b.location is None:
                continue
            d = haversine_distance_m(a.location, b.location)
            if d > radius_m:
                continue
            walk_s = walk_seconds(d, speed_mps)
            out[i].append(Footpath(to_stop=k, walk_s=walk_s, distance_m=d))
            out[k].append(Footpath(to_stop=i, walk_s=walk_s, distance_m=d))
    return tuple(tuple(f) for f in out)
