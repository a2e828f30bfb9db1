from __future__ import annotations

from dataclasses import dataclass

from journey_planner.domain.models import GeoPoint, Stop

from .geo_utils import haversine_distance_m
from .network_graph import NetworkGraph

DEFAULT_MAX_RESULTS = 5
DEFAULT_MAX_RADIUS_M = 1000.0


@dataclass(frozen=True, slots=True)
class NearbyStop:
    stop: Stop
    distance_m: float


@dataclass(frozen=True, slots=True)
class NearestStopFinder:
    """Bounded-radius, distance-ordered, capped stop lookup.

    Linear scan over the graph's stops; fine for a city network of a few
    hundred stops.
    """

    graph: NetworkGraph

    def nearby(
        self,
        point: GeoPoint,
        *,
        max_results: int = DEFAULT_MAX_RESULTS,
        max_radius_m: float = DEFAULT_MAX_RADIUS_M,
    ) -> list[NearbyStop]:
        scored: list[NearbyStop] = []
        for stop in self.graph.stops:
            if stop.location is None:
                continue
            d = haversine_distance_m(point, stop.location)
            if d <= max_radius_m:
                scored.append(NearbyStop(stop=stop, distance_m=d))

        # Stable sort: equidistant stops keep snapshot order.
        scored.sort(key=lambda n: n.distance_m)
        return scored[: max(0, int(max_results))]

    def nearby_ids(
        self,
        point: GeoPoint,
        *,
        max_results: int = DEFAULT_MAX_RESULTS,
        max_radius_m: float = DEFAULT_MAX_RADIUS_M,
    ) -> list[str]:
        return [
            n.stop.id
            for n in self.nearby(
                point, max_results=max_results, max_radius_m=max_radius_m
            )
        ]
