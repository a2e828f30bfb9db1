from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from journey_planner.domain.algorithms.geo_utils import walk_seconds
from journey_planner.domain.algorithms.nearest_stops import (
    NearbyStop,
    NearestStopFinder,
)
from journey_planner.domain.algorithms.network_graph import (
    NetworkGraph,
    build_network_graph,
)
from journey_planner.domain.algorithms.raptor import (
    HeadwayTravelTime,
    TravelTimeModel,
    earliest_arrival_label,
    propagate,
)
from journey_planner.domain.algorithms.reconstruction import (
    JourneyEndpoints,
    reconstruct_full_chain,
    reconstruct_single_ride,
)
from journey_planner.domain.algorithms.service_time import seconds_since_midnight
from journey_planner.domain.exceptions import NoPathFound
from journey_planner.domain.models import (
    GeoPoint,
    Itinerary,
    PlannerConfig,
    Route,
    Stop,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class JourneyPlanner:
    """Walk + ride journey planning over an immutable network graph.

    - Candidate boarding/alighting stops come from a bounded-radius lookup.
    - Each origin stop runs one round-based search; every destination
      candidate is then read off its labels.
    - Itineraries are sorted by (total duration, transfers) and truncated.
    """

    graph: NetworkGraph
    config: PlannerConfig = field(default_factory=PlannerConfig)
    travel_time: TravelTimeModel | None = None

    @classmethod
    def from_collections(
        cls,
        stops: Iterable[Stop],
        routes: Iterable[Route],
        config: PlannerConfig | None = None,
        travel_time: TravelTimeModel | None = None,
    ) -> JourneyPlanner:
        config = config or PlannerConfig()
        graph = build_network_graph(
            stops,
            routes,
            transfer_radius_m=config.transfer_radius_m,
            walking_speed_mps=config.walking_speed_mps,
        )
        return cls(graph=graph, config=config, travel_time=travel_time)

    def nearby_stops(
        self,
        point: GeoPoint,
        *,
        max_results: int | None = None,
        max_radius_m: float | None = None,
    ) -> list[NearbyStop]:
        return NearestStopFinder(self.graph).nearby(
            point,
            max_results=(
                self.config.max_candidate_stops if max_results is None else max_results
            ),
            max_radius_m=(
                self.config.max_walk_radius_m if max_radius_m is None else max_radius_m
            ),
        )

    def plan(
        self,
        *,
        origin: GeoPoint,
        destination: GeoPoint,
        depart_at: datetime,
    ) -> list[Itinerary]:
        if not self.graph.routes:
            logger.info("Network has no usable routes; nothing to plan")
            return []

        origin_candidates = self.nearby_stops(origin)
        dest_candidates = self.nearby_stops(destination)
        if not origin_candidates or not dest_candidates:
            logger.debug("No stops within walking radius of origin/destination")
            return []

        endpoints = JourneyEndpoints(
            origin=origin,
            destination=destination,
            depart_at=depart_at,
            walking_speed_mps=self.config.walking_speed_mps,
        )
        depart_s = seconds_since_midnight(depart_at)

        def run(candidate: NearbyStop) -> list[Itinerary]:
            return self._plan_from_stop(
                candidate, dest_candidates, endpoints=endpoints, depart_s=depart_s
            )

        if self.config.max_workers > 1 and len(origin_candidates) > 1:
            # Propagations share only the immutable graph; map keeps input order.
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
                batches = list(pool.map(run, origin_candidates))
        else:
            batches = [run(c) for c in origin_candidates]

        itineraries = [it for batch in batches for it in batch]
        itineraries.sort(key=lambda it: (it.total_duration_s, it.transfer_count))
        return itineraries[: self.config.max_results]

    def _plan_from_stop(
        self,
        candidate: NearbyStop,
        dest_candidates: list[NearbyStop],
        *,
        endpoints: JourneyEndpoints,
        depart_s: int,
    ) -> list[Itinerary]:
        board_time_s = depart_s + walk_seconds(
            candidate.distance_m, self.config.walking_speed_mps
        )
        result = propagate(
            self.graph,
            origin_stop_id=candidate.stop.id,
            board_time_s=board_time_s,
            max_rounds=self.config.max_rounds,
            travel_time=self._travel_time(),
        )

        reconstruct = (
            reconstruct_single_ride
            if self.config.reconstruction == "single_ride"
            else reconstruct_full_chain
        )

        out: list[Itinerary] = []
        for dest in dest_candidates:
            try:
                label = earliest_arrival_label(result, dest.stop.id)
            except NoPathFound:
                logger.debug(
                    "No route found from %s to %s", candidate.stop.id, dest.stop.id
                )
                continue
            out.append(reconstruct(self.graph, label, endpoints))
        return out

    def _travel_time(self) -> TravelTimeModel:
        if self.travel_time is not None:
            return self.travel_time
        return HeadwayTravelTime(
            seconds_per_hop=self.config.seconds_per_hop,
            average_wait_s=self.config.average_wait_s,
        )
