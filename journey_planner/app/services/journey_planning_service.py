from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime

from journey_planner.app.ports.output import INetworkSnapshotRepository
from journey_planner.domain.algorithms.nearest_stops import NearbyStop
from journey_planner.domain.algorithms.raptor import (
    HeadwayTravelTime,
    TimetableTravelTime,
    TravelTimeModel,
)
from journey_planner.domain.models import (
    GeoPoint,
    Itinerary,
    NetworkSnapshot,
    PlannerConfig,
)

from .journey_planner import JourneyPlanner


@dataclass(slots=True)
class JourneyPlanningService:
    """Application service (use case) for journey planning.

    Loads the snapshot through its port and keeps one planner (and so one
    network graph) per snapshot object. Snapshots carrying trips are planned
    on their timetable; routes without trips keep the headway estimate.
    """

    snapshot_repository: INetworkSnapshotRepository
    config: PlannerConfig = field(default_factory=PlannerConfig)

    _snapshot: NetworkSnapshot | None = field(default=None, init=False, repr=False)
    _planner: JourneyPlanner | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def plan_journeys(
        self,
        *,
        origin: GeoPoint,
        destination: GeoPoint,
        depart_at: datetime | None = None,
    ) -> list[Itinerary]:
        # Labels are whole seconds; keep the first segment at the requested time.
        depart_at = (depart_at or datetime.now()).replace(microsecond=0)
        return self.planner().plan(
            origin=origin, destination=destination, depart_at=depart_at
        )

    def nearby_stops(
        self,
        *,
        point: GeoPoint,
        radius_m: float | None = None,
        limit: int | None = None,
    ) -> list[NearbyStop]:
        return self.planner().nearby_stops(
            point, max_results=limit, max_radius_m=radius_m
        )

    def planner(self) -> JourneyPlanner:
        snapshot = self.snapshot_repository.load_snapshot()
        with self._lock:
            if self._planner is None or snapshot is not self._snapshot:
                self._planner = JourneyPlanner.from_collections(
                    snapshot.stops,
                    snapshot.routes,
                    self.config,
                    travel_time=self._travel_time(snapshot),
                )
                self._snapshot = snapshot
            return self._planner

    def _travel_time(self, snapshot: NetworkSnapshot) -> TravelTimeModel | None:
        if not snapshot.trips:
            return None
        return TimetableTravelTime.from_trips(
            snapshot.trips,
            fallback=HeadwayTravelTime(
                seconds_per_hop=self.config.seconds_per_hop,
                average_wait_s=self.config.average_wait_s,
            ),
        )
