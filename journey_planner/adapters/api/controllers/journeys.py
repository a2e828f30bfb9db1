from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from journey_planner.adapters.api.dependencies import get_planning_service
from journey_planner.adapters.api.schemas.journeys import (
    GeoPointSchema,
    ItinerarySchema,
    JourneyRequestSchema,
    JourneyResponseSchema,
    NearbyStopSchema,
    SegmentSchema,
    StopSchema,
)
from journey_planner.app.services.journey_planning_service import (
    JourneyPlanningService,
)
from journey_planner.domain.models import GeoPoint, Itinerary, Stop

router = APIRouter(tags=["journeys"])


def _stop_to_schema(stop: Stop) -> StopSchema:
    return StopSchema(
        id=stop.id,
        name=stop.name,
        code=stop.code,
        location=(
            GeoPointSchema(lat=stop.location.lat, lon=stop.location.lon)
            if stop.location
            else None
        ),
    )


def _itinerary_to_schema(itinerary: Itinerary) -> ItinerarySchema:
    return ItinerarySchema(
        segments=[
            SegmentSchema(
                kind=seg.kind.value,
                from_id=seg.from_id,
                to_id=seg.to_id,
                from_name=seg.from_name,
                to_name=seg.to_name,
                depart_at=seg.depart_at,
                arrive_at=seg.arrive_at,
                duration_s=seg.duration_s,
                distance_m=seg.distance_m,
                route_id=seg.route_id,
                route_name=seg.route_name,
                stops=[_stop_to_schema(s) for s in seg.stops],
                instruction=seg.instruction,
            )
            for seg in itinerary.segments
        ],
        total_duration_s=itinerary.total_duration_s,
        transfer_count=itinerary.transfer_count,
        total_walk_m=itinerary.total_walk_m,
        origin_stop_id=itinerary.origin_stop_id,
        destination_stop_id=itinerary.destination_stop_id,
    )


@router.post("/journeys", response_model=JourneyResponseSchema)
def plan_journeys(
    req: JourneyRequestSchema,
    service: JourneyPlanningService = Depends(get_planning_service),
) -> JourneyResponseSchema:
    itineraries = service.plan_journeys(
        origin=GeoPoint(lat=req.origin.lat, lon=req.origin.lon),
        destination=GeoPoint(lat=req.destination.lat, lon=req.destination.lon),
        depart_at=req.depart_at,
    )
    return JourneyResponseSchema(
        itineraries=[_itinerary_to_schema(it) for it in itineraries]
    )


@router.get("/stops/nearby", response_model=list[NearbyStopSchema])
def nearby_stops(
    lat: float = Query(..., ge=-90.0, le=90.0),
    lon: float = Query(..., ge=-180.0, le=180.0),
    radius_m: float | None = Query(default=None, ge=0.0),
    limit: int | None = Query(default=None, ge=1, le=50),
    service: JourneyPlanningService = Depends(get_planning_service),
) -> list[NearbyStopSchema]:
    return [
        NearbyStopSchema(stop=_stop_to_schema(n.stop), distance_m=n.distance_m)
        for n in service.nearby_stops(
            point=GeoPoint(lat=lat, lon=lon), radius_m=radius_m, limit=limit
        )
    ]
