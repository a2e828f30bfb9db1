from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class GeoPointSchema(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)


class StopSchema(BaseModel):
    id: str
    name: str
    code: str | None = None
    location: GeoPointSchema | None = None


class SegmentSchema(BaseModel):
    kind: Literal["walk", "ride"]
    from_id: str
    to_id: str
    from_name: str | None = None
    to_name: str | None = None
    depart_at: datetime
    arrive_at: datetime
    duration_s: int
    distance_m: float | None = None
    route_id: str | None = None
    route_name: str | None = None
    stops: list[StopSchema] = []
    instruction: str


class ItinerarySchema(BaseModel):
    segments: list[SegmentSchema] = []
    total_duration_s: int
    transfer_count: int
    total_walk_m: float
    origin_stop_id: str | None = None
    destination_stop_id: str | None = None


class JourneyRequestSchema(BaseModel):
    origin: GeoPointSchema
    destination: GeoPointSchema
    depart_at: datetime | None = None


class JourneyResponseSchema(BaseModel):
    itineraries: list[ItinerarySchema] = []


class NearbyStopSchema(BaseModel):
    stop: StopSchema
    distance_m: float
