from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .stop import Stop

ORIGIN = "origin"
DESTINATION = "destination"


class SegmentKind(str, Enum):
    WALK = "walk"
    RIDE = "ride"


@dataclass(frozen=True, slots=True)
class Segment:
    """One leg of an itinerary.

    `from_id`/`to_id` hold a stop id or the literal endpoints
    "origin"/"destination".
    """

    kind: SegmentKind
    from_id: str
    to_id: str
    depart_at: datetime
    arrive_at: datetime
    instruction: str
    from_name: str | None = None
    to_name: str | None = None
    distance_m: float | None = None  # walk legs only
    route_id: str | None = None  # ride legs only
    route_name: str | None = None
    stops: tuple[Stop, ...] = ()

    @property
    def duration_s(self) -> int:
        return int((self.arrive_at - self.depart_at).total_seconds())


@dataclass(frozen=True, slots=True)
class Itinerary:
    segments: tuple[Segment, ...] = field(default_factory=tuple)
    transfer_count: int = 0
    origin_stop_id: str | None = None
    destination_stop_id: str | None = None

    @property
    def total_duration_s(self) -> int:
        # Wall-clock span, so waiting at stops is included.
        if not self.segments:
            return 0
        delta = self.segments[-1].arrive_at - self.segments[0].depart_at
        return int(max(0.0, delta.total_seconds()))

    @property
    def total_walk_m(self) -> float:
        return float(
            sum(
                s.distance_m or 0.0
                for s in self.segments
                if s.kind is SegmentKind.WALK
            )
        )

    @property
    def ride_count(self) -> int:
        return sum(1 for s in self.segments if s.kind is SegmentKind.RIDE)
