from .config import PlannerConfig, ReconstructionMode
from .geo import GeoPoint
from .itinerary import DESTINATION, ORIGIN, Itinerary, Segment, SegmentKind
from .network import NetworkSnapshot, Route, Trip
from .stop import Stop

__all__ = [
    "DESTINATION",
    "ORIGIN",
    "GeoPoint",
    "Itinerary",
    "NetworkSnapshot",
    "PlannerConfig",
    "ReconstructionMode",
    "Route",
    "Segment",
    "SegmentKind",
    "Stop",
    "Trip",
]
