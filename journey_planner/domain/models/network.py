from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from .stop import Stop


@dataclass(frozen=True, slots=True)
class Route:
    """A transit line with a single fixed stop pattern."""

    id: str
    name: str
    stop_ids: tuple[str, ...] = ()
    color: str | None = None  # hex without '#'


@dataclass(frozen=True, slots=True)
class Trip:
    """One scheduled run of a route.

    `stop_times` maps stop id -> arrival in seconds since service day midnight.
    """

    id: str
    route_id: str
    stop_times: Mapping[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class NetworkSnapshot:
    """Read-only stops/routes collections handed over by the data layer.

    `trips` is optional; without it ride times are estimated from headways.
    """

    stops: tuple[Stop, ...] = field(default_factory=tuple)
    routes: tuple[Route, ...] = field(default_factory=tuple)
    trips: tuple[Trip, ...] = field(default_factory=tuple)
    version: str | None = None
