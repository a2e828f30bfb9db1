from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping

from journey_planner.app.ports.output import INetworkSnapshotRepository
from journey_planner.domain.algorithms.service_time import parse_service_time
from journey_planner.domain.models import GeoPoint, NetworkSnapshot, Route, Stop, Trip

logger = logging.getLogger(__name__)

# Field aliases used by the documents the mobile client and dashboard write.
_STOP_ID_KEYS = ("id_parada", "id", "stop_id")
_STOP_NAME_KEYS = ("nombre", "name", "stop_name")
_STOP_CODE_KEYS = ("codigo", "code", "stop_code")
_ROUTE_ID_KEYS = ("id_ruta", "id", "route_id")
_ROUTE_NAME_KEYS = ("nombre", "name", "numero", "route_short_name")
_ROUTE_STOPS_KEYS = ("stopIds", "orderedStopIds", "paradas", "stop_ids")
_TRIP_ID_KEYS = ("id_viaje", "trip_id", "id")
_TRIP_ROUTE_KEYS = ("id_ruta", "ruta_id", "route_id")
_STOP_TIME_TRIP_KEYS = ("id_viaje", "trip_id")
_STOP_TIME_STOP_KEYS = ("id_parada", "stop_id")
_TIME_KEYS = ("tiempo_llegada", "arrival_time", "departure_time")


def _first(raw: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _float(value: Any) -> float | None:
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return out if math.isfinite(out) else None


def parse_location(raw: Mapping[str, Any]) -> GeoPoint | None:
    """Read a coordinate pair from any of the known stop shapes.

    Returns None when no pair is present or the values are not usable.
    """

    candidates: list[tuple[Any, Any]] = []
    coords = raw.get("coordenadas")
    if isinstance(coords, Mapping):
        candidates.append((coords.get("lat"), coords.get("lng", coords.get("lon"))))
    ubicacion = raw.get("ubicacion")
    if isinstance(ubicacion, Mapping):
        candidates.append((ubicacion.get("latitud"), ubicacion.get("longitud")))
    candidates.append((raw.get("lat"), raw.get("lng", raw.get("lon"))))
    candidates.append((raw.get("latitude"), raw.get("longitude")))
    candidates.append((raw.get("stop_lat"), raw.get("stop_lon")))

    for raw_lat, raw_lon in candidates:
        lat = _float(raw_lat)
        lon = _float(raw_lon)
        if lat is None or lon is None:
            continue
        try:
            return GeoPoint(lat=lat, lon=lon)
        except ValueError:
            return None
    return None


def stop_from_record(raw: Mapping[str, Any]) -> Stop | None:
    stop_id = _text(_first(raw, _STOP_ID_KEYS))
    if stop_id is None:
        logger.warning("Stop record without id skipped: %r", dict(raw))
        return None

    location = parse_location(raw)
    if location is None:
        logger.warning("Stop %r has no usable coordinates", stop_id)

    return Stop(
        id=stop_id,
        name=_text(_first(raw, _STOP_NAME_KEYS)) or stop_id,
        location=location,
        code=_text(_first(raw, _STOP_CODE_KEYS)),
    )


def route_from_record(raw: Mapping[str, Any]) -> Route | None:
    route_id = _text(_first(raw, _ROUTE_ID_KEYS))
    if route_id is None:
        logger.warning("Route record without id skipped: %r", dict(raw))
        return None

    stop_ids_raw = _first(raw, _ROUTE_STOPS_KEYS) or []
    if not isinstance(stop_ids_raw, (list, tuple)):
        logger.warning("Route %r has a malformed stop list", route_id)
        stop_ids_raw = []
    stop_ids = tuple(s for s in (_text(v) for v in stop_ids_raw) if s is not None)

    color = _text(raw.get("color"))
    return Route(
        id=route_id,
        name=_text(_first(raw, _ROUTE_NAME_KEYS)) or route_id,
        stop_ids=stop_ids,
        color=color.lstrip("#") if color else None,
    )


def trips_from_records(
    trip_records: Iterable[Mapping[str, Any]],
    stop_time_records: Iterable[Mapping[str, Any]],
) -> tuple[Trip, ...]:
    """Join trip records with their stop times (one record per trip and stop)."""

    times_by_trip: dict[str, dict[str, int]] = {}
    for raw in stop_time_records:
        trip_id = _text(_first(raw, _STOP_TIME_TRIP_KEYS))
        stop_id = _text(_first(raw, _STOP_TIME_STOP_KEYS))
        value = _first(raw, _TIME_KEYS)
        if trip_id is None or stop_id is None or value is None:
            logger.warning("Incomplete stop time skipped: %r", dict(raw))
            continue
        try:
            seconds = parse_service_time(value)
        except ValueError:
            logger.warning("Stop time with bad time skipped: %r", dict(raw))
            continue
        times_by_trip.setdefault(trip_id, {}).setdefault(stop_id, seconds)

    trips: list[Trip] = []
    for raw in trip_records:
        trip_id = _text(_first(raw, _TRIP_ID_KEYS))
        route_id = _text(_first(raw, _TRIP_ROUTE_KEYS))
        if trip_id is None or route_id is None:
            logger.warning("Trip record without id or route skipped: %r", dict(raw))
            continue
        stop_times = times_by_trip.get(trip_id, {})
        if len(stop_times) < 2:
            logger.warning("Trip %r has fewer than 2 stop times; skipped", trip_id)
            continue
        trips.append(Trip(id=trip_id, route_id=route_id, stop_times=stop_times))
    return tuple(trips)


def snapshot_from_document(document: Mapping[str, Any]) -> NetworkSnapshot:
    stops = tuple(
        s
        for s in (stop_from_record(r) for r in document.get("stops") or ())
        if s is not None
    )
    routes = tuple(
        r
        for r in (route_from_record(r) for r in document.get("routes") or ())
        if r is not None
    )
    trips = trips_from_records(
        document.get("viajes") or document.get("trips") or (),
        document.get("tiemposParada") or document.get("stop_times") or (),
    )
    return NetworkSnapshot(
        stops=stops,
        routes=routes,
        trips=trips,
        version=_text(document.get("version")),
    )


@dataclass(slots=True)
class LocalSnapshotRepository(INetworkSnapshotRepository):
    """Loads the network snapshot from a JSON export of the stops/routes collections.

    Document shape: {"stops": [...], "routes": [...], "version": "..."}, plus
    optional "viajes"/"trips" and "tiemposParada"/"stop_times" collections.
    The parsed snapshot is cached until the file's mtime changes.

    Env vars:
      - NETWORK_SNAPSHOT_PATH: path to the JSON document (default data/network.json)
    """

    path: str | Path | None = None

    _cached: NetworkSnapshot | None = field(default=None, init=False, repr=False)
    _cached_key: tuple[str, int] | None = field(default=None, init=False, repr=False)

    def _path(self) -> Path:
        value = self.path or os.getenv("NETWORK_SNAPSHOT_PATH") or "data/network.json"
        return Path(value)

    def load_snapshot(self) -> NetworkSnapshot:
        path = self._path()
        key = (str(path.resolve()), path.stat().st_mtime_ns)
        if self._cached is not None and key == self._cached_key:
            return self._cached

        with path.open("r", encoding="utf-8") as fp:
            document = json.load(fp)
        if not isinstance(document, Mapping):
            raise ValueError(f"Network snapshot {path} must be a JSON object")

        snapshot = snapshot_from_document(document)
        logger.info(
            "Loaded network snapshot %s: %d stops, %d routes, %d trips",
            path,
            len(snapshot.stops),
            len(snapshot.routes),
            len(snapshot.trips),
        )
        self._cached = snapshot
        self._cached_key = key
        return snapshot
