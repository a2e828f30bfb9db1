from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator

import pytest

from journey_planner.adapters.api.dependencies import get_planning_service

_ENV_VARS = (
    "WALK_SPEED_MPS",
    "MAX_ROUNDS",
    "MAX_WALK_RADIUS_M",
    "MAX_CANDIDATE_STOPS",
    "MAX_RESULTS",
    "TRANSFER_RADIUS_M",
    "RECONSTRUCTION_MODE",
    "PLANNER_MAX_WORKERS",
)


def _network_document() -> dict:
    """Two lines meeting at P4, exported in the dashboard's field names."""

    lat, lon = 28.10, -15.43
    stops = [
        {"id_parada": f"P{k + 1}", "nombre": f"Parada {k + 1}",
         "coordenadas": {"lat": lat, "lng": lon + 0.004 * k}}
        for k in range(4)
    ]
    stops += [
        {"id": "P5", "name": "Parada 5", "latitude": lat + 0.004, "longitude": lon + 0.012},
        {"id": "P6", "name": "Parada 6", "latitude": lat + 0.008, "longitude": lon + 0.012},
        {"id": "P7", "name": "Sin coordenadas"},
    ]
    return {
        "version": "integration",
        "stops": stops,
        "routes": [
            {"id_ruta": "L1", "nombre": "Linea 1", "paradas": ["P1", "P2", "P3", "P4"]},
            {"id_ruta": "L2", "nombre": "Linea 2", "paradas": ["P4", "P7", "P5", "P6"]},
        ],
    }


@pytest.fixture
def network_snapshot_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Path]:
    """Write a snapshot to disk and point the API's repository at it."""

    path = tmp_path / "network.json"
    path.write_text(json.dumps(_network_document()), encoding="utf-8")

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NETWORK_SNAPSHOT_PATH", str(path))

    get_planning_service.cache_clear()
    yield path
    get_planning_service.cache_clear()
