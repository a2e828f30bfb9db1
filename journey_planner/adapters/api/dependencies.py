from __future__ import annotations

import os
from functools import lru_cache

from journey_planner.adapters.persistence.local_snapshot_repository import (
    LocalSnapshotRepository,
)
from journey_planner.app.services.journey_planning_service import (
    JourneyPlanningService,
)
from journey_planner.domain.models import PlannerConfig


def planner_config_from_env() -> PlannerConfig:
    """Build the planner configuration, allowing tuning via env without changing code."""

    overrides: dict[str, object] = {}
    if os.getenv("WALK_SPEED_MPS"):
        overrides["walking_speed_mps"] = float(os.environ["WALK_SPEED_MPS"])
    if os.getenv("MAX_ROUNDS"):
        overrides["max_rounds"] = int(os.environ["MAX_ROUNDS"])
    if os.getenv("MAX_WALK_RADIUS_M"):
        overrides["max_walk_radius_m"] = float(os.environ["MAX_WALK_RADIUS_M"])
    if os.getenv("MAX_CANDIDATE_STOPS"):
        overrides["max_candidate_stops"] = int(os.environ["MAX_CANDIDATE_STOPS"])
    if os.getenv("MAX_RESULTS"):
        overrides["max_results"] = int(os.environ["MAX_RESULTS"])
    if os.getenv("TRANSFER_RADIUS_M"):
        overrides["transfer_radius_m"] = float(os.environ["TRANSFER_RADIUS_M"])
    if os.getenv("RECONSTRUCTION_MODE"):
        overrides["reconstruction"] = os.environ["RECONSTRUCTION_MODE"].strip().lower()
    if os.getenv("PLANNER_MAX_WORKERS"):
        overrides["max_workers"] = int(os.environ["PLANNER_MAX_WORKERS"])

    return PlannerConfig(**overrides)  # type: ignore[arg-type]


@lru_cache(maxsize=1)
def get_planning_service() -> JourneyPlanningService:
    # Cached so the network graph built from the snapshot survives across requests.
    return JourneyPlanningService(
        snapshot_repository=LocalSnapshotRepository(),
        config=planner_config_from_env(),
    )
