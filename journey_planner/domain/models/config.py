from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReconstructionMode = Literal["full_chain", "single_ride"]


@dataclass(frozen=True, slots=True)
class PlannerConfig:
    """Tuning knobs of the journey planner.

    Defaults reproduce the behavior of the mobile client:
        - 1.4 m/s walking speed (5 km/h)
        - 120 s per stop hop plus a 300 s average wait per boarding
        - at most 3 transfers, 1 km walking radius, 5 candidate stops per endpoint
        - 3 itineraries returned
        - no walking transfers between stops (transfer_radius_m=0)
    """

    walking_speed_mps: float = 1.4
    seconds_per_hop: int = 120
    average_wait_s: int = 300
    max_rounds: int = 3
    max_walk_radius_m: float = 1000.0
    max_candidate_stops: int = 5
    max_results: int = 3
    transfer_radius_m: float = 0.0
    reconstruction: ReconstructionMode = "full_chain"
    max_workers: int = 1

    def __post_init__(self) -> None:
        if self.walking_speed_mps <= 0:
            raise ValueError(f"Invalid walking speed: {self.walking_speed_mps}")
        if self.seconds_per_hop < 0 or self.average_wait_s < 0:
            raise ValueError("Ride time constants must be non-negative")
        if self.max_rounds < 0:
            raise ValueError(f"Invalid max_rounds: {self.max_rounds}")
        if self.max_walk_radius_m < 0 or self.transfer_radius_m < 0:
            raise ValueError("Walking radii must be non-negative")
        if self.max_candidate_stops < 1 or self.max_results < 1:
            raise ValueError("Candidate and result counts must be at least 1")
        if self.reconstruction not in ("full_chain", "single_ride"):
            raise ValueError(f"Unknown reconstruction mode: {self.reconstruction}")
        if self.max_workers < 1:
            raise ValueError(f"Invalid max_workers: {self.max_workers}")
