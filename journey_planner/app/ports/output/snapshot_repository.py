from __future__ import annotations

from abc import ABC, abstractmethod

from journey_planner.domain.models import NetworkSnapshot


class INetworkSnapshotRepository(ABC):
    """Port for loading the stops/routes snapshot into memory.

    Implementations should return the same object while the underlying data
    is unchanged so callers can cache derived indices.
    """

    @abstractmethod
    def load_snapshot(self) -> NetworkSnapshot:
        raise NotImplementedError
