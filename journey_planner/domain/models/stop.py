from __future__ import annotations

from dataclasses import dataclass

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class Stop:
    """A boarding/alighting point of the network snapshot.

    `location` is None when the data layer could not read usable
    coordinates; such stops are kept for display but never searched.
    """

    id: str
    name: str
    location: GeoPoint | None
    code: str | None = None

    @property
    def is_routable(self) -> bool:
        return self.location is not None
