from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from journey_planner.domain.exceptions import NoPathFound
from journey_planner.domain.models import Route, Trip

from .network_graph import NetworkGraph

DEFAULT_MAX_ROUNDS = 3


class TravelTimeModel(ABC):
    """Ride time between two positions of a route's stop pattern.

    Positions index `route.stop_ids`; `alight_pos > board_pos` always holds.
    `board_time_s` is the rider's arrival at the boarding stop; the returned
    time includes any wait there. None means no vehicle can be caught.
    """

    @abstractmethod
    def ride_seconds(
        self, route: Route, board_pos: int, alight_pos: int, board_time_s: int
    ) -> int | None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class HeadwayTravelTime(TravelTimeModel):
    """Schedule-free estimate: fixed time per stop hop plus one average wait."""

    seconds_per_hop: int = 120
    average_wait_s: int = 300

    def ride_seconds(
        self, route: Route, board_pos: int, alight_pos: int, board_time_s: int
    ) -> int:
        return self.seconds_per_hop * (alight_pos - board_pos) + self.average_wait_s


@dataclass(frozen=True, slots=True)
class TimetableTravelTime(TravelTimeModel):
    """Ride times read from scheduled trips.

    Among the route's trips that reach the boarding stop at or after
    `board_time_s` and later serve the alighting stop, the one arriving
    first is taken; the result is the wait plus that trip's run time.
    Routes without trips use `fallback`, or cannot be boarded without one.
    """

    trips: Mapping[str, tuple[Mapping[str, int], ...]]
    fallback: TravelTimeModel | None = None

    @classmethod
    def from_trips(
        cls, trips: Iterable[Trip], fallback: TravelTimeModel | None = None
    ) -> TimetableTravelTime:
        by_route: dict[str, list[Mapping[str, int]]] = {}
        for trip in trips:
            by_route.setdefault(trip.route_id, []).append(trip.stop_times)
        return cls(
            trips=MappingProxyType({k: tuple(v) for k, v in by_route.items()}),
            fallback=fallback,
        )

    def ride_seconds(
        self, route: Route, board_pos: int, alight_pos: int, board_time_s: int
    ) -> int | None:
        route_trips = self.trips.get(route.id)
        if not route_trips:
            if self.fallback is None:
                return None
            return self.fallback.ride_seconds(
                route, board_pos, alight_pos, board_time_s
            )

        board_id = route.stop_ids[board_pos]
        alight_id = route.stop_ids[alight_pos]
        best: int | None = None
        for times in route_trips:
            departs = times.get(board_id)
            arrives = times.get(alight_id)
            if departs is None or arrives is None:
                continue
            if departs < board_time_s or arrives < departs:
                continue
            if best is None or arrives < best:
                best = arrives
        return None if best is None else best - board_time_s


@dataclass(frozen=True, slots=True)
class ArrivalLabel:
    """Best known arrival at a stop and how it was reached.

    Times are seconds since service day midnight. `round` is the number of
    transfers made before the last boarding. A ride label records the route
    and the board/alight positions on its pattern; a footpath label records
    the stop it was walked from. `previous` is the label this one extends
    (None for the origin seed).
    """

    stop: int
    arrival_s: int
    round: int = 0
    route: int | None = None
    board_pos: int | None = None
    alight_pos: int | None = None
    walked_from: int | None = None
    walk_m: float | None = None
    previous: ArrivalLabel | None = None

    @property
    def is_ride(self) -> bool:
        return self.route is not None

    @property
    def is_footpath(self) -> bool:
        return self.walked_from is not None

    @property
    def is_origin(self) -> bool:
        return self.previous is None


@dataclass(frozen=True, slots=True)
class RoundLabels:
    """Per-round label maps produced by `propagate`.

    `rounds[k]` maps stop index -> label; `rounds[r + 1]` holds what round r
    reached. Rounds are never mutated after `propagate` returns.
    """

    graph: NetworkGraph
    origin: int
    rounds: tuple[Mapping[int, ArrivalLabel], ...]

    @property
    def round_count(self) -> int:
        return len(self.rounds)

    def labels_for_round(self, k: int) -> dict[str, ArrivalLabel]:
        stops = self.graph.stops
        return {stops[i].id: label for i, label in self.rounds[k].items()}

    def best_label(self, stop_id: str) -> ArrivalLabel | None:
        """Earliest arrival over all rounds; ties go to the lower round."""

        i = self.graph.stop_position(stop_id)
        best: ArrivalLabel | None = None
        for labels in self.rounds:
            label = labels.get(i)
            if label is not None and (best is None or label.arrival_s < best.arrival_s):
                best = label
        return best


def earliest_arrival_label(result: RoundLabels, stop_id: str) -> ArrivalLabel:
    label = result.best_label(stop_id)
    if label is None:
        raise NoPathFound(f"Stop {stop_id} not reachable within the round limit")
    return label


def propagate(
    graph: NetworkGraph,
    *,
    origin_stop_id: str,
    board_time_s: int,
    max_rounds: int = DEFAULT_MAX_ROUNDS,
    travel_time: TravelTimeModel | None = None,
) -> RoundLabels:
    """Round-based earliest-arrival search from a single origin stop.

    Round r boards every route serving a stop labelled in `rounds[r]` and
    relaxes downstream stops into `rounds[r + 1]`, which starts as a copy of
    `rounds[r]` so arrivals never get worse. Stops early once a round
    improves nothing; at most `max_rounds + 1` rounds run, i.e. at most
    `max_rounds` transfers.
    """

    model = travel_time or HeadwayTravelTime()
    origin = graph.stop_position(origin_stop_id)

    rounds: list[dict[int, ArrivalLabel]] = [
        {origin: ArrivalLabel(stop=origin, arrival_s=int(board_time_s))}
    ]

    for r in range(max_rounds + 1):
        current = rounds[r]
        nxt = dict(current)
        rounds.append(nxt)

        marked = sorted({j for i in current for j in graph.stop_routes[i]})
        improved: list[int] = []
        for j in marked:
            improved.extend(_scan_route(graph, j, current, nxt, r, model))

        if improved and graph.has_footpaths:
            improved.extend(_relax_footpaths(graph, improved, nxt, r))

        if not improved:
            break

    return RoundLabels(
        graph=graph,
        origin=origin,
        rounds=tuple(MappingProxyType(labels) for labels in rounds),
    )


def _scan_route(
    graph: NetworkGraph,
    j: int,
    current: Mapping[int, ArrivalLabel],
    nxt: dict[int, ArrivalLabel],
    r: int,
    model: TravelTimeModel,
) -> list[int]:
    route = graph.routes[j]
    pattern = graph.route_stops[j]

    improved: list[int] = []
    board: ArrivalLabel | None = None
    board_pos = -1

    for pos, i in enumerate(pattern):
        label = current.get(i)
        if label is not None and (board is None or label.arrival_s < board.arrival_s):
            # Earlier boarding here; nothing downstream of pos is relaxed at pos itself.
            board = label
            board_pos = pos
            continue

        if board is None:
            continue

        ride_s = model.ride_seconds(route, board_pos, pos, board.arrival_s)
        if ride_s is None:
            if label is not None:
                # Nothing catchable upstream reaches pos; a later vehicle may leave from here.
                board = label
                board_pos = pos
            continue

        arrival_s = board.arrival_s + ride_s
        existing = nxt.get(i)
        if existing is None or arrival_s < existing.arrival_s:
            nxt[i] = ArrivalLabel(
                stop=i,
                arrival_s=arrival_s,
                round=r,
                route=j,
                board_pos=board_pos,
                alight_pos=pos,
                previous=board,
            )
            improved.append(i)

    return improved


def _relax_footpaths(
    graph: NetworkGraph,
    improved: list[int],
    nxt: dict[int, ArrivalLabel],
    r: int,
) -> list[int]:
    # Only stops reached by a ride this round seed a walk: one walk per transfer.
    sources = [nxt[i] for i in dict.fromkeys(improved) if nxt[i].is_ride]

    walked: list[int] = []
    for source in sources:
        for path in graph.footpaths[source.stop]:
            arrival_s = source.arrival_s + path.walk_s
            existing = nxt.get(path.to_stop)
            if existing is None or arrival_s < existing.arrival_s:
                nxt[path.to_stop] = ArrivalLabel(
                    stop=path.to_stop,
                    arrival_s=arrival_s,
                    round=r,
                    walked_from=source.stop,
                    walk_m=path.distance_m,
                    previous=source,
                )
                walked.append(path.to_stop)
    return walked
