"""Canonical ordered stop sequence and per-stop delay configuration."""

from __future__ import annotations

import logging
import threading
import uuid
from collections import Counter
from datetime import datetime
from typing import Iterable, Iterator, Sequence

from ...errors import CoordinateAlreadyResolved, InvalidPermutation, OutOfRange, UnknownStop
from ...models.domain import Coordinate, RouteGeometry, Stop

MIN_DELAY_PER_STOP_MINUTES = 0
MAX_DELAY_PER_STOP_MINUTES = 30

logger = logging.getLogger(__name__)


def _validate_delay(minutes: object) -> int:
    # bool is an int subclass; True must not pass as one minute
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise OutOfRange(f"Delay per stop must be an integer, got {minutes!r}.")
    if not MIN_DELAY_PER_STOP_MINUTES <= minutes <= MAX_DELAY_PER_STOP_MINUTES:
        raise OutOfRange(
            f"Delay per stop must be between {MIN_DELAY_PER_STOP_MINUTES} and "
            f"{MAX_DELAY_PER_STOP_MINUTES} minutes, got {minutes}."
        )
    return minutes


class StopStore:
    """Ordered itinerary plus an id index for constant-time lookups.

    Stamped ETAs and the route geometry are derived data: they are dropped
    whenever the order changes, a stop is removed, or the delay changes, and
    only a new sequencing run restores them.

    FastAPI runs sync endpoints in a threadpool, so every reader and mutator
    holds a re-entrant lock; readers hand out snapshots, never live views.
    """

    def __init__(self, delay_per_stop_minutes: int = 0) -> None:
        self._default_delay = _validate_delay(delay_per_stop_minutes)
        self._order: list[str] = []
        self._stops: dict[str, Stop] = {}
        self._delay = self._default_delay
        self._geometry: RouteGeometry = ()
        self._lock = threading.RLock()


    # ----------------
    # Readers
    # ----------------
    def __len__(self) -> int:
        with self._lock:
            return len(self._order)

    def __iter__(self) -> Iterator[Stop]:
        return iter(self.stops())

    def __contains__(self, stop_id: object) -> bool:
        with self._lock:
            return stop_id in self._stops

    def get(self, stop_id: str) -> Stop:
        with self._lock:
            try:
                return self._stops[stop_id]
            except KeyError:
                raise UnknownStop(stop_id) from None

    def locate(self, stop_id: str) -> tuple[int, Stop]:
        """Return the stop and its current position, read under one lock."""
        with self._lock:
            stop = self.get(stop_id)
            return self._order.index(stop_id), stop

    def ids(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._order)

    def stops(self) -> tuple[Stop, ...]:
        with self._lock:
            return tuple(self._stops[stop_id] for stop_id in self._order)

    @property
    def delay_per_stop_minutes(self) -> int:
        return self._delay

    @property
    def route_geometry(self) -> RouteGeometry:
        return self._geometry

    # ----------------
    # Mutations
    # ----------------
    def append(self, address: str, coordinate: Coordinate | None = None) -> Stop:
        with self._lock:
            stop_id = uuid.uuid4().hex
            while stop_id in self._stops:
                stop_id = uuid.uuid4().hex
            stop = Stop(id=stop_id, address=address, coordinate=coordinate)
            self._stops[stop_id] = stop
            self._order.append(stop_id)
            position = len(self._order) - 1
        logger.debug(f"Appended stop {stop_id} ({'resolved' if coordinate else 'pending'}) at position {position}")
        return stop

    def replace_order(self, stop_ids: Sequence[str]) -> None:
        """Make ``stop_ids`` the new iteration order.

        Raises InvalidPermutation unless ``stop_ids`` holds exactly the current
        ids, each once.
        """
        new_order = list(stop_ids)
        with self._lock:
            if len(new_order) != len(self._order) or Counter(new_order) != Counter(self._order):
                raise InvalidPermutation(
                    f"Expected a permutation of {len(self._order)} stop ids, got {len(new_order)} ids "
                    f"that do not match the itinerary."
                )
            if new_order == self._order:
                return
            self._order = new_order
            self._invalidate_derived()

    def apply_sequence(
        self,
        stop_ids: Sequence[str],
        etas: Sequence[datetime],
        geometry: Iterable[Coordinate],
    ) -> None:
        """Reorder, stamp ETAs and store the route geometry as one step.

        Nothing changes when ``stop_ids`` is not a permutation of the current ids.
        """
        if len(etas) != len(stop_ids):
            raise ValueError(f"Got {len(etas)} ETAs for {len(stop_ids)} stops.")
        with self._lock:
            self.replace_order(stop_ids)
            for stop_id, eta in zip(stop_ids, etas):
                self._stops[stop_id].eta = eta
            self._geometry = tuple(geometry)

    def set_eta(self, stop_id: str, eta: datetime | None) -> None:
        with self._lock:
            self.get(stop_id).eta = eta

    def set_visited(self, stop_id: str, visited: bool) -> Stop:
        with self._lock:
            stop = self.get(stop_id)
            stop.visited = bool(visited)
            return stop

    def resolve_coordinate(self, stop_id: str, coordinate: Coordinate) -> Stop:
        with self._lock:
            stop = self.get(stop_id)
            if stop.coordinate is not None:
                raise CoordinateAlreadyResolved(stop_id)
            stop.coordinate = coordinate
            return stop

    def remove(self, stop_id: str) -> Stop:
        with self._lock:
            stop = self._stops.pop(stop_id, None)
            if stop is None:
                raise UnknownStop(stop_id)
            self._order.remove(stop_id)
            self._invalidate_derived()
            return stop

    def set_delay_per_stop(self, minutes: int) -> None:
        minutes = _validate_delay(minutes)
        with self._lock:
            if minutes == self._delay:
                return
            self._delay = minutes
            self._clear_etas()

    def set_route_geometry(self, points: Iterable[Coordinate]) -> None:
        geometry = tuple(points)
        with self._lock:
            self._geometry = geometry

    def clear(self) -> None:
        """Drop every stop and restore the construction-time delay."""
        with self._lock:
            self._order.clear()
            self._stops.clear()
            self._delay = self._default_delay
            self._geometry = ()

    def _clear_etas(self) -> None:
        for stop in self._stops.values():
            stop.eta = None

    def _invalidate_derived(self) -> None:
        self._clear_etas()
        self._geometry = ()
