"""Optimize-and-stamp sequencing runs over a StopStore.

A run snapshots the itinerary, asks the trip optimizer for a visiting order,
applies that order to the store and stamps each stop with an ETA that grows by
the configured per-stop delay. Preconditions and the optimizer answer are
checked before anything is written, so a failed run leaves the store exactly
as it found it.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Protocol, Sequence

from ...errors import (
    EmptyItinerary,
    IncompleteItinerary,
    InvalidOptimizerResponse,
    SequencingInProgress,
)
from ...models.domain import Coordinate, OptimizedTrip, RouteGeometry
from .models import SequencingResult, SequencingState
from .store import StopStore

logger = logging.getLogger(__name__)


class TripOptimizer(Protocol):
    def trip(self, coordinates: Sequence[Coordinate], source_fixed: bool = True) -> OptimizedTrip:
        ...


def validate_permutation(permutation: Sequence[Any], size: int) -> tuple[int, ...]:
    """Return ``permutation`` as ints if it is a permutation of ``range(size)``."""
    values = tuple(permutation)
    if len(values) != size:
        raise InvalidOptimizerResponse(
            f"Optimizer returned {len(values)} waypoint indices for {size} stops."
        )
    if any(isinstance(value, bool) or not isinstance(value, int) for value in values):
        raise InvalidOptimizerResponse(f"Optimizer returned non-integer waypoint indices: {values!r}")
    if set(values) != set(range(size)):
        raise InvalidOptimizerResponse(f"Waypoint indices {values!r} are not a permutation of 0..{size - 1}.")
    return values


def flip_geometry(points: Sequence[Sequence[Any]]) -> RouteGeometry:
    """Convert wire-order (lon, lat) points to the internal (lat, lon) order."""
    flipped: list[Coordinate] = []
    for point in points:
        try:
            lon, lat = point[0], point[1]
            flipped.append((float(lat), float(lon)))
        except (IndexError, KeyError, TypeError, ValueError) as exc:
            raise InvalidOptimizerResponse(f"Malformed geometry point {point!r}") from exc
    return tuple(flipped)


def derive_etas(start: datetime, count: int, delay_minutes: int) -> tuple[datetime, ...]:
    step = timedelta(minutes=delay_minutes)
    return tuple(start + step * index for index in range(count))


class SequencingEngine:
    """Runs one sequencing pass at a time against a single store.

    A second ``run`` issued while one is outstanding is rejected with
    SequencingInProgress rather than queued.
    """

    def __init__(
        self,
        store: StopStore,
        optimizer: TripOptimizer,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.optimizer = optimizer
        self.clock = clock
        self.state = SequencingState.IDLE
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def run(self) -> SequencingResult:
        if not self._lock.acquire(blocking=False):
            raise SequencingInProgress()
        try:
            return self._run()
        except Exception:
            self.state = SequencingState.IDLE
            raise
        finally:
            self._lock.release()

    def _run(self) -> SequencingResult:
        self.state = SequencingState.VALIDATING
        started_at = self.clock()
        stops = self.store.stops()
        if not stops:
            raise EmptyItinerary()
        pending = [stop.id for stop in stops if stop.coordinate is None]
        if pending:
            logger.info(f"Sequencing refused: {len(pending)} of {len(stops)} stops are not geocoded")
            raise IncompleteItinerary(pending)

        ids = [stop.id for stop in stops]
        coordinates = [stop.coordinate for stop in stops]

        self.state = SequencingState.OPTIMIZING
        if len(ids) == 1:
            # Nothing to optimize and OSRM rejects single-point trips
            lat, lon = coordinates[0]
            trip = OptimizedTrip(permutation=(0,), geometry=((lon, lat),))
        else:
            trip = self.optimizer.trip(coordinates, source_fixed=True)

        try:
            visiting_order = validate_permutation(trip.permutation, len(ids))
            geometry = flip_geometry(trip.geometry)
        except InvalidOptimizerResponse as exc:
            logger.error(f"Discarding optimizer response: {exc}")
            raise

        self.state = SequencingState.APPLYING
        new_order = [ids[input_index] for input_index in visiting_order]
        delay = self.store.delay_per_stop_minutes
        etas = derive_etas(started_at, len(new_order), delay)
        self.store.apply_sequence(new_order, etas, geometry)

        self.state = SequencingState.DONE
        logger.info(
            f"Sequenced {len(new_order)} stops with {delay} min per stop; "
            f"geometry has {len(geometry)} points"
        )
        return SequencingResult(
            order=tuple(new_order),
            etas=etas,
            geometry=geometry,
            started_at=started_at,
            delay_per_stop_minutes=delay,
        )
