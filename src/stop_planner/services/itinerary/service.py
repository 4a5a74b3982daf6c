"""Itinerary orchestration service."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Protocol

from ...errors import CoordinateAlreadyResolved, NotFound, TransientError
from ...models.domain import Coordinate, Stop
from .engine import SequencingEngine, TripOptimizer
from .models import AddStopOutcome, SequencingResult
from .store import StopStore

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    def resolve(self, address: str) -> Coordinate:
        ...


class ItinerarySession:
    """One user's in-memory itinerary together with the providers it talks to."""

    def __init__(
        self,
        geocoder: Geocoder,
        optimizer: TripOptimizer,
        *,
        delay_per_stop_minutes: int = 0,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.geocoder = geocoder
        self.store = StopStore(delay_per_stop_minutes=delay_per_stop_minutes)
        self.engine = SequencingEngine(self.store, optimizer, clock=clock)


def add_stop(session: ItinerarySession, address: str) -> AddStopOutcome:
    """Geocode ``address`` and append it to the itinerary.

    An address the geocoder cannot resolve (or cannot reach) is still appended,
    without a coordinate, so the user can retry or remove it. The failure is
    reported on the outcome rather than raised.
    """
    cleaned = address.strip()
    if not cleaned:
        raise ValueError("Address must not be blank.")

    try:
        coordinate = session.geocoder.resolve(cleaned)
    except (NotFound, TransientError) as exc:
        logger.warning(f"Geocoding failed for '{cleaned}' ({exc.code}): {exc}")
        stop = session.store.append(cleaned)
        return AddStopOutcome(stop=stop, geocode_error=exc.code, geocode_message=str(exc))

    stop = session.store.append(cleaned, coordinate)
    logger.info(f"Added stop {stop.id} for '{cleaned}'")
    return AddStopOutcome(stop=stop)


def retry_geocoding(session: ItinerarySession, stop_id: str) -> Stop:
    """Geocode a stop that was appended without a coordinate."""
    stop = session.store.get(stop_id)
    if stop.coordinate is not None:
        raise CoordinateAlreadyResolved(stop_id)
    coordinate = session.geocoder.resolve(stop.address)
    return session.store.resolve_coordinate(stop_id, coordinate)


def optimize(session: ItinerarySession) -> SequencingResult:
    return session.engine.run()


def reset(session: ItinerarySession) -> None:
    session.store.clear()
    logger.info("Itinerary reset")
