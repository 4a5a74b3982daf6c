"""Itinerary store, sequencing engine and orchestration."""

from .engine import SequencingEngine
from .models import AddStopOutcome, SequencingResult, SequencingState
from .service import ItinerarySession, add_stop, optimize, reset, retry_geocoding
from .store import StopStore

__all__ = [
    "AddStopOutcome",
    "ItinerarySession",
    "SequencingEngine",
    "SequencingResult",
    "SequencingState",
    "StopStore",
    "add_stop",
    "optimize",
    "reset",
    "retry_geocoding",
]
