"""Named failure conditions raised by the itinerary core and its providers."""

from __future__ import annotations

from typing import Sequence


class StopPlannerError(Exception):
    """Base class; ``code`` is the condition name reported to API clients."""

    code = "StopPlannerError"

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls.code = cls.__name__


# Geocoding provider


class NotFound(StopPlannerError):
    """The geocoder returned no match for the address."""

    def __init__(self, address: str) -> None:
        super().__init__(f"No geocoding match for address '{address}'.")
        self.address = address


class TransientError(StopPlannerError):
    """Network or service failure while geocoding; retry by calling again."""


# Route optimizer provider


class OptimizationFailed(StopPlannerError):
    """The optimizer could not be reached or did not answer with code 'Ok'."""


class InvalidOptimizerResponse(StopPlannerError):
    """The optimizer answered 'Ok' but the payload breaks its contract."""


# Sequencing preconditions


class EmptyItinerary(StopPlannerError):
    def __init__(self) -> None:
        super().__init__("Itinerary has no stops to sequence.")


class IncompleteItinerary(StopPlannerError):
    """At least one stop has no coordinate yet."""

    def __init__(self, pending_ids: Sequence[str]) -> None:
        self.pending_ids = tuple(pending_ids)
        super().__init__(
            f"{len(self.pending_ids)} stop(s) have no resolved coordinate: {', '.join(self.pending_ids)}"
        )


class SequencingInProgress(StopPlannerError):
    def __init__(self) -> None:
        super().__init__("A sequencing run is already in progress.")


# Store contract violations


class InvalidPermutation(StopPlannerError, ValueError):
    """The id sequence is not a permutation of the current stop ids."""


class UnknownStop(StopPlannerError):
    def __init__(self, stop_id: str) -> None:
        super().__init__(f"Stop '{stop_id}' not found.")
        self.stop_id = stop_id


class OutOfRange(StopPlannerError, ValueError):
    """A configuration value falls outside its allowed range."""


class CoordinateAlreadyResolved(StopPlannerError):
    def __init__(self, stop_id: str) -> None:
        super().__init__(f"Stop '{stop_id}' already has a coordinate.")
        self.stop_id = stop_id
