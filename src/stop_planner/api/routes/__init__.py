"""Route group exports."""

from . import health, itinerary, stops

__all__ = ["health", "itinerary", "stops"]
