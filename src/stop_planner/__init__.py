"""In-memory stop itinerary planner with OSRM trip sequencing."""

__version__ = "0.1.0"
