"""Domain models for itinerary stops and optimizer results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

# Internal coordinate convention: (lat, lon)
Coordinate = Tuple[float, float]
RouteGeometry = Tuple[Coordinate, ...]


@dataclass(slots=True)
class Stop:
    """One address-bound itinerary entry.

    A stop does not know its own position; the owning store's sequence is the
    only ordering authority.
    """

    id: str
    address: str
    coordinate: Optional[Coordinate] = None
    eta: Optional[datetime] = None
    visited: bool = False

    @property
    def is_resolved(self) -> bool:
        return self.coordinate is not None


@dataclass(slots=True, frozen=True)
class OptimizedTrip:
    """Raw optimizer answer.

    ``permutation`` is the visiting order: input indices, first stop first;
    ``geometry`` is still in wire order (lon, lat).
    """

    permutation: Tuple[int, ...]
    geometry: Tuple[Tuple[float, float], ...] = field(default_factory=tuple)
