"""Sequencing run models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from ...models.domain import RouteGeometry, Stop


class SequencingState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    OPTIMIZING = "optimizing"
    APPLYING = "applying"
    DONE = "done"


@dataclass(slots=True, frozen=True)
class SequencingResult:
    order: Tuple[str, ...]
    etas: Tuple[datetime, ...]
    geometry: RouteGeometry
    started_at: datetime
    delay_per_stop_minutes: int


@dataclass(slots=True, frozen=True)
class AddStopOutcome:
    """A freshly appended stop and, when geocoding failed, the condition name."""

    stop: Stop
    geocode_error: Optional[str] = None
    geocode_message: Optional[str] = None
