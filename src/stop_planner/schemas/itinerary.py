"""Itinerary request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field


class AddStopRequest(BaseModel):
    address: str = Field(..., min_length=1, description="Free-text street address of the stop.")


class UpdateStopRequest(BaseModel):
    visited: bool


class ReorderRequest(BaseModel):
    stop_ids: List[str] = Field(..., description="Every current stop id, in the desired order.")


class DelayRequest(BaseModel):
    # Range is enforced by the store so the API reports the same OutOfRange condition
    minutes: int = Field(..., description="Dwell time added per stop, 0-30 minutes.")


class StopModel(BaseModel):
    id: str
    position: int
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    visited: bool
    eta: Optional[datetime] = None
    eta_label: Optional[str] = None
    navigation_url: str


class MapMarkerModel(BaseModel):
    stop_id: str
    label: str
    position: Tuple[float, float]


class MapViewModel(BaseModel):
    center: Tuple[float, float]
    markers: List[MapMarkerModel]
    polyline: List[Tuple[float, float]]


class ItineraryResponse(BaseModel):
    delay_per_stop_minutes: int
    stops: List[StopModel]
    pending_stop_ids: List[str]
    map: MapViewModel


class AddStopResponse(BaseModel):
    stop: StopModel
    geocode_error: Optional[str] = Field(
        default=None, description="Condition name when the address could not be resolved (NotFound, TransientError)."
    )
    geocode_message: Optional[str] = None


class SequencingResponse(BaseModel):
    started_at: datetime
    delay_per_stop_minutes: int
    order: List[str]
    itinerary: ItineraryResponse
