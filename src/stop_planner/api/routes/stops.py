"""Stop endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ...errors import StopPlannerError
from ...schemas.itinerary import (
    AddStopRequest,
    AddStopResponse,
    ItineraryResponse,
    ReorderRequest,
    StopModel,
    UpdateStopRequest,
)
from ...services.itinerary.service import ItinerarySession, add_stop, retry_geocoding
from ...services.outputs.itinerary_formatter import itinerary_to_json, stop_to_json
from ..deps import get_session, http_error

router = APIRouter(prefix="/stops", tags=["stops"])


def _stop_model(session: ItinerarySession, stop_id: str) -> StopModel:
    try:
        position, stop = session.store.locate(stop_id)
    except StopPlannerError as exc:
        raise http_error(exc) from exc
    return StopModel(**stop_to_json(stop, position))


@router.post("", response_model=AddStopResponse, status_code=status.HTTP_201_CREATED)
def create_stop(payload: AddStopRequest, session: ItinerarySession = Depends(get_session)) -> AddStopResponse:
    """Geocode and append a stop; unresolved addresses are kept for a later retry."""
    try:
        outcome = add_stop(session, payload.address)
    except (StopPlannerError, ValueError) as exc:
        raise http_error(exc) from exc
    return AddStopResponse(
        stop=_stop_model(session, outcome.stop.id),
        geocode_error=outcome.geocode_error,
        geocode_message=outcome.geocode_message,
    )


@router.put("/order", response_model=ItineraryResponse, status_code=status.HTTP_200_OK)
def reorder_stops(payload: ReorderRequest, session: ItinerarySession = Depends(get_session)) -> ItineraryResponse:
    """Manually reorder the itinerary. Stamped ETAs are dropped when the order changes."""
    try:
        session.store.replace_order(payload.stop_ids)
    except StopPlannerError as exc:
        raise http_error(exc) from exc
    return ItineraryResponse(**itinerary_to_json(session.store))


@router.post("/{stop_id}/geocode", response_model=StopModel, status_code=status.HTTP_200_OK)
def geocode_stop(stop_id: str, session: ItinerarySession = Depends(get_session)) -> StopModel:
    try:
        stop = retry_geocoding(session, stop_id)
    except (StopPlannerError, ValueError) as exc:
        raise http_error(exc) from exc
    return _stop_model(session, stop.id)


@router.patch("/{stop_id}", response_model=StopModel, status_code=status.HTTP_200_OK)
def update_stop(
    stop_id: str, payload: UpdateStopRequest, session: ItinerarySession = Depends(get_session)
) -> StopModel:
    try:
        stop = session.store.set_visited(stop_id, payload.visited)
    except StopPlannerError as exc:
        raise http_error(exc) from exc
    return _stop_model(session, stop.id)


@router.delete("/{stop_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stop(stop_id: str, session: ItinerarySession = Depends(get_session)) -> Response:
    try:
        session.store.remove(stop_id)
    except StopPlannerError as exc:
        raise http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
