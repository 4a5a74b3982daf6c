"""Itinerary endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status

from ...errors import StopPlannerError
from ...schemas.itinerary import DelayRequest, ItineraryResponse, SequencingResponse
from ...services.itinerary.service import ItinerarySession, optimize, reset
from ...services.outputs.itinerary_formatter import itinerary_to_csv, itinerary_to_json
from ..deps import get_session, http_error

router = APIRouter(prefix="/itinerary", tags=["itinerary"])

logger = logging.getLogger(__name__)


@router.get("", response_model=ItineraryResponse, status_code=status.HTTP_200_OK)
def get_itinerary(session: ItinerarySession = Depends(get_session)) -> ItineraryResponse:
    return ItineraryResponse(**itinerary_to_json(session.store))


@router.get("/export.csv", status_code=status.HTTP_200_OK)
def export_itinerary(session: ItinerarySession = Depends(get_session)) -> Response:
    return Response(
        content=itinerary_to_csv(session.store),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="itinerary.csv"'},
    )


@router.post("/optimize", response_model=SequencingResponse, status_code=status.HTTP_200_OK)
def optimize_itinerary(session: ItinerarySession = Depends(get_session)) -> SequencingResponse:
    """Reorder the stops through the trip optimizer and stamp ETAs."""
    try:
        result = optimize(session)
    except StopPlannerError as exc:
        logger.warning(f"Sequencing run failed ({exc.code}): {exc}")
        raise http_error(exc) from exc
    return SequencingResponse(
        started_at=result.started_at,
        delay_per_stop_minutes=result.delay_per_stop_minutes,
        order=list(result.order),
        itinerary=ItineraryResponse(**itinerary_to_json(session.store)),
    )


@router.put("/delay", response_model=ItineraryResponse, status_code=status.HTTP_200_OK)
def set_delay(payload: DelayRequest, session: ItinerarySession = Depends(get_session)) -> ItineraryResponse:
    """Change the per-stop delay. Takes effect on the next optimize run."""
    try:
        session.store.set_delay_per_stop(payload.minutes)
    except StopPlannerError as exc:
        raise http_error(exc) from exc
    return ItineraryResponse(**itinerary_to_json(session.store))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def reset_itinerary(session: ItinerarySession = Depends(get_session)) -> Response:
    reset(session)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
