"""Shared request dependencies and error translation for the routers."""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status

from ..errors import (
    CoordinateAlreadyResolved,
    EmptyItinerary,
    IncompleteItinerary,
    InvalidOptimizerResponse,
    InvalidPermutation,
    NotFound,
    OptimizationFailed,
    OutOfRange,
    SequencingInProgress,
    StopPlannerError,
    TransientError,
    UnknownStop,
)
from ..services.itinerary.service import ItinerarySession

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[StopPlannerError], int] = {
    UnknownStop: status.HTTP_404_NOT_FOUND,
    OutOfRange: status.HTTP_400_BAD_REQUEST,
    InvalidPermutation: status.HTTP_400_BAD_REQUEST,
    EmptyItinerary: status.HTTP_409_CONFLICT,
    IncompleteItinerary: status.HTTP_409_CONFLICT,
    CoordinateAlreadyResolved: status.HTTP_409_CONFLICT,
    SequencingInProgress: status.HTTP_409_CONFLICT,
    NotFound: status.HTTP_422_UNPROCESSABLE_ENTITY,
    TransientError: status.HTTP_502_BAD_GATEWAY,
    OptimizationFailed: status.HTTP_502_BAD_GATEWAY,
    InvalidOptimizerResponse: status.HTTP_502_BAD_GATEWAY,
}


def get_session(request: Request) -> ItinerarySession:
    return request.app.state.itinerary


def http_error(exc: Exception) -> HTTPException:
    """Translate a named condition (or a plain ValueError) into an HTTPException."""
    if isinstance(exc, StopPlannerError):
        status_code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        detail: dict = {"error": exc.code, "message": str(exc)}
        if isinstance(exc, IncompleteItinerary):
            detail["pending_stop_ids"] = list(exc.pending_ids)
    elif isinstance(exc, ValueError):
        status_code = status.HTTP_400_BAD_REQUEST
        detail = {"error": "ValueError", "message": str(exc)}
    else:
        logger.exception(f"Unexpected error: {exc}")
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        detail = {"error": type(exc).__name__, "message": str(exc)}
    return HTTPException(status_code=status_code, detail=detail)
