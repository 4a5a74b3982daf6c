"""FastAPI application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import health, itinerary, stops
from .config import settings
from .services.geocoding.nominatim_client import NominatimClient
from .services.itinerary.service import ItinerarySession
from .services.routing.osrm_client import OSRMClient


def build_session() -> ItinerarySession:
    return ItinerarySession(
        geocoder=NominatimClient(),
        optimizer=OSRMClient(),
        delay_per_stop_minutes=settings.default_delay_per_stop_minutes,
    )


def create_app(session: ItinerarySession | None = None) -> FastAPI:
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title=settings.app_name)
    app.state.itinerary = session or build_session()

    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(stops.router, prefix=settings.api_prefix)
    app.include_router(itinerary.router, prefix=settings.api_prefix)
    return app


app = create_app()
