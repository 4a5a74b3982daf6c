"""Serializers for the itinerary list/map view and navigation hand-off links."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Sequence
from urllib.parse import quote

from ...config import settings
from ...models.domain import Coordinate, Stop
from ..itinerary.store import StopStore


def navigation_link(
    address: str,
    *,
    template: str | None = None,
    travel_mode: str | None = None,
) -> str:
    """Build the external navigation URL for a destination address."""
    return (template or settings.navigation_url_template).format(
        destination=quote(address, safe=""),
        travel_mode=travel_mode or settings.navigation_travel_mode,
    )


def format_eta(eta: datetime | None) -> str | None:
    if eta is None:
        return None
    return eta.strftime("%H:%M")


def map_center(stops: Sequence[Stop]) -> Coordinate:
    resolved = [stop.coordinate for stop in stops if stop.coordinate is not None]
    if not resolved:
        return settings.default_map_center
    lat = sum(point[0] for point in resolved) / len(resolved)
    lon = sum(point[1] for point in resolved) / len(resolved)
    return (lat, lon)


def stop_to_json(stop: Stop, position: int) -> dict:
    latitude, longitude = stop.coordinate if stop.coordinate is not None else (None, None)
    return {
        "id": stop.id,
        "position": position,
        "address": stop.address,
        "latitude": latitude,
        "longitude": longitude,
        "visited": stop.visited,
        "eta": stop.eta.isoformat() if stop.eta else None,
        "eta_label": format_eta(stop.eta),
        "navigation_url": navigation_link(stop.address),
    }


def itinerary_to_json(store: StopStore) -> dict:
    stops = store.stops()
    return {
        "delay_per_stop_minutes": store.delay_per_stop_minutes,
        "stops": [stop_to_json(stop, position) for position, stop in enumerate(stops)],
        "pending_stop_ids": [stop.id for stop in stops if stop.coordinate is None],
        "map": {
            "center": list(map_center(stops)),
            "markers": [
                {"stop_id": stop.id, "label": stop.address, "position": list(stop.coordinate)}
                for stop in stops
                if stop.coordinate is not None
            ],
            "polyline": [list(point) for point in store.route_geometry],
        },
    }


def itinerary_to_csv(store: StopStore) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "position",
        "stop_id",
        "address",
        "latitude",
        "longitude",
        "visited",
        "eta",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for position, stop in enumerate(store.stops()):
        latitude, longitude = stop.coordinate if stop.coordinate is not None else ("", "")
        writer.writerow(
            {
                "position": position,
                "stop_id": stop.id,
                "address": stop.address,
                "latitude": latitude,
                "longitude": longitude,
                "visited": stop.visited,
                "eta": format_eta(stop.eta) or "",
            }
        )
    return buffer.getvalue()
