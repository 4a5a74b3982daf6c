from datetime import datetime

import pytest

from stop_planner.config import settings
from stop_planner.services.itinerary.store import StopStore
from stop_planner.services.outputs.itinerary_formatter import (
    format_eta,
    itinerary_to_csv,
    itinerary_to_json,
    map_center,
    navigation_link,
)


def test_navigation_link_encodes_destination():
    link = navigation_link("800 Robson St, Vancouver & Co")

    assert link == (
        "https://www.google.com/maps/dir/?api=1"
        "&destination=800%20Robson%20St%2C%20Vancouver%20%26%20Co&travelmode=driving"
    )


def test_navigation_link_custom_template():
    link = navigation_link("A/B", template="geo:0,0?q={destination}", travel_mode="walking")

    assert link == "geo:0,0?q=A%2FB"


def test_format_eta():
    assert format_eta(None) is None
    assert format_eta(datetime(2024, 1, 1, 7, 5, 59)) == "07:05"


def test_map_center_falls_back_to_default():
    store = StopStore()
    store.append("Pending")

    assert map_center(store.stops()) == settings.default_map_center


def test_itinerary_to_json_lists_stops_markers_and_polyline():
    store = StopStore(delay_per_stop_minutes=5)
    first = store.append("Depot", (49.0, -123.0))
    second = store.append("Customer", (49.2, -123.2))
    pending = store.append("Nowhere")
    store.set_eta(first.id, datetime(2024, 1, 1, 9, 0))
    store.set_route_geometry([(49.0, -123.0), (49.2, -123.2)])

    payload = itinerary_to_json(store)

    assert payload["delay_per_stop_minutes"] == 5
    assert [stop["id"] for stop in payload["stops"]] == [first.id, second.id, pending.id]
    assert [stop["position"] for stop in payload["stops"]] == [0, 1, 2]
    assert payload["stops"][0]["eta_label"] == "09:00"
    assert payload["stops"][1]["eta"] is None
    assert payload["stops"][2]["latitude"] is None
    assert payload["pending_stop_ids"] == [pending.id]
    assert [marker["stop_id"] for marker in payload["map"]["markers"]] == [first.id, second.id]
    assert payload["map"]["center"] == pytest.approx([49.1, -123.1])
    assert payload["map"]["polyline"] == [[49.0, -123.0], [49.2, -123.2]]


def test_itinerary_to_csv():
    store = StopStore()
    stop = store.append("Depot", (49.0, -123.0))
    store.append("Nowhere")
    store.set_eta(stop.id, datetime(2024, 1, 1, 9, 0))

    lines = itinerary_to_csv(store).strip().splitlines()

    assert lines[0] == "position,stop_id,address,latitude,longitude,visited,eta"
    assert lines[1] == f"0,{stop.id},Depot,49.0,-123.0,False,09:00"
    assert lines[2].endswith(",Nowhere,,,False,")
