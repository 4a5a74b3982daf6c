import httpx
import pytest

from stop_planner.errors import NotFound, TransientError
from stop_planner.services.geocoding.nominatim_client import NominatimClient


def _client(handler) -> NominatimClient:
    return NominatimClient(
        base_url="http://geocoder.test",
        user_agent="stop-planner-tests",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


def test_resolve_returns_first_match_as_lat_lon():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        seen["user_agent"] = request.headers["User-Agent"]
        return httpx.Response(
            200,
            json=[
                {"lat": "49.2827", "lon": "-123.1207", "display_name": "Vancouver"},
                {"lat": "0", "lon": "0", "display_name": "Elsewhere"},
            ],
        )

    coordinate = _client(handler).resolve("  800 Robson St, Vancouver  ")

    assert coordinate == (49.2827, -123.1207)
    assert seen["params"]["q"] == "800 Robson St, Vancouver"
    assert seen["params"]["format"] == "json"
    assert seen["user_agent"] == "stop-planner-tests"


def test_empty_result_set_is_not_found():
    with pytest.raises(NotFound) as excinfo:
        _client(lambda request: httpx.Response(200, json=[])).resolve("Nowhere Lane")

    assert excinfo.value.address == "Nowhere Lane"


@pytest.mark.parametrize("response", [
    httpx.Response(503, text="Service Unavailable"),
    httpx.Response(200, text="not json"),
    httpx.Response(200, json={"error": "unexpected"}),
    httpx.Response(200, json=[{"display_name": "no coordinates"}]),
])
def test_provider_failures_are_transient(response):
    with pytest.raises(TransientError):
        _client(lambda request: response).resolve("1 Main St")


def test_network_failure_is_transient_and_not_retried():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(TransientError):
        _client(handler).resolve("1 Main St")

    assert len(calls) == 1


def test_blank_address_is_rejected_before_any_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(ValueError):
        _client(handler).resolve("   ")
