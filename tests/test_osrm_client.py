import httpx
import pytest

from stop_planner.errors import InvalidOptimizerResponse, OptimizationFailed
from stop_planner.services.routing.osrm_client import OSRMClient, format_coordinates, visiting_order


def _client(handler) -> OSRMClient:
    return OSRMClient(base_url="http://osrm.test", profile="driving", timeout=1.0, transport=httpx.MockTransport(handler))


def _ok_payload() -> dict:
    return {
        "code": "Ok",
        "waypoints": [
            {"waypoint_index": 0, "trips_index": 0, "location": [-123.1, 49.25]},
            {"waypoint_index": 2, "trips_index": 0, "location": [-123.0, 49.3]},
            {"waypoint_index": 1, "trips_index": 0, "location": [-123.2, 49.2]},
        ],
        "trips": [
            {
                "geometry": {"type": "LineString", "coordinates": [[-123.1, 49.25], [-123.2, 49.2], [-123.0, 49.3]]},
                "distance": 1234.5,
                "duration": 321.0,
            }
        ],
    }


def test_format_coordinates_swaps_to_lon_lat():
    assert format_coordinates([(49.25, -123.1), (49.3, -123.0)]) == "-123.1,49.25;-123.0,49.3"


def test_trip_builds_request_and_returns_wire_geometry():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=_ok_payload())

    trip = _client(handler).trip([(49.25, -123.1), (49.3, -123.0), (49.2, -123.2)])

    assert seen["path"] == "/trip/v1/driving/-123.1,49.25;-123.0,49.3;-123.2,49.2"
    assert seen["params"]["source"] == "first"
    assert seen["params"]["roundtrip"] == "false"
    assert seen["params"]["geometries"] == "geojson"
    assert trip.permutation == (0, 2, 1)
    assert trip.geometry == ((-123.1, 49.25), (-123.2, 49.2), (-123.0, 49.3))


def test_trip_without_fixed_source():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=_ok_payload())

    _client(handler).trip([(49.25, -123.1), (49.3, -123.0), (49.2, -123.2)], source_fixed=False)

    assert seen["params"]["source"] == "any"


def test_trip_code_other_than_ok_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"code": "NoTrips", "message": "No trip visiting all destinations possible."})

    with pytest.raises(OptimizationFailed, match="No trip visiting"):
        _client(handler).trip([(49.25, -123.1), (49.3, -123.0)])


def test_trip_non_json_body_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad Gateway</html>")

    with pytest.raises(OptimizationFailed):
        _client(handler).trip([(49.25, -123.1), (49.3, -123.0)])


def test_trip_timeout_surfaces_as_optimization_failed():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(OptimizationFailed):
        _client(handler).trip([(49.25, -123.1), (49.3, -123.0)])


def test_trip_connection_error_is_not_retried():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(OptimizationFailed):
        _client(handler).trip([(49.25, -123.1), (49.3, -123.0)])

    assert len(calls) == 1


def test_trip_ok_without_trips_is_invalid_response():
    def handler(request: httpx.Request) -> httpx.Response:
        payload = _ok_payload()
        payload["trips"] = []
        return httpx.Response(200, json=payload)

    with pytest.raises(InvalidOptimizerResponse):
        _client(handler).trip([(49.25, -123.1), (49.3, -123.0), (49.2, -123.2)])


def test_trip_requires_a_coordinate():
    with pytest.raises(ValueError):
        _client(lambda request: httpx.Response(200, json=_ok_payload())).trip([])


def test_trip_inverts_waypoint_positions_into_visiting_order():
    def handler(request: httpx.Request) -> httpx.Response:
        payload = _ok_payload()
        payload["waypoints"] = [{"waypoint_index": index, "trips_index": 0} for index in (0, 3, 1, 2)]
        return httpx.Response(200, json=payload)

    trip = _client(handler).trip([(49.25, -123.1), (49.3, -123.0), (49.2, -123.2), (49.1, -123.3)])

    # input 0 first, then input 2 (position 1), input 3 (position 2), input 1 (position 3)
    assert trip.permutation == (0, 2, 3, 1)


def test_trip_duplicate_waypoint_indices_are_invalid_response():
    def handler(request: httpx.Request) -> httpx.Response:
        payload = _ok_payload()
        payload["waypoints"] = [{"waypoint_index": index, "trips_index": 0} for index in (0, 1, 1)]
        return httpx.Response(200, json=payload)

    with pytest.raises(InvalidOptimizerResponse):
        _client(handler).trip([(49.25, -123.1), (49.3, -123.0), (49.2, -123.2)])


@pytest.mark.parametrize("positions", [[0, 2], [0, "1"], [True, 0], [-1, 0]])
def test_visiting_order_rejects_non_permutations(positions):
    with pytest.raises(InvalidOptimizerResponse):
        visiting_order(positions)


def test_visiting_order_identity_and_rotation():
    assert visiting_order([0, 1, 2]) == (0, 1, 2)
    assert visiting_order([2, 0, 1]) == (1, 2, 0)
