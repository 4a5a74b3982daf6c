"""HTTP client for interacting with the OSRM trip service."""

from __future__ import annotations

import logging
from typing import Sequence

import httpx

from ...config import settings
from ...errors import InvalidOptimizerResponse, OptimizationFailed
from ...models.domain import Coordinate, OptimizedTrip

logger = logging.getLogger(__name__)


def format_coordinates(coordinates: Sequence[Coordinate]) -> str:
    """Convert (lat, lon) pairs to OSRM's 'lon,lat;lon,lat;...' path segment."""
    return ";".join(f"{lon},{lat}" for lat, lon in coordinates)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self._transport,
        )

    def trip(self, coordinates: Sequence[Coordinate], source_fixed: bool = True) -> OptimizedTrip:
        """Ask OSRM for a visiting order over ``coordinates``.

        Args:
            coordinates: Sequence of (lat, lon) tuples in current itinerary order
            source_fixed: Keep the first coordinate as the trip start

        Returns:
            OptimizedTrip holding input indices in visiting order; geometry is
            left in OSRM's (lon, lat) order.

        Raises:
            OptimizationFailed: transport failure, timeout, or a code other than "Ok".
            InvalidOptimizerResponse: "Ok" payload missing waypoints or trip geometry,
                or waypoint indices that are not a permutation.
        """
        if len(coordinates) < 1:
            raise ValueError("At least one coordinate is required for an OSRM trip.")

        url = f"{self.base_url}/trip/v1/{self.profile}/{format_coordinates(coordinates)}"
        params = {
            "source": "first" if source_fixed else "any",
            "roundtrip": "false",
            "overview": "full",
            "geometries": "geojson",
        }
        logger.debug(f"Requesting OSRM trip for {len(coordinates)} coordinates")

        with self._get_client() as client:
            try:
                response = client.get(url, params=params)
                data = response.json()
            except httpx.TimeoutException as exc:
                logger.warning(f"OSRM trip request timed out: {exc}")
                raise OptimizationFailed(f"OSRM trip request timed out: {exc}") from exc
            except httpx.HTTPError as exc:
                logger.warning(f"OSRM trip request failed: {exc}")
                raise OptimizationFailed(f"Failed to connect to OSRM service at {self.base_url}: {exc}") from exc
            except ValueError as exc:
                raise OptimizationFailed(
                    f"OSRM returned a non-JSON body (HTTP {response.status_code})."
                ) from exc

        # OSRM reports errors in the body, often alongside a 4xx status
        if not isinstance(data, dict) or data.get("code") != "Ok":
            message = data.get("message", "Unknown OSRM trip error") if isinstance(data, dict) else "Unknown OSRM trip error"
            code = data.get("code") if isinstance(data, dict) else None
            logger.warning(f"OSRM trip failed with code {code!r}: {message}")
            raise OptimizationFailed(f"OSRM trip request failed: {message}")

        try:
            trip_positions = [waypoint["waypoint_index"] for waypoint in data["waypoints"]]
            geometry = tuple(tuple(point) for point in data["trips"][0]["geometry"]["coordinates"])
        except (KeyError, IndexError, TypeError) as exc:
            raise InvalidOptimizerResponse(f"OSRM trip response is malformed: {exc!r}") from exc

        return OptimizedTrip(permutation=visiting_order(trip_positions), geometry=geometry)


def visiting_order(trip_positions: Sequence[int]) -> tuple[int, ...]:
    """Invert OSRM's per-input trip positions into input indices in visiting order.

    ``waypoints[i].waypoint_index`` is where input ``i`` lands in the trip, so
    positions ``[0, 3, 1, 2]`` visit inputs ``(0, 2, 3, 1)``.
    """
    size = len(trip_positions)
    if any(isinstance(position, bool) or not isinstance(position, int) for position in trip_positions):
        raise InvalidOptimizerResponse(f"OSRM returned non-integer waypoint indices: {trip_positions!r}")
    if set(trip_positions) != set(range(size)):
        raise InvalidOptimizerResponse(
            f"OSRM waypoint indices {trip_positions!r} are not a permutation of 0..{size - 1}."
        )
    order = [0] * size
    for input_index, position in enumerate(trip_positions):
        order[position] = input_index
    return tuple(order)


def check_health(base_url: str | None = None) -> bool:
    """Check OSRM service health by requesting a minimal two-point trip.

    Public OSRM endpoints may not have a /health endpoint, so connectivity is
    tested with a real request.
    """
    base = (base_url or settings.osrm_base_url).rstrip("/")
    if not base:
        return False
    try:
        # Two coordinates in the Berlin area
        test_coords = "13.388860,52.517037;13.385983,52.496891"
        url = f"{base}/trip/v1/{settings.osrm_profile}/{test_coords}"
        params = {"source": "first", "roundtrip": "false", "overview": "false"}

        response = httpx.get(url, params=params, timeout=5.0)
        response.raise_for_status()
        return response.json().get("code") == "Ok"
    except (httpx.HTTPError, ValueError):
        return False
