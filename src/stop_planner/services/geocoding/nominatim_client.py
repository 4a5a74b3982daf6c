"""HTTP client for resolving addresses through Nominatim."""

from __future__ import annotations

import logging

import httpx

from ...config import settings
from ...errors import NotFound, TransientError
from ...models.domain import Coordinate

logger = logging.getLogger(__name__)


class NominatimClient:
    """Address -> (lat, lon) lookup.

    Never retries: a failed lookup raises and the caller decides whether to
    ask again.
    """

    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.nominatim_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("Geocoder base URL is not configured.")
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            transport=self._transport,
        )

    def resolve(self, address: str) -> Coordinate:
        """Return the first match for ``address``.

        Raises:
            ValueError: the address is blank.
            NotFound: the provider returned an empty result set.
            TransientError: network failure, timeout, HTTP error or unreadable body.
        """
        query = address.strip()
        if not query:
            raise ValueError("Address must not be blank.")

        url = f"{self.base_url}/search"
        params = {"format": "json", "q": query, "limit": 1}
        logger.debug(f"Geocoding '{query}' via {url}")

        with self._get_client() as client:
            try:
                response = client.get(url, params=params)
                response.raise_for_status()
                data = response.json()
            except httpx.TimeoutException as exc:
                logger.warning(f"Geocoder timed out for '{query}': {exc}")
                raise TransientError(f"Geocoder timed out: {exc}") from exc
            except httpx.HTTPStatusError as exc:
                logger.warning(f"Geocoder returned HTTP {exc.response.status_code} for '{query}'")
                raise TransientError(f"Geocoder returned HTTP {exc.response.status_code}.") from exc
            except httpx.HTTPError as exc:
                logger.warning(f"Geocoder request failed for '{query}': {exc}")
                raise TransientError(f"Failed to reach geocoder at {self.base_url}: {exc}") from exc
            except ValueError as exc:
                raise TransientError(f"Geocoder returned an unreadable body: {exc}") from exc

        if not isinstance(data, list):
            raise TransientError("Geocoder returned an unexpected payload.")
        if not data:
            raise NotFound(query)

        first = data[0]
        try:
            coordinate = (float(first["lat"]), float(first["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise TransientError(f"Geocoder match has no usable coordinates: {exc}") from exc

        logger.debug(f"Geocoded '{query}' to {coordinate[0]}, {coordinate[1]}")
        return coordinate


def check_health(base_url: str | None = None) -> bool:
    """Check that the geocoder answers a status request."""
    base = (base_url or settings.nominatim_base_url).rstrip("/")
    if not base:
        return False
    try:
        response = httpx.get(
            f"{base}/status",
            params={"format": "json"},
            headers={"User-Agent": settings.geocoder_user_agent},
            timeout=5.0,
        )
        response.raise_for_status()
        return True
    except httpx.HTTPError:
        return False
