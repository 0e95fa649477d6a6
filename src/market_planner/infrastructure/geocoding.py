"""Place search backends.

The planner only needs "text in, coordinate out".  `NominatimGeocoder`
talks to the OpenStreetMap search endpoint; tests and offline runs can
pass any object with a matching `lookup` method.
"""

import logging
from typing import Protocol

import requests

from market_planner.core.errors import GeocodingError
from market_planner.schemas import GeocoderConfig, LatLng

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    """Blocking free-text place lookup."""

    def lookup(self, query: str) -> LatLng | None:
        """Return the best match for `query`, or None if nothing matched.

        Raises:
            GeocodingError: If the service could not be queried.
        """
        ...


class NominatimGeocoder:
    """Geocoder backed by the Nominatim `/search` endpoint."""

    def __init__(
        self,
        config: GeocoderConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or GeocoderConfig()
        self._session = session or requests.Session()

    def lookup(self, query: str) -> LatLng | None:
        logger.info(f"Geocoding request for: {query}")
        try:
            response = self._session.get(
                self.config.url,
                params={"q": query, "format": "json", "limit": 1},
                headers={"User-Agent": self.config.user_agent},
                timeout=self.config.timeout_s,
            )
            response.raise_for_status()
            results = response.json()
        except requests.exceptions.Timeout as e:
            raise GeocodingError(
                f"Search timed out after {self.config.timeout_s}s"
            ) from e
        except requests.exceptions.RequestException as e:
            raise GeocodingError(f"Search request failed: {e}") from e
        except ValueError as e:
            raise GeocodingError("Search returned invalid JSON") from e

        if not results:
            logger.info(f"Geocoding returned no results for: {query}")
            return None

        best = results[0]
        try:
            point = LatLng(lat=float(best["lat"]), lng=float(best["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingError(f"Unexpected search result: {best!r}") from e
        logger.info(f"Geocoding found: {best.get('display_name', query)}")
        return point
