"""Asynchronous place search with last-request-wins semantics.

Lookups block on the network, so they run in a worker thread.  Each call
takes a fresh token; when a response arrives after a newer search was
started it is reported as stale and must not move the map.
"""

import asyncio
import itertools
import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict

from market_planner.core.errors import GeocodingError
from market_planner.infrastructure.geocoding import Geocoder
from market_planner.schemas import LatLng

logger = logging.getLogger(__name__)


class SearchStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"
    STALE = "stale"


class SearchOutcome(BaseModel):
    """Result of one search request."""

    query: str
    token: int
    status: SearchStatus
    location: LatLng | None = None
    error: str | None = None

    model_config = ConfigDict(frozen=True)


class SearchCoordinator:
    """Runs geocoder lookups off the event loop and drops stale answers."""

    def __init__(self, geocoder: Geocoder) -> None:
        self.geocoder = geocoder
        self._tokens = itertools.count(1)
        self._latest = 0

    @property
    def latest_token(self) -> int:
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest

    async def search(self, query: str) -> SearchOutcome:
        """Look up `query`.

        Args:
            query: Free-text place description.

        Returns:
            The outcome; `STALE` if a newer search started meanwhile.
        """
        token = next(self._tokens)
        self._latest = token
        query = query.strip()
        if not query:
            return SearchOutcome(query=query, token=token, status=SearchStatus.NOT_FOUND)

        try:
            location = await asyncio.to_thread(self.geocoder.lookup, query)
        except GeocodingError as e:
            outcome = SearchOutcome(
                query=query, token=token, status=SearchStatus.FAILED, error=str(e)
            )
        except Exception as e:
            logger.error(f"Unexpected failure searching '{query}'", exc_info=True)
            outcome = SearchOutcome(
                query=query, token=token, status=SearchStatus.FAILED, error=str(e)
            )
        else:
            status = SearchStatus.FOUND if location else SearchStatus.NOT_FOUND
            outcome = SearchOutcome(
                query=query, token=token, status=status, location=location
            )

        if not self.is_current(token):
            logger.debug(
                f"Discarding stale search #{token} for '{query}' "
                f"(latest is #{self._latest})"
            )
            return outcome.model_copy(update={"status": SearchStatus.STALE})
        return outcome
