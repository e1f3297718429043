"""VIA Rail live feed fetcher."""

import logging
import time
from datetime import datetime
from typing import Any, Dict, Optional, Tuple, Union

import requests

from .exceptions import FeedUnavailableError
from .models import Train, ViaRailData
from .normalizer import normalize_feed, to_payload

logger = logging.getLogger(__name__)

# Public feed backing tsimobile.viarail.ca
VIA_RAIL_FEED_URL = "https://tsimobile.viarail.ca/data/allData.json"

# The feed rejects requests without a browser-like user agent
DEFAULT_HEADERS = {
    "user-agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/143.0.0.0 Safari/537.36"
    ),
}

DEFAULT_TIMEOUT = 10  # seconds
DEFAULT_CACHE_TTL = 10  # seconds, the feed refreshes about this often


def attribution_text(year: Optional[int] = None) -> str:
    """Copyright line that must accompany redistributed feed data."""
    if year is None:
        year = datetime.now().year
    return f"Copyright © {year} VIA Rail Canada Inc."


def build_proxy_payload(data: Union[ViaRailData, Train], year: Optional[int] = None) -> Dict[str, Any]:
    """
    Wrap a snapshot the way the read-only proxy endpoint serves it.

    Returns:
        {"attribution": "...", "data": {train_id: record, ...}}
    """
    return {
        "attribution": attribution_text(year),
        "data": to_payload(data),
    }


class ViaRailClient:
    """Fetches and validates the VIA Rail live train feed."""

    def __init__(
        self,
        feed_url: str = VIA_RAIL_FEED_URL,
        timeout: float = DEFAULT_TIMEOUT,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            feed_url: Feed endpoint returning the all-trains JSON document.
            timeout: Request timeout in seconds.
            cache_ttl: Seconds a fetched payload is reused. 0 disables caching.
            session: Optional requests session (a new one is created if omitted).
        """
        self.feed_url = feed_url
        self.timeout = timeout
        self._cache_ttl = cache_ttl
        self._cache: Optional[Tuple[Any, float]] = None  # (payload, fetched_at)
        self._session = session or requests.Session()
        self._session.headers.update(DEFAULT_HEADERS)

    def get_train_data(self) -> ViaRailData:
        """
        Fetch the feed and return a validated snapshot.

        Raises:
            FeedUnavailableError: If the feed could not be fetched or decoded.
            FeedValidationError: If the payload does not match the schema.
        """
        return normalize_feed(self.fetch_raw())

    def fetch_raw(self) -> Any:
        """
        Fetch the raw feed payload, reusing a recent response when possible.

        Returns:
            Parsed JSON document.
        """
        now = time.time()
        if self._cache is not None:
            payload, fetched_at = self._cache
            if now - fetched_at < self._cache_ttl:
                logger.debug(f"Using cached data for {self.feed_url}")
                return payload

        logger.debug(f"Fetching {self.feed_url}")
        try:
            response = self._session.get(self.feed_url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            # JSON decode errors from requests are RequestException subclasses
            logger.error(f"Failed to fetch {self.feed_url}: {e}")
            raise FeedUnavailableError(f"Failed to fetch {self.feed_url}: {e}") from e
        except ValueError as e:
            logger.error(f"Invalid JSON from {self.feed_url}: {e}")
            raise FeedUnavailableError(f"Invalid JSON from {self.feed_url}: {e}") from e

        self._cache = (payload, now)
        return payload

    def clear_cache(self) -> None:
        """Manually clear the cache."""
        self._cache = None

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()
