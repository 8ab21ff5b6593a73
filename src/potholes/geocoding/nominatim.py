"""
Nominatim Geocoder

Resolves free-text addresses to coordinates with the OpenStreetMap Nominatim
search API, requesting only the single best match.
"""
import time
from typing import Optional

import requests

from config.settings import settings
from src.potholes.errors import GeocodingUnavailable
from src.potholes.models.defect import Coordinates
from src.potholes.utils.logger import get_logger

logger = get_logger(__name__)


class _RetryableResponse(Exception):
    """Internal marker for a 5xx answer worth one more attempt."""


class NominatimGeocoder:
    """
    Address resolver backed by Nominatim.

    Nominatim rejects anonymous clients, so every request carries the
    configured User-Agent.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_seconds: Optional[float] = None,
        country_codes: Optional[str] = None,
    ):
        """
        Initialize the geocoder.

        Args:
            base_url: Override the default search URL (for testing)
            user_agent: User-Agent header sent to Nominatim
            timeout: Request timeout in seconds
            max_retries: Extra attempts after a transient failure
            backoff_seconds: Base delay between attempts
            country_codes: Comma-separated ISO country filter
        """
        self.base_url = base_url or settings.nominatim_url
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.geocoder_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.geocoder_backoff_seconds
        )
        self.country_codes = country_codes or settings.geocoder_country_codes
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent or settings.geocoder_user_agent,
            "Accept": "application/json",
        })
        logger.info("nominatim_geocoder_initialized", base_url=self.base_url)

    def resolve(self, query: str) -> Optional[Coordinates]:
        """
        Resolve an address to its best-matching coordinates.

        Args:
            query: Free-text address, e.g. "Budapest, Váci út 12"

        Returns:
            Coordinates of the first candidate, or None when there is none

        Raises:
            GeocodingUnavailable: On network, HTTP, or response format errors
        """
        params = {"format": "json", "q": query, "limit": 1}
        if self.country_codes:
            params["countrycodes"] = self.country_codes

        attempts = 1 + max(0, self.max_retries)
        for attempt in range(1, attempts + 1):
            try:
                payload = self._request(params)
                break
            except (requests.ConnectionError, requests.Timeout, _RetryableResponse) as e:
                if attempt < attempts:
                    logger.warning(
                        "geocoding_request_retry",
                        attempt=attempt,
                        max_attempts=attempts,
                        error=str(e)
                    )
                    time.sleep(self.backoff_seconds * attempt)
                    continue
                logger.error("geocoding_request_failed", query=query, error=str(e))
                raise GeocodingUnavailable(cause=e) from e
            except requests.RequestException as e:
                logger.error(
                    "geocoding_request_failed",
                    query=query,
                    error=str(e),
                    error_type=type(e).__name__
                )
                raise GeocodingUnavailable(cause=e) from e

        return self._parse_response(query, payload)

    def _request(self, params: dict):
        """Issue one search request and decode its JSON body."""
        response = self.session.get(self.base_url, params=params, timeout=self.timeout)
        if response.status_code >= 500:
            raise _RetryableResponse(f"Nominatim answered HTTP {response.status_code}")
        response.raise_for_status()

        try:
            payload = response.json()
        except ValueError as e:
            logger.error("geocoding_invalid_json", status_code=response.status_code)
            raise GeocodingUnavailable(cause=e) from e

        logger.debug("geocoding_request_successful", status_code=response.status_code)
        return payload

    def _parse_response(self, query: str, payload) -> Optional[Coordinates]:
        """Take the first candidate's lat/lon, or None for an empty result."""
        if not isinstance(payload, list):
            logger.error("geocoding_unexpected_payload", payload_type=type(payload).__name__)
            raise GeocodingUnavailable()

        if not payload:
            logger.info("geocoding_no_candidates", query=query)
            return None

        first = payload[0]
        try:
            coordinates = Coordinates(latitude=float(first["lat"]), longitude=float(first["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            logger.error("geocoding_unparsable_candidate", candidate=first, error=str(e))
            raise GeocodingUnavailable(cause=e) from e

        logger.info(
            "geocoding_resolved",
            query=query,
            latitude=coordinates.latitude,
            longitude=coordinates.longitude
        )
        return coordinates
