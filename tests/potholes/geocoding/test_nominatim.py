"""
Unit tests for the Nominatim geocoder
"""
from unittest.mock import MagicMock, Mock, patch

import pytest
import requests

from src.potholes.errors import GeocodingUnavailable
from src.potholes.geocoding.nominatim import NominatimGeocoder
from src.potholes.models.defect import Coordinates


def make_response(payload=None, status_code=200, json_error=None):
    response = Mock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"HTTP {status_code}")
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def geocoder():
    client = NominatimGeocoder(
        base_url="https://nominatim.example.org/search",
        user_agent="pothole-tests",
        timeout=5,
        max_retries=1,
        backoff_seconds=0,
    )
    client.session = MagicMock()
    return client


class TestNominatimGeocoder:
    """Tests for NominatimGeocoder."""

    def test_initialization_sets_user_agent(self):
        client = NominatimGeocoder(user_agent="pothole-tests")
        assert client.session.headers["User-Agent"] == "pothole-tests"
        assert client.base_url

    def test_resolve_first_candidate(self, geocoder):
        geocoder.session.get.return_value = make_response([
            {"lat": "47.51", "lon": "19.05", "display_name": "Váci út 12"},
            {"lat": "1.0", "lon": "2.0"},
        ])

        result = geocoder.resolve("Budapest, Váci út 12")

        assert result == Coordinates(latitude=47.51, longitude=19.05)

    def test_request_parameters(self, geocoder):
        geocoder.session.get.return_value = make_response([])

        geocoder.resolve("Budapest, Váci út 12")

        args, kwargs = geocoder.session.get.call_args
        assert args[0] == "https://nominatim.example.org/search"
        assert kwargs["params"] == {"format": "json", "q": "Budapest, Váci út 12", "limit": 1}
        assert kwargs["timeout"] == 5

    def test_country_filter(self, geocoder):
        geocoder.country_codes = "hu"
        geocoder.session.get.return_value = make_response([])

        geocoder.resolve("Budapest, Váci út 12")

        assert geocoder.session.get.call_args.kwargs["params"]["countrycodes"] == "hu"

    def test_empty_result_is_none(self, geocoder):
        geocoder.session.get.return_value = make_response([])

        assert geocoder.resolve("Nowhere, Sehol utca 99") is None

    def test_connection_error_retried_once(self, geocoder):
        geocoder.session.get.side_effect = [
            requests.ConnectionError("reset"),
            make_response([{"lat": "47.51", "lon": "19.05"}]),
        ]

        assert geocoder.resolve("Budapest, Váci út 12") is not None
        assert geocoder.session.get.call_count == 2

    def test_persistent_timeout_raises_unavailable(self, geocoder):
        geocoder.session.get.side_effect = requests.Timeout("slow")

        with pytest.raises(GeocodingUnavailable):
            geocoder.resolve("Budapest, Váci út 12")
        assert geocoder.session.get.call_count == 2

    def test_server_error_retried_then_unavailable(self, geocoder):
        geocoder.session.get.return_value = make_response(status_code=503)

        with pytest.raises(GeocodingUnavailable):
            geocoder.resolve("Budapest, Váci út 12")
        assert geocoder.session.get.call_count == 2

    def test_client_error_not_retried(self, geocoder):
        geocoder.session.get.return_value = make_response(status_code=403)

        with pytest.raises(GeocodingUnavailable):
            geocoder.resolve("Budapest, Váci út 12")
        assert geocoder.session.get.call_count == 1

    def test_invalid_json(self, geocoder):
        geocoder.session.get.return_value = make_response(json_error=ValueError("not json"))

        with pytest.raises(GeocodingUnavailable):
            geocoder.resolve("Budapest, Váci út 12")

    def test_unparsable_coordinates(self, geocoder):
        geocoder.session.get.return_value = make_response([{"lat": "north", "lon": "19.05"}])

        with pytest.raises(GeocodingUnavailable):
            geocoder.resolve("Budapest, Váci út 12")

    def test_unexpected_payload_shape(self, geocoder):
        geocoder.session.get.return_value = make_response({"error": "Unable to geocode"})

        with pytest.raises(GeocodingUnavailable):
            geocoder.resolve("Budapest, Váci út 12")

    @patch("src.potholes.geocoding.nominatim.time.sleep")
    def test_backoff_between_attempts(self, mock_sleep, geocoder):
        geocoder.backoff_seconds = 2
        geocoder.session.get.side_effect = [
            requests.ConnectionError("reset"),
            make_response([]),
        ]

        geocoder.resolve("Budapest, Váci út 12")

        mock_sleep.assert_called_once_with(2)
