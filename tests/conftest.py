"""Shared test fixtures and configuration."""

import asyncio
from typing import Any, Callable, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

from geofacade.core.utils.address import PostalAddress
from geofacade.core.utils.geo import Coordinate
from geofacade.geocoding.providers.native import Placemark
from geofacade.geocoding.transport import HttpTransport


GOOGLE_RESULT = {
    "address_components": [
        {"long_name": "1", "short_name": "1", "types": ["street_number"]},
        {"long_name": "Market Street", "short_name": "Market St", "types": ["route"]},
        {"long_name": "Financial District", "short_name": "Financial District", "types": ["neighborhood", "political"]},
        {"long_name": "San Francisco", "short_name": "SF", "types": ["locality", "political"]},
        {"long_name": "San Francisco County", "short_name": "San Francisco County", "types": ["administrative_area_level_2", "political"]},
        {"long_name": "California", "short_name": "CA", "types": ["administrative_area_level_1", "political"]},
        {"long_name": "United States", "short_name": "US", "types": ["country", "political"]},
        {"long_name": "94105", "short_name": "94105", "types": ["postal_code"]},
    ],
    "formatted_address": "1 Market St, San Francisco, CA 94105, USA",
    "geometry": {"location": {"lat": 37.7936, "lng": -122.395}, "location_type": "ROOFTOP"},
    "place_id": "ChIJ-market",
    "types": ["street_address"],
}

GOOGLE_OK = {"status": "OK", "results": [GOOGLE_RESULT]}
GOOGLE_ZERO_RESULTS = {"status": "ZERO_RESULTS", "results": []}

HERE_RESULT = {
    "Relevance": 1.0,
    "MatchLevel": "houseNumber",
    "Location": {
        "LocationId": "NT_x",
        "DisplayPosition": {"Latitude": 52.53086, "Longitude": 13.38469},
        "Address": {
            "Label": "Invalidenstraße 116, 10115 Berlin, Deutschland",
            "Country": "DEU",
            "State": "Berlin",
            "County": "Berlin",
            "City": "Berlin",
            "District": "Mitte",
            "Subdistrict": "Mitte",
            "Street": "Invalidenstraße",
            "HouseNumber": "116",
            "PostalCode": "10115",
        },
    },
}

HERE_OK = {"Response": {"View": [{"_type": "SearchResultsViewType", "Result": [HERE_RESULT]}]}}
HERE_EMPTY = {"Response": {"View": []}}

PLACEMARK = Placemark(
    location=Coordinate(48.8584, 2.2945),
    thoroughfare="Avenue Anatole France",
    sub_thoroughfare="5",
    locality="Paris",
    sub_locality="Gros-Caillou",
    administrative_area="Île-de-France",
    sub_administrative_area="Paris",
    postal_code="75007",
    country="France",
    iso_country_code="FR",
    postal_address=PostalAddress(
        street="5 Avenue Anatole France",
        city="Paris",
        state="Île-de-France",
        postal_code="75007",
        country="France",
        iso_country_code="FR",
    ),
)


def route_by_provider(responses: Dict[str, Any]) -> Callable:
    """
    Build a fetch side effect answering per provider name.

    Values that are exceptions are raised, anything else is returned.
    """

    async def fetch(url: str, provider: str = "") -> Any:
        response = responses[provider]
        if isinstance(response, BaseException):
            raise response
        return response

    return fetch


def blocking_fetch(gate: asyncio.Event, response: Any) -> Callable:
    """Build a fetch side effect that waits on `gate` before answering."""

    async def fetch(url: str, provider: str = "") -> Any:
        await gate.wait()
        return response

    return fetch


@pytest.fixture
def transport():
    """Create a mock HTTP transport."""
    mock_transport = MagicMock(spec=HttpTransport)
    mock_transport.timeout = 30.0
    mock_transport.fetch = AsyncMock(return_value=GOOGLE_OK)
    mock_transport.fetch_any = AsyncMock(return_value=[])
    return mock_transport


@pytest.fixture
def native_geocoder():
    """Create a mock native placemark backend."""
    backend = MagicMock()
    backend.geocode_address = AsyncMock(return_value=[PLACEMARK])
    backend.reverse_geocode = AsyncMock(return_value=[PLACEMARK])
    return backend


@pytest.fixture
def callback():
    """Record callback invocations as (records, error) tuples."""
    return MagicMock()
