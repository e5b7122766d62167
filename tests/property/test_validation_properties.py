"""Property-based tests for request validation and record mapping."""

import functools
from unittest.mock import AsyncMock, MagicMock

import pytest
from hypothesis import given, settings, strategies as st, HealthCheck

from geofacade.core.utils.geo import Coordinate, is_valid_coordinate
from geofacade.geocoding import (
    AddressRecord,
    GeocodeRequest,
    HttpTransport,
    InvalidAddressInput,
    InvalidCoordinateInput,
    ProviderKind,
    build_provider,
)


# Hypothesis strategies
out_of_range_latitude = st.one_of(
    st.floats(min_value=90.0, exclude_min=True, allow_infinity=True, allow_nan=False),
    st.floats(max_value=-90.0, exclude_max=True, allow_infinity=True, allow_nan=False),
)
out_of_range_longitude = st.one_of(
    st.floats(min_value=180.0, exclude_min=True, allow_infinity=True, allow_nan=False),
    st.floats(max_value=-180.0, exclude_max=True, allow_infinity=True, allow_nan=False),
)
any_latitude = st.floats(min_value=-90.0, max_value=90.0)
any_longitude = st.floats(min_value=-180.0, max_value=180.0)

whitespace_strategy = st.text(alphabet=" \t\n\r\x0b\x0c", max_size=20)

component_text = st.text(
    min_size=1,
    max_size=40,
    alphabet=st.characters(blacklist_categories=("Cs",)),
)


def make_transport():
    transport = MagicMock(spec=HttpTransport)
    transport.fetch = AsyncMock(return_value={"status": "OK", "results": []})
    return transport


def make_request(transport, **kwargs):
    factory = functools.partial(
        build_provider,
        transport=transport,
        google_api_key="g-key",
        here_app_id="id",
        here_app_code="code",
    )
    if "coordinate" in kwargs:
        return GeocodeRequest.reverse(
            kwargs["coordinate"],
            ProviderKind.GOOGLE,
            provider_factory=factory,
            alternative_service=ProviderKind.HERE,
        )
    return GeocodeRequest.forward(
        kwargs["address"],
        ProviderKind.GOOGLE,
        provider_factory=factory,
        alternative_service=ProviderKind.HERE,
    )


@pytest.mark.asyncio
@settings(max_examples=100, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(
    coordinate=st.one_of(
        st.tuples(out_of_range_latitude, any_longitude),
        st.tuples(any_latitude, out_of_range_longitude),
    )
)
async def test_out_of_range_coordinate_never_reaches_provider(coordinate):
    transport = make_transport()
    request = make_request(transport, coordinate=coordinate)

    await request.run()

    assert isinstance(request.error, InvalidCoordinateInput)
    assert request.records is None
    transport.fetch.assert_not_called()


@pytest.mark.asyncio
@settings(max_examples=100, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(coordinate=st.tuples(any_latitude, any_longitude))
async def test_in_range_coordinate_reaches_provider(coordinate):
    transport = make_transport()
    request = make_request(transport, coordinate=coordinate)

    await request.run()

    assert request.error is None
    assert request.records == []
    transport.fetch.assert_awaited_once()


@pytest.mark.asyncio
@settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(address=whitespace_strategy)
async def test_blank_address_is_rejected_without_fallback(address):
    transport = make_transport()
    request = make_request(transport, address=address)

    await request.run()

    assert isinstance(request.error, InvalidAddressInput)
    assert request.attempted_services == []
    transport.fetch.assert_not_called()


@settings(max_examples=100)
@given(latitude=st.floats(allow_nan=True, allow_infinity=True), longitude=st.floats(allow_nan=True, allow_infinity=True))
def test_validity_matches_ranges(latitude, longitude):
    expected = (
        -90.0 <= latitude <= 90.0
        and -180.0 <= longitude <= 180.0
        and (latitude, longitude) != (-180.0, -180.0)
    )

    assert is_valid_coordinate(Coordinate(latitude, longitude)) is expected


@settings(max_examples=100)
@given(
    street_number=component_text,
    route=component_text,
    locality=component_text,
    postal_code=component_text,
    country_code=st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ", min_size=2, max_size=2),
)
def test_google_components_map_to_record_fields(street_number, route, locality, postal_code, country_code):
    payload = {
        "address_components": [
            {"long_name": street_number, "short_name": street_number, "types": ["street_number"]},
            {"long_name": route, "short_name": route, "types": ["route"]},
            {"long_name": locality, "short_name": locality, "types": ["locality", "political"]},
            {"long_name": "unused", "short_name": postal_code, "types": ["postal_code"]},
            {"long_name": "Country", "short_name": country_code, "types": ["country", "political"]},
        ],
    }

    record = AddressRecord.from_provider_payload(payload, ProviderKind.GOOGLE)

    assert record.street_number == street_number
    assert record.route == route
    assert record.locality == locality
    assert record.postal_code == postal_code
    assert record.iso_country_code == country_code
    assert record.country == "Country"
