"""
Google Geocoding API provider.

Paid, accurate geocoding service with global coverage.
https://developers.google.com/maps/documentation/geocoding
"""

import logging
from typing import Optional, List, Dict, Any

from geofacade.core.utils.geo import Coordinate
from geofacade.geocoding.address import AddressRecord
from geofacade.geocoding.base import ProviderKind, ProviderRejected, RestProvider
from geofacade.geocoding.transport import HttpTransport

logger = logging.getLogger(__name__)

GOOGLE_GEOCODING_URL = "https://maps.googleapis.com/maps/api/geocode/json"


def _as_float(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


def get_component(
    component_type: str,
    components: Any,
    name_variant: str = "long_name",
) -> Optional[str]:
    """
    Look up an address component by type.

    Scans the components in order and returns the requested name of the first
    one whose `types` contains `component_type`.

    Args:
        component_type: Google component type, e.g. "postal_code"
        components: The `address_components` list (may be missing)
        name_variant: "long_name" or "short_name"

    Returns:
        The component name, or None if absent
    """
    if not isinstance(components, list):
        return None

    for component in components:
        if not isinstance(component, dict):
            continue
        types = component.get("types")
        if isinstance(types, list) and component_type in types:
            value = component.get(name_variant)
            return value if isinstance(value, str) else None

    return None


class GoogleGeocoder(RestProvider):
    """
    Google Geocoding API provider.

    Only a top-level `status` of "OK" counts as success; every other status
    (ZERO_RESULTS, OVER_QUERY_LIMIT, REQUEST_DENIED, ...) is a provider
    rejection so the request can fall back.

    Usage:
        geocoder = GoogleGeocoder(HttpTransport(), api_key="...")
        records = await geocoder.geocode("1 Market St, San Francisco")
    """

    kind = ProviderKind.GOOGLE
    geocode_url = GOOGLE_GEOCODING_URL
    reverse_url = GOOGLE_GEOCODING_URL

    def __init__(self, transport: HttpTransport, api_key: Optional[str] = None):
        super().__init__(transport)
        self.api_key = api_key or ""

    def geocode_params(self, address: str) -> Dict[str, str]:
        return {"address": address, "key": self.api_key}

    def reverse_params(self, coordinate: Coordinate) -> Dict[str, str]:
        return {"latlng": coordinate.as_query(), "key": self.api_key}

    def extract_results(self, document: Dict[str, Any]) -> List[Any]:
        status = document.get("status")
        if status != "OK":
            logger.warning(f"Google API error: {status}")
            raise ProviderRejected(
                f"Google returned status {status}",
                provider=self.provider_name,
                status=status if isinstance(status, str) else None,
            )

        results = document.get("results")
        if not isinstance(results, list):
            raise ProviderRejected("Google response has no results list", provider=self.provider_name, status=status)

        return results

    @staticmethod
    def parse_result(entry: Any) -> Optional[AddressRecord]:
        if not isinstance(entry, dict):
            return None

        components = entry.get("address_components")
        formatted_address = entry.get("formatted_address")
        if not isinstance(formatted_address, str):
            formatted_address = None

        geometry = entry.get("geometry")
        location = geometry.get("location") if isinstance(geometry, dict) else None
        if not isinstance(location, dict):
            location = {}

        return AddressRecord(
            coordinate=Coordinate(_as_float(location.get("lat")), _as_float(location.get("lng"))),
            street_number=get_component("street_number", components),
            route=get_component("route", components),
            locality=get_component("locality", components),
            sub_locality=get_component("sublocality", components),
            administrative_area=get_component("administrative_area_level_1", components),
            sub_administrative_area=get_component("administrative_area_level_2", components),
            neighborhood=get_component("neighborhood", components),
            postal_code=get_component("postal_code", components, "short_name"),
            country=get_component("country", components),
            iso_country_code=get_component("country", components, "short_name"),
            formatted_address=formatted_address,
            lines=tuple(formatted_address.split(", ")) if formatted_address is not None else None,
            provider=ProviderKind.GOOGLE.value,
            raw_source=entry,
        )
