"""
HERE Geocoder API (6.2) provider.

Forward and reverse geocoding use separate endpoints and authenticate with an
app id / app code pair.
https://developer.here.com/documentation/geocoder
"""

import logging
from typing import Optional, List, Dict, Any

from geofacade.core.utils.geo import Coordinate
from geofacade.geocoding.address import AddressRecord
from geofacade.geocoding.base import ProviderKind, ProviderRejected, RestProvider
from geofacade.geocoding.transport import HttpTransport

logger = logging.getLogger(__name__)

HERE_GEOCODING_URL = "https://geocoder.api.here.com/6.2/geocode.json"
HERE_REVERSE_GEOCODING_URL = "https://reverse.geocoder.api.here.com/6.2/reversegeocode.json"

# HERE Address key -> AddressRecord field
ADDRESS_FIELDS = {
    "HouseNumber": "street_number",
    "Street": "route",
    "Subdistrict": "locality",
    "City": "administrative_area",
    "District": "sub_administrative_area",
    "Country": "country",
    "Label": "formatted_address",
}


def _as_float(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


class HereGeocoder(RestProvider):
    """
    HERE Geocoder API provider.

    Success is structural: the document must carry `Response.View[0].Result`
    as a list.

    Usage:
        geocoder = HereGeocoder(HttpTransport(), app_id="...", app_code="...")
        records = await geocoder.reverse_geocode(Coordinate(52.53, 13.38))
    """

    kind = ProviderKind.HERE
    geocode_url = HERE_GEOCODING_URL
    reverse_url = HERE_REVERSE_GEOCODING_URL

    def __init__(
        self,
        transport: HttpTransport,
        app_id: Optional[str] = None,
        app_code: Optional[str] = None,
    ):
        super().__init__(transport)
        self.app_id = app_id or ""
        self.app_code = app_code or ""

    def geocode_params(self, address: str) -> Dict[str, str]:
        return {
            "searchtext": address,
            "app_id": self.app_id,
            "app_code": self.app_code,
        }

    def reverse_params(self, coordinate: Coordinate) -> Dict[str, str]:
        return {
            "mode": "retrieveAddress",
            "prox": coordinate.as_query(),
            "app_id": self.app_id,
            "app_code": self.app_code,
        }

    def extract_results(self, document: Dict[str, Any]) -> List[Any]:
        response = document.get("Response")
        views = response.get("View") if isinstance(response, dict) else None
        view = views[0] if isinstance(views, list) and views else None
        results = view.get("Result") if isinstance(view, dict) else None

        if not isinstance(results, list):
            logger.warning("HERE: Response has no View[0].Result")
            raise ProviderRejected("HERE response has no results", provider=self.provider_name)

        return results

    @staticmethod
    def parse_result(entry: Any) -> Optional[AddressRecord]:
        # Malformed entries still produce a record carrying the raw payload
        location = entry.get("Location") if isinstance(entry, dict) else None
        address = location.get("Address") if isinstance(location, dict) else None
        if not isinstance(address, dict):
            return AddressRecord(provider=ProviderKind.HERE.value, raw_source=entry)

        position = location.get("DisplayPosition")
        if not isinstance(position, dict):
            position = {}

        fields = {}
        for key, name in ADDRESS_FIELDS.items():
            value = address.get(key)
            fields[name] = value if isinstance(value, str) else None

        return AddressRecord(
            coordinate=Coordinate(_as_float(position.get("Latitude")), _as_float(position.get("Longitude"))),
            provider=ProviderKind.HERE.value,
            raw_source=entry,
            **fields,
        )
