"""
Nominatim (OpenStreetMap) placemark backend.

Free geocoding using OpenStreetMap data, used as the native geocoder when no
operating-system geocoder is available.
https://nominatim.org/
"""

import logging
from typing import Optional, List, Dict, Any

from geofacade.core.utils.address import PostalAddress
from geofacade.core.utils.geo import Coordinate
from geofacade.geocoding.base import ProviderKind, ProviderRejected
from geofacade.geocoding.providers.native import Placemark
from geofacade.geocoding.transport import HttpTransport, build_url

logger = logging.getLogger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org"


def _first(address: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = address.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _as_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def placemark_from_result(result: Dict[str, Any]) -> Placemark:
    """
    Convert a Nominatim result (with addressdetails) into a Placemark.

    Args:
        result: One entry of a /search response, or a /reverse response

    Returns:
        Placemark with whatever fields Nominatim supplied
    """
    address = result.get("address")
    if not isinstance(address, dict):
        address = {}

    lat = _as_float(result.get("lat"))
    lng = _as_float(result.get("lon"))
    location = Coordinate(lat, lng) if lat is not None and lng is not None else None

    road = _first(address, "road", "pedestrian", "footway")
    house_number = _first(address, "house_number")
    city = _first(address, "city", "town", "village", "hamlet")
    sub_locality = _first(address, "suburb", "city_district", "quarter")
    state = _first(address, "state")
    county = _first(address, "county")
    postcode = _first(address, "postcode")
    country = _first(address, "country")
    country_code = _first(address, "country_code")
    country_code = country_code.upper() if country_code else None

    street = " ".join(part for part in (house_number, road) if part) or None
    if country_code and country_code not in ("US", "CA", "AU", "GB", "IE", "NZ") and road:
        # Most of the world writes the number after the street name
        street = " ".join(part for part in (road, house_number) if part)

    return Placemark(
        location=location,
        name=result.get("display_name") if isinstance(result.get("display_name"), str) else None,
        thoroughfare=road,
        sub_thoroughfare=house_number,
        locality=city,
        sub_locality=sub_locality,
        administrative_area=state,
        sub_administrative_area=county,
        postal_code=postcode,
        country=country,
        iso_country_code=country_code,
        postal_address=PostalAddress(
            street=street,
            sub_locality=sub_locality,
            city=city,
            sub_administrative_area=county,
            state=state,
            postal_code=postcode,
            country=country,
            iso_country_code=country_code,
        ),
    )


class NominatimNativeGeocoder:
    """
    Nominatim-backed placemark service.

    Cons:
    - Strict rate limiting (1 request/second)
    - Variable accuracy
    - Requires user agent

    Usage:
        backend = NominatimNativeGeocoder(HttpTransport(headers={"User-Agent": "myapp/1.0"}))
        placemarks = await backend.geocode_address("360 Plantation St, Worcester, MA")
    """

    def __init__(
        self,
        transport: HttpTransport,
        base_url: str = NOMINATIM_URL,
        limit: int = 5,
    ):
        self.transport = transport
        self.base_url = base_url.rstrip("/")
        self.limit = limit

    async def geocode_address(self, address: str) -> List[Placemark]:
        params = {
            "q": address,
            "format": "json",
            "addressdetails": 1,
            "limit": self.limit,
        }
        url = build_url(f"{self.base_url}/search", params, provider=ProviderKind.NATIVE.value)
        data = await self.transport.fetch_any(url, provider=ProviderKind.NATIVE.value)

        if not isinstance(data, list) or not data:
            logger.debug(f"Nominatim: No results for {address}")
            raise ProviderRejected(f"No results for {address!r}", provider=ProviderKind.NATIVE.value)

        return [placemark_from_result(item) for item in data if isinstance(item, dict)]

    async def reverse_geocode(self, coordinate: Coordinate) -> List[Placemark]:
        params = {
            "lat": coordinate.latitude,
            "lon": coordinate.longitude,
            "format": "json",
            "addressdetails": 1,
        }
        url = build_url(f"{self.base_url}/reverse", params, provider=ProviderKind.NATIVE.value)
        data = await self.transport.fetch_any(url, provider=ProviderKind.NATIVE.value)

        if not isinstance(data, dict) or "error" in data:
            error = data.get("error") if isinstance(data, dict) else None
            logger.debug(f"Nominatim: No reverse result for {coordinate.as_query()}: {error}")
            raise ProviderRejected(
                f"No results for {coordinate.as_query()}",
                provider=ProviderKind.NATIVE.value,
            )

        return [placemark_from_result(data)]
