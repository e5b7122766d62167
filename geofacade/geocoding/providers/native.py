"""
Platform-native geocoding provider.

Wraps an opaque placemark service (the operating system's geocoder or a
stand-in such as NominatimNativeGeocoder) behind the provider interface.
"""

import logging
from dataclasses import dataclass
from typing import Optional, List, Any, Protocol

from geofacade.core.utils.address import PostalAddress, format_mailing_address
from geofacade.core.utils.geo import Coordinate
from geofacade.geocoding.address import AddressRecord
from geofacade.geocoding.base import BaseProvider, GeocodingError, ProviderKind, TransportFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placemark:
    """Structured result of a native geocoder lookup."""

    location: Optional[Coordinate] = None
    name: Optional[str] = None
    thoroughfare: Optional[str] = None
    sub_thoroughfare: Optional[str] = None
    locality: Optional[str] = None
    sub_locality: Optional[str] = None
    administrative_area: Optional[str] = None
    sub_administrative_area: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    iso_country_code: Optional[str] = None
    postal_address: Optional[PostalAddress] = None


class NativeGeocoder(Protocol):
    """
    Placemark service capability.

    Implementations raise on failure (including "no result"); cancellation is
    delivered by cancelling the awaiting task.
    """

    async def geocode_address(self, address: str) -> List[Placemark]:
        ...

    async def reverse_geocode(self, coordinate: Coordinate) -> List[Placemark]:
        ...


class PlatformGeocoder(BaseProvider):
    """
    Provider delegating to a NativeGeocoder backend.

    Usage:
        geocoder = PlatformGeocoder(NominatimNativeGeocoder(HttpTransport()))
        records = await geocoder.geocode("Brandenburger Tor, Berlin")
    """

    kind = ProviderKind.NATIVE

    def __init__(self, backend: Optional[NativeGeocoder]):
        self.backend = backend

    async def geocode(self, address: str) -> List[AddressRecord]:
        backend = self._require_backend()
        try:
            placemarks = await backend.geocode_address(address)
        except GeocodingError:
            raise
        except Exception as e:
            logger.warning(f"Native geocoder failed for {address!r}: {e}")
            raise TransportFailure(str(e) or e.__class__.__name__, provider=self.provider_name) from e

        return self.parse_results(placemarks or [])

    async def reverse_geocode(self, coordinate: Coordinate) -> List[AddressRecord]:
        backend = self._require_backend()
        try:
            placemarks = await backend.reverse_geocode(coordinate)
        except GeocodingError:
            raise
        except Exception as e:
            logger.warning(f"Native reverse geocoder failed for {coordinate.as_query()}: {e}")
            raise TransportFailure(str(e) or e.__class__.__name__, provider=self.provider_name) from e

        return self.parse_results(placemarks or [])

    def _require_backend(self) -> NativeGeocoder:
        if self.backend is None:
            raise TransportFailure("No native geocoder configured", provider=self.provider_name)
        return self.backend

    @staticmethod
    def parse_result(entry: Any) -> Optional[AddressRecord]:
        if not isinstance(entry, Placemark):
            return None

        return AddressRecord(
            coordinate=entry.location,
            street_number=entry.thoroughfare,
            locality=entry.locality,
            sub_locality=entry.sub_locality,
            administrative_area=entry.administrative_area,
            sub_administrative_area=entry.sub_administrative_area,
            postal_code=entry.postal_code,
            country=entry.country,
            iso_country_code=entry.iso_country_code,
            formatted_address=format_mailing_address(entry.postal_address),
            provider=ProviderKind.NATIVE.value,
            raw_source=entry,
        )
