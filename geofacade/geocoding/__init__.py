"""
Geocoding facade with single-flight requests and provider fallback.

Provides a unified interface for multiple geocoding providers:
- native: Platform placemark service (Nominatim by default)
- google: Google Geocoding API (API key)
- here: HERE Geocoder API 6.2 (app id + app code)

Usage:
    from geofacade.geocoding import GeocodeService, ProviderKind

    service = GeocodeService(google_api_key="...")
    records = await service.geocode(
        "360 Plantation St, Worcester, MA",
        ProviderKind.GOOGLE,
        alternative_service=ProviderKind.NATIVE,
    )
"""

from geofacade.geocoding.base import (
    ProviderKind,
    GeocodingError,
    InvalidAddressInput,
    InvalidCoordinateInput,
    TransportFailure,
    ProviderRejected,
    ParseFailure,
    InternalFailure,
    BaseProvider,
)
from geofacade.geocoding.address import AddressRecord
from geofacade.geocoding.transport import HttpTransport
from geofacade.geocoding.providers import (
    GoogleGeocoder,
    HereGeocoder,
    PlatformGeocoder,
    NativeGeocoder,
    NominatimNativeGeocoder,
    Placemark,
    build_provider,
)
from geofacade.geocoding.request import GeocodeRequest, RequestState
from geofacade.geocoding.service import GeocodeService

__all__ = [
    # Base classes
    "ProviderKind",
    "GeocodingError",
    "InvalidAddressInput",
    "InvalidCoordinateInput",
    "TransportFailure",
    "ProviderRejected",
    "ParseFailure",
    "InternalFailure",
    "BaseProvider",
    "AddressRecord",
    "HttpTransport",
    # Providers
    "GoogleGeocoder",
    "HereGeocoder",
    "PlatformGeocoder",
    "NativeGeocoder",
    "NominatimNativeGeocoder",
    "Placemark",
    "build_provider",
    # Orchestration
    "GeocodeRequest",
    "RequestState",
    "GeocodeService",
]
