"""
Geocoding provider implementations.
"""

from typing import Optional, Type, Union

from geofacade.geocoding.base import BaseProvider, ProviderKind
from geofacade.geocoding.providers.google import GoogleGeocoder
from geofacade.geocoding.providers.here import HereGeocoder
from geofacade.geocoding.providers.native import NativeGeocoder, Placemark, PlatformGeocoder
from geofacade.geocoding.providers.nominatim import NominatimNativeGeocoder
from geofacade.geocoding.transport import HttpTransport

PROVIDER_CLASSES = {
    ProviderKind.NATIVE: PlatformGeocoder,
    ProviderKind.GOOGLE: GoogleGeocoder,
    ProviderKind.HERE: HereGeocoder,
}


def get_provider_class(kind: Union[ProviderKind, str]) -> Type[BaseProvider]:
    """
    Look up the provider class for a kind.

    Raises:
        ValueError: If the kind is unknown
    """
    try:
        return PROVIDER_CLASSES[ProviderKind(kind)]
    except ValueError:
        raise ValueError(
            f"Unknown provider: {kind}. Choose from: {[k.value for k in PROVIDER_CLASSES]}"
        ) from None


def build_provider(
    kind: Union[ProviderKind, str],
    transport: HttpTransport,
    google_api_key: Optional[str] = None,
    here_app_id: Optional[str] = None,
    here_app_code: Optional[str] = None,
    native_geocoder: Optional[NativeGeocoder] = None,
) -> BaseProvider:
    """
    Get a provider instance by kind.

    Args:
        kind: Provider kind ("native", "google", "here")
        transport: HTTP transport for the REST providers
        google_api_key: Google credential
        here_app_id: HERE credential
        here_app_code: HERE credential
        native_geocoder: Placemark backend for the native provider

    Returns:
        Provider instance
    """
    kind = get_provider_class(kind).kind

    if kind is ProviderKind.GOOGLE:
        return GoogleGeocoder(transport, api_key=google_api_key)
    if kind is ProviderKind.HERE:
        return HereGeocoder(transport, app_id=here_app_id, app_code=here_app_code)
    return PlatformGeocoder(native_geocoder)


__all__ = [
    "PROVIDER_CLASSES",
    "get_provider_class",
    "build_provider",
    "GoogleGeocoder",
    "HereGeocoder",
    "PlatformGeocoder",
    "NativeGeocoder",
    "Placemark",
    "NominatimNativeGeocoder",
]
