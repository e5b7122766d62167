"""
Single-flight geocoding service.

GeocodeService is the public entry point. Every new geocode or reverse
geocode cancels the request currently occupying the service and takes its
place; a request only starts executing once its predecessor has fully
finished, so at most one provider call is in flight at a time.

Usage:
    from geofacade.geocoding import GeocodeService, ProviderKind

    service = GeocodeService(google_api_key="...")

    def on_done(records, error):
        ...

    service.geocode("1 Market St, San Francisco", ProviderKind.GOOGLE,
                    alternative_service=ProviderKind.NATIVE, callback=on_done)

    # or await the request directly
    records = await service.reverse_geocode((37.79, -122.39), ProviderKind.HERE)

Delivery guarantees:
    - Callbacks run on the event loop that admitted the request.
    - A cancelled or superseded request never invokes its callback.
    - Supersession is best effort: a request whose provider call completed
      before the cancellation was observed is still suppressed, but a
      callback that is already running cannot be recalled.
"""

import asyncio
import functools
import logging
from typing import Optional, Any, Union

from geofacade.core.config import Settings
from geofacade.geocoding.base import ProviderKind
from geofacade.geocoding.providers import build_provider
from geofacade.geocoding.providers.native import NativeGeocoder
from geofacade.geocoding.providers.nominatim import NominatimNativeGeocoder
from geofacade.geocoding.request import GeocodeRequest, GeocodeCallback, ProviderFactory
from geofacade.geocoding.transport import HttpTransport, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "geofacade/0.1"


class GeocodeService:
    """
    Exposes forward and reverse geocoding with single-flight semantics.

    Construct one instance per process and pass it to the code that needs
    it. Credentials are plain attributes; changing them affects requests
    created afterwards, never one already under way.

    All methods must be called from the thread running the event loop.
    """

    def __init__(
        self,
        google_api_key: Optional[str] = None,
        here_app_id: Optional[str] = None,
        here_app_code: Optional[str] = None,
        transport: Optional[HttpTransport] = None,
        native_geocoder: Optional[NativeGeocoder] = None,
    ):
        """
        Initialize the service.

        Args:
            google_api_key: Google Geocoding API key
            here_app_id: HERE app id
            here_app_code: HERE app code
            transport: HTTP transport for the REST providers
            native_geocoder: Placemark backend for ProviderKind.NATIVE
                (defaults to Nominatim)
        """
        self.google_api_key = google_api_key
        self.here_app_id = here_app_id
        self.here_app_code = here_app_code
        self.transport = transport or HttpTransport(timeout=DEFAULT_TIMEOUT)

        if native_geocoder is None:
            native_geocoder = NominatimNativeGeocoder(
                HttpTransport(
                    timeout=self.transport.timeout,
                    headers={"User-Agent": DEFAULT_USER_AGENT},
                )
            )
        self.native_geocoder = native_geocoder

        self._current: Optional[GeocodeRequest] = None
        # Request whose run() is in progress; may be a superseded one still unwinding
        self._running: Optional[GeocodeRequest] = None
        self._tail: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "GeocodeService":
        """Build a service from application settings."""
        transport = kwargs.pop("transport", None) or HttpTransport(timeout=settings.GEOCODING_TIMEOUT)
        native_geocoder = kwargs.pop("native_geocoder", None) or NominatimNativeGeocoder(
            HttpTransport(
                timeout=settings.GEOCODING_TIMEOUT,
                headers={"User-Agent": settings.GEOCODING_USER_AGENT},
            ),
            base_url=settings.NOMINATIM_URL,
        )

        return cls(
            google_api_key=settings.GOOGLE_GEOCODING_API_KEY or None,
            here_app_id=settings.HERE_APP_ID or None,
            here_app_code=settings.HERE_APP_CODE or None,
            transport=transport,
            native_geocoder=native_geocoder,
            **kwargs,
        )

    @property
    def is_busy(self) -> bool:
        """True while the current request, or one still unwinding, has not finished."""
        return any(
            request is not None and not request.is_finished
            for request in (self._current, self._running)
        )

    @property
    def current_request(self) -> Optional[GeocodeRequest]:
        return self._current

    def geocode(
        self,
        address: str,
        service: Union[ProviderKind, str],
        alternative_service: Optional[Union[ProviderKind, str]] = None,
        callback: Optional[GeocodeCallback] = None,
    ) -> GeocodeRequest:
        """
        Submit a forward-geocoding request, superseding any current request.

        Args:
            address: The string describing the location to look up
            service: Provider used first
            alternative_service: Provider tried once if `service` fails
            callback: Invoked as callback(records, error) unless cancelled

        Returns:
            The admitted GeocodeRequest (awaitable)
        """
        request = GeocodeRequest.forward(
            address,
            service,
            provider_factory=self._provider_factory(),
            alternative_service=alternative_service,
            callback=callback,
        )
        self._admit(request)
        return request

    def reverse_geocode(
        self,
        coordinate: Any,
        service: Union[ProviderKind, str],
        alternative_service: Optional[Union[ProviderKind, str]] = None,
        callback: Optional[GeocodeCallback] = None,
    ) -> GeocodeRequest:
        """
        Submit a reverse-geocoding request, superseding any current request.

        Args:
            coordinate: Coordinate or (lat, lng) pair to look up
            service: Provider used first
            alternative_service: Provider tried once if `service` fails
            callback: Invoked as callback(records, error) unless cancelled

        Returns:
            The admitted GeocodeRequest (awaitable)
        """
        request = GeocodeRequest.reverse(
            coordinate,
            service,
            provider_factory=self._provider_factory(),
            alternative_service=alternative_service,
            callback=callback,
        )
        self._admit(request)
        return request

    def cancel_geocode(self) -> None:
        """Cancel the current request, if any. Safe to call repeatedly."""
        if self._current is not None:
            self._current.cancel()

    def _provider_factory(self) -> ProviderFactory:
        # Credentials are bound now so later changes do not reach this request
        return functools.partial(
            build_provider,
            transport=self.transport,
            google_api_key=self.google_api_key,
            here_app_id=self.here_app_id,
            here_app_code=self.here_app_code,
            native_geocoder=self.native_geocoder,
        )

    def _admit(self, request: GeocodeRequest) -> None:
        loop = asyncio.get_running_loop()

        # No await between reading, cancelling and replacing the occupant
        previous = self._tail
        self.cancel_geocode()
        self._current = request
        self._tail = loop.create_task(self._run(request, previous))

        logger.debug(f"Admitted {request!r}")

    async def _run(self, request: GeocodeRequest, previous: Optional[asyncio.Task]) -> None:
        try:
            if previous is not None and not previous.done():
                await asyncio.wait({previous})
            self._running = request
            await request.run()
        except asyncio.CancelledError:
            request.cancel()
            raise
        finally:
            if self._running is request:
                self._running = None
