"""
A single forward or reverse geocoding attempt.

GeocodeRequest is a small state machine:

    READY -> EXECUTING -> FINISHED

Cancellation is a flag on top of the state, not a state of its own. A
cancelled request never invokes its callback; a failed one always does, with
the error. On a provider failure the request retries once with the
alternative provider, if one was given.

Requests are normally created and scheduled by GeocodeService; `run()` is the
entry point the service awaits.
"""

import asyncio
import logging
from enum import Enum
from typing import Optional, List, Callable, Any, Union

from geofacade.core.utils.geo import Coordinate, to_coordinate, is_valid_coordinate
from geofacade.geocoding.address import AddressRecord
from geofacade.geocoding.base import (
    BaseProvider,
    GeocodingError,
    InternalFailure,
    InvalidAddressInput,
    InvalidCoordinateInput,
    ProviderKind,
)

logger = logging.getLogger(__name__)

# Invoked as callback(records, error); exactly one of the two is not None
GeocodeCallback = Callable[[Optional[List[AddressRecord]], Optional[GeocodingError]], Any]
ProviderFactory = Callable[[ProviderKind], BaseProvider]


class RequestState(str, Enum):
    """Lifecycle state of a GeocodeRequest."""

    READY = "ready"
    EXECUTING = "executing"
    FINISHED = "finished"


class GeocodeRequest:
    """
    One in-flight geocoding request.

    Usage:
        request = GeocodeRequest.forward(
            "1 Market St, San Francisco",
            ProviderKind.GOOGLE,
            provider_factory=factory,
            alternative_service=ProviderKind.HERE,
        )
        await request.run()
        records = await request

    Awaiting the request returns the records or raises the delivered error;
    awaiting a cancelled request raises asyncio.CancelledError.
    """

    def __init__(
        self,
        *,
        is_reverse: bool,
        service: Union[ProviderKind, str],
        provider_factory: ProviderFactory,
        alternative_service: Optional[Union[ProviderKind, str]] = None,
        address: Optional[str] = None,
        coordinate: Any = None,
        callback: Optional[GeocodeCallback] = None,
    ):
        self.is_reverse = is_reverse
        self.address = address
        self.coordinate: Optional[Coordinate] = to_coordinate(coordinate)
        self.service = ProviderKind(service)
        self.alternative_service = (
            ProviderKind(alternative_service) if alternative_service is not None else None
        )
        self.callback = callback

        self._provider_factory = provider_factory
        self._state = RequestState.READY
        self._cancelled = False
        self._attempt: Optional[asyncio.Task] = None
        self._finished = asyncio.Event()

        self._delivered = False
        self._records: Optional[List[AddressRecord]] = None
        self._error: Optional[GeocodingError] = None

        # Services tried so far, in order
        self.attempted_services: List[ProviderKind] = []

    @classmethod
    def forward(
        cls,
        address: Optional[str],
        service: Union[ProviderKind, str],
        provider_factory: ProviderFactory,
        alternative_service: Optional[Union[ProviderKind, str]] = None,
        callback: Optional[GeocodeCallback] = None,
    ) -> "GeocodeRequest":
        """Create a forward-geocoding request (address -> records)."""
        return cls(
            is_reverse=False,
            address=address,
            service=service,
            alternative_service=alternative_service,
            provider_factory=provider_factory,
            callback=callback,
        )

    @classmethod
    def reverse(
        cls,
        coordinate: Any,
        service: Union[ProviderKind, str],
        provider_factory: ProviderFactory,
        alternative_service: Optional[Union[ProviderKind, str]] = None,
        callback: Optional[GeocodeCallback] = None,
    ) -> "GeocodeRequest":
        """Create a reverse-geocoding request (coordinate -> records)."""
        return cls(
            is_reverse=True,
            coordinate=coordinate,
            service=service,
            alternative_service=alternative_service,
            provider_factory=provider_factory,
            callback=callback,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    @property
    def is_executing(self) -> bool:
        return self._state is RequestState.EXECUTING

    @property
    def is_finished(self) -> bool:
        return self._state is RequestState.FINISHED

    @property
    def records(self) -> Optional[List[AddressRecord]]:
        """Delivered records, or None."""
        return self._records

    @property
    def error(self) -> Optional[GeocodingError]:
        """Delivered error, or None."""
        return self._error

    def __repr__(self) -> str:
        target = self.coordinate if self.is_reverse else repr(self.address)
        kind = "reverse" if self.is_reverse else "forward"
        flag = " cancelled" if self._cancelled else ""
        return f"<GeocodeRequest {kind} {target} via {self.service.value} [{self._state.value}{flag}]>"

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def cancel(self) -> None:
        """
        Cancel the request.

        Cancels the provider call in flight (best effort). A request that has
        not started finishes immediately; an executing one finishes as soon
        as the in-flight call unwinds. No-op once the outcome was delivered.
        """
        if self._state is RequestState.FINISHED or self._cancelled or self._delivered:
            return

        self._cancelled = True
        logger.debug(f"Cancelling {self!r}")

        if self._attempt is not None and not self._attempt.done():
            self._attempt.cancel()

        if self._state is RequestState.READY:
            self._finish()

    async def run(self) -> None:
        """Execute the request. Only the first call on a ready request does work."""
        if self._state is not RequestState.READY:
            logger.debug(f"Ignoring start of {self!r}")
            return

        if self._cancelled:
            self._finish()
            return

        self._state = RequestState.EXECUTING
        try:
            await self._execute()
        finally:
            self._attempt = None
            self._finish()

    async def wait_finished(self) -> None:
        """Wait until the request reaches FINISHED. Never raises."""
        await self._finished.wait()

    async def result(self) -> List[AddressRecord]:
        """
        Wait for the outcome.

        Returns:
            Delivered records

        Raises:
            GeocodingError: The delivered error
            asyncio.CancelledError: If the request was cancelled
        """
        await self._finished.wait()
        if not self._delivered:
            raise asyncio.CancelledError()
        if self._error is not None:
            raise self._error
        return self._records

    def __await__(self):
        return self.result().__await__()

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _validate(self) -> Optional[GeocodingError]:
        if self.is_reverse:
            if not is_valid_coordinate(self.coordinate):
                return InvalidCoordinateInput(f"Invalid coordinate: {self.coordinate}")
        elif not isinstance(self.address, str) or not self.address.strip():
            return InvalidAddressInput()
        return None

    async def _execute(self) -> None:
        error = self._validate()
        if error is not None:
            logger.debug(f"Rejected {self!r}: {error}")
            self._deliver(None, error)
            return

        service = self.service
        alternative = self.alternative_service

        while not self._cancelled:
            try:
                records = await self._attempt_with(service)
            except asyncio.CancelledError:
                if self._cancelled:
                    logger.debug(f"{self!r} cancelled during {service.value} call")
                    return
                raise
            except GeocodingError as e:
                error = e
            except Exception as e:
                logger.exception(f"Unexpected error from {service.value} provider")
                error = InternalFailure(str(e) or e.__class__.__name__, provider=service.value)
                error.__cause__ = e
            else:
                self._deliver(records, None)
                return

            if alternative is not None and error.allows_fallback and not self._cancelled:
                logger.info(
                    f"{service.value} failed ({error.message}); "
                    f"retrying with {alternative.value}"
                )
                service, alternative = alternative, None
                continue

            logger.warning(f"Geocoding failed via {service.value}: {error}")
            self._deliver(None, error)
            return

    async def _attempt_with(self, service: ProviderKind) -> List[AddressRecord]:
        self.attempted_services.append(service)
        provider = self._provider_factory(service)

        if self.is_reverse:
            call = provider.reverse_geocode(self.coordinate)
        else:
            call = provider.geocode(self.address.strip())

        # The slot holds only the current attempt; a fallback replaces it
        task = asyncio.ensure_future(call)
        self._attempt = task
        try:
            return await task
        finally:
            if self._attempt is task:
                self._attempt = None

    def _deliver(
        self,
        records: Optional[List[AddressRecord]],
        error: Optional[GeocodingError],
    ) -> None:
        if self._delivered:
            return
        if self._cancelled:
            logger.debug(f"Suppressing outcome of cancelled {self!r}")
            return

        self._delivered = True
        self._records = records
        self._error = error

        if self.callback is None:
            return
        try:
            self.callback(records, error)
        except Exception:
            logger.exception("Geocode callback raised")

    def _finish(self) -> None:
        self._state = RequestState.FINISHED
        self._finished.set()
