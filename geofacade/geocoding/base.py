"""
Base classes and interfaces for geocoding providers.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, List, Dict, Any, Iterable, TYPE_CHECKING

from geofacade.core.utils.geo import Coordinate

if TYPE_CHECKING:
    from geofacade.geocoding.address import AddressRecord
    from geofacade.geocoding.transport import HttpTransport


class ProviderKind(str, Enum):
    """The closed set of geocoding backends."""

    NATIVE = "native"
    GOOGLE = "google"
    HERE = "here"


class GeocodingError(Exception):
    """Exception raised when geocoding fails."""

    def __init__(self, message: str, provider: str = ""):
        self.message = message
        self.provider = provider
        super().__init__(f"[{provider}] {message}" if provider else message)

    @property
    def allows_fallback(self) -> bool:
        """Whether an alternative provider may be tried after this error."""
        return True


class InvalidAddressInput(GeocodingError):
    """Forward geocode requested with an empty or missing address."""

    def __init__(self, message: str = "Invalid address string", provider: str = ""):
        super().__init__(message, provider)

    @property
    def allows_fallback(self) -> bool:
        return False


class InvalidCoordinateInput(GeocodingError):
    """Reverse geocode requested with a missing or out-of-range coordinate."""

    def __init__(self, message: str = "Invalid coordinate", provider: str = ""):
        super().__init__(message, provider)

    @property
    def allows_fallback(self) -> bool:
        return False


class TransportFailure(GeocodingError):
    """Network-level failure talking to a provider."""


class ProviderRejected(GeocodingError):
    """A reachable provider answered with a non-success status or shape."""

    def __init__(self, message: str, provider: str = "", status: Optional[str] = None):
        self.status = status
        super().__init__(message, provider)


class ParseFailure(GeocodingError):
    """Provider response body could not be parsed."""


class InternalFailure(GeocodingError):
    """URL construction or another failure that should never happen."""


class BaseProvider(ABC):
    """
    Abstract base class for geocoding providers.

    Subclasses must implement:
    - kind: The ProviderKind served
    - geocode(): Forward geocode an address string
    - reverse_geocode(): Reverse geocode a coordinate
    - parse_result(): Map one raw provider entry into an AddressRecord

    Failures are reported by raising a GeocodingError subclass.
    """

    kind: ProviderKind

    @property
    def provider_name(self) -> str:
        """Name of the geocoding provider."""
        return self.kind.value

    @abstractmethod
    async def geocode(self, address: str) -> List["AddressRecord"]:
        """
        Geocode an address string.

        Args:
            address: Free-text address, already validated as non-empty

        Returns:
            List of AddressRecord (possibly empty)

        Raises:
            GeocodingError: On transport, parse or provider failure
        """
        pass

    @abstractmethod
    async def reverse_geocode(self, coordinate: Coordinate) -> List["AddressRecord"]:
        """
        Reverse geocode a coordinate.

        Args:
            coordinate: Coordinate, already validated as in range

        Returns:
            List of AddressRecord (possibly empty)

        Raises:
            GeocodingError: On transport, parse or provider failure
        """
        pass

    @staticmethod
    @abstractmethod
    def parse_result(entry: Any) -> Optional["AddressRecord"]:
        """Map one raw provider entry, or return None to drop it."""
        pass

    def parse_results(self, entries: Iterable[Any]) -> List["AddressRecord"]:
        """Map raw provider entries, dropping those that yield no record."""
        records = []
        for entry in entries:
            record = self.parse_result(entry)
            if record is not None:
                records.append(record)
        return records


class RestProvider(BaseProvider):
    """
    Provider backed by a JSON REST endpoint.

    Subclasses describe their endpoints and query parameters and how to pull
    the result entries out of a response document; fetching and mapping is
    shared.
    """

    geocode_url: str
    reverse_url: str

    def __init__(self, transport: "HttpTransport"):
        self.transport = transport

    @abstractmethod
    def geocode_params(self, address: str) -> Dict[str, str]:
        """Query parameters for a forward geocode."""
        pass

    @abstractmethod
    def reverse_params(self, coordinate: Coordinate) -> Dict[str, str]:
        """Query parameters for a reverse geocode."""
        pass

    @abstractmethod
    def extract_results(self, document: Dict[str, Any]) -> List[Any]:
        """
        Pull the list of result entries out of a response document.

        Raises:
            ProviderRejected: If the document does not signal success
        """
        pass

    async def geocode(self, address: str) -> List["AddressRecord"]:
        return await self._request(self.geocode_url, self.geocode_params(address))

    async def reverse_geocode(self, coordinate: Coordinate) -> List["AddressRecord"]:
        return await self._request(self.reverse_url, self.reverse_params(coordinate))

    async def _request(self, base_url: str, params: Dict[str, str]) -> List["AddressRecord"]:
        from geofacade.geocoding.transport import build_url

        url = build_url(base_url, params, provider=self.provider_name)
        document = await self.transport.fetch(url, provider=self.provider_name)
        return self.parse_results(self.extract_results(document))
