"""
Normalized address model shared by every provider.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any, Union

from geofacade.core.utils.geo import Coordinate
from geofacade.geocoding.base import ProviderKind

# Serialized field names, in output order
_STRING_FIELDS = (
    "street_number",
    "route",
    "locality",
    "sub_locality",
    "administrative_area",
    "sub_administrative_area",
    "neighborhood",
    "postal_code",
    "country",
    "iso_country_code",
    "formatted_address",
)


@dataclass(frozen=True)
class AddressRecord:
    """
    A geocoding result containing a human-readable address.

    Every field may be None, indicating the provider did not supply it.
    `raw_source` keeps the provider payload the record was built from and is
    not interpreted further.
    """

    coordinate: Optional[Coordinate] = None
    street_number: Optional[str] = None
    route: Optional[str] = None
    locality: Optional[str] = None
    sub_locality: Optional[str] = None
    administrative_area: Optional[str] = None
    sub_administrative_area: Optional[str] = None
    neighborhood: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    iso_country_code: Optional[str] = None
    formatted_address: Optional[str] = None
    lines: Optional[Tuple[str, ...]] = None
    provider: Optional[str] = None
    raw_source: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def from_provider_payload(
        cls,
        payload: Any,
        provider: Union[ProviderKind, str],
    ) -> Optional["AddressRecord"]:
        """
        Build a record from one raw provider entry.

        Args:
            payload: Placemark (native) or JSON result entry (google, here)
            provider: Which provider produced the payload

        Returns:
            AddressRecord, or None if the payload has the wrong shape
        """
        from geofacade.geocoding.providers import get_provider_class

        return get_provider_class(provider).parse_result(payload)

    @property
    def as_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data: Dict[str, Any] = {
            "latitude": self.coordinate.latitude if self.coordinate else None,
            "longitude": self.coordinate.longitude if self.coordinate else None,
        }
        for name in _STRING_FIELDS:
            data[name] = getattr(self, name)
        data["lines"] = list(self.lines) if self.lines is not None else None
        data["provider"] = self.provider
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AddressRecord":
        """Rebuild a record from `as_dict` output. Missing keys map to None."""
        lat = data.get("latitude")
        lng = data.get("longitude")
        coordinate = Coordinate(float(lat), float(lng)) if lat is not None and lng is not None else None
        lines = data.get("lines")

        return cls(
            coordinate=coordinate,
            lines=tuple(lines) if lines is not None else None,
            provider=data.get("provider"),
            **{name: data.get(name) for name in _STRING_FIELDS},
        )
