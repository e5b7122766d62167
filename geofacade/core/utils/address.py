"""
Postal address formatting utilities.

Turns a structured postal address into the mailing-address text used as the
formatted address for native placemarks. Line order follows the conventions
of the address's country; unknown countries get one field per line.

Usage:
    from geofacade.core.utils.address import PostalAddress, format_mailing_address

    address = PostalAddress(
        street="1 Market St",
        city="San Francisco",
        state="CA",
        postal_code="94105",
        country="United States",
        iso_country_code="US",
    )
    format_mailing_address(address)
    # "1 Market St\\nSan Francisco CA 94105\\nUnited States"
"""

from dataclasses import dataclass
from typing import Optional, List

# Countries writing "City ST 12345" on one line
CITY_STATE_POSTAL_COUNTRIES = {"US", "CA", "AU", "PR", "NZ"}

# Countries writing "12345 City" on one line
POSTAL_CITY_COUNTRIES = {
    "AT", "BE", "BR", "CH", "CZ", "DE", "DK", "ES", "FI", "FR", "IT",
    "LU", "MX", "NL", "NO", "PL", "PT", "SE", "SK",
}


@dataclass(frozen=True)
class PostalAddress:
    """Structured mailing address attached to a native placemark."""

    street: Optional[str] = None
    sub_locality: Optional[str] = None
    city: Optional[str] = None
    sub_administrative_area: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    iso_country_code: Optional[str] = None


def _join(*parts: Optional[str], sep: str = " ") -> str:
    return sep.join(p.strip() for p in parts if p and p.strip())


def format_mailing_address(address: Optional[PostalAddress]) -> Optional[str]:
    """
    Format a postal address as mailing-address lines.

    Args:
        address: PostalAddress to format

    Returns:
        Newline-separated address lines, or None if nothing could be formatted
    """
    if address is None:
        return None

    country_code = (address.iso_country_code or "").upper()
    lines: List[str] = [_join(address.street)]

    if country_code in CITY_STATE_POSTAL_COUNTRIES:
        lines.append(_join(address.city, address.state, address.postal_code))
    elif country_code in POSTAL_CITY_COUNTRIES:
        lines.append(_join(address.postal_code, address.city))
        lines.append(_join(address.state))
    else:
        lines.append(_join(address.sub_locality))
        lines.append(_join(address.city))
        lines.append(_join(address.state))
        lines.append(_join(address.postal_code))

    lines.append(_join(address.country))

    text = "\n".join(line for line in lines if line)
    return text or None
