"""
Shared utility functions for the geocoding facade.

Modules:
- geo: Coordinate type and validity checks
- address: Postal address formatting

Usage:
    from geofacade.core.utils import Coordinate, is_valid_coordinate, format_mailing_address
"""

from geofacade.core.utils.geo import (
    Coordinate,
    INVALID_COORDINATE,
    to_coordinate,
    is_valid_coordinate,
)
from geofacade.core.utils.address import (
    PostalAddress,
    format_mailing_address,
)

__all__ = [
    # Geo utilities
    "Coordinate",
    "INVALID_COORDINATE",
    "to_coordinate",
    "is_valid_coordinate",
    # Address utilities
    "PostalAddress",
    "format_mailing_address",
]
