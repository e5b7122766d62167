"""
Geographic utility functions for coordinate handling.

This module holds the coordinate type shared across the codebase and the
range checks applied before any reverse-geocoding call:
- Coordinate named tuple (latitude, longitude)
- Coercion of plain (lat, lng) pairs
- Validity checks (range, finiteness, invalid sentinel)

Usage:
    from geofacade.core.utils.geo import Coordinate, is_valid_coordinate

    is_valid_coordinate(Coordinate(42.26, -71.80))  # True
    is_valid_coordinate((91.0, 0.0))  # False
"""

import math
from collections.abc import Sequence
from typing import NamedTuple, Optional, Any


class Coordinate(NamedTuple):
    """A WGS84 point in decimal degrees."""

    latitude: float
    longitude: float

    def as_query(self) -> str:
        """Render as the "lat,lng" pair used by provider query strings."""
        return f"{self.latitude},{self.longitude}"


# Sentinel for "no usable coordinate" (latitude is deliberately out of range)
INVALID_COORDINATE = Coordinate(-180.0, -180.0)

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


def to_coordinate(value: Any) -> Optional[Coordinate]:
    """
    Coerce a value into a Coordinate.

    Accepts a Coordinate, a (lat, lng) tuple or list of numbers, or None.

    Returns:
        Coordinate, or None if the value cannot be read as a pair of numbers
    """
    if value is None:
        return None
    if isinstance(value, Coordinate):
        return value
    # Strings unpack character by character, so "12" must not read as (1, 2)
    if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Sequence):
        return None
    try:
        lat, lng = value
        if isinstance(lat, bool) or isinstance(lng, bool):
            return None
        return Coordinate(float(lat), float(lng))
    except (TypeError, ValueError):
        return None


def is_valid_coordinate(value: Any) -> bool:
    """
    Check whether a value is a usable coordinate.

    A coordinate is valid when both parts are finite, latitude lies in
    [-90, 90], longitude lies in [-180, 180], and it is not the
    INVALID_COORDINATE sentinel.

    Example:
        >>> is_valid_coordinate((37.7749, -122.4194))
        True
        >>> is_valid_coordinate((0.0, 181.0))
        False
        >>> is_valid_coordinate(None)
        False
    """
    coordinate = to_coordinate(value)
    if coordinate is None or coordinate == INVALID_COORDINATE:
        return False

    lat, lng = coordinate
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False

    return (
        LATITUDE_RANGE[0] <= lat <= LATITUDE_RANGE[1] and
        LONGITUDE_RANGE[0] <= lng <= LONGITUDE_RANGE[1]
    )
