"""
Core module providing shared configuration and utilities.

This module consolidates common functionality used across the codebase:
- Configuration management (settings, environment variables)
- Utility functions (coordinate validation, mailing address formatting)

Usage:
    from geofacade.core import settings
    from geofacade.core.utils import is_valid_coordinate, format_mailing_address
"""

from geofacade.core.config import settings, Settings

__all__ = [
    "settings",
    "Settings",
]
