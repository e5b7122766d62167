"""
Centralized configuration management for the geocoding facade.

All configuration is loaded from environment variables with sensible defaults.
Use the `settings` instance for accessing configuration values, or build a
fresh `Settings()` when the environment changed after import.

Usage:
    from geofacade.core.config import settings

    # Access configuration
    print(settings.GOOGLE_GEOCODING_API_KEY)
    print(settings.GEOCODING_TIMEOUT)
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load environment variables from .env file
# Search in common locations
_env_paths = [
    Path(__file__).parent.parent.parent / ".env",  # project root
    Path.cwd() / ".env",  # Current working directory
]

for env_path in _env_paths:
    if env_path.exists():
        load_dotenv(env_path)
        break


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # ==========================================================================
    # Provider credentials
    # ==========================================================================
    GOOGLE_GEOCODING_API_KEY: str = field(
        default_factory=lambda: os.getenv("GOOGLE_GEOCODING_API_KEY", "")
    )
    HERE_APP_ID: str = field(
        default_factory=lambda: os.getenv("HERE_APP_ID", "")
    )
    HERE_APP_CODE: str = field(
        default_factory=lambda: os.getenv("HERE_APP_CODE", "")
    )

    # ==========================================================================
    # Native placemark backend (OpenStreetMap Nominatim)
    # ==========================================================================
    NOMINATIM_URL: str = field(
        default_factory=lambda: os.getenv(
            "NOMINATIM_URL",
            "https://nominatim.openstreetmap.org"
        )
    )
    GEOCODING_USER_AGENT: str = field(
        default_factory=lambda: os.getenv("GEOCODING_USER_AGENT", "geofacade/0.1")
    )

    # ==========================================================================
    # Transport
    # ==========================================================================
    GEOCODING_TIMEOUT: float = field(
        default_factory=lambda: float(os.getenv("GEOCODING_TIMEOUT", "30"))
    )

    # ==========================================================================
    # Logging
    # ==========================================================================
    LOG_LEVEL: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper()
    )

    def validate_google_geocoding(self) -> bool:
        """Check if Google Geocoding API key is configured."""
        return bool(self.GOOGLE_GEOCODING_API_KEY)

    def validate_here_geocoding(self) -> bool:
        """Check if HERE app id and app code are both configured."""
        return bool(self.HERE_APP_ID and self.HERE_APP_CODE)


# Shared settings instance
settings = Settings()
