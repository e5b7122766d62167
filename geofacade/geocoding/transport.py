"""
HTTP transport shared by the REST providers and the Nominatim placemark backend.

One GET per fetch, JSON body expected. Errors are reported as GeocodingError
subclasses so the request state machine can decide on fallback.
"""

import asyncio
import logging
from typing import Optional, Dict, Any
from urllib.parse import urlencode, urlsplit, quote

import aiohttp

from geofacade.geocoding.base import TransportFailure, ParseFailure, InternalFailure

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def build_url(base_url: str, params: Dict[str, Any], provider: str = "") -> str:
    """
    Build a request URL from a fixed endpoint and query parameters.

    Values are percent-encoded; commas are kept literal so "lat,lng" pairs
    read the way providers document them.

    Raises:
        InternalFailure: If encoding fails or the result is not an absolute URL
    """
    try:
        query = urlencode(params, quote_via=quote, safe=",")
        url = f"{base_url}?{query}" if query else base_url
        parts = urlsplit(url)
    except (UnicodeError, ValueError, TypeError) as e:
        raise InternalFailure(f"Could not build request URL: {e}", provider=provider) from e

    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InternalFailure(f"Malformed request URL: {base_url}", provider=provider)

    return url


class HttpTransport:
    """
    Async JSON fetcher built on aiohttp.

    Usage:
        transport = HttpTransport(timeout=10)
        document = await transport.fetch("https://example.com/geocode?q=x")

    A session may be injected to share connections; otherwise each fetch
    opens and closes its own session.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.timeout = timeout
        self.headers = dict(headers or {})
        self.session = session

    async def fetch(self, url: str, provider: str = "") -> Dict[str, Any]:
        """
        GET a URL and parse the body as a JSON object.

        Args:
            url: Fully built request URL
            provider: Provider name used in error messages and logs

        Returns:
            Parsed JSON object

        Raises:
            TransportFailure: On network errors and timeouts
            ParseFailure: If the body is not a JSON object
        """
        document = await self.fetch_any(url, provider=provider)

        if not isinstance(document, dict):
            raise ParseFailure("Response is not a JSON object", provider=provider)

        return document

    async def fetch_any(self, url: str, provider: str = "") -> Any:
        """GET a URL and parse the body as JSON of any shape."""
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            if self.session is not None:
                return await self._read(self.session, url, timeout, provider)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                return await self._read(session, url, timeout, provider)

        except asyncio.TimeoutError as e:
            logger.warning(f"{provider or 'http'}: Timeout after {self.timeout}s")
            raise TransportFailure(f"Request timed out after {self.timeout}s", provider=provider) from e
        except aiohttp.ClientError as e:
            logger.warning(f"{provider or 'http'}: Transport error: {e}")
            raise TransportFailure(str(e) or e.__class__.__name__, provider=provider) from e

    async def _read(
        self,
        session: aiohttp.ClientSession,
        url: str,
        timeout: aiohttp.ClientTimeout,
        provider: str,
    ) -> Any:
        async with session.get(url, headers=self.headers, timeout=timeout) as response:
            if response.status != 200:
                logger.warning(f"{provider or 'http'}: HTTP {response.status}")

            try:
                # Providers do not always label JSON bodies as application/json
                return await response.json(content_type=None)
            except (aiohttp.ContentTypeError, ValueError) as e:
                raise ParseFailure(f"Response is not valid JSON: {e}", provider=provider) from e
