"""Image download over HTTP, plus inline ``data:`` URIs."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import TYPE_CHECKING, Protocol
from urllib.parse import unquote_to_bytes

import httpx

from pagescan.parser.errors import ImageFetchError

if TYPE_CHECKING:
    from pagescan.config import Settings

logger = logging.getLogger(__name__)


class ImageFetcher(Protocol):
    """Protocol for image fetchers."""

    async def fetch(self, url: str) -> bytes: ...


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        timeout=settings.image_fetch_timeout,
        follow_redirects=True,
    )


def decode_data_uri(uri: str) -> bytes:
    """Return the payload of an RFC 2397 ``data:`` URI.

    Raises:
        ValueError: If the URI has no comma or its base64 payload is invalid.
    """
    header, sep, payload = uri[len("data:"):].partition(",")
    if not sep:
        raise ValueError("data URI has no payload separator")
    if header.lower().endswith(";base64"):
        try:
            return base64.b64decode(unquote_to_bytes(payload), validate=False)
        except binascii.Error as exc:
            raise ValueError(f"invalid base64 payload: {exc}") from exc
    return unquote_to_bytes(payload)


class HttpImageFetcher:
    """Fetches image bytes with a shared ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch(self, url: str) -> bytes:
        if url[:5].lower() == "data:":
            try:
                return decode_data_uri(url)
            except ValueError as exc:
                raise ImageFetchError(url[:64], str(exc)) from exc

        logger.debug("fetching image", extra={"image_url": url})
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ImageFetchError(url, f"HTTP {exc.response.status_code}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ImageFetchError(url, type(exc).__name__) from exc
        logger.debug("image fetched", extra={"image_url": url, "bytes": len(response.content)})
        return response.content
