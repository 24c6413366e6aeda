"""API key validation (FastAPI dependency)."""

import hmac
import logging

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

from pagescan.config import Settings, get_settings

logger = logging.getLogger(__name__)

_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def _reject(request: Request, reason: str) -> HTTPException:
    client = request.client.host if request.client else "unknown"
    logger.warning("request rejected", extra={"reason": reason, "client": client, "path": request.url.path})
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid API key",
        headers={"WWW-Authenticate": "ApiKey"},
    )


async def require_api_key(
    request: Request,
    api_key: str | None = Security(_api_key_header),
    settings: Settings = Depends(get_settings),
) -> str:
    """Check the X-API-Key header against API_KEY in constant time."""
    if not api_key:
        raise _reject(request, "missing api key")
    if not hmac.compare_digest(api_key.encode(), settings.api_key.encode()):
        raise _reject(request, "wrong api key")
    return api_key
