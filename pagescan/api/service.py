"""Service layer — runs extractions for the API routes and maps failures to HTTP errors."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from pagescan.api.schemas import NormalizeRequest
from pagescan.parser import (
    ExtractionEngine,
    ExtractionError,
    ExtractionResult,
    ImageFetchError,
    ProcessorOutputError,
    StorageError,
    TextProcessorError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[ExtractionError], int], ...] = (
    (ImageFetchError, status.HTTP_502_BAD_GATEWAY),
    (TextProcessorError, status.HTTP_502_BAD_GATEWAY),
    (ProcessorOutputError, status.HTTP_502_BAD_GATEWAY),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: ExtractionError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def get_normalized_content(engine: ExtractionEngine, body: NormalizeRequest) -> ExtractionResult:
    """Run one extraction; a failed scan becomes an ``HTTPException``."""
    url = str(body.url)
    try:
        return await engine.run(body.html, url)
    except ExtractionError as exc:
        logger.exception("extraction failed", extra={"url": url, "error_type": type(exc).__name__})
        raise HTTPException(status_code=status_for(exc), detail=str(exc)) from exc
