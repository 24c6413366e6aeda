"""Error taxonomy for the extraction pipeline.

Every error here is fatal to the scan that raised it. The core never retries;
the HTTP layer decides how each one is reported to the caller.
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for all scan failures."""


class ImageFetchError(ExtractionError):
    """An image referenced by the page could not be downloaded."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        message = f"failed to fetch image {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TextProcessorError(ExtractionError):
    """The text processor call itself failed."""


class ProcessorOutputError(ExtractionError):
    """The text processor returned something that is not an extraction record."""

    def __init__(self, message: str, chunk_index: int | None = None) -> None:
        self.chunk_index = chunk_index
        super().__init__(message)


class StorageError(ExtractionError):
    """The session area or one of its files could not be written."""
