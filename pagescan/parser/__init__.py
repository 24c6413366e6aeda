"""HTML content extraction: parse, chunk, walk, sanitize and hand off to a text processor."""

from .chunker import chunk
from .dom import Document, Element, Text, content_root, parse_html, serialize
from .engine import ExtractionEngine, parse_record
from .errors import (
    ExtractionError,
    ImageFetchError,
    ProcessorOutputError,
    StorageError,
    TextProcessorError,
)
from .fetcher import HttpImageFetcher, ImageFetcher, create_http_client
from .models import ContentItem, ExtractionRecord, ExtractionResult, Section, merge_records
from .sanitizer import sanitize
from .store import ArtifactKind, ContentStore, ScanSession
from .walker import extract, walk

__all__ = [
    "ArtifactKind",
    "ContentItem",
    "ContentStore",
    "Document",
    "Element",
    "ExtractionEngine",
    "ExtractionError",
    "ExtractionRecord",
    "ExtractionResult",
    "HttpImageFetcher",
    "ImageFetchError",
    "ImageFetcher",
    "ProcessorOutputError",
    "ScanSession",
    "Section",
    "StorageError",
    "Text",
    "TextProcessorError",
    "chunk",
    "content_root",
    "create_http_client",
    "extract",
    "merge_records",
    "parse_html",
    "parse_record",
    "sanitize",
    "serialize",
    "walk",
]
