"""Extraction engine — parse -> chunk -> walk -> sanitize -> process pipeline orchestrator."""

from __future__ import annotations

import json
import logging
import time

from pydantic import TypeAdapter, ValidationError

from pagescan.config import Settings
from pagescan.llm.processor import LlmTextProcessor, TextProcessor
from pagescan.parser.chunker import chunk
from pagescan.parser.dom import content_root, parse_html
from pagescan.parser.errors import ProcessorOutputError
from pagescan.parser.fetcher import ImageFetcher
from pagescan.parser.models import ExtractionRecord, ExtractionResult, merge_records
from pagescan.parser.sanitizer import sanitize
from pagescan.parser.store import ContentStore
from pagescan.parser.walker import extract

logger = logging.getLogger(__name__)

_RESULT_ADAPTER: TypeAdapter[ExtractionResult] = TypeAdapter(ExtractionResult)


def parse_record(raw: str, chunk_index: int | None = None) -> ExtractionRecord:
    """Parse the text processor's JSON answer into an ``ExtractionRecord``.

    Raises:
        ProcessorOutputError: If *raw* is not JSON or not shaped like a record.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ProcessorOutputError(f"text processor returned invalid JSON: {exc}", chunk_index) from exc
    try:
        return ExtractionRecord.model_validate(data)
    except ValidationError as exc:
        raise ProcessorOutputError(
            f"text processor returned an unexpected shape: {exc.error_count()} validation error(s)",
            chunk_index,
        ) from exc


def dump_result(result: ExtractionResult) -> str:
    return _RESULT_ADAPTER.dump_json(result).decode("utf-8")


class ExtractionEngine:
    """Turns one page's raw HTML into structured extraction records.

    Chunks are handled strictly one after another: each chunk is walked, its
    artifacts stored, its text sanitized and sent to the text processor before
    the next chunk starts. Any failure aborts the whole run.
    """

    def __init__(
        self,
        settings: Settings,
        fetcher: ImageFetcher,
        store: ContentStore | None = None,
        processor: TextProcessor | None = None,
    ) -> None:
        self._settings = settings
        self._fetcher = fetcher
        self._store = store or ContentStore(settings.storage_dir)
        self._processor = processor or LlmTextProcessor(settings)

    async def run(self, raw_html: str, source_url: str) -> ExtractionResult:
        """Execute the full extraction pipeline and return the result."""
        start = time.perf_counter()
        logger.info("extraction started", extra={"url": source_url, "html_length": len(raw_html)})

        document = parse_html(raw_html)
        session = self._store.create_session(source_url)
        chunks = chunk(content_root(document), self._settings.max_chunk_size)
        logger.info(
            "chunks planned",
            extra={"url": source_url, "chunks": len(chunks), "max_chunk_size": self._settings.max_chunk_size},
        )

        records: list[ExtractionRecord] = []
        for index, part in enumerate(chunks):
            if not part.children:
                logger.debug("empty chunk skipped", extra={"chunk_index": index})
                continue

            text = await extract(part, source_url, session, self._store, self._fetcher)
            text = sanitize(text)
            logger.info(
                "processing chunk",
                extra={"url": source_url, "chunk_index": index, "total_chunks": len(chunks), "text_length": len(text)},
            )
            raw = await self._processor.process_text(text)
            records.append(parse_record(raw, index))

        result: ExtractionResult = records
        if self._settings.result_layout == "merged":
            result = merge_records(records)

        self._store.save_result(session, dump_result(result))

        logger.info(
            "extraction completed",
            extra={
                "url": source_url,
                "session_area": str(session.area),
                "records": len(records),
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return result
