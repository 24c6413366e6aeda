"""FastAPI app entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pagescan.api.routes import router
from pagescan.config import get_settings
from pagescan.logging_config import setup_logging
from pagescan.parser import ContentStore, ExtractionEngine, HttpImageFetcher, create_http_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # Initialize logging FIRST so all subsequent operations produce structured logs
    setup_logging(settings.log_level, settings.log_format)
    logger.info("starting pagescan service")

    settings.storage_dir.mkdir(parents=True, exist_ok=True)
    http_client = create_http_client(settings)

    engine = ExtractionEngine(
        settings,
        fetcher=HttpImageFetcher(http_client),
        store=ContentStore(settings.storage_dir),
    )

    app.state.settings = settings
    app.state.engine = engine

    logger.info(
        "pagescan service ready",
        extra={
            "llm_provider": settings.llm_provider,
            "llm_model": settings.llm_model,
            "storage_dir": str(settings.storage_dir.resolve()),
            "max_chunk_size": settings.max_chunk_size,
            "result_layout": settings.result_layout,
        },
    )

    yield

    logger.info("shutting down pagescan service")
    await http_client.aclose()


app = FastAPI(title="Pagescan", lifespan=lifespan)
app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}
