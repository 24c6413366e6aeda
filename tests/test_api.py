"""HTTP layer tests — /parser/normalize and /health."""

from __future__ import annotations

import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from conftest import RECORD, FakeImageFetcher, ScriptedProcessor
from pagescan.api.routes import router
from pagescan.api.service import status_for
from pagescan.config import Settings, get_settings
from pagescan.main import app as main_app
from pagescan.parser.engine import ExtractionEngine
from pagescan.parser.errors import (
    ExtractionError,
    ImageFetchError,
    ProcessorOutputError,
    StorageError,
    TextProcessorError,
)

HEADERS = {"X-API-Key": "test-key"}


def _make_client(settings: Settings, engine: ExtractionEngine) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_settings] = lambda: settings
    app.state.engine = engine
    return TestClient(app)


@pytest.fixture
def processor() -> ScriptedProcessor:
    return ScriptedProcessor()


@pytest.fixture
def client(settings: Settings, store, fetcher: FakeImageFetcher, processor: ScriptedProcessor) -> TestClient:
    engine = ExtractionEngine(settings, fetcher=fetcher, store=store, processor=processor)
    return _make_client(settings, engine)


def test_normalize_returns_records(client: TestClient, processor: ScriptedProcessor):
    resp = client.post(
        "/parser/normalize",
        json={"url": "https://example.com/page", "html": '<p>Hello</p><img src="/a.png">'},
        headers=HEADERS,
    )
    assert resp.status_code == 200
    assert resp.json() == [RECORD]
    assert processor.inputs[0].startswith("Hello\n[IMAGE:image_")


def test_normalize_requires_api_key(client: TestClient):
    resp = client.post("/parser/normalize", json={"url": "https://example.com", "html": "<p>x</p>"})
    assert resp.status_code == 401


def test_normalize_rejects_invalid_url(client: TestClient):
    resp = client.post("/parser/normalize", json={"url": "not a url", "html": "<p>x</p>"}, headers=HEADERS)
    assert resp.status_code == 422


def test_normalize_image_failure_is_bad_gateway(client: TestClient):
    resp = client.post(
        "/parser/normalize",
        json={"url": "https://example.com/page", "html": '<img src="/missing.png">'},
        headers=HEADERS,
    )
    assert resp.status_code == 502
    assert "missing.png" in resp.json()["detail"]


def test_normalize_bad_processor_output_is_bad_gateway(settings: Settings, store, fetcher: FakeImageFetcher):
    engine = ExtractionEngine(settings, fetcher=fetcher, store=store, processor=ScriptedProcessor("nope"))
    client = _make_client(settings, engine)
    resp = client.post(
        "/parser/normalize",
        json={"url": "https://example.com/page", "html": "<p>x</p>"},
        headers=HEADERS,
    )
    assert resp.status_code == 502


def test_normalize_merged_layout_returns_object(settings: Settings, store, fetcher: FakeImageFetcher):
    settings.result_layout = "merged"
    engine = ExtractionEngine(settings, fetcher=fetcher, store=store, processor=ScriptedProcessor(json.dumps(RECORD)))
    client = _make_client(settings, engine)
    resp = client.post(
        "/parser/normalize",
        json={"url": "https://example.com/page", "html": "<p>Hello</p>"},
        headers=HEADERS,
    )
    assert resp.status_code == 200
    assert resp.json() == RECORD


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (ImageFetchError("https://x.test/a.png"), 502),
        (TextProcessorError("down"), 502),
        (ProcessorOutputError("bad json"), 502),
        (StorageError("disk full"), 500),
        (ExtractionError("other"), 500),
    ],
)
def test_status_for(error, expected):
    assert status_for(error) == expected


def test_health_no_auth():
    resp = TestClient(main_app).get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
