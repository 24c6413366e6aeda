"""Fixtures — settings, tmp-backed content store, fake image fetcher and text processor."""

from __future__ import annotations

import json

import httpx
import pytest
import pytest_asyncio

from pagescan.config import Settings
from pagescan.parser.errors import ImageFetchError
from pagescan.parser.store import ContentStore

PNG_BYTES = b"\x89PNG\r\n\x1a\n fake image payload"

RECORD = {
    "title": "Example",
    "sections": [
        {
            "header": "Intro",
            "content": [{"type": "text", "description": "greeting", "value": "Hello"}],
        }
    ],
}


class FakeImageFetcher:
    """Serves bytes from a dict; unknown URLs fail like a 404 would."""

    def __init__(self, images: dict[str, bytes] | None = None) -> None:
        self.images = images or {}
        self.calls: list[str] = []

    async def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        if url not in self.images:
            raise ImageFetchError(url, "HTTP 404")
        return self.images[url]


class ScriptedProcessor:
    """Returns canned JSON answers in order and records every input text."""

    def __init__(self, *answers: str) -> None:
        self._answers = list(answers)
        self.inputs: list[str] = []

    async def process_text(self, text: str) -> str:
        self.inputs.append(text)
        if self._answers:
            return self._answers.pop(0)
        return json.dumps(RECORD)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(api_key="test-key", storage_dir=tmp_path / "scans")  # type: ignore[call-arg]


@pytest.fixture
def store(tmp_path) -> ContentStore:
    return ContentStore(tmp_path / "scans")


@pytest.fixture
def fetcher() -> FakeImageFetcher:
    return FakeImageFetcher({"https://example.com/a.png": PNG_BYTES})


@pytest_asyncio.fixture
async def mock_http_client():
    """AsyncClient whose transport serves a tiny fake image host."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/img.png":
            return httpx.Response(200, content=PNG_BYTES, headers={"Content-Type": "image/png"})
        if request.url.path == "/boom":
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(404)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    yield client
    await client.aclose()
