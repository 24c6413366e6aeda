"""Content-addressed storage for table and image artifacts."""

from __future__ import annotations

import enum
import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import urlsplit, urlunsplit

from pagescan.parser.errors import StorageError

logger = logging.getLogger(__name__)

RESULT_FILENAME = "result.txt"

_DEFAULT_PORTS = {"http": 80, "https": 443}


class ArtifactKind(str, enum.Enum):
    TABLE = "table"
    IMAGE = "image"

    @property
    def extension(self) -> str:
        # Images are always saved as .jpg, whatever their actual encoding.
        return "txt" if self is ArtifactKind.TABLE else "jpg"


@dataclass(frozen=True)
class ScanSession:
    """One scan request's storage area."""

    source_url: str
    created_at: datetime
    area: Path


def _to_bytes(content: bytes | str) -> bytes:
    return content.encode("utf-8") if isinstance(content, str) else content


def artifact_name(content: bytes | str, kind: ArtifactKind) -> str:
    """Return the content-derived file name for an artifact."""
    digest = hashlib.sha256(_to_bytes(content)).hexdigest()
    return f"{kind.value}_{digest}.{kind.extension}"


def normalize_url(url: str) -> str:
    """Canonicalize *url* so equivalent spellings hash to the same session prefix.

    Lowercases scheme and host, drops default ports and turns an empty path
    into ``/``. Query and fragment are kept as given.
    """
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if ":" in host:
        host = f"[{host}]"
    netloc = host
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"
    port = parts.port
    if port is not None and _DEFAULT_PORTS.get(scheme) != port:
        netloc = f"{netloc}:{port}"
    path = parts.path or ("/" if netloc else "")
    return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))


def session_name(source_url: str, created_at: datetime) -> str:
    url_hash = hashlib.sha256(normalize_url(source_url).encode("utf-8")).hexdigest()
    millis = int(created_at.timestamp() * 1000)
    return f"{url_hash}_{millis}"


class ContentStore:
    """Writes artifacts under ``base_dir/<session>/``.

    File names are derived from content, so writing the same bytes twice is a
    no-op and no in-memory index is kept.
    """

    def __init__(self, base_dir: Path | str) -> None:
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def create_session(self, source_url: str, now: datetime | None = None) -> ScanSession:
        created_at = now or datetime.now(timezone.utc)
        area = self._base_dir / session_name(source_url, created_at)
        try:
            area.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"cannot create session area {area}: {exc}") from exc
        logger.info("scan session created", extra={"url": source_url, "session_area": str(area)})
        return ScanSession(source_url=source_url, created_at=created_at, area=area)

    def store(self, content: bytes | str, kind: ArtifactKind, session: ScanSession) -> str:
        """Persist *content* and return its reference (the file name)."""
        data = _to_bytes(content)
        reference = artifact_name(data, kind)
        path = session.area / reference
        if path.exists():
            logger.debug("artifact already stored", extra={"reference": reference})
            return reference
        try:
            path.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"cannot write artifact {reference}: {exc}") from exc
        logger.debug("artifact stored", extra={"reference": reference, "bytes": len(data)})
        return reference

    def save_result(self, session: ScanSession, payload: str) -> Path:
        path = session.area / RESULT_FILENAME
        try:
            path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"cannot write result to {path}: {exc}") from exc
        logger.info("result persisted", extra={"path": str(path), "bytes": len(payload)})
        return path
