"""DOM walk: turns a subtree into a text stream with inline artifact markers.

The walk is split in two. ``walk`` is pure and returns an ordered list of
segments (text lines, tables to store, images to fetch). ``materialize`` does
the I/O for those segments and renders the final text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import urljoin

from pagescan.parser.dom import Document, Element, Node, Text, iter_elements, text_content
from pagescan.parser.fetcher import ImageFetcher
from pagescan.parser.store import ArtifactKind, ContentStore, ScanSession

logger = logging.getLogger(__name__)

_NEWLINE_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class TextSegment:
    text: str


@dataclass(frozen=True)
class TableSegment:
    csv: str


@dataclass(frozen=True)
class ImageSegment:
    url: str


Segment = TextSegment | TableSegment | ImageSegment


def table_to_csv(table: Element) -> str:
    """Flatten *table* into comma-joined rows, one row per line."""
    lines: list[str] = []
    for row in iter_elements(table, ("tr",)):
        cells = [
            _NEWLINE_RE.sub(" ", text_content(cell).strip())
            for cell in iter_elements(row, ("th", "td"))
        ]
        lines.append(",".join(cells) + "\n")
    return "".join(lines)


def resolve_image_url(img: Element, source_url: str) -> str | None:
    """Resolve *img*'s reference against *source_url*.

    ``src`` wins, then the lazy-loading ``data-src``, then the first
    ``srcset`` candidate. Returns ``None`` when the image names no source.
    """
    srcset = (img.get("srcset") or "").split(",", 1)[0].split()
    candidates = (img.get("src"), img.get("data-src"), srcset[0] if srcset else None)
    for ref in candidates:
        if ref and ref.strip():
            return urljoin(source_url, ref.strip())
    return None


def walk(node: Node | Document, source_url: str) -> list[Segment]:
    """Classify *node*'s subtree into segments, in document order."""
    segments: list[Segment] = []
    stack: list[Node | Document] = [node]
    while stack:
        current = stack.pop()
        match current:
            case Element(tag="table"):
                segments.append(TableSegment(table_to_csv(current)))
            case Element(tag="img"):
                url = resolve_image_url(current, source_url)
                if url is not None:
                    segments.append(ImageSegment(url))
            case Text(content=content):
                segments.append(TextSegment(content.strip()))
            case Element(tag="script" | "style"):
                continue
            case Element(children=children) | Document(children=children):
                stack.extend(reversed(children))
    return segments


async def materialize(
    segments: list[Segment],
    store: ContentStore,
    session: ScanSession,
    fetcher: ImageFetcher,
) -> str:
    """Store every artifact in *segments* and render the text stream."""
    lines: list[str] = []
    for segment in segments:
        match segment:
            case TextSegment(text=text):
                lines.append(f"{text}\n")
            case TableSegment(csv=csv):
                reference = store.store(csv, ArtifactKind.TABLE, session)
                lines.append(f"[TABLE:{reference}]\n")
            case ImageSegment(url=url):
                data = await fetcher.fetch(url)
                reference = store.store(data, ArtifactKind.IMAGE, session)
                lines.append(f"[IMAGE:{reference}]\n")
    return "".join(lines)


async def extract(
    node: Node | Document,
    source_url: str,
    session: ScanSession,
    store: ContentStore,
    fetcher: ImageFetcher,
) -> str:
    """Walk *node* and return its text with ``[TABLE:...]``/``[IMAGE:...]`` markers."""
    segments = walk(node, source_url)
    logger.debug(
        "subtree walked",
        extra={
            "segments": len(segments),
            "tables": sum(isinstance(s, TableSegment) for s in segments),
            "images": sum(isinstance(s, ImageSegment) for s in segments),
        },
    )
    return await materialize(segments, store, session, fetcher)
