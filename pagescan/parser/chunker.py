"""Split a document into size-bounded groups of top-level nodes.

Sizes are measured on serialized markup. Node boundaries are never split, so
a single node larger than the bound becomes a chunk of its own.
"""

from __future__ import annotations

import logging

from pagescan.parser.dom import Document, Node, serialize

logger = logging.getLogger(__name__)


def chunk(document: Document, max_size: int) -> list[Document]:
    """Partition *document*'s children into ordered chunks of at most *max_size* characters.

    Concatenating the returned chunks' children reproduces ``document.children``.
    """
    if max_size <= 0:
        raise ValueError(f"max_size must be positive, got {max_size}")

    chunks: list[Document] = []
    current: list[Node] = []
    current_size = 0

    for node in document.children:
        node_size = len(serialize(node))

        if current and current_size + node_size > max_size:
            chunks.append(Document(tuple(current)))
            current = []
            current_size = 0

        if node_size > max_size:
            logger.debug("oversized node emitted alone", extra={"node_size": node_size, "max_size": max_size})
            chunks.append(Document((node,)))
            continue

        current.append(node)
        current_size += node_size

    if current:
        chunks.append(Document(tuple(current)))

    logger.debug(
        "document chunked",
        extra={"top_level_nodes": len(document.children), "chunks": len(chunks), "max_size": max_size},
    )
    return chunks
