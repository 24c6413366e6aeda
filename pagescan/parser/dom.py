"""Immutable document tree built from raw HTML.

BeautifulSoup does the tolerant parsing; its result is converted once into
frozen ``Text``/``Element`` variants that the chunker and walker dispatch on
with ``match``. Conversion, traversal and serialization use explicit stacks,
so pathologically deep markup cannot exhaust the interpreter's recursion limit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from html import escape

from bs4 import BeautifulSoup, Comment, Declaration, Doctype, ProcessingInstruction, Tag

logger = logging.getLogger(__name__)

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})


@dataclass(frozen=True)
class Text:
    content: str


@dataclass(frozen=True)
class Element:
    tag: str
    attrs: tuple[tuple[str, str], ...] = ()
    children: tuple[Node, ...] = ()

    def get(self, name: str) -> str | None:
        """Return the first value of attribute *name*, or ``None``."""
        for key, value in self.attrs:
            if key == name:
                return value
        return None


@dataclass(frozen=True)
class Document:
    """Root container; every chunk is also a ``Document``."""

    children: tuple[Node, ...] = ()

    def __len__(self) -> int:
        return len(self.children)


Node = Text | Element


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _string_node(string) -> Text | None:
    if isinstance(string, Doctype):
        value = str(string)
        if value[:7].lower() == "doctype":
            value = value[7:].strip()
        return Text(f"<!DOCTYPE {value}>")
    if isinstance(string, (Comment, Declaration, ProcessingInstruction)):
        return None
    return Text(str(string))


def _convert(contents: Iterable) -> tuple[Node, ...]:
    root: list[Node] = []
    # Each frame: (children iterator, collected nodes, (tag, attrs, parent list) or None)
    stack: list[tuple[Iterator, list[Node], tuple | None]] = [(iter(contents), root, None)]
    while stack:
        children, collected, pending = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            if pending is not None:
                tag, attrs, parent = pending
                parent.append(Element(tag, attrs, tuple(collected)))
            continue
        if isinstance(child, Tag):
            attrs = tuple((str(k), "" if v is None else str(v)) for k, v in child.attrs.items())
            stack.append((iter(child.contents), [], (child.name.lower(), attrs, collected)))
        else:
            node = _string_node(child)
            if node is not None:
                collected.append(node)
    return tuple(root)


def parse_html(raw_html: str) -> Document:
    """Parse *raw_html* into an immutable ``Document``.

    Malformed markup is recovered by the parser rather than rejected.
    """
    soup = BeautifulSoup(raw_html, "html.parser", multi_valued_attributes=None)
    document = Document(_convert(soup.contents))
    logger.debug("html parsed", extra={"html_length": len(raw_html), "top_level_nodes": len(document)})
    return document


# ---------------------------------------------------------------------------
# Traversal helpers
# ---------------------------------------------------------------------------


def iter_nodes(node: Node | Document, skip: Iterable[str] = ()) -> Iterator[Node]:
    """Yield *node*'s descendants in document order.

    Elements whose tag is in *skip* are neither yielded nor descended into.
    The starting node itself is not yielded.
    """
    skipped = frozenset(skip)
    stack: list[Node] = list(reversed(getattr(node, "children", ())))
    while stack:
        current = stack.pop()
        if isinstance(current, Element):
            if current.tag in skipped:
                continue
            yield current
            stack.extend(reversed(current.children))
        else:
            yield current


def iter_elements(node: Node | Document, tags: Iterable[str]) -> Iterator[Element]:
    """Yield descendant elements whose tag is in *tags*, in document order."""
    wanted = frozenset(tags)
    for current in iter_nodes(node):
        if isinstance(current, Element) and current.tag in wanted:
            yield current


def text_content(node: Node | Document, skip: Iterable[str] = RAW_TEXT_ELEMENTS) -> str:
    if isinstance(node, Text):
        return node.content
    return "".join(n.content for n in iter_nodes(node, skip) if isinstance(n, Text))


def content_root(document: Document) -> Document:
    """Flatten *document* into the nodes that carry page content.

    ``<html>`` and ``<body>`` wrappers are unwrapped in place so their children
    become top-level units, and ``<head>`` is reduced to its ``<title>``.
    Everything else, including nodes the parser leaves after ``</body>``, is
    kept in document order.
    """
    nodes: list[Node] = []
    stack: list[Node] = list(reversed(document.children))
    while stack:
        current = stack.pop()
        match current:
            case Element(tag="html" | "body", children=children):
                stack.extend(reversed(children))
            case Element(tag="head"):
                nodes.extend(iter_elements(current, ("title",)))
            case _:
                nodes.append(current)
    return Document(tuple(nodes))


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _open_tag(element: Element) -> str:
    if not element.attrs:
        return f"<{element.tag}>"
    rendered = " ".join(f'{key}="{escape(value, quote=True)}"' for key, value in element.attrs)
    return f"<{element.tag} {rendered}>"


def serialize(node: Node | Document) -> str:
    """Render *node* back to markup; used to measure chunk sizes."""
    parts: list[str] = []
    # Plain strings on the stack are literal fragments (closing tags, raw text).
    stack: list[Node | Document | str] = [node]
    while stack:
        item = stack.pop()
        match item:
            case str():
                parts.append(item)
            case Text(content=content):
                parts.append(escape(content, quote=False))
            case Element(tag=tag, children=children):
                parts.append(_open_tag(item))
                if tag in VOID_ELEMENTS and not children:
                    continue
                stack.append(f"</{tag}>")
                for child in reversed(children):
                    if tag in RAW_TEXT_ELEMENTS and isinstance(child, Text):
                        stack.append(child.content)
                    else:
                        stack.append(child)
            case Document(children=children):
                stack.extend(reversed(children))
    return "".join(parts)
