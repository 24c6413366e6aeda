"""Plain-text normalization applied to walker output before it reaches the text processor."""

from __future__ import annotations

import re

_DOCTYPE_RE = re.compile(r"^\s*<!DOCTYPE[^>]*>", re.IGNORECASE)
_NBSP_RE = re.compile("\u00a0|&nbsp;")
_MARKER_RE = re.compile(r"\s*(\[(?:IMAGE|TABLE):)")
_BLANK_LINES_RE = re.compile(r"\n\s*\n")

# &amp; goes first so "&amp;lt;" still decodes in a single pass.
_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&apos;", "'"),
)


def _sanitize_once(text: str) -> str:
    text = _DOCTYPE_RE.sub("", text, count=1)
    text = _NBSP_RE.sub(" ", text)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    text = _MARKER_RE.sub(r"\n\1", text)
    return _BLANK_LINES_RE.sub("\n", text)


def sanitize(text: str) -> str:
    """Return the canonical plain-text form of *text*.

    Steps, in order: strip a leading doctype, turn non-breaking spaces into
    spaces, decode the basic HTML entities, start every ``[IMAGE:``/``[TABLE:``
    marker on its own line, and collapse blank-line runs into one newline.

    The pass is repeated until the text stops changing, so
    ``sanitize(sanitize(x)) == sanitize(x)`` even for doubly-escaped input.
    One consequence: a run of leading doctypes such as
    ``<!DOCTYPE html><!DOCTYPE html>x`` is stripped as a whole, not just the
    first one.
    """
    while True:
        cleaned = _sanitize_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned
