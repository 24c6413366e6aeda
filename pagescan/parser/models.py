"""Extraction record models returned by the text processor."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ContentItem(BaseModel):
    type: Literal["text", "image", "table"]
    description: str = ""
    value: str = ""


class Section(BaseModel):
    header: str = ""
    content: list[ContentItem] = Field(default_factory=list)


class ExtractionRecord(BaseModel):
    title: str
    sections: list[Section]


ExtractionResult = list[ExtractionRecord] | ExtractionRecord


def merge_records(records: list[ExtractionRecord]) -> ExtractionRecord:
    """Fold per-chunk records into one document description.

    The first non-empty title wins. Sections keep chunk order, and a section
    whose header repeats the previous one (a section cut by a chunk boundary)
    is appended to it.
    """
    title = next((r.title for r in records if r.title), "")
    sections: list[Section] = []
    for record in records:
        for section in record.sections:
            if sections and section.header and sections[-1].header == section.header:
                sections[-1].content.extend(item.model_copy() for item in section.content)
            else:
                sections.append(section.model_copy(deep=True))
    return ExtractionRecord(title=title, sections=sections)
