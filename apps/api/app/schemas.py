from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CatalogEntry(BaseModel):
    """A lecture as read from the catalog CSV, before ids are assigned."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    chapter: int
    verse_range: str = ""
    location: str = ""
    date: str = ""
    title: str = ""
    filename: str
    audio_url: str


class Lecture(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int = Field(ge=1)
    chapter: int
    verse_range: str = ""
    location: str = ""
    date: str = ""
    title: str = ""
    filename: str
    audio_url: str
    listened: bool = False
    bookmarked: bool = False
    notes: str = ""
    summary: str = ""


# PATCH whitelist: field name -> the JSON type its value must have.
UPDATABLE_FIELDS: dict[str, type] = {
    "listened": bool,
    "bookmarked": bool,
    "notes": str,
    "summary": str,
}


class UpdateResponse(BaseModel):
    message: str
    lecture: dict[str, Any]


class SummaryResponse(BaseModel):
    summary: str


class ErrorResponse(BaseModel):
    error: str
