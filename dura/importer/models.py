"""Pydantic models for the import pipeline."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class SourceFormat(str, Enum):
    """How an imported note originally came into being."""

    markdown = "markdown"
    web = "web"
    plain_text = "plain_text"
    rtf = "rtf"
    pdf = "pdf"
    image = "image"
    audio = "audio"
    epub = "epub"
    docx = "docx"


class ImportResult(BaseModel):
    """Normalized output of one provider call.

    Built once per import and handed straight to whatever stores notes;
    never persisted itself.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    body: str
    source_format: SourceFormat
    original_filename: str
    original_bytes: bytes
    mime_type: str
    ocr_text: str | None = None

    # Front-matter derived
    source_url: str | None = None
    excerpt: str | None = None
    notebook_name: str | None = None
    featured_image_url: str | None = None
    tag_names: list[str] | None = None
