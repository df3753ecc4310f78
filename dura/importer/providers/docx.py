"""Word document import via python-docx.

Paragraph styles map onto markdown: ``Heading N`` becomes ``#`` x N,
``Title`` a level one heading, and the built-in list styles bullet or
numbered items. Tables are written as pipe rows.
"""

from __future__ import annotations

import io
import logging
import re
from zipfile import BadZipFile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from docx.table import Table
from docx.text.paragraph import Paragraph

from dura.importer import formats
from dura.importer.base import ImportProvider, ProgressCallback, filename_stem, no_progress
from dura.importer.errors import EmptyFileError, ParseFailedError
from dura.importer.models import ImportResult, SourceFormat

logger = logging.getLogger(__name__)

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
_HEADING_STYLE_RE = re.compile(r"^Heading (\d)$")


class DocxImportProvider(ImportProvider):
    supported_formats = (formats.DOCX,)

    async def process(
        self,
        data: bytes,
        filename: str,
        progress: ProgressCallback = no_progress,
    ) -> ImportResult:
        self.require_data(data)

        progress(0.2)

        try:
            document = Document(io.BytesIO(data))
        except (PackageNotFoundError, BadZipFile, KeyError, ValueError) as e:
            raise ParseFailedError(f"Could not open Word document: {e}") from e

        progress(0.5)

        parts: list[str] = []
        heading: str | None = None
        for item in document.iter_inner_content():
            if isinstance(item, Table):
                rendered = table_to_markdown(item)
            else:
                rendered = paragraph_to_markdown(item)
                if heading is None and rendered.startswith("#"):
                    heading = rendered.lstrip("#").strip()
            if rendered:
                parts.append(rendered)

        body = "\n\n".join(parts)
        if not body.strip():
            raise EmptyFileError()

        title = heading or self.first_line_title(body) or filename_stem(filename)

        progress(1.0)

        return ImportResult(
            title=title[: self.config.title_max_length],
            body=body,
            source_format=SourceFormat.docx,
            original_filename=filename,
            original_bytes=data,
            mime_type=DOCX_MIME_TYPE,
        )


def paragraph_to_markdown(paragraph: Paragraph) -> str:
    text = paragraph.text.strip()
    if not text:
        return ""

    style = paragraph.style.name if paragraph.style is not None else ""
    if style == "Title":
        return f"# {text}"
    match = _HEADING_STYLE_RE.match(style)
    if match:
        level = min(max(int(match.group(1)), 1), 6)
        return f"{'#' * level} {text}"
    if style.startswith("List Bullet"):
        return f"- {text}"
    if style.startswith("List Number"):
        return f"1. {text}"
    return text


def table_to_markdown(table: Table) -> str:
    rows: list[str] = []
    for row in table.rows:
        cells = [cell.text.strip().replace("\n", " ") for cell in row.cells]
        if any(cells):
            rows.append("| " + " | ".join(cells) + " |")
    return "\n".join(rows)
