"""Plain text import."""

from __future__ import annotations

from dura.importer import formats
from dura.importer.base import ImportProvider, ProgressCallback, filename_stem, no_progress
from dura.importer.models import ImportResult, SourceFormat


class PlainTextImportProvider(ImportProvider):
    supported_formats = (formats.PLAIN_TEXT,)

    async def process(
        self,
        data: bytes,
        filename: str,
        progress: ProgressCallback = no_progress,
    ) -> ImportResult:
        self.require_data(data)
        text = self.decode_utf8(data)

        progress(0.5)

        title = self.first_line_title(text) or filename_stem(filename)

        progress(1.0)

        return ImportResult(
            title=title,
            body=text,
            source_format=SourceFormat.plain_text,
            original_filename=filename,
            original_bytes=data,
            mime_type="text/plain",
        )
