"""RTF import via striprtf."""

from __future__ import annotations

from striprtf.striprtf import rtf_to_text

from dura.importer import formats
from dura.importer.base import ImportProvider, ProgressCallback, filename_stem, no_progress
from dura.importer.errors import EmptyFileError, EncodingFailedError, ParseFailedError
from dura.importer.models import ImportResult, SourceFormat


class RTFImportProvider(ImportProvider):
    supported_formats = (formats.RTF,)

    async def process(
        self,
        data: bytes,
        filename: str,
        progress: ProgressCallback = no_progress,
    ) -> ImportResult:
        self.require_data(data)

        progress(0.3)

        source = decode_rtf(data)
        try:
            text = rtf_to_text(source, errors="replace")
        except (ValueError, IndexError) as e:
            raise ParseFailedError(f"RTF parsing failed: {e}") from e

        if not text.strip():
            raise EmptyFileError()

        progress(0.7)

        title = self.first_line_title(text) or filename_stem(filename)

        progress(1.0)

        return ImportResult(
            title=title,
            body=text.strip(),
            source_format=SourceFormat.rtf,
            original_filename=filename,
            original_bytes=data,
            mime_type="application/rtf",
        )


def decode_rtf(data: bytes) -> str:
    """RTF is 7-bit in practice; fall back to the Windows code page."""
    for encoding in ("utf-8", "cp1252"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise EncodingFailedError()
