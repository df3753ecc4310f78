"""Image import: OCR the picture, keep the original as the attachment."""

from __future__ import annotations

import logging

from dura.config.models import ImportConfig
from dura.importer import formats
from dura.importer.base import ImportProvider, ProgressCallback, filename_stem, no_progress
from dura.importer.models import ImportResult, SourceFormat
from dura.ocr import OCRError, TextRecognizer

logger = logging.getLogger(__name__)


class ImageImportProvider(ImportProvider):
    supported_formats = (
        formats.PNG,
        formats.JPEG,
        formats.HEIC,
        formats.TIFF,
        formats.BMP,
        formats.GIF,
    )

    def __init__(
        self,
        config: ImportConfig | None = None,
        recognizer: TextRecognizer | None = None,
    ) -> None:
        super().__init__(config)
        self.recognizer = recognizer

    async def process(
        self,
        data: bytes,
        filename: str,
        progress: ProgressCallback = no_progress,
    ) -> ImportResult:
        self.require_data(data)
        mime_type = formats.mime_type_for(filename, default="image/png")

        progress(0.3)

        text = await self._recognize(data, mime_type, filename)

        progress(1.0)

        if not text:
            # no text found, the note is just the attachment
            return ImportResult(
                title=filename_stem(filename),
                body="",
                source_format=SourceFormat.image,
                original_filename=filename,
                original_bytes=data,
                mime_type=mime_type,
            )

        return ImportResult(
            title=self.first_line_title(text) or filename_stem(filename),
            body=text,
            source_format=SourceFormat.image,
            original_filename=filename,
            original_bytes=data,
            mime_type=mime_type,
            ocr_text=text,
        )

    async def _recognize(self, data: bytes, mime_type: str, filename: str) -> str:
        if self.recognizer is None:
            return ""
        try:
            return (await self.recognizer.recognize_text(data, mime_type)).strip()
        except OCRError as e:
            logger.warning("OCR skipped for %s: %s", filename, e)
            return ""
