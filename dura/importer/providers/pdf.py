"""PDF import: text layer per page, OCR for pages without one."""

from __future__ import annotations

import io
import logging

from pypdf import PageObject, PdfReader
from pypdf.errors import PyPdfError

from dura.config.models import ImportConfig
from dura.importer import formats
from dura.importer.base import ImportProvider, ProgressCallback, filename_stem, no_progress
from dura.importer.errors import EmptyFileError, ParseFailedError
from dura.importer.models import ImportResult, SourceFormat
from dura.ocr import OCRError, TextRecognizer

logger = logging.getLogger(__name__)

PAGE_HEADER_PREFIX = "## Page "


class PDFImportProvider(ImportProvider):
    supported_formats = (formats.PDF,)

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

        try:
            reader = PdfReader(io.BytesIO(data))
            pages = list(reader.pages)
        except (PyPdfError, ValueError) as e:
            raise ParseFailedError(f"Could not open PDF document: {e}") from e

        page_count = len(pages)
        if page_count == 0:
            raise EmptyFileError()

        sections: list[str] = []
        did_ocr = False

        for i, page in enumerate(pages):
            text = _text_layer(page)
            if len(text) < self.config.text_layer_threshold and self.recognizer is not None:
                recognized = await self._ocr_page(page, i + 1)
                if recognized:
                    text = recognized
                    did_ocr = True

            if text:
                sections.append(f"{PAGE_HEADER_PREFIX}{i + 1}\n\n{text}" if page_count > 1 else text)

            progress((i + 1) / page_count)

        body = "\n\n".join(sections)
        title = self._extract_title(body) or filename_stem(filename)

        return ImportResult(
            title=title,
            body=body,
            source_format=SourceFormat.pdf,
            original_filename=filename,
            original_bytes=data,
            mime_type="application/pdf",
            ocr_text=body if did_ocr else None,
        )

    async def _ocr_page(self, page: PageObject, number: int) -> str:
        """Recognize text in the page's embedded images; failures leave the page as is."""
        try:
            images = [(image.name, image.data) for image in page.images]
        except Exception as e:
            # pypdf needs Pillow to decode images and raises ImportError without it
            logger.warning("page %d: could not extract images for OCR: %s", number, e)
            return ""

        texts: list[str] = []
        for name, payload in images:
            mime = formats.mime_type_for(name, default="image/png")
            try:
                text = await self.recognizer.recognize_text(payload, mime)
            except OCRError as e:
                logger.warning("page %d: OCR skipped: %s", number, e)
                continue
            if text.strip():
                texts.append(text.strip())
        return "\n".join(texts)

    def _extract_title(self, body: str) -> str | None:
        for line in body.splitlines():
            trimmed = line.strip()
            if not trimmed or trimmed.startswith(PAGE_HEADER_PREFIX):
                continue
            return trimmed[: self.config.title_max_length]
        return None


def _text_layer(page: PageObject) -> str:
    try:
        return (page.extract_text() or "").strip()
    except (PyPdfError, ValueError) as e:
        logger.debug("text extraction failed: %s", e)
        return ""
