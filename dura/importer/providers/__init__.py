"""Format providers and the default provider set."""

from dura.config.models import ImportConfig
from dura.importer.base import ImportProvider
from dura.importer.providers.audio import AudioImportProvider
from dura.importer.providers.docx import DocxImportProvider
from dura.importer.providers.epub import EPUBImportProvider
from dura.importer.providers.html import HTMLImportProvider
from dura.importer.providers.image import ImageImportProvider
from dura.importer.providers.markdown import MarkdownImportProvider
from dura.importer.providers.pdf import PDFImportProvider
from dura.importer.providers.rtf import RTFImportProvider
from dura.importer.providers.text import PlainTextImportProvider
from dura.ocr import TextRecognizer
from dura.transcription import Transcriber

__all__ = [
    "AudioImportProvider",
    "DocxImportProvider",
    "EPUBImportProvider",
    "HTMLImportProvider",
    "ImageImportProvider",
    "MarkdownImportProvider",
    "PDFImportProvider",
    "PlainTextImportProvider",
    "RTFImportProvider",
    "default_providers",
]


def default_providers(
    config: ImportConfig | None = None,
    recognizer: TextRecognizer | None = None,
    transcriber: Transcriber | None = None,
) -> list[ImportProvider]:
    """All nine providers in registration order."""
    config = config or ImportConfig()
    return [
        MarkdownImportProvider(config),
        PlainTextImportProvider(config),
        HTMLImportProvider(config),
        EPUBImportProvider(config),
        PDFImportProvider(config, recognizer=recognizer),
        ImageImportProvider(config, recognizer=recognizer),
        AudioImportProvider(config, transcriber=transcriber),
        RTFImportProvider(config),
        DocxImportProvider(config),
    ]
