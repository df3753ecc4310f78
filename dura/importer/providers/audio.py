"""Audio import: an audio marker line plus an optional transcript."""

from __future__ import annotations

import logging

from dura.blocks.renderer import AUDIO_ICON
from dura.config.models import ImportConfig
from dura.importer import formats
from dura.importer.base import ImportProvider, ProgressCallback, filename_stem, no_progress
from dura.importer.models import ImportResult, SourceFormat
from dura.transcription import Transcriber, TranscriptionError

logger = logging.getLogger(__name__)


class AudioImportProvider(ImportProvider):
    supported_formats = (
        formats.MP3,
        formats.M4A,
        formats.WAV,
        formats.AIFF,
        formats.AAC,
    )

    def __init__(
        self,
        config: ImportConfig | None = None,
        transcriber: Transcriber | None = None,
    ) -> None:
        super().__init__(config)
        self.transcriber = transcriber

    async def process(
        self,
        data: bytes,
        filename: str,
        progress: ProgressCallback = no_progress,
    ) -> ImportResult:
        self.require_data(data)

        progress(0.2)

        marker = f"{AUDIO_ICON} [{filename}](attachment://{filename})"
        transcript = await self._transcribe(data, filename)
        body = f"{marker}\n\n{transcript}" if transcript else marker

        progress(1.0)

        return ImportResult(
            title=filename_stem(filename),
            body=body,
            source_format=SourceFormat.audio,
            original_filename=filename,
            original_bytes=data,
            mime_type=formats.mime_type_for(filename, default="audio/mpeg"),
            ocr_text=transcript or None,
        )

    async def _transcribe(self, data: bytes, filename: str) -> str:
        if self.transcriber is None:
            return ""
        try:
            return (await self.transcriber.transcribe(data, filename)).strip()
        except TranscriptionError as e:
            logger.warning("transcription skipped for %s: %s", filename, e)
            return ""
