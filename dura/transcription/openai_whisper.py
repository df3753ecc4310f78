"""OpenAI speech-to-text adapter."""

from __future__ import annotations

from openai import APIError, AsyncOpenAI

from dura.config.models import TranscriptionConfig
from dura.transcription.base import TranscriptionFailed, Transcriber


class OpenAITranscriber(Transcriber):
    """Transcription via the OpenAI async SDK audio endpoint."""

    def __init__(self, config: TranscriptionConfig, api_key: str | None = None) -> None:
        self.config = config
        self._client = AsyncOpenAI(
            api_key=api_key,  # falls back to OPENAI_API_KEY env var
            max_retries=2,
        )

    async def transcribe(self, audio: bytes, filename: str) -> str:
        try:
            response = await self._client.audio.transcriptions.create(
                model=self.config.model,
                file=(filename, audio),
            )
        except APIError as e:
            raise TranscriptionFailed(str(e)) from e
        return (response.text or "").strip()
