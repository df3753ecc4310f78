"""Speech transcription capability: interface, errors and the OpenAI adapter."""

import os

from dura.config.models import TranscriptionConfig
from dura.transcription.base import (
    Transcriber,
    TranscriptionError,
    TranscriptionFailed,
    TranscriptionUnavailable,
)
from dura.transcription.openai_whisper import OpenAITranscriber

_TRANSCRIBER_MAP: dict[str, type[OpenAITranscriber]] = {
    "openai": OpenAITranscriber,
}


def create_transcriber(config: TranscriptionConfig) -> Transcriber | None:
    """Build the configured transcriber, or None when transcription is off."""
    if not config.enabled:
        return None
    cls = _TRANSCRIBER_MAP.get(config.provider)
    if cls is None:
        raise TranscriptionUnavailable(
            f"Unsupported transcription provider: {config.provider!r}. "
            f"Supported: {', '.join(_TRANSCRIBER_MAP)}"
        )
    api_key = os.environ.get(config.api_key_env)
    if not api_key:
        raise TranscriptionUnavailable(
            f"Missing API key: set environment variable {config.api_key_env!r}"
        )
    return cls(config, api_key=api_key)


__all__ = [
    "OpenAITranscriber",
    "Transcriber",
    "TranscriptionError",
    "TranscriptionFailed",
    "TranscriptionUnavailable",
    "create_transcriber",
]
