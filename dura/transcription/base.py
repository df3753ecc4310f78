"""Abstract speech transcription interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class TranscriptionError(Exception):
    """Base class for transcription failures."""


class TranscriptionUnavailable(TranscriptionError):
    def __init__(self, reason: str = "Transcription is not available") -> None:
        self.reason = reason
        super().__init__(reason)


class TranscriptionFailed(TranscriptionError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Transcription failed: {reason}")


class Transcriber(ABC):
    @abstractmethod
    async def transcribe(self, audio: bytes, filename: str) -> str:
        """Return the spoken text, or an empty string for silence."""
        ...
