"""Abstract OCR interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class OCRError(Exception):
    """Base class for text recognition failures."""


class OCRUnavailable(OCRError):
    """No recognizer can handle this request (not configured, unsupported media)."""

    def __init__(self, reason: str = "OCR is not available") -> None:
        self.reason = reason
        super().__init__(reason)


class OCRFailed(OCRError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"OCR failed: {reason}")


class TextRecognizer(ABC):
    """Turns an image into text. Callers treat any failure as non-fatal."""

    @abstractmethod
    async def recognize_text(self, image: bytes, mime_type: str = "image/png") -> str:
        """Return the recognized text, or an empty string when there is none."""
        ...
