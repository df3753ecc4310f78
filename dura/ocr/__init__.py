"""OCR capability: interface, errors and the Claude-backed recognizer."""

import os

from dura.config.models import OCRConfig
from dura.ocr.base import OCRError, OCRFailed, OCRUnavailable, TextRecognizer
from dura.ocr.claude import ClaudeTextRecognizer

_RECOGNIZER_MAP: dict[str, type[ClaudeTextRecognizer]] = {
    "anthropic": ClaudeTextRecognizer,
}


def create_text_recognizer(config: OCRConfig) -> TextRecognizer | None:
    """Build the configured recognizer, or None when OCR is switched off.

    Raises OCRUnavailable when the provider is unknown or its API key is unset.
    """
    if not config.enabled:
        return None
    cls = _RECOGNIZER_MAP.get(config.provider)
    if cls is None:
        raise OCRUnavailable(
            f"Unsupported OCR provider: {config.provider!r}. "
            f"Supported: {', '.join(_RECOGNIZER_MAP)}"
        )
    api_key = os.environ.get(config.api_key_env)
    if not api_key:
        raise OCRUnavailable(
            f"Missing API key: set environment variable {config.api_key_env!r}"
        )
    return cls(config, api_key=api_key)


__all__ = [
    "ClaudeTextRecognizer",
    "OCRError",
    "OCRFailed",
    "OCRUnavailable",
    "TextRecognizer",
    "create_text_recognizer",
]
