"""Anthropic Claude vision adapter for OCR."""

from __future__ import annotations

import base64

from anthropic import APIError, AsyncAnthropic

from dura.config.models import OCRConfig
from dura.ocr.base import OCRFailed, OCRUnavailable, TextRecognizer

SUPPORTED_MEDIA_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})

OCR_PROMPT = (
    "Transcribe all text visible in this image exactly as written, preserving "
    "line breaks. Reply with the text only. If there is no text, reply with "
    "nothing."
)


class ClaudeTextRecognizer(TextRecognizer):
    """OCR via Claude's image input using the Anthropic async SDK."""

    def __init__(self, config: OCRConfig, api_key: str | None = None) -> None:
        self.config = config
        self._client = AsyncAnthropic(
            api_key=api_key,  # falls back to ANTHROPIC_API_KEY env var
            max_retries=2,
        )

    async def recognize_text(self, image: bytes, mime_type: str = "image/png") -> str:
        if mime_type not in SUPPORTED_MEDIA_TYPES:
            raise OCRUnavailable(f"Unsupported image type for OCR: {mime_type}")

        try:
            message = await self._client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=0.0,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": mime_type,
                                    "data": base64.b64encode(image).decode("ascii"),
                                },
                            },
                            {"type": "text", "text": OCR_PROMPT},
                        ],
                    }
                ],
            )
        except APIError as e:
            raise OCRFailed(str(e)) from e

        parts = [block.text for block in message.content if hasattr(block, "text")]
        return "\n".join(parts).strip()
