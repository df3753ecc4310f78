"""Abstract import provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import PurePath
from typing import ClassVar

from dura.config.models import ImportConfig
from dura.importer.errors import EmptyFileError, EncodingFailedError
from dura.importer.models import ImportResult

ProgressCallback = Callable[[float], None]


def no_progress(_: float) -> None:
    pass


class ImportProvider(ABC):
    """Converts one family of input formats into an ``ImportResult``.

    Providers receive bytes that were already read plus the original
    filename; they never touch the filesystem. ``progress`` is called with a
    fraction in [0, 1] and at least once with 1.0 on success.
    """

    supported_formats: ClassVar[tuple[str, ...]] = ()

    def __init__(self, config: ImportConfig | None = None) -> None:
        self.config = config or ImportConfig()

    def declared_formats(self) -> frozenset[str]:
        return frozenset(self.supported_formats)

    @abstractmethod
    async def process(
        self,
        data: bytes,
        filename: str,
        progress: ProgressCallback = no_progress,
    ) -> ImportResult:
        """Convert raw file bytes. Raises DocumentImportError subclasses."""
        ...

    # -- shared helpers ------------------------------------------------------

    @staticmethod
    def require_data(data: bytes) -> None:
        if not data:
            raise EmptyFileError()

    @staticmethod
    def decode_utf8(data: bytes) -> str:
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise EncodingFailedError() from e

    def first_line_title(self, text: str) -> str | None:
        return first_line_title(text, self.config.title_max_length)


def filename_stem(filename: str) -> str:
    """``/path/to/document.pdf`` -> ``document``; names without extension are kept."""
    return PurePath(filename).stem


def first_line_title(text: str, limit: int = 100) -> str | None:
    """First non-empty line, truncated to ``limit`` characters."""
    for line in text.splitlines():
        trimmed = line.strip()
        if trimmed:
            return trimmed[:limit]
    return None
