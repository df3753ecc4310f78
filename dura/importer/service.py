"""Import orchestration: pick a provider by extension and run it."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path

from dura.config.models import ImportConfig
from dura.importer import formats
from dura.importer.base import ImportProvider, ProgressCallback
from dura.importer.errors import (
    DocumentImportError,
    FileReadFailedError,
    ParseFailedError,
    UnsupportedTypeError,
)
from dura.importer.models import ImportResult
from dura.importer.providers import default_providers
from dura.ocr import TextRecognizer
from dura.transcription import Transcriber

logger = logging.getLogger(__name__)


class ImportService:
    """Routes files to providers.

    The identifier -> provider table is built once. When two providers
    declare the same format the one registered first keeps it.
    """

    def __init__(
        self,
        providers: Iterable[ImportProvider] | None = None,
        config: ImportConfig | None = None,
        recognizer: TextRecognizer | None = None,
        transcriber: Transcriber | None = None,
    ) -> None:
        self.config = config or ImportConfig()
        if providers is None:
            providers = default_providers(self.config, recognizer, transcriber)
        self.providers: list[ImportProvider] = list(providers)

        self._lookup: dict[str, ImportProvider] = {}
        for provider in self.providers:
            for identifier in sorted(provider.declared_formats()):
                if identifier in self._lookup:
                    logger.debug(
                        "%s already handled by %s, ignoring %s",
                        identifier,
                        type(self._lookup[identifier]).__name__,
                        type(provider).__name__,
                    )
                    continue
                self._lookup[identifier] = provider

    @property
    def supported_formats(self) -> list[str]:
        """Registered format identifiers, grouped by provider in registration order."""
        return list(self._lookup)

    def supported_extensions(self) -> list[str]:
        """Every known extension that resolves to a registered provider."""
        extensions: list[str] = []
        for fmt in formats.all_formats():
            if self._provider_for_identifier(fmt.identifier) is None:
                continue
            extensions.extend(fmt.extensions)
        return sorted(set(extensions))

    def resolve_provider(self, filename: str) -> ImportProvider:
        ext = formats.extension_of(filename)
        fmt = formats.format_for_extension(ext) if ext else None
        if fmt is None:
            raise UnsupportedTypeError(ext or "unknown")

        provider = self._provider_for_identifier(fmt.identifier)
        if provider is None:
            raise UnsupportedTypeError(ext)
        return provider

    def _provider_for_identifier(self, identifier: str) -> ImportProvider | None:
        provider = self._lookup.get(identifier)
        if provider is not None:
            return provider
        for registered, candidate in self._lookup.items():
            if formats.conforms_to(identifier, registered):
                return candidate
        return None

    async def import_data(
        self,
        data: bytes,
        filename: str,
        progress: ProgressCallback | None = None,
    ) -> ImportResult:
        provider = self.resolve_provider(filename)
        logger.info("Importing %s with %s", filename, type(provider).__name__)

        try:
            return await provider.process(data, filename, _relay(progress))
        except DocumentImportError:
            raise
        except Exception as e:
            logger.exception("%s failed on %s", type(provider).__name__, filename)
            raise ParseFailedError(str(e) or type(e).__name__) from e

    async def import_file(
        self,
        path: str | Path,
        progress: ProgressCallback | None = None,
    ) -> ImportResult:
        path = Path(path)
        # fail on unknown extensions before touching the disk
        self.resolve_provider(path.name)
        data = await asyncio.to_thread(self._read_file, path)
        return await self.import_data(data, path.name, progress)

    def _read_file(self, path: Path) -> bytes:
        limit = self.config.max_file_size_mb * 1024 * 1024
        try:
            size = path.stat().st_size
            if size > limit:
                raise FileReadFailedError(
                    f"{path.name} is {size} bytes, over the {self.config.max_file_size_mb} MB limit"
                )
            return path.read_bytes()
        except OSError as e:
            raise FileReadFailedError(str(e)) from e


def _relay(progress: ProgressCallback | None) -> ProgressCallback:
    """Wrap a caller callback so its exceptions never reach the provider."""

    def report(fraction: float) -> None:
        if progress is None:
            return
        try:
            progress(fraction)
        except Exception:
            logger.warning("progress callback raised", exc_info=True)

    return report
