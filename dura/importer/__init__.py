"""Document import: format table, providers and the import service."""

from dura.importer.base import ImportProvider, ProgressCallback, filename_stem, first_line_title
from dura.importer.errors import (
    DocumentImportError,
    EmptyFileError,
    EncodingFailedError,
    FileReadFailedError,
    ParseFailedError,
    UnsupportedTypeError,
)
from dura.importer.models import ImportResult, SourceFormat
from dura.importer.service import ImportService

__all__ = [
    "DocumentImportError",
    "EmptyFileError",
    "EncodingFailedError",
    "FileReadFailedError",
    "ImportProvider",
    "ImportResult",
    "ImportService",
    "ParseFailedError",
    "ProgressCallback",
    "SourceFormat",
    "UnsupportedTypeError",
    "filename_stem",
    "first_line_title",
]
