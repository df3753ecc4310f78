"""Typed import failures surfaced to callers unmodified."""

from __future__ import annotations


class DocumentImportError(Exception):
    """Base class for import failures. ``str(err)`` is the user-facing message."""


class UnsupportedTypeError(DocumentImportError):
    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Unsupported file type: {type_name}")


class EncodingFailedError(DocumentImportError):
    def __init__(self) -> None:
        super().__init__("Could not decode the file's text encoding.")


class ParseFailedError(DocumentImportError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to parse file: {reason}")


class EmptyFileError(DocumentImportError):
    def __init__(self) -> None:
        super().__init__("The file is empty.")


class FileReadFailedError(DocumentImportError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to read file: {reason}")
