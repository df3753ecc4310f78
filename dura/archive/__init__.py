"""Read-only ZIP container support (used for EPUB books)."""

from dura.archive.reader import (
    ArchiveEntry,
    ArchiveError,
    DecompressionFailed,
    InvalidArchive,
    UnsupportedCompression,
    extract_entry,
    find_eocd,
    read_archive,
    scan_entries,
)

__all__ = [
    "ArchiveEntry",
    "ArchiveError",
    "DecompressionFailed",
    "InvalidArchive",
    "UnsupportedCompression",
    "extract_entry",
    "find_eocd",
    "read_archive",
    "scan_entries",
]
