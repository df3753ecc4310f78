"""Minimal read-only ZIP reader.

Supports Store (method 0) and Deflate (method 8). Problems with a single
entry drop that entry; only a missing end-of-central-directory record fails
the whole archive.
"""

from __future__ import annotations

import logging
import struct
import zlib
from dataclasses import dataclass

logger = logging.getLogger(__name__)

EOCD_SIGNATURE = 0x06054B50
CENTRAL_SIGNATURE = 0x02014B50

EOCD_SIZE = 22
MAX_COMMENT_SIZE = 65535
CENTRAL_HEADER_SIZE = 46
LOCAL_HEADER_SIZE = 30

METHOD_STORE = 0
METHOD_DEFLATE = 8

# floor for the inflate buffer so zero-size headers still get room
_MIN_INFLATE_BUFFER = 1024


class ArchiveError(Exception):
    """Base class for ZIP reading failures."""


class InvalidArchive(ArchiveError):
    """No end-of-central-directory record was found."""

    def __init__(self, message: str = "No end of central directory record found") -> None:
        super().__init__(message)


class UnsupportedCompression(ArchiveError):
    def __init__(self, method: int) -> None:
        self.method = method
        super().__init__(f"Unsupported compression method: {method}")


class DecompressionFailed(ArchiveError):
    def __init__(self, name: str, reason: str | None = None) -> None:
        self.name = name
        msg = f"Could not inflate {name}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


@dataclass(frozen=True)
class ArchiveEntry:
    """One file record from the central directory."""

    name: str
    compression_method: int
    compressed_size: int
    uncompressed_size: int
    local_header_offset: int

    @property
    def is_directory(self) -> bool:
        return self.name.endswith("/")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def read_archive(data: bytes) -> dict[str, bytes]:
    """Extract every regular, non-empty file from a ZIP archive.

    Raises InvalidArchive when the buffer has no end-of-central-directory
    record. Entries with unsupported compression or corrupt payloads are
    skipped.
    """
    entries: dict[str, bytes] = {}

    for entry in scan_entries(data):
        if entry.is_directory or entry.uncompressed_size == 0:
            continue

        payload_start = _payload_offset(data, entry)
        if payload_start is None or payload_start + entry.compressed_size > len(data):
            logger.debug("entry %s runs past end of archive, stopping", entry.name)
            break

        payload = data[payload_start:payload_start + entry.compressed_size]
        try:
            entries[entry.name] = _decompress(entry, payload)
        except ArchiveError as e:
            logger.debug("skipping %s: %s", entry.name, e)

    return entries


def scan_entries(data: bytes) -> list[ArchiveEntry]:
    """Walk the central directory and return the entries that fit in the buffer."""
    eocd = find_eocd(data)
    if eocd is None:
        raise InvalidArchive()

    entry_count = _u16(data, eocd + 10)
    offset = _u32(data, eocd + 16)

    entries: list[ArchiveEntry] = []
    for _ in range(entry_count):
        if offset + CENTRAL_HEADER_SIZE > len(data):
            break
        if _u32(data, offset) != CENTRAL_SIGNATURE:
            break

        name_length = _u16(data, offset + 28)
        extra_length = _u16(data, offset + 30)
        comment_length = _u16(data, offset + 32)

        name_start = offset + CENTRAL_HEADER_SIZE
        if name_start + name_length > len(data):
            break
        name = data[name_start:name_start + name_length].decode("utf-8", errors="replace")

        entries.append(
            ArchiveEntry(
                name=name,
                compression_method=_u16(data, offset + 10),
                compressed_size=_u32(data, offset + 20),
                uncompressed_size=_u32(data, offset + 24),
                local_header_offset=_u32(data, offset + 42),
            )
        )
        offset = name_start + name_length + extra_length + comment_length

    return entries


def extract_entry(data: bytes, entry: ArchiveEntry) -> bytes:
    """Return the decompressed bytes of a single entry.

    Raises ArchiveError subclasses instead of skipping.
    """
    payload_start = _payload_offset(data, entry)
    if payload_start is None or payload_start + entry.compressed_size > len(data):
        raise DecompressionFailed(entry.name, "payload runs past end of archive")
    payload = data[payload_start:payload_start + entry.compressed_size]
    return _decompress(entry, payload)


def find_eocd(data: bytes) -> int | None:
    """Scan backwards for the end-of-central-directory signature."""
    if len(data) < EOCD_SIZE:
        return None

    lowest = max(0, len(data) - (EOCD_SIZE + MAX_COMMENT_SIZE))
    for i in range(len(data) - EOCD_SIZE, lowest - 1, -1):
        if _u32(data, i) == EOCD_SIGNATURE:
            return i
    return None


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _u16(data: bytes, offset: int) -> int:
    if offset + 2 > len(data):
        return 0
    return struct.unpack_from("<H", data, offset)[0]


def _u32(data: bytes, offset: int) -> int:
    if offset + 4 > len(data):
        return 0
    return struct.unpack_from("<I", data, offset)[0]


def _payload_offset(data: bytes, entry: ArchiveEntry) -> int | None:
    """Locate payload start from the local header, whose lengths may differ from the central record."""
    header = entry.local_header_offset
    if header + LOCAL_HEADER_SIZE > len(data):
        return None
    name_length = _u16(data, header + 26)
    extra_length = _u16(data, header + 28)
    return header + LOCAL_HEADER_SIZE + name_length + extra_length


def _decompress(entry: ArchiveEntry, payload: bytes) -> bytes:
    if entry.compression_method == METHOD_STORE:
        return bytes(payload)

    if entry.compression_method != METHOD_DEFLATE:
        raise UnsupportedCompression(entry.compression_method)

    inflater = zlib.decompressobj(-zlib.MAX_WBITS)
    try:
        inflated = inflater.decompress(
            payload, max(entry.uncompressed_size, _MIN_INFLATE_BUFFER)
        )
    except zlib.error as e:
        raise DecompressionFailed(entry.name, str(e)) from e

    if not inflated:
        raise DecompressionFailed(entry.name, "inflate produced no data")
    return inflated
