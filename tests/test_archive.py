"""Tests for dura.archive — the read-only ZIP reader."""

import struct

import pytest

from dura.archive import (
    ArchiveEntry,
    DecompressionFailed,
    InvalidArchive,
    UnsupportedCompression,
    extract_entry,
    find_eocd,
    read_archive,
    scan_entries,
)


class TestReadArchive:
    def test_store_and_deflate(self, zip_builder):
        data = zip_builder([
            ("plain.txt", b"stored bytes", 0),
            ("packed.txt", b"deflated " * 50, 8),
        ])
        assert read_archive(data) == {
            "plain.txt": b"stored bytes",
            "packed.txt": b"deflated " * 50,
        }

    def test_directories_and_empty_files_skipped(self, zip_builder):
        data = zip_builder([
            ("folder/", b"", 0),
            ("folder/empty.txt", b"", 0),
            ("folder/full.txt", b"x", 0),
        ])
        assert list(read_archive(data)) == ["folder/full.txt"]

    def test_unsupported_method_dropped(self, zip_builder):
        data = bytearray(zip_builder([("a.txt", b"aaa", 0), ("b.txt", b"bbb", 0)]))
        # patch the central record of the first entry to method 12 (bzip2)
        central = data.find(b"PK\x01\x02")
        struct.pack_into("<H", data, central + 10, 12)
        assert read_archive(bytes(data)) == {"b.txt": b"bbb"}

    def test_corrupt_deflate_dropped(self, zip_builder):
        data = bytearray(zip_builder([("bad.txt", b"hello world" * 10, 8), ("ok.txt", b"ok", 0)]))
        # local header is 30 bytes + "bad.txt"; scribble over the deflate stream
        start = 30 + len("bad.txt")
        data[start:start + 4] = b"\xff\xff\xff\xff"
        assert read_archive(bytes(data)) == {"ok.txt": b"ok"}

    def test_archive_comment_tolerated(self, zip_builder):
        data = zip_builder([("a.txt", b"abc", 0)], comment=b"made by hand")
        assert read_archive(data) == {"a.txt": b"abc"}

    def test_no_eocd_raises(self):
        with pytest.raises(InvalidArchive):
            read_archive(b"this is not a zip file at all, just text")

    def test_short_buffer_raises(self):
        with pytest.raises(InvalidArchive):
            read_archive(b"PK")

    def test_truncated_central_directory_keeps_parsed_entries(self, zip_builder):
        data = bytearray(zip_builder([("one.txt", b"1", 0), ("two.txt", b"2", 0)]))
        # corrupt the second central signature; the walk stops there
        first = data.find(b"PK\x01\x02")
        second = data.find(b"PK\x01\x02", first + 1)
        data[second:second + 4] = b"XXXX"
        assert read_archive(bytes(data)) == {"one.txt": b"1"}

    def test_payload_past_end_stops(self, zip_builder):
        data = bytearray(zip_builder([("a.txt", b"abc", 0)]))
        central = data.find(b"PK\x01\x02")
        struct.pack_into("<I", data, central + 20, 10_000)
        assert read_archive(bytes(data)) == {}

    def test_utf8_names(self, zip_builder):
        data = zip_builder([("café/menu.txt", b"soup", 0)])
        assert read_archive(data) == {"café/menu.txt": b"soup"}


class TestScanEntries:
    def test_entry_fields(self, zip_builder):
        data = zip_builder([("doc.txt", b"x" * 40, 8)])
        [entry] = scan_entries(data)
        assert entry.name == "doc.txt"
        assert entry.compression_method == 8
        assert entry.uncompressed_size == 40
        assert entry.local_header_offset == 0
        assert not entry.is_directory

    def test_directory_flag(self):
        assert ArchiveEntry("dir/", 0, 0, 0, 0).is_directory

    def test_find_eocd_none_for_garbage(self):
        assert find_eocd(b"\x00" * 100) is None


class TestExtractEntry:
    def test_extracts_single_entry(self, zip_builder):
        data = zip_builder([("a.txt", b"alpha", 8), ("b.txt", b"beta", 0)])
        entries = {e.name: e for e in scan_entries(data)}
        assert extract_entry(data, entries["a.txt"]) == b"alpha"
        assert extract_entry(data, entries["b.txt"]) == b"beta"

    def test_unsupported_method_raises(self, zip_builder):
        data = zip_builder([("a.txt", b"alpha", 0)])
        entry = scan_entries(data)[0]
        odd = ArchiveEntry(entry.name, 14, entry.compressed_size, entry.uncompressed_size, 0)
        with pytest.raises(UnsupportedCompression) as exc:
            extract_entry(data, odd)
        assert exc.value.method == 14

    def test_out_of_bounds_raises(self, zip_builder):
        data = zip_builder([("a.txt", b"alpha", 0)])
        bogus = ArchiveEntry("a.txt", 0, 5, 5, len(data) + 10)
        with pytest.raises(DecompressionFailed):
            extract_entry(data, bogus)
