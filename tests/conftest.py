"""Shared test fixtures for Dura."""

import struct
import zlib
from types import SimpleNamespace

import pytest

from dura.config.models import DuraConfig, ImportConfig, OutputConfig
from dura.importer.models import ImportResult, SourceFormat
from dura.ocr.base import TextRecognizer
from dura.transcription.base import Transcriber


def build_zip(files, method=8, comment=b""):
    """Assemble a ZIP archive byte by byte.

    ``files`` is a list of ``(name, content)`` or ``(name, content, method)``.
    """
    local = b""
    central = b""
    for item in files:
        name, content = item[0], item[1]
        entry_method = item[2] if len(item) > 2 else method
        name_bytes = name.encode("utf-8")
        if entry_method == 8:
            compressor = zlib.compressobj(9, zlib.DEFLATED, -zlib.MAX_WBITS)
            payload = compressor.compress(content) + compressor.flush()
        else:
            payload = content
        crc = zlib.crc32(content)
        offset = len(local)
        local += struct.pack(
            "<IHHHHHIIIHH",
            0x04034B50, 20, 0, entry_method, 0, 0,
            crc, len(payload), len(content), len(name_bytes), 0,
        ) + name_bytes + payload
        central += struct.pack(
            "<IHHHHHHIIIHHHHHII",
            0x02014B50, 20, 20, 0, entry_method, 0, 0,
            crc, len(payload), len(content), len(name_bytes), 0, 0, 0, 0, 0, offset,
        ) + name_bytes
    count = len(files)
    eocd = struct.pack(
        "<IHHHHIIH", 0x06054B50, 0, 0, count, count, len(central), len(local), len(comment)
    ) + comment
    return local + central + eocd


@pytest.fixture
def zip_builder():
    return build_zip


CONTAINER_XML = b"""<?xml version="1.0"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>"""

OPF_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    <dc:title>The Lighthouse Keeper</dc:title>
  </metadata>
  <manifest>
    <item id="c1" href="text/one.xhtml" media-type="application/xhtml+xml"/>
    <item href="text/two.xhtml" id="c2" media-type="application/xhtml+xml"/>
    <item id="c3" href="text/three%20final.xhtml" media-type="application/xhtml+xml"/>
  </manifest>
  <spine>
    <itemref idref="c1"/>
    <itemref idref="c2"/>
    <itemref idref="c3"/>
  </spine>
</package>"""


def _chapter(heading, text):
    return (
        "<?xml version='1.0' encoding='utf-8'?>\n"
        "<!DOCTYPE html>\n"
        "<html xmlns=\"http://www.w3.org/1999/xhtml\"><head><title>x</title></head>"
        f"<body><h1>{heading}</h1><p>{text}</p></body></html>"
    ).encode("utf-8")


@pytest.fixture
def epub_parts():
    """Container, OPF and a chapter factory for hand-built EPUBs."""
    return SimpleNamespace(container=CONTAINER_XML, opf=OPF_XML, chapter=_chapter)


@pytest.fixture
def sample_epub():
    return build_zip([
        ("mimetype", b"application/epub+zip", 0),
        ("META-INF/container.xml", CONTAINER_XML),
        ("OEBPS/content.opf", OPF_XML),
        ("OEBPS/text/one.xhtml", _chapter("Arrival", "The boat came in at dusk.")),
        ("OEBPS/text/two.xhtml", _chapter("Storm", "Wind &amp; rain all night.")),
        ("OEBPS/text/three final.xhtml", _chapter("Morning", "Calm again.")),
    ])


@pytest.fixture
def import_config():
    return ImportConfig()


@pytest.fixture
def sample_config():
    return DuraConfig()


@pytest.fixture
def output_config(tmp_path):
    return OutputConfig(base_dir=str(tmp_path / "notes"))


@pytest.fixture
def sample_result():
    return ImportResult(
        title="Weekly Review",
        body="# Weekly Review\n\nShipped the importer.",
        source_format=SourceFormat.markdown,
        original_filename="review.md",
        original_bytes=b"# Weekly Review\n\nShipped the importer.",
        mime_type="text/markdown",
    )


class FakeRecognizer(TextRecognizer):
    """Returns canned text and records what it was asked to read."""

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def recognize_text(self, image, mime_type="image/png"):
        self.calls.append((image, mime_type))
        if self.error is not None:
            raise self.error
        return self.text


class FakeTranscriber(Transcriber):
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def transcribe(self, audio, filename):
        self.calls.append((audio, filename))
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def fake_recognizer():
    return FakeRecognizer


@pytest.fixture
def fake_transcriber():
    return FakeTranscriber


@pytest.fixture
def progress_log():
    """A callable that records every progress fraction it receives."""
    values = []

    def record(fraction):
        values.append(fraction)

    record.values = values
    return record
