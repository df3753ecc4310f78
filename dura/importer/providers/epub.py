"""EPUB import: ZIP -> container.xml -> OPF -> spine-ordered chapters."""

from __future__ import annotations

import html as html_lib
import logging
import posixpath
import re
from urllib.parse import unquote

from dura.archive import ArchiveError, read_archive
from dura.importer import formats
from dura.importer.base import ImportProvider, ProgressCallback, filename_stem, no_progress
from dura.importer.errors import ParseFailedError
from dura.importer.models import ImportResult, SourceFormat
from dura.markup import convert_to_markdown

logger = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"
CHAPTER_SEPARATOR = "\n\n---\n\n"

_FULL_PATH_RE = re.compile(r'full-path="([^"]+)"')
_DC_TITLE_RE = re.compile(r"<dc:title[^>]*>(.*?)</dc:title>", re.IGNORECASE | re.DOTALL)
_ITEM_RE = re.compile(r"<item\s+[^>]*?/?>", re.IGNORECASE)
_ITEMREF_RE = re.compile(r"<itemref\s+[^>]*?/?>", re.IGNORECASE)
_ID_RE = re.compile(r'\bid="([^"]+)"', re.IGNORECASE)
_HREF_RE = re.compile(r'\bhref="([^"]+)"', re.IGNORECASE)
_IDREF_RE = re.compile(r'\bidref="([^"]+)"', re.IGNORECASE)


class EPUBImportProvider(ImportProvider):
    supported_formats = (formats.EPUB,)

    async def process(
        self,
        data: bytes,
        filename: str,
        progress: ProgressCallback = no_progress,
    ) -> ImportResult:
        self.require_data(data)

        progress(0.1)

        try:
            entries = read_archive(data)
        except ArchiveError as e:
            raise ParseFailedError(f"Failed to read EPUB archive: {e}") from e

        progress(0.3)

        container = _decode(entries.get(CONTAINER_PATH))
        if container is None:
            raise ParseFailedError(f"Missing {CONTAINER_PATH}")

        opf_path = extract_opf_path(container)
        if opf_path is None:
            raise ParseFailedError("Could not find OPF path in container.xml")

        opf = _decode(entries.get(opf_path))
        if opf is None:
            raise ParseFailedError(f"Could not read OPF file at {opf_path}")

        opf_dir = posixpath.dirname(opf_path)
        title = extract_dc_title(opf) or filename_stem(filename)
        manifest = parse_manifest(opf)
        spine = parse_spine(opf)

        progress(0.5)

        chapters: list[str] = []
        for index, idref in enumerate(spine):
            chapter = self._convert_chapter(entries, manifest, opf_dir, idref)
            if chapter:
                chapters.append(f"## Chapter {index + 1}\n\n{chapter}")
            progress(0.5 + 0.4 * (index + 1) / len(spine))

        logger.debug("epub %s: %d of %d spine items converted", filename, len(chapters), len(spine))

        progress(1.0)

        return ImportResult(
            title=title,
            body=CHAPTER_SEPARATOR.join(chapters),
            source_format=SourceFormat.epub,
            original_filename=filename,
            original_bytes=data,
            mime_type="application/epub+zip",
        )

    @staticmethod
    def _convert_chapter(
        entries: dict[str, bytes],
        manifest: dict[str, str],
        opf_dir: str,
        idref: str,
    ) -> str | None:
        href = manifest.get(idref)
        if href is None:
            logger.debug("spine item %s not in manifest", idref)
            return None

        path = resolve_chapter_path(opf_dir, href)
        markup = _decode(entries.get(path))
        if markup is None:
            logger.debug("chapter %s missing or undecodable", path)
            return None

        return convert_to_markdown(markup).strip() or None


# ---------------------------------------------------------------------------
# OPF parsing
# ---------------------------------------------------------------------------


def extract_opf_path(container_xml: str) -> str | None:
    match = _FULL_PATH_RE.search(container_xml)
    return match.group(1) if match else None


def extract_dc_title(opf_xml: str) -> str | None:
    match = _DC_TITLE_RE.search(opf_xml)
    if match is None:
        return None
    title = html_lib.unescape(match.group(1)).strip()
    return title or None


def parse_manifest(opf_xml: str) -> dict[str, str]:
    """Manifest item id -> href; attribute order does not matter."""
    manifest: dict[str, str] = {}
    for tag in _ITEM_RE.findall(opf_xml):
        id_match = _ID_RE.search(tag)
        href_match = _HREF_RE.search(tag)
        if id_match and href_match:
            manifest.setdefault(id_match.group(1), html_lib.unescape(href_match.group(1)))
    return manifest


def parse_spine(opf_xml: str) -> list[str]:
    """Ordered idrefs from the spine."""
    ids: list[str] = []
    for tag in _ITEMREF_RE.findall(opf_xml):
        match = _IDREF_RE.search(tag)
        if match:
            ids.append(match.group(1))
    return ids


def resolve_chapter_path(opf_dir: str, href: str) -> str:
    href = unquote(href.split("#", 1)[0])
    joined = posixpath.join(opf_dir, href) if opf_dir else href
    return posixpath.normpath(joined)


def _decode(data: bytes | None) -> str | None:
    if data is None:
        return None
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return None
