"""HTML import: strip page chrome, then convert the rest to markdown."""

from __future__ import annotations

import html as html_lib
import re

from dura.importer import formats
from dura.importer.base import ImportProvider, ProgressCallback, filename_stem, no_progress
from dura.importer.errors import EncodingFailedError
from dura.importer.models import ImportResult, SourceFormat
from dura.markup import convert_to_markdown

NON_CONTENT_TAGS = ("script", "style", "nav", "footer", "header", "aside")

_NON_CONTENT_RES = [
    re.compile(rf"<{tag}[^>]*>[\s\S]*?</{tag}>", re.IGNORECASE) for tag in NON_CONTENT_TAGS
]
_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)
_H1_RE = re.compile(r"<h1[^>]*>(.*?)</h1>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")


class HTMLImportProvider(ImportProvider):
    supported_formats = (formats.HTML,)

    async def process(
        self,
        data: bytes,
        filename: str,
        progress: ProgressCallback = no_progress,
    ) -> ImportResult:
        self.require_data(data)
        markup = decode_markup(data)

        progress(0.3)

        markdown = convert_to_markdown(strip_non_content(markup))

        progress(0.8)

        title = extract_html_title(markup) or filename_stem(filename)

        progress(1.0)

        return ImportResult(
            title=title,
            body=markdown,
            source_format=SourceFormat.web,
            original_filename=filename,
            original_bytes=data,
            mime_type="text/html",
        )


def decode_markup(data: bytes) -> str:
    """UTF-8, then BOM-marked UTF-16, then Latin-1."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass
    if data[:2] in (b"\xff\xfe", b"\xfe\xff"):
        try:
            return data.decode("utf-16")
        except UnicodeDecodeError as e:
            raise EncodingFailedError() from e
    return data.decode("latin-1")


def strip_non_content(markup: str) -> str:
    for pattern in _NON_CONTENT_RES:
        markup = pattern.sub("", markup)
    return markup


def extract_html_title(markup: str) -> str | None:
    """``<title>`` first, then the first ``<h1>`` with inner tags removed."""
    for pattern in (_TITLE_RE, _H1_RE):
        match = pattern.search(markup)
        if match is None:
            continue
        title = html_lib.unescape(_TAG_RE.sub("", match.group(1))).strip()
        if title:
            return " ".join(title.split())
    return None
