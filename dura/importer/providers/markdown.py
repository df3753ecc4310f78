"""Markdown import with front matter support."""

from __future__ import annotations

from dura.importer import formats
from dura.importer.base import ImportProvider, ProgressCallback, filename_stem, no_progress
from dura.importer.frontmatter import parse_front_matter
from dura.importer.models import ImportResult, SourceFormat


class MarkdownImportProvider(ImportProvider):
    supported_formats = (formats.MARKDOWN,)

    async def process(
        self,
        data: bytes,
        filename: str,
        progress: ProgressCallback = no_progress,
    ) -> ImportResult:
        self.require_data(data)
        text = self.decode_utf8(data)

        progress(0.5)

        front_matter, body = parse_front_matter(text)
        fm_title = front_matter.title.strip() if front_matter and front_matter.title else ""
        title = fm_title or extract_heading_title(body) or filename_stem(filename)

        progress(1.0)

        if front_matter is None:
            return ImportResult(
                title=title,
                body=body,
                source_format=SourceFormat.markdown,
                original_filename=filename,
                original_bytes=data,
                mime_type="text/markdown",
            )

        return ImportResult(
            title=title,
            body=body,
            source_format=SourceFormat.web if front_matter.is_web_clip else SourceFormat.markdown,
            original_filename=filename,
            original_bytes=data,
            mime_type="text/markdown",
            source_url=front_matter.url,
            excerpt=front_matter.excerpt,
            notebook_name=front_matter.notebook,
            featured_image_url=front_matter.featured_image,
            tag_names=front_matter.tags,
        )


def extract_heading_title(text: str) -> str | None:
    """Text of the first non-empty ``# `` heading."""
    for line in text.splitlines():
        trimmed = line.strip()
        if trimmed.startswith("# "):
            title = trimmed[2:].strip()
            if title:
                return title
    return None
