"""NoteWriter: writes ImportResults to disk as front-matter markdown notes."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

import yaml

from dura.config.models import OutputConfig
from dura.importer.models import ImportResult

logger = logging.getLogger(__name__)

ATTACHMENTS_DIR = "attachments"


def _sanitize_filename(name: str, max_length: int = 120) -> str:
    """Make a note title safe for use as a filename.

    Replaces path separators with dashes, strips ``..`` segments, and removes
    characters that are problematic on common filesystems.
    """
    name = name.replace("/", "-").replace("\\", "-")
    name = name.replace("..", "")
    name = re.sub(r"[^\w\-\. ]", "", name)
    name = re.sub(r"\s+", " ", name).strip(" .")
    name = name[:max_length].rstrip(" .")
    if not name:
        name = "_untitled"
    return name


def _unique_path(path: Path) -> Path:
    """``note.md`` -> ``note-2.md`` -> ``note-3.md`` until the name is free."""
    if not path.exists():
        return path
    n = 2
    while True:
        candidate = path.with_name(f"{path.stem}-{n}{path.suffix}")
        if not candidate.exists():
            return candidate
        n += 1


def build_front_matter(result: ImportResult, imported_at: datetime) -> dict:
    fields: dict = {
        "title": result.title,
        "source": result.source_format.value,
        "source_url": result.source_url,
        "notebook": result.notebook_name,
        "tags": result.tag_names,
        "excerpt": result.excerpt,
        "featured_image": result.featured_image_url,
        "original_filename": result.original_filename,
        "mime_type": result.mime_type,
        "imported_at": imported_at.isoformat(),
    }
    return {k: v for k, v in fields.items() if v is not None}


def render_note(result: ImportResult, imported_at: datetime | None = None) -> str:
    imported_at = imported_at or datetime.now(timezone.utc)
    yaml_str = yaml.safe_dump(
        build_front_matter(result, imported_at),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    body = result.body.rstrip("\n")
    return f"---\n{yaml_str}---\n\n{body}\n" if body else f"---\n{yaml_str}---\n"


class NoteWriter:
    """Writes imported documents under ``OutputConfig.base_dir``.

    Handles filename sanitization, collision suffixes, the optional copy of
    the original file, and dry-run mode.
    """

    def __init__(self, config: OutputConfig) -> None:
        self.config = config
        self.base_dir = Path(config.base_dir)

    def write(self, result: ImportResult, *, dry_run: bool = False) -> Path:
        """Write one note. Returns the Path of the written (or would-be) file."""
        dest = _unique_path(self.base_dir / f"{_sanitize_filename(result.title)}.md")

        if dry_run:
            logger.debug("dry-run: would write %s", dest)
            return dest

        content = render_note(result)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(content, encoding="utf-8")
        logger.info("wrote %s (%d bytes)", dest, len(content))

        if self.config.keep_original and result.original_bytes:
            self._write_attachment(result)

        return dest

    def _write_attachment(self, result: ImportResult) -> Path:
        attachments = self.base_dir / ATTACHMENTS_DIR
        attachments.mkdir(parents=True, exist_ok=True)
        dest = _unique_path(attachments / _sanitize_filename(Path(result.original_filename).name))
        dest.write_bytes(result.original_bytes)
        logger.debug("kept original as %s", dest)
        return dest
