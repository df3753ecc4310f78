"""Front matter splitting and field extraction for imported markdown.

Web clippers write a ``---`` delimited preamble with title, url, tags and so
on. Each line is read as a plain ``key: value`` pair, so values keep their
text exactly (``#`` and ``No`` stay as written). Block-style values on
indented lines are read with YAML's string-only loader.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

_DELIMITER = "---"
_KEY_VALUE_RE = re.compile(r"^([A-Za-z_][\w-]*)\s*:\s*(.*)$")
_CONTINUATION_RE = re.compile(r"^[ \t]+\S", re.MULTILINE)


@dataclass(frozen=True)
class FrontMatter:
    """Fields the importer understands. Unknown keys are kept in ``extra``."""

    title: str | None = None
    url: str | None = None
    source: str | None = None
    tags: list[str] | None = None
    notebook: str | None = None
    excerpt: str | None = None
    featured_image: str | None = None
    extra: dict[str, str] | None = None

    @property
    def is_web_clip(self) -> bool:
        return (self.source or "").lower() == "web"


def split_front_matter(text: str) -> tuple[dict[str, object] | None, str]:
    """Split ``text`` into (raw fields, body).

    Returns ``(None, text)`` unchanged when the first line is not exactly
    ``---`` or the block is never closed.
    """
    normalized = text.replace("\r\n", "\n")
    first_line, sep, rest = normalized.partition("\n")
    if first_line != _DELIMITER or not sep:
        return None, text

    # closing delimiter may directly follow the opening one
    if rest.startswith(_DELIMITER + "\n") or rest == _DELIMITER:
        block, after = "", rest[len(_DELIMITER):]
    else:
        close = rest.find("\n" + _DELIMITER)
        if close == -1:
            return None, text
        block = rest[:close]
        after = rest[close + 1 + len(_DELIMITER):]

    # drop the remainder of the closing line, then leading blank lines
    _, _, body = after.partition("\n")
    return _parse_fields(block), body.lstrip("\n")


def parse_front_matter(text: str) -> tuple[FrontMatter | None, str]:
    """Like ``split_front_matter`` but maps the raw fields onto ``FrontMatter``."""
    fields, body = split_front_matter(text)
    if fields is None:
        return None, body

    known = {"title", "url", "source", "tags", "notebook", "excerpt", "featured_image"}
    extra = {k: _as_str(v) for k, v in fields.items() if k not in known and v is not None}
    return (
        FrontMatter(
            title=_optional_str(fields.get("title")),
            url=_optional_str(fields.get("url")),
            source=_optional_str(fields.get("source")),
            tags=_as_list(fields["tags"]) if "tags" in fields else None,
            notebook=_optional_str(fields.get("notebook")),
            excerpt=_optional_str(fields.get("excerpt")),
            featured_image=_optional_str(fields.get("featured_image")),
            extra=extra or None,
        ),
        body,
    )


# ---------------------------------------------------------------------------
# Field parsing
# ---------------------------------------------------------------------------


def _parse_fields(block: str) -> dict[str, object]:
    fields = parse_front_matter_lines(block)

    # keys with an empty inline value may carry a block-style YAML value
    # (an indented "- item" list or a folded string) on the following lines
    pending = [k for k, v in fields.items() if v == ""]
    if not pending or not _CONTINUATION_RE.search(block):
        return fields
    try:
        loaded = yaml.load(block, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        logger.debug("front matter block values are not valid YAML: %s", e)
        return fields
    if isinstance(loaded, dict):
        for key in pending:
            value = loaded.get(key)
            if isinstance(value, list):
                fields[key] = [v for v in value if isinstance(v, str)]
            elif isinstance(value, str):
                fields[key] = value
    return fields


def parse_front_matter_lines(block: str) -> dict[str, object]:
    """Line-oriented ``key: value`` parser with quote and inline-array support."""
    fields: dict[str, object] = {}
    for line in block.split("\n"):
        match = _KEY_VALUE_RE.match(line.strip())
        if match is None:
            continue
        key, raw = match.group(1), match.group(2).strip()
        if raw.startswith("[") and raw.endswith("]"):
            fields[key] = parse_inline_array(raw)
        else:
            fields[key] = unquote(raw)
    return fields


def parse_inline_array(raw: str) -> list[str]:
    """``[a, b]`` or ``["a","b"]`` -> ``["a", "b"]``."""
    inner = raw[1:-1].strip()
    if not inner:
        return []
    return [unquote(part.strip()) for part in inner.split(",")]


def unquote(value: str) -> str:
    """Strip surrounding quotes and undo ``\\"`` / ``\\\\`` escapes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
        return re.sub(r'\\(["\\])', r"\1", value)
    return value


def _as_str(value: object) -> str:
    if isinstance(value, list):
        return ", ".join(_as_str(v) for v in value)
    return str(value)


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return _as_str(value)


def _as_list(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v) for v in value if v is not None]
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(value)]
