"""HTML/XHTML -> markdown converter.

Uses Python's expat parser for streaming parsing. The markup is wrapped in a
synthetic root element and pre-cleaned so HTML-isms (named entities, void
tags without a closing slash) do not trip the strict tokenizer. On a
tokenizer error the converter keeps whatever it produced so far.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from html.entities import html5, name2codepoint
from xml.parsers import expat

logger = logging.getLogger(__name__)

_ROOT_TAG = "_root_"

# Overrides for named HTML entities; anything else goes through html.entities.
_ENTITY_TABLE: dict[str, str] = {
    "nbsp": " ",
    "ldquo": "“",
    "rdquo": "”",
    "lsquo": "‘",
    "rsquo": "’",
    "mdash": "—",
    "ndash": "–",
    "hellip": "…",
    "trade": "™",
    "copy": "©",
    "reg": "®",
    "laquo": "«",
    "raquo": "»",
    "bull": "•",
    "middot": "·",
}
_XML_ENTITIES = {"amp", "lt", "gt", "quot", "apos"}

_VOID_TAGS = (
    "br", "hr", "img", "input", "meta", "link", "source", "wbr",
    "col", "area", "base", "embed", "param", "track",
)

_ENTITY_RE = re.compile(r"&([a-zA-Z][a-zA-Z0-9]*);")
_DECLARATION_RE = re.compile(r"<\?xml[^>]*\?>|<!DOCTYPE[^>]*>", re.IGNORECASE)
_VOID_OPEN_RE = re.compile(
    r"<(" + "|".join(_VOID_TAGS) + r")\b((?:\s[^>]*?)?)\s*/?>", re.IGNORECASE
)
_VOID_CLOSE_RE = re.compile(r"</(" + "|".join(_VOID_TAGS) + r")\s*>", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")

_HEADINGS = {f"h{n}": n for n in range(1, 7)}
_BLOCK_TAGS = {"p", "div", "section", "article", "main", "figure", "figcaption", "table"}
_SILENT_TAGS = {"head", "title", "script", "style", "noscript"}
_INLINE_MARKS = {
    "strong": "**",
    "b": "**",
    "em": "*",
    "i": "*",
    "del": "~~",
    "s": "~~",
    "strike": "~~",
}


def convert_to_markdown(html: str) -> str:
    """Convert an HTML fragment or document to markdown. Never raises."""
    return MarkupConverter().convert(html)


def prepare_markup(html: str) -> str:
    """Make HTML palatable to a strict XML tokenizer."""
    cleaned = _DECLARATION_RE.sub("", html)
    cleaned = _ENTITY_RE.sub(_replace_entity, cleaned)
    cleaned = _VOID_CLOSE_RE.sub("", cleaned)
    cleaned = _VOID_OPEN_RE.sub(r"<\1\2/>", cleaned)
    return f"<{_ROOT_TAG}>{cleaned}</{_ROOT_TAG}>"


def _replace_entity(match: re.Match[str]) -> str:
    name = match.group(1)
    if name in _XML_ENTITIES:
        return match.group(0)
    if name in _ENTITY_TABLE:
        return _ENTITY_TABLE[name]
    if name in name2codepoint:
        text = chr(name2codepoint[name])
    else:
        # unknown entities are dropped rather than breaking the parse
        text = html5.get(name + ";", "")
    return text.replace("&", "&amp;").replace("<", "&lt;")


@dataclass
class _ListLevel:
    ordered: bool
    counter: int = 0


class MarkupConverter:
    """Tag-event state machine that writes markdown into a buffer.

    One instance per document; state is not shared between calls.
    """

    def __init__(self) -> None:
        self._result = ""
        self._pending_text = ""
        self._element_stack: list[str] = []
        self._list_stack: list[_ListLevel] = []
        self._quote_starts: list[int] = []
        self._link_url: str | None = None

    def convert(self, html: str) -> str:
        parser = expat.ParserCreate()
        parser.buffer_text = True
        parser.StartElementHandler = self._on_start
        parser.EndElementHandler = self._on_end
        parser.CharacterDataHandler = self._on_chardata

        try:
            parser.Parse(prepare_markup(html).encode("utf-8"), True)
        except expat.ExpatError as e:
            # keep the partial output
            logger.debug("markup tokenizer stopped early: %s", e)
        self._flush_text()
        return self._result.strip()

    # -------------------------------------------------------------------------
    # Event handling
    # -------------------------------------------------------------------------

    def _on_start(self, name: str, attrs: dict[str, str]) -> None:
        tag = name.lower()
        self._flush_text()
        self._element_stack.append(tag)

        if tag in _HEADINGS:
            self._ensure_newlines(2)
            self._result += "#" * _HEADINGS[tag] + " "
        elif tag in _BLOCK_TAGS:
            self._ensure_newlines(2)
        elif tag == "br":
            self._result = self._result.rstrip(" ") + "\n"
        elif tag in ("ul", "ol"):
            self._ensure_newlines(1)
            self._list_stack.append(_ListLevel(ordered=tag == "ol"))
        elif tag == "li":
            self._start_list_item()
        elif tag == "blockquote":
            self._ensure_newlines(2)
            self._quote_starts.append(len(self._result))
        elif tag == "pre":
            self._ensure_newlines(2)
            self._result += "```\n"
        elif tag == "code":
            if not self._inside("pre"):
                self._result += "`"
        elif tag in _INLINE_MARKS:
            self._result += _INLINE_MARKS[tag]
        elif tag == "a":
            self._link_url = attrs.get("href")
            self._result += "["
        elif tag == "img":
            self._result += f"![{attrs.get('alt', '')}]({attrs.get('src', '')})"
        elif tag == "hr":
            self._ensure_newlines(2)
            self._result += "---"
            self._ensure_newlines(2)
        elif tag == "tr":
            self._ensure_newlines(1)

    def _on_end(self, name: str) -> None:
        tag = name.lower()
        self._flush_text()

        if tag in _HEADINGS or tag in _BLOCK_TAGS:
            self._ensure_newlines(2)
        elif tag in ("ul", "ol"):
            if self._list_stack:
                self._list_stack.pop()
            self._ensure_newlines(1 if self._list_stack else 2)
        elif tag == "blockquote":
            self._close_quote()
        elif tag == "pre":
            self._result = self._result.rstrip("\n") + "\n```"
            self._ensure_newlines(2)
        elif tag == "code":
            if not self._inside("pre", skip_last=True):
                self._result += "`"
        elif tag in _INLINE_MARKS:
            self._result += _INLINE_MARKS[tag]
        elif tag == "a":
            if self._link_url is not None:
                self._result += f"]({self._link_url})"
            else:
                self._result += "]"
            self._link_url = None
        elif tag in ("td", "th"):
            self._result += " "

        if self._element_stack and self._element_stack[-1] == tag:
            self._element_stack.pop()

    def _on_chardata(self, data: str) -> None:
        self._pending_text += data

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _inside(self, tag: str, skip_last: bool = False) -> bool:
        stack = self._element_stack[:-1] if skip_last else self._element_stack
        return tag in stack

    def _flush_text(self) -> None:
        if not self._pending_text:
            return
        text, self._pending_text = self._pending_text, ""

        if any(tag in _SILENT_TAGS for tag in self._element_stack):
            return
        if self._inside("pre"):
            self._result += text
            return

        collapsed = _WHITESPACE_RE.sub(" ", text)
        if not self._result or self._result.endswith("\n"):
            collapsed = collapsed.lstrip()
        elif self._result.endswith(" "):
            collapsed = collapsed.lstrip(" ")
        self._result += collapsed

    def _ensure_newlines(self, count: int) -> None:
        """Guarantee at least ``count`` trailing newlines, dropping trailing spaces."""
        self._result = self._result.rstrip(" ")
        existing = len(self._result) - len(self._result.rstrip("\n"))
        self._result += "\n" * max(0, count - existing)

    def _start_list_item(self) -> None:
        self._ensure_newlines(1)
        indent = "  " * max(0, len(self._list_stack) - 1)
        if not self._list_stack:
            self._result += "- "
            return
        level = self._list_stack[-1]
        if level.ordered:
            level.counter += 1
            self._result += f"{indent}{level.counter}. "
        else:
            self._result += f"{indent}- "

    def _close_quote(self) -> None:
        if not self._quote_starts:
            return
        start = self._quote_starts.pop()
        quoted = self._result[start:].strip("\n")
        prefixed = "\n".join(f"> {line}" if line else ">" for line in quoted.split("\n"))
        self._result = self._result[:start] + prefixed
        self._ensure_newlines(2)
