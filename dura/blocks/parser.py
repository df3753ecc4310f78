"""Markdown -> blocks.

Markdown is always the source of truth; blocks are derived on each read.
Malformed constructs degrade to paragraph text instead of raising.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from dura.blocks.models import Block, BlockType

_FENCES = ("```", "~~~")
_DIVIDER_CHARS = ({"-"}, {"*"}, {"_"})
_CHECKLIST_PREFIXES = ("- [ ] ", "- [x] ", "- [X] ")
_BULLET_PREFIXES = ("- ", "* ", "+ ")

_IMAGE_RE = re.compile(r"^!\[([^\]]*)\]\(([^)]+)\)$")
_AUDIO_RE = re.compile(r"^\U0001F50A\s*\[([^\]]+)\]\(([^)]+)\)$")
_NUMBERED_RE = re.compile(r"^\d+\.\s")


class _Consumed(NamedTuple):
    block: Block
    next_index: int


def parse_markdown(markdown: str) -> list[Block]:
    """Parse a markdown string into blocks. Never raises."""
    if not markdown:
        return [Block()]

    lines = markdown.replace("\r\n", "\n").split("\n")
    blocks: list[Block] = []
    index = 0

    while index < len(lines):
        line = lines[index]

        code = _parse_fenced_code(lines, index)
        if code is not None:
            blocks.append(code.block)
            index = code.next_index
            continue

        if _is_divider(line):
            blocks.append(Block(type=BlockType.divider))
            index += 1
            continue

        heading = _parse_heading(line)
        if heading is not None:
            blocks.append(heading)
            index += 1
            continue

        image = _parse_image(line)
        if image is not None:
            blocks.append(image)
            index += 1
            continue

        audio = _parse_audio(line)
        if audio is not None:
            blocks.append(audio)
            index += 1
            continue

        if _is_checklist_item(line):
            consumed = _parse_checklist(lines, index)
        elif _is_bullet_item(line):
            consumed = _parse_bullet_list(lines, index)
        elif _is_numbered_item(line):
            consumed = _parse_numbered_list(lines, index)
        elif line.startswith(">"):
            consumed = _parse_blockquote(lines, index)
        elif not line.strip():
            index += 1
            continue
        else:
            consumed = _parse_paragraph(lines, index)

        blocks.append(consumed.block)
        index = consumed.next_index

    if not blocks:
        blocks.append(Block())
    return blocks


# ---------------------------------------------------------------------------
# Single-line matchers
# ---------------------------------------------------------------------------


def _parse_heading(line: str) -> Block | None:
    trimmed = line.strip()
    if not trimmed.startswith("#"):
        return None

    level = len(trimmed) - len(trimmed.lstrip("#"))
    if level > 6:
        return None

    rest = trimmed[level:]
    # "#Foo" is not a heading
    if rest and not rest.startswith(" "):
        return None
    return Block.heading(level, rest.strip())


def _parse_image(line: str) -> Block | None:
    match = _IMAGE_RE.match(line.strip())
    if match is None:
        return None
    alt, url = match.groups()
    return Block(type=BlockType.image, content=alt, metadata={"url": url})


def _parse_audio(line: str) -> Block | None:
    match = _AUDIO_RE.match(line.strip())
    if match is None:
        return None
    name, url = match.groups()
    return Block(type=BlockType.audio, content=name, metadata={"url": url})


def _is_divider(line: str) -> bool:
    trimmed = line.strip()
    return len(trimmed) >= 3 and set(trimmed) in _DIVIDER_CHARS


def _is_checklist_item(line: str) -> bool:
    return line.strip().startswith(_CHECKLIST_PREFIXES)


def _is_bullet_item(line: str) -> bool:
    return line.strip().startswith(_BULLET_PREFIXES) and not _is_checklist_item(line)


def _is_numbered_item(line: str) -> bool:
    return _NUMBERED_RE.match(line.strip()) is not None


def _opens_fence(line: str) -> bool:
    return line.strip().startswith(_FENCES)


# ---------------------------------------------------------------------------
# Multi-line constructs
# ---------------------------------------------------------------------------


def _parse_fenced_code(lines: list[str], start: int) -> _Consumed | None:
    opening = lines[start].strip()
    if not opening.startswith(_FENCES):
        return None

    fence = opening[:3]
    language = opening[3:].strip()

    code_lines: list[str] = []
    idx = start + 1
    while idx < len(lines):
        current = lines[idx]
        idx += 1
        if current.strip().startswith(fence):
            break
        code_lines.append(current)

    metadata = {"language": language} if language else None
    block = Block(type=BlockType.code_block, content="\n".join(code_lines), metadata=metadata)
    return _Consumed(block, idx)


def _parse_blockquote(lines: list[str], start: int) -> _Consumed:
    quote_lines: list[str] = []
    idx = start

    while idx < len(lines):
        line = lines[idx]
        if line.startswith(">"):
            content = line[1:]
            if content.startswith(" "):
                content = content[1:]
            quote_lines.append(content)
            idx += 1
        elif not line.strip() and idx + 1 < len(lines) and lines[idx + 1].startswith(">"):
            quote_lines.append("")
            idx += 1
        else:
            break

    return _Consumed(Block(type=BlockType.quote, content="\n".join(quote_lines)), idx)


def _parse_bullet_list(lines: list[str], start: int) -> _Consumed:
    items: list[str] = []
    idx = start
    while idx < len(lines) and _is_bullet_item(lines[idx]):
        items.append(lines[idx].strip()[2:])
        idx += 1
    return _Consumed(Block(type=BlockType.bullet_list, content="\n".join(items)), idx)


def _parse_numbered_list(lines: list[str], start: int) -> _Consumed:
    items: list[str] = []
    idx = start
    while idx < len(lines) and _is_numbered_item(lines[idx]):
        trimmed = lines[idx].strip()
        items.append(trimmed[trimmed.index(".") + 1:].strip())
        idx += 1
    return _Consumed(Block(type=BlockType.numbered_list, content="\n".join(items)), idx)


def _parse_checklist(lines: list[str], start: int) -> _Consumed:
    items: list[str] = []
    checked: list[str] = []
    idx = start

    while idx < len(lines) and _is_checklist_item(lines[idx]):
        trimmed = lines[idx].strip()
        if trimmed[3] in "xX":
            checked.append(str(len(items)))
        items.append(trimmed[6:])
        idx += 1

    metadata = {"checked": ",".join(checked)} if checked else None
    block = Block(type=BlockType.checklist, content="\n".join(items), metadata=metadata)
    return _Consumed(block, idx)


def _starts_construct(line: str) -> bool:
    trimmed = line.strip()
    return (
        (trimmed.startswith("#") and _parse_heading(line) is not None)
        or _opens_fence(line)
        or _is_divider(line)
        or trimmed.startswith(">")
        or _is_checklist_item(line)
        or _is_bullet_item(line)
        or _is_numbered_item(line)
        or _parse_image(line) is not None
        or _parse_audio(line) is not None
    )


def _parse_paragraph(lines: list[str], start: int) -> _Consumed:
    para_lines: list[str] = []
    idx = start

    while idx < len(lines):
        line = lines[idx]
        # the first line is always taken so an indented "> x" cannot stall the scan
        if idx > start and (not line.strip() or _starts_construct(line)):
            break
        para_lines.append(line)
        idx += 1

    return _Consumed(Block(type=BlockType.paragraph, content="\n".join(para_lines)), idx)
