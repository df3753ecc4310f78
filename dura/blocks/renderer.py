"""Blocks -> markdown."""

from __future__ import annotations

from collections.abc import Iterable

from dura.blocks.models import Block, BlockType

AUDIO_ICON = "\U0001F50A"


def render_markdown(blocks: Iterable[Block]) -> str:
    """Render blocks back to markdown, separated by blank lines."""
    return "\n\n".join(render_block(block) for block in blocks)


def render_block(block: Block) -> str:
    kind = block.type
    content = block.content

    if kind == BlockType.heading:
        level = min(max(block.level or 1, 1), 6)
        return f"{'#' * level} {content}"

    if kind == BlockType.image:
        return f"![{content}]({block.meta('url', '')})"

    if kind == BlockType.code_block:
        return f"```{block.meta('language', '')}\n{content}\n```"

    if kind == BlockType.quote:
        return "\n".join(f"> {line}" for line in content.split("\n"))

    if kind == BlockType.bullet_list:
        return "\n".join(_bullet_line(item) for item in content.split("\n"))

    if kind == BlockType.numbered_list:
        return "\n".join(
            f"{n}. {item}" for n, item in enumerate(content.split("\n"), start=1)
        )

    if kind == BlockType.checklist:
        checked = set((block.meta("checked") or "").split(","))
        return "\n".join(
            f"- [{'x' if str(i) in checked else ' '}] {item}"
            for i, item in enumerate(content.split("\n"))
        )

    if kind == BlockType.divider:
        return "---"

    if kind == BlockType.toggle:
        # html passthrough so other markdown tools still collapse it
        summary = block.meta("summary", "Details")
        return f"<details>\n<summary>{summary}</summary>\n\n{content}\n</details>"

    if kind == BlockType.embed:
        return block.meta("url") or content

    if kind == BlockType.audio:
        return f"{AUDIO_ICON} [{content or 'audio'}]({block.meta('url', '')})"

    return content


def _bullet_line(item: str) -> str:
    # "- [ ] x" would read back as a checklist item
    if item.startswith(("[ ] ", "[x] ", "[X] ")):
        return f"* {item}"
    return f"- {item}"
