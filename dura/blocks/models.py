"""Pydantic models for the block representation of a note."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class BlockType(str, Enum):
    """Kinds of structural unit a note body is split into."""

    paragraph = "paragraph"
    heading = "heading"
    image = "image"
    code_block = "code_block"
    quote = "quote"
    bullet_list = "bullet_list"
    numbered_list = "numbered_list"
    checklist = "checklist"
    divider = "divider"
    toggle = "toggle"
    embed = "embed"
    audio = "audio"


_DISPLAY_NAMES: dict[BlockType, str] = {
    BlockType.paragraph: "Paragraph",
    BlockType.heading: "Heading",
    BlockType.image: "Image",
    BlockType.code_block: "Code Block",
    BlockType.quote: "Quote",
    BlockType.bullet_list: "Bullet List",
    BlockType.numbered_list: "Numbered List",
    BlockType.checklist: "Checklist",
    BlockType.divider: "Divider",
    BlockType.toggle: "Toggle",
    BlockType.embed: "Embed",
    BlockType.audio: "Audio",
}


class Block(BaseModel):
    """A single block derived from markdown.

    Blocks are never stored: they are rebuilt from the markdown body on every
    read. ``level`` is only set for headings. ``metadata`` holds type-specific
    extras (``language``, ``url``, ``checked``, ``summary``) and is ``None``
    rather than empty.
    """

    model_config = ConfigDict(frozen=True)

    type: BlockType = BlockType.paragraph
    content: str = ""
    level: int | None = None
    metadata: dict[str, str] | None = None

    @model_validator(mode="before")
    @classmethod
    def _drop_empty_metadata(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("metadata") == {}:
            data = {**data, "metadata": None}
        return data

    @model_validator(mode="after")
    def _check_level(self) -> Block:
        if self.type == BlockType.heading:
            if self.level is None or not 1 <= self.level <= 6:
                raise ValueError(f"heading level must be 1-6, got {self.level!r}")
        elif self.level is not None:
            raise ValueError(f"level is only valid for headings, not {self.type.value}")
        return self

    @property
    def display_name(self) -> str:
        name = _DISPLAY_NAMES[self.type]
        if self.type == BlockType.heading:
            return f"{name} {self.level}"
        return name

    def meta(self, key: str, default: str | None = None) -> str | None:
        if self.metadata is None:
            return default
        return self.metadata.get(key, default)

    @classmethod
    def heading(cls, level: int, content: str) -> Block:
        return cls(type=BlockType.heading, level=level, content=content)
