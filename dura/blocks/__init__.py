"""Block model plus the markdown <-> blocks parser and renderer."""

from dura.blocks.models import Block, BlockType
from dura.blocks.parser import parse_markdown
from dura.blocks.renderer import render_block, render_markdown

__all__ = [
    "Block",
    "BlockType",
    "parse_markdown",
    "render_block",
    "render_markdown",
]
