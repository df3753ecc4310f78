"""Dura - document import, markdown block parsing and rendering."""

from dura.blocks import Block, BlockType, parse_markdown, render_markdown
from dura.config import DuraConfig, load_config
from dura.importer import DocumentImportError, ImportResult, ImportService, SourceFormat
from dura.output import NoteWriter

__version__ = "0.1.0"

__all__ = [
    "Block",
    "BlockType",
    "DocumentImportError",
    "DuraConfig",
    "ImportResult",
    "ImportService",
    "NoteWriter",
    "SourceFormat",
    "load_config",
    "parse_markdown",
    "render_markdown",
]
