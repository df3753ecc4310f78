"""Streaming HTML -> markdown conversion, shared by the HTML and EPUB importers."""

from dura.markup.converter import MarkupConverter, convert_to_markdown, prepare_markup

__all__ = ["MarkupConverter", "convert_to_markdown", "prepare_markup"]
