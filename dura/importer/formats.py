"""Format identifiers, file extensions, MIME types and conformance.

Identifiers follow uniform-type naming. A format may conform to broader
formats (``public.log`` is a kind of ``public.plain-text``), which lets the
import service fall back to a provider registered for the broader type.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath


@dataclass(frozen=True)
class FormatType:
    identifier: str
    extensions: tuple[str, ...]
    mime_type: str
    conforms_to: tuple[str, ...] = ()


# Abstract parents
TEXT = "public.text"
IMAGE = "public.image"
AUDIO = "public.audio"
ARCHIVE = "public.zip-archive"

# Concrete formats
PLAIN_TEXT = "public.plain-text"
LOG = "public.log"
MARKDOWN = "net.daringfireball.markdown"
HTML = "public.html"
XHTML = "public.xhtml"
EPUB = "org.idpf.epub-container"
PDF = "com.adobe.pdf"
RTF = "public.rtf"
DOCX = "org.openxmlformats.wordprocessingml.document"
PNG = "public.png"
JPEG = "public.jpeg"
HEIC = "public.heic"
TIFF = "public.tiff"
BMP = "com.microsoft.bmp"
GIF = "com.compuserve.gif"
WEBP = "org.webmproject.webp"
MP3 = "public.mp3"
M4A = "public.mpeg-4-audio"
WAV = "com.microsoft.waveform-audio"
AIFF = "public.aiff-audio"
AAC = "public.aac-audio"

_FORMATS: tuple[FormatType, ...] = (
    FormatType(TEXT, (), "text/plain"),
    FormatType(IMAGE, (), "application/octet-stream"),
    FormatType(AUDIO, (), "application/octet-stream"),
    FormatType(ARCHIVE, ("zip",), "application/zip"),
    FormatType(PLAIN_TEXT, ("txt", "text"), "text/plain", (TEXT,)),
    FormatType(LOG, ("log",), "text/plain", (PLAIN_TEXT,)),
    FormatType(MARKDOWN, ("md", "markdown", "mdown", "mkd"), "text/markdown", (PLAIN_TEXT,)),
    FormatType(HTML, ("html", "htm"), "text/html", (TEXT,)),
    FormatType(XHTML, ("xhtml", "xht"), "application/xhtml+xml", (HTML,)),
    FormatType(EPUB, ("epub",), "application/epub+zip", (ARCHIVE,)),
    FormatType(PDF, ("pdf",), "application/pdf"),
    FormatType(RTF, ("rtf",), "application/rtf", (TEXT,)),
    FormatType(
        DOCX,
        ("docx",),
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        (ARCHIVE,),
    ),
    FormatType(PNG, ("png",), "image/png", (IMAGE,)),
    FormatType(JPEG, ("jpg", "jpeg", "jpe"), "image/jpeg", (IMAGE,)),
    FormatType(HEIC, ("heic",), "image/heic", (IMAGE,)),
    FormatType(TIFF, ("tif", "tiff"), "image/tiff", (IMAGE,)),
    FormatType(BMP, ("bmp",), "image/bmp", (IMAGE,)),
    FormatType(GIF, ("gif",), "image/gif", (IMAGE,)),
    FormatType(WEBP, ("webp",), "image/webp", (IMAGE,)),
    FormatType(MP3, ("mp3",), "audio/mpeg", (AUDIO,)),
    FormatType(M4A, ("m4a",), "audio/mp4", (AUDIO,)),
    FormatType(WAV, ("wav",), "audio/wav", (AUDIO,)),
    FormatType(AIFF, ("aif", "aiff"), "audio/aiff", (AUDIO,)),
    FormatType(AAC, ("aac",), "audio/aac", (AUDIO,)),
)

_BY_IDENTIFIER: dict[str, FormatType] = {f.identifier: f for f in _FORMATS}
_BY_EXTENSION: dict[str, FormatType] = {
    ext: f for f in _FORMATS for ext in f.extensions
}


def get_format(identifier: str) -> FormatType | None:
    return _BY_IDENTIFIER.get(identifier)


def format_for_extension(ext: str) -> FormatType | None:
    """Look up a format by extension; accepts ``"md"``, ``".md"`` or ``".MD"``."""
    return _BY_EXTENSION.get(ext.lower().lstrip("."))


def extension_of(filename: str) -> str:
    return PurePath(filename).suffix.lower().lstrip(".")


def conforms_to(identifier: str, parent: str) -> bool:
    """True when ``identifier`` is ``parent`` or (transitively) specializes it."""
    if identifier == parent:
        return True
    fmt = _BY_IDENTIFIER.get(identifier)
    if fmt is None:
        return False
    return any(conforms_to(p, parent) for p in fmt.conforms_to)


def mime_type_for(filename: str, default: str = "application/octet-stream") -> str:
    fmt = format_for_extension(extension_of(filename))
    return fmt.mime_type if fmt is not None else default


def all_formats() -> tuple[FormatType, ...]:
    return _FORMATS
