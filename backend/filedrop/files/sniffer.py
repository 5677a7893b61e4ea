"""Content-type sniffing from leading bytes.

Implements the WHATWG MIME sniffing signature table. The result depends only
on the bytes given, never on a client-declared type or a file extension.
"""
from typing import Callable, List, Optional, Tuple

from .errors import TruncatedStream

# Only the first SNIFF_LEN bytes are ever considered
SNIFF_LEN = 512

DEFAULT_TYPE = "application/octet-stream"

_WHITESPACE = b"\t\n\x0c\r "

# Bytes that mark data as binary rather than text
_BINARY_BYTES = frozenset(
    list(range(0x00, 0x09)) + [0x0B] + list(range(0x0E, 0x1B)) + list(range(0x1C, 0x20))
)

Signature = Callable[[bytes, int], Optional[str]]


def _exact(pattern: bytes, mime_type: str) -> Signature:
    def match(data: bytes, first_non_ws: int) -> Optional[str]:
        if data.startswith(pattern):
            return mime_type
        return None
    return match


def _masked(pattern: bytes, mask: bytes, mime_type: str, skip_ws: bool = False) -> Signature:
    def match(data: bytes, first_non_ws: int) -> Optional[str]:
        if skip_ws:
            data = data[first_non_ws:]
        if len(data) < len(mask):
            return None
        for i, m in enumerate(mask):
            if data[i] & m != pattern[i]:
                return None
        return mime_type
    return match


def _html(tag: bytes) -> Signature:
    def match(data: bytes, first_non_ws: int) -> Optional[str]:
        data = data[first_non_ws:]
        if len(data) < len(tag) + 1:
            return None
        for i, b in enumerate(tag):
            db = data[i]
            if ord("A") <= b <= ord("Z"):
                db &= 0xDF
            if b != db:
                return None
        # Next byte must be a tag-terminating byte
        if data[len(tag)] not in b" >":
            return None
        return "text/html; charset=utf-8"
    return match


def _mp4(data: bytes, first_non_ws: int) -> Optional[str]:
    if len(data) < 12:
        return None
    box_size = int.from_bytes(data[:4], "big")
    if len(data) < box_size or box_size % 4 != 0:
        return None
    if data[4:8] != b"ftyp":
        return None
    for start in range(8, box_size, 4):
        if start == 12:
            # minor version number
            continue
        if data[start:start + 3] == b"mp4":
            return "video/mp4"
    return None


def _text(data: bytes, first_non_ws: int) -> Optional[str]:
    for b in data[first_non_ws:]:
        if b in _BINARY_BYTES:
            return None
    return "text/plain; charset=utf-8"


_HTML_TAGS: Tuple[bytes, ...] = (
    b"<!DOCTYPE HTML", b"<HTML", b"<HEAD", b"<SCRIPT", b"<IFRAME", b"<H1",
    b"<DIV", b"<FONT", b"<TABLE", b"<A", b"<STYLE", b"<TITLE", b"<B",
    b"<BODY", b"<BR", b"<P", b"<!--",
)

SIGNATURES: List[Signature] = [
    *(_html(tag) for tag in _HTML_TAGS),
    _masked(b"<?xml", b"\xFF\xFF\xFF\xFF\xFF", "text/xml; charset=utf-8", skip_ws=True),
    _exact(b"%PDF-", "application/pdf"),
    _exact(b"%!PS-Adobe-", "application/postscript"),

    # Byte order marks
    _masked(b"\xFE\xFF\x00\x00", b"\xFF\xFF\x00\x00", "text/plain; charset=utf-16be"),
    _masked(b"\xFF\xFE\x00\x00", b"\xFF\xFF\x00\x00", "text/plain; charset=utf-16le"),
    _masked(b"\xEF\xBB\xBF\x00", b"\xFF\xFF\xFF\x00", "text/plain; charset=utf-8"),

    # Images
    _exact(b"\x00\x00\x01\x00", "image/x-icon"),
    _exact(b"\x00\x00\x02\x00", "image/x-icon"),
    _exact(b"BM", "image/bmp"),
    _exact(b"GIF87a", "image/gif"),
    _exact(b"GIF89a", "image/gif"),
    _masked(
        b"RIFF\x00\x00\x00\x00WEBPVP",
        b"\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF\xFF\xFF",
        "image/webp",
    ),
    _exact(b"\x89PNG\x0D\x0A\x1A\x0A", "image/png"),
    _exact(b"\xFF\xD8\xFF", "image/jpeg"),

    # Audio and video
    _masked(
        b"FORM\x00\x00\x00\x00AIFF",
        b"\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF",
        "audio/aiff",
    ),
    _masked(b"ID3", b"\xFF\xFF\xFF", "audio/mpeg"),
    _masked(b"OggS\x00", b"\xFF\xFF\xFF\xFF\xFF", "application/ogg"),
    _masked(b"MThd\x00\x00\x00\x06", b"\xFF\xFF\xFF\xFF\xFF\xFF\xFF\xFF", "audio/midi"),
    _masked(
        b"RIFF\x00\x00\x00\x00AVI ",
        b"\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF",
        "video/avi",
    ),
    _masked(
        b"RIFF\x00\x00\x00\x00WAVE",
        b"\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF",
        "audio/wave",
    ),
    _mp4,
    _exact(b"\x1A\x45\xDF\xA3", "video/webm"),

    # Fonts
    _exact(b"wOFF", "font/woff"),
    _exact(b"wOF2", "font/woff2"),
    _exact(b"OTTO", "font/otf"),
    _exact(b"\x00\x01\x00\x00", "font/ttf"),
    _exact(b"ttcf", "font/collection"),

    # Archives
    _exact(b"\x1F\x8B\x08", "application/x-gzip"),
    _exact(b"PK\x03\x04", "application/zip"),
    _exact(b"Rar!\x1A\x07\x00", "application/x-rar-compressed"),
    _exact(b"Rar!\x1A\x07\x01\x00", "application/x-rar-compressed"),
    _exact(b"\x00\x61\x73\x6D", "application/wasm"),

    _text,
]


def sniff(prefix: bytes) -> str:
    """Determine the MIME type of content from its leading bytes.

    Args:
        prefix: Up to the first 512 bytes of the content. Anything beyond
            512 bytes is ignored.

    Returns:
        A MIME type string; ``application/octet-stream`` when nothing
        more specific matches.

    Raises:
        TruncatedStream: If ``prefix`` is empty.
    """
    if not prefix:
        raise TruncatedStream("No bytes available to determine the content type")

    data = bytes(prefix[:SNIFF_LEN])

    first_non_ws = 0
    while first_non_ws < len(data) and data[first_non_ws] in _WHITESPACE:
        first_non_ws += 1

    for signature in SIGNATURES:
        mime_type = signature(data, first_non_ws)
        if mime_type is not None:
            return mime_type
    return DEFAULT_TYPE


def essence(mime_type: str) -> str:
    """Return the ``type/subtype`` part of a MIME type, lowercased."""
    return mime_type.split(";", 1)[0].strip().lower()
