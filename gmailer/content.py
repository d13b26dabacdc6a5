"""Content type and transfer encoding inference for message parts.

Types are looked up by file extension first and sniffed from the payload
only when the extension is missing or unknown. Sniffing follows the WHATWG
MIME Sniffing signature table and inspects at most the first 512 bytes.
"""

from mimetypes import guess_type
from typing import Optional, Tuple

QUOTED_PRINTABLE = "quoted-printable"
BASE64 = "base64"

DEFAULT_TYPE = "application/octet-stream"
TEXT_PLAIN = "text/plain; charset=utf-8"
TEXT_HTML = "text/html; charset=utf-8"

SNIFF_LENGTH = 512

# mimetypes encodings (".gz", ".bz2", ...) and the type of the compressed file
_COMPRESSED_TYPES = {
    "gzip": "application/gzip",
    "bzip2": "application/x-bzip2",
    "xz": "application/x-xz",
    "compress": "application/x-compress",
    "br": "application/x-brotli",
}

_WHITESPACE = b"\t\n\x0c\r "

_HTML_TAGS = (
    b"<!DOCTYPE HTML", b"<HTML", b"<HEAD", b"<SCRIPT", b"<IFRAME", b"<H1",
    b"<DIV", b"<FONT", b"<TABLE", b"<A", b"<STYLE", b"<TITLE", b"<B",
    b"<BODY", b"<BR", b"<P", b"<!--",
)

# (prefix, content type), checked in order against the raw payload
_SIGNATURES = (
    (b"%PDF-", "application/pdf"),
    (b"%!PS-Adobe-", "application/postscript"),
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", TEXT_PLAIN),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"\x00\x00\x02\x00", "image/x-icon"),
    (b"BM", "image/bmp"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"wOFF", "font/woff"),
    (b"wOF2", "font/woff2"),
    (b"OggS\x00", "application/ogg"),
    (b"ID3", "audio/mpeg"),
    (b"\x1aE\xdf\xa3", "video/webm"),
    (b"PK\x03\x04", "application/zip"),
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"Rar!\x1a\x07\x00", "application/x-rar-compressed"),
    (b"Rar!\x1a\x07\x01\x00", "application/x-rar-compressed"),
    (b"\x00asm", "application/wasm"),
)

_BINARY_BYTES = frozenset(
    list(range(0x00, 0x09)) + [0x0B] + list(range(0x0E, 0x1B)) + list(range(0x1C, 0x20))
)


def _is_html(data: bytes) -> bool:
    head = data.lstrip(_WHITESPACE)
    for tag in _HTML_TAGS:
        if len(head) > len(tag) and head[:len(tag)].upper() == tag:
            # the tag must be terminated by a space or a closing bracket
            if head[len(tag)] in b" >":
                return True
    return False


def _riff_type(data: bytes) -> Optional[str]:
    if data[:4] != b"RIFF" or len(data) < 14:
        return None
    if data[8:14] == b"WEBPVP":
        return "image/webp"
    if data[8:12] == b"WAVE":
        return "audio/wave"
    if data[8:12] == b"AVI ":
        return "video/avi"
    return None


def _is_mp4(data: bytes) -> bool:
    if len(data) < 12:
        return False
    box_size = int.from_bytes(data[:4], "big")
    if box_size % 4 != 0 or box_size > len(data) or data[4:8] != b"ftyp":
        return False
    for start in range(8, box_size, 4):
        if start == 12:
            # the minor version is not a brand
            continue
        if data[start:start + 3] == b"mp4":
            return True
    return False


def sniff(data: bytes) -> str:
    """Detects the content type of ``data`` from its leading bytes.

    Args:
        data (bytes): Raw payload.

    Returns:
        str: A MIME type, ``application/octet-stream`` when nothing matches.

    Example:
        sniff(b"<html><p>hi</p></html>")  # "text/html; charset=utf-8"
    """
    data = data[:SNIFF_LENGTH]

    if _is_html(data):
        return TEXT_HTML
    if data.lstrip(_WHITESPACE)[:5] == b"<?xml":
        return "text/xml; charset=utf-8"

    for prefix, content_type in _SIGNATURES:
        if data.startswith(prefix):
            return content_type

    content_type = _riff_type(data)
    if content_type:
        return content_type
    if _is_mp4(data):
        return "video/mp4"

    if any(byte in _BINARY_BYTES for byte in data):
        return DEFAULT_TYPE
    return TEXT_PLAIN


def type_by_extension(filename: Optional[str], data: bytes = b"") -> Optional[str]:
    """Looks up a MIME type from the extension of ``filename``.

    A compression suffix wins over the type underneath it, so
    ``backup.tar.gz`` is ``application/gzip``. Text types get a
    ``charset=utf-8`` parameter when ``data`` decodes as UTF-8. Returns
    ``None`` if the extension is missing or unknown.
    """
    if not filename:
        return None

    content_type, encoding = guess_type(filename, strict=False)
    if encoding:
        return _COMPRESSED_TYPES.get(encoding)
    if not content_type:
        return None

    if content_type.startswith("text/"):
        try:
            data.decode("utf-8")
        except UnicodeDecodeError:
            return content_type
        return f"{content_type}; charset=utf-8"
    return content_type


def encoding_for(content_type: str) -> str:
    """Picks the transfer encoding used to serialize ``content_type``."""
    return QUOTED_PRINTABLE if content_type.startswith("text/") else BASE64


def classify(filename: Optional[str], data: bytes) -> Tuple[str, str]:
    """Infers the content type and transfer encoding of a part.

    Args:
        filename (str | None): Display name of the part, ``None`` for the body.
        data (bytes): Raw payload. It is only inspected, never modified.

    Returns:
        tuple[str, str]: ``(content_type, transfer_encoding)``.
    """
    content_type = type_by_extension(filename, data) or sniff(data)
    return content_type, encoding_for(content_type)
