import pytest

from gmailer.content import (
    BASE64,
    DEFAULT_TYPE,
    QUOTED_PRINTABLE,
    TEXT_HTML,
    TEXT_PLAIN,
    classify,
    encoding_for,
    sniff,
    type_by_extension,
)


def test_extension_is_used_first():
    assert classify("a.bin", bytes([0, 1, 2, 3])) == (DEFAULT_TYPE, BASE64)
    assert classify("notes.txt", b"<html><p>hi</p></html>") == (TEXT_PLAIN, QUOTED_PRINTABLE)
    assert classify("page.html", b"plain words") == (TEXT_HTML, QUOTED_PRINTABLE)


def test_extension_lookup_is_case_insensitive():
    assert classify("PAGE.HTML", b"<p>x</p>") == (TEXT_HTML, QUOTED_PRINTABLE)


def test_text_extension_without_utf8_content():
    assert type_by_extension("legacy.txt", b"caf\xe9") == "text/plain"
    assert classify("legacy.txt", b"caf\xe9") == ("text/plain", QUOTED_PRINTABLE)


def test_unknown_extension_falls_back_to_sniffing():
    assert type_by_extension("README", b"text") is None
    assert type_by_extension(None, b"text") is None
    assert classify("README", b"Just some words.") == (TEXT_PLAIN, QUOTED_PRINTABLE)
    assert classify("scan", b"%PDF-1.7\n%\xe2\xe3") == ("application/pdf", BASE64)


def test_body_without_name_is_sniffed():
    assert classify(None, b"<html><p>hi</p></html>") == (TEXT_HTML, QUOTED_PRINTABLE)
    assert classify(None, bytes([0, 1, 2])) == (DEFAULT_TYPE, BASE64)


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"<!DOCTYPE html><html></html>", TEXT_HTML),
        (b" \n\t<HTML><body>x</body></HTML>", TEXT_HTML),
        (b"<p>paragraph</p>", TEXT_HTML),
        (b"<!-- comment -->", TEXT_HTML),
        (b"<?xml version='1.0'?><a/>", "text/xml; charset=utf-8"),
        (b"GIF89a\x01\x00", "image/gif"),
        (b"\x89PNG\r\n\x1a\n\x00\x00", "image/png"),
        (b"\xff\xd8\xff\xe0\x00\x10JFIF", "image/jpeg"),
        (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp"),
        (b"RIFF\x00\x00\x00\x00WAVEfmt ", "audio/wave"),
        (b"PK\x03\x04\x14\x00", "application/zip"),
        (b"\x1f\x8b\x08\x00", "application/x-gzip"),
        (b"\xef\xbb\xbfhello", TEXT_PLAIN),
        (b"\xff\xfeh\x00i\x00", "text/plain; charset=utf-16le"),
        (b"plain text\r\nwith lines", TEXT_PLAIN),
        (b"\x00\x01\x02\x03", DEFAULT_TYPE),
    ],
)
def test_sniff(data, expected):
    assert sniff(data) == expected


def test_sniff_mp4():
    data = (24).to_bytes(4, "big") + b"ftypisom\x00\x00\x02\x00isommp41"
    assert sniff(data) == "video/mp4"


def test_sniff_requires_tag_terminator():
    assert sniff(b"<pre>code</pre>") == TEXT_PLAIN
    assert sniff(b"<b>bold</b>") == TEXT_HTML


def test_sniff_only_reads_leading_bytes():
    assert sniff(b"a" * 600 + b"\x00") == TEXT_PLAIN


def test_encoding_for():
    assert encoding_for("text/csv") == QUOTED_PRINTABLE
    assert encoding_for("image/png") == BASE64


def test_compressed_files_are_typed_by_compression():
    gzip_data = b"\x1f\x8b\x08\x00rest"
    assert classify("backup.tar.gz", gzip_data) == ("application/gzip", BASE64)
    assert classify("backup.tgz", gzip_data) == ("application/gzip", BASE64)
    assert classify("drawing.svgz", gzip_data) == ("application/gzip", BASE64)
    assert classify("backup.tar.bz2", b"BZh91AY&SY") == ("application/x-bzip2", BASE64)
    assert type_by_extension("notes.txt.xz", b"\xfd7zXZ\x00") == "application/x-xz"
