import pytest

from gmailer.utils import encode_subject, html_to_text, validate_mailer, validate_path, validate_template


def test_html_to_text():
    html = "<html>\n<h2>Message body</h2>\n<p>This is a html text message.</p>\n</html>"
    assert html_to_text(html) == "Message body This is a html text message."
    assert html_to_text("<html><br></html>") == "Content not available."


def test_encode_subject():
    assert encode_subject("Monthly report") == "Monthly report"
    assert encode_subject("line\r\nbreak") == "line break"
    encoded = encode_subject("Тестовое сообщение")
    assert encoded.startswith("=?utf-8?")
    assert encoded.endswith("?=")


def test_validate_path(tmp_path):
    path = tmp_path / "file.txt"
    path.write_text("x")
    validate_path(str(path))

    with pytest.raises(ValueError):
        validate_path("")
    with pytest.raises(FileNotFoundError):
        validate_path(str(tmp_path / "missing.txt"))


def test_validate_template(tmp_path):
    page = tmp_path / "page.HTML"
    page.write_text("<p>x</p>")
    validate_template(str(page))

    other = tmp_path / "page.md"
    other.write_text("x")
    with pytest.raises(ValueError):
        validate_template(str(other))


def test_validate_mailer():
    validate_mailer("reports 1.0")
    for bad in ("", "  ", "two\r\nlines", None):
        with pytest.raises(ValueError):
            validate_mailer(bad)


def test_long_subject_is_split_into_short_encoded_words():
    subject = " ".join(["Тестовое сообщение"] * 15)

    encoded = encode_subject(subject)

    words = encoded.split()
    assert len(words) > 1
    assert all(len(word) <= 75 for word in words)
    assert all(word.startswith("=?utf-8?") and word.endswith("?=") for word in words)


def test_validate_mailer_requires_ascii():
    with pytest.raises(ValueError):
        validate_mailer("отправитель 1.0")
