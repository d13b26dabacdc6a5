from email.header import Header
from os.path import isfile
from re import sub


def validate_path(path: str) -> None:
    """Ensures ``path`` names an existing file.

    Raises:
        ValueError: If ``path`` is not a non-empty string.
        FileNotFoundError: If the file does not exist.
    """
    if not isinstance(path, str) or not path:
        raise ValueError("File path must be a non-empty string.")
    if not isfile(path):
        raise FileNotFoundError(f"File not found: {path}")


def validate_template(file: str) -> None:
    """Ensures ``file`` is an existing HTML template.

    Raises:
        ValueError: If the file does not have an ``.html``/``.htm`` extension.
        FileNotFoundError: If the file does not exist.
    """
    validate_path(file)
    if not file.lower().endswith((".html", ".htm")):
        raise ValueError(f"Template must be an HTML file: {file}")


def validate_mailer(mailer: str) -> None:
    if not isinstance(mailer, str) or not mailer.strip():
        raise ValueError("Mailer must be a non-empty string.")
    if "\r" in mailer or "\n" in mailer:
        raise ValueError("Mailer must fit on a single header line.")
    if not mailer.isascii():
        raise ValueError("Mailer must be plain ASCII.")


def html_to_text(html: str) -> str:
    """Builds the plain text version of an HTML body by stripping its tags."""
    plain_text = sub(r"<[^>]+>", "", html)
    return sub(r"\s+", " ", plain_text).strip() or "Content not available."


def encode_subject(subject: str) -> str:
    """Returns ``subject`` as RFC 2047 encoded words when it is not plain ASCII.

    Long subjects are split into several encoded words of at most 75
    characters, one per folded line.
    """
    subject = sub(r"[\r\n]+", " ", subject)
    if subject.isascii():
        return subject
    return Header(subject, "utf-8", header_name="Subject").encode()
