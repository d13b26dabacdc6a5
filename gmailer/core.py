from dataclasses import dataclass
from email.base64mime import body_encode as base64_body_encode
from email.generator import BytesGenerator
from email.message import Message as MIMEEntity
from email.policy import SMTP
from email.quoprimime import body_encode as qp_body_encode
from email.utils import encode_rfc2231
from enum import Enum
from io import BytesIO
from os import altsep, sep
from re import compile as re_compile
from typing import BinaryIO, Dict, Iterable, List, Optional, Tuple, Union
from uuid import uuid4

from jinja2 import Template  # type: ignore

from .addresses import address_list, parse_sender
from .content import BASE64, QUOTED_PRINTABLE, TEXT_PLAIN, classify
from .errors import (
    EmptyMessageError,
    InvalidNameError,
    NoRecipientError,
    UnsupportedBodyTypeError,
    UnsupportedEncodingError,
)
from .headers import Header
from .logger import get_logger
from .sender import send as _send
from .utils import encode_subject, html_to_text, validate_mailer, validate_path, validate_template

logger = get_logger("Gmailer.core")

MAILER = "gmailer (https://pypi.org/project/gmailer/)"

_SEPARATORS = "".join(dict.fromkeys(s for s in ("/", sep, altsep) if s))
_BAD_NAMES = {".", "..", "/", sep}
_TOKEN = re_compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class PartKind(Enum):
    BODY = "body"
    ATTACHMENT = "attachment"


def _quoted_printable(data: bytes) -> str:
    # latin-1 maps every byte to one character, so each is escaped on its own
    return qp_body_encode(data.decode("latin-1"))


def _base64(data: bytes) -> str:
    return base64_body_encode(data)


_ENCODERS = {
    QUOTED_PRINTABLE: _quoted_printable,
    BASE64: _base64,
}


@dataclass(frozen=True)
class Part:
    """A body or attachment together with its MIME headers.

    ``name`` is ``None`` for the body. ``data`` holds the raw, unencoded
    payload; the transfer encoding is applied when the part is written.
    """

    kind: PartKind
    name: Optional[str]
    header: Header
    data: bytes

    @property
    def key(self) -> Tuple[PartKind, str]:
        return self.kind, self.name or ""

    @property
    def content_type(self) -> str:
        return self.header.get("Content-Type", "")

    def encoded_payload(self) -> str:
        """Returns the payload encoded with the declared transfer encoding.

        Lines are wrapped at 76 columns and separated by ``\\n``; the
        generator rewrites the line endings when the message is written.

        Raises:
            UnsupportedEncodingError: If the encoding is neither
                quoted-printable nor base64.
        """
        encoding = self.header.get("Content-Transfer-Encoding", "")
        encoder = _ENCODERS.get(encoding)
        if encoder is None:
            raise UnsupportedEncodingError(encoding)
        return encoder(self.data)

    def __repr__(self) -> str:
        return (
            f"Part(kind={self.kind.value!r}, name={self.name!r}, "
            f"content_type={self.content_type!r}, data_size={len(self.data)} bytes)"
        )


def _multipart(subtype: str) -> str:
    return f"multipart/{subtype}; boundary={uuid4().hex}"


def _entity(header: Header, payload: Union[str, List[MIMEEntity]]) -> MIMEEntity:
    """Builds a MIME entity whose headers follow the sorted order of ``header``."""
    entity = MIMEEntity()
    for name, value in header.sorted_items():
        entity[name] = value
    if isinstance(payload, str):
        entity.set_payload(payload)
    else:
        for sub_entity in payload:
            entity.attach(sub_entity)
    return entity


def _base_name(name: Optional[str]) -> str:
    if not name:
        return "."
    stripped = name.rstrip(_SEPARATORS)
    if not stripped:
        return "/"
    for separator in _SEPARATORS:
        stripped = stripped.rsplit(separator, 1)[-1]
    return stripped


def _disposition(name: str) -> str:
    if _TOKEN.match(name):
        return f"attachment; filename={name}"
    if name.isascii() and name.isprintable():
        quoted = name.replace("\\", "\\\\").replace('"', '\\"')
        return f'attachment; filename="{quoted}"'
    return f"attachment; filename*={encode_rfc2231(name, 'utf-8')}"


def _as_bytes(data: Union[bytes, bytearray, memoryview, str, None]) -> bytes:
    if data is None:
        return b""
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise ValueError("Data must be bytes or a string.")


class Message:
    """An outgoing email message: headers, an optional body and attachments.

    The body may be plain text or HTML; its format is detected from the
    content (wrap HTML in an ``<html>`` tag to be sure it is recognized).
    Binary data is never accepted as the body. Attachments are keyed by
    file name, and attaching empty content under a name removes it.

    The message is always sent on behalf of the authorized user, so
    ``sender`` may be empty or ``"me"``. Any other address is written to
    both ``From`` and ``Reply-To``.

    Addresses are accepted as ``test@example.com``, ``<test@example.com>``
    or ``Test User <test@example.com>``. At least one ``to`` or ``cc``
    address is required.

    A message can be sent more than once; every send renders the current
    headers and parts again.

    Example:
        msg = Message("Welcome!", "", ["Test User <test@example.com>"])
        msg.set_body("<html><h1>Hello!</h1></html>")
        msg.attach("report.csv", b"id,total\\n1,10\\n")
        msg.send(session)
    """

    def __init__(
        self,
        subject: str = "",
        sender: str = "",
        to: Union[str, Iterable[str], None] = None,
        cc: Union[str, Iterable[str], None] = None,
        body: Union[bytes, str, None] = None,
        *,
        plain_fallback: bool = False,
        mailer: str = MAILER,
    ):
        """Validates the addresses and builds the message headers.

        Args:
            subject (str): Subject line; non-ASCII text is RFC 2047 encoded.
            sender (str): Sender address, or ``""``/``"me"`` to send as self.
            to (str | list[str] | None): Primary recipients.
            cc (str | list[str] | None): Carbon copy recipients.
            body (bytes | str | None): Optional body, see :meth:`set_body`.
            plain_fallback (bool): Send an HTML body together with a derived
                plain text version in a ``multipart/alternative`` entity.
            mailer (str): Value of the ``X-Mailer`` header.

        Raises:
            AddressFormatError: If an address is present but malformed.
            NoRecipientError: If neither ``to`` nor ``cc`` holds an address.
            UnsupportedBodyTypeError: If ``body`` is not text.
        """
        validate_mailer(mailer)

        if isinstance(to, str):
            to = [to]
        if isinstance(cc, str):
            cc = [cc]

        headers = Header()
        sender_address = parse_sender(sender)
        if sender_address:
            headers.set("From", sender_address)
            headers.set("Reply-To", sender_address)

        to_addresses = address_list(to, "To")
        if to_addresses:
            headers.set("To", to_addresses)
        cc_addresses = address_list(cc, "Cc")
        if cc_addresses:
            headers.set("Cc", cc_addresses)
        if not to_addresses and not cc_addresses:
            raise NoRecipientError()

        if subject:
            headers.set("Subject", encode_subject(subject))

        self.headers = headers
        self.mailer = mailer
        self.plain_fallback = plain_fallback
        self._parts: Dict[Tuple[PartKind, str], Part] = {}

        if body:
            self.set_body(body)

    def attach(self, name: str, data: Union[bytes, str, None]) -> None:
        """Attaches ``data`` as a file called ``name``.

        Only the last path component of ``name`` is kept. The content type
        is guessed from the extension, then from the content. Passing empty
        data removes the attachment with that name, if any.

        Args:
            name (str): File name shown to the recipient.
            data (bytes | str | None): File content; strings are UTF-8 encoded.

        Raises:
            InvalidNameError: If ``name`` resolves to ``.``, ``..`` or a
                bare path separator.

        Example:
            attach("reports/monthly.pdf", pdf_bytes)
            attach("monthly.pdf", b"")  # removes it again
        """
        data = _as_bytes(data)
        name = _base_name(name)
        if not data:
            if self._parts.pop((PartKind.ATTACHMENT, name), None):
                logger.debug("Removed attachment %r", name)
            return

        if name in _BAD_NAMES:
            raise InvalidNameError(name)
        self._store(PartKind.ATTACHMENT, name, data)

    def set_body(self, data: Union[bytes, str, None]) -> None:
        """Sets the text or HTML body of the message.

        Passing empty data removes the body.

        Raises:
            UnsupportedBodyTypeError: If ``data`` is not text. The previous
                body, if any, is kept.
        """
        data = _as_bytes(data)
        if not data:
            self._parts.pop((PartKind.BODY, ""), None)
            return
        self._store(PartKind.BODY, None, data)

    def use_template(self, file: str, **variables) -> None:
        """Renders a Jinja2 HTML template and uses it as the body.

        Raises:
            ValueError: If the file is not an HTML template.
            FileNotFoundError: If the file does not exist.

        Example:
            use_template("templates/welcome.html", name="John")
        """
        validate_template(file)

        with open(file, "r", encoding="utf-8") as f:
            html = Template(f.read()).render(**variables)
        self.set_body(html)

    def add_file(self, path: str) -> None:
        """Reads the file at ``path`` and attaches it under its base name."""
        validate_path(path)

        with open(path, "rb") as f:
            self.attach(path, f.read())

    def has(self, name: str) -> bool:
        """Returns True if an attachment called ``name`` is present."""
        return (PartKind.ATTACHMENT, _base_name(name)) in self._parts

    @property
    def has_body(self) -> bool:
        return (PartKind.BODY, "") in self._parts

    @property
    def attachments(self) -> List[str]:
        return sorted(name for kind, name in self._parts if kind is PartKind.ATTACHMENT)

    def _store(self, kind: PartKind, name: Optional[str], data: bytes) -> None:
        content_type, encoding = classify(name, data)
        if kind is PartKind.BODY and not content_type.startswith("text/"):
            raise UnsupportedBodyTypeError(content_type)

        header = Header({
            "Content-Type": content_type,
            "Content-Transfer-Encoding": encoding,
        })
        if kind is PartKind.ATTACHMENT:
            header.set("Content-Disposition", _disposition(name))

        part = Part(kind, name, header, data)
        self._parts[part.key] = part
        logger.debug("Stored %r", part)

    def _ordered_parts(self) -> List[Part]:
        body = self._parts.get((PartKind.BODY, ""))
        parts = [body] if body else []
        parts.extend(self._parts[(PartKind.ATTACHMENT, name)] for name in self.attachments)
        return parts

    def _wants_alternative(self, part: Part) -> bool:
        return (
            self.plain_fallback
            and part.kind is PartKind.BODY
            and part.content_type.startswith("text/html")
        )

    def _part_entity(self, header: Header, part: Part) -> MIMEEntity:
        if not self._wants_alternative(part):
            header.update(part.header)
            return _entity(header, part.encoded_payload())

        plain = Part(
            PartKind.BODY,
            None,
            Header({"Content-Type": TEXT_PLAIN, "Content-Transfer-Encoding": QUOTED_PRINTABLE}),
            html_to_text(part.data.decode("utf-8", errors="replace")).encode("utf-8"),
        )
        header.set("Content-Type", _multipart("alternative"))
        return _entity(header, [
            _entity(alternative.header, alternative.encoded_payload())
            for alternative in (plain, part)
        ])

    def _build(self) -> MIMEEntity:
        header = Header({"MIME-Version": "1.0", "X-Mailer": self.mailer})
        header.update(self.headers)

        parts = self._ordered_parts()
        if len(parts) == 1 and parts[0].kind is PartKind.BODY:
            return self._part_entity(header, parts[0])

        header.set("Content-Type", _multipart("mixed"))
        return _entity(header, [self._part_entity(Header(), part) for part in parts])

    def write_to(self, out: BinaryIO) -> None:
        """Writes the MIME representation of the message to ``out``.

        A message with only a body is written as a single entity; anything
        else is wrapped in a ``multipart/mixed`` envelope with the body
        first and attachments sorted by name. Header keys are always
        written in sorted order. Lines end with CRLF and header lines
        longer than 78 characters are folded.

        Args:
            out (BinaryIO): Any object with a ``write(bytes)`` method.

        Raises:
            EmptyMessageError: If the message has no body and no attachments.
            UnsupportedEncodingError: If a part declares an unknown encoding.
        """
        if not self._parts:
            raise EmptyMessageError()

        entity = self._build()
        logger.debug("Writing %r", self)
        BytesGenerator(out, mangle_from_=False, policy=SMTP).flatten(entity)

    def as_bytes(self) -> bytes:
        """Returns the full MIME representation of the message."""
        buffer = BytesIO()
        self.write_to(buffer)
        return buffer.getvalue()

    def send(self, session) -> str:
        """Sends the message through ``session``. See :func:`gmailer.sender.send`."""
        return _send(self, session)

    def __repr__(self) -> str:
        return (
            f"<Message to={self.headers.get('To')!r} "
            f"subject={self.headers.get('Subject')!r} "
            f"body={self.has_body} attachments={len(self.attachments)}>"
        )
