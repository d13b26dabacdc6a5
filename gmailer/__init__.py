"""gmailer package initialization module.

This package builds MIME email messages (headers, a text or HTML body and
file attachments) and sends them through an authorized Gmail API session.
Messages are rendered deterministically: header keys are sorted and
attachments are written in name order.

Modules:
    core (module): The ``Message`` class, its parts and the MIME renderer.
    addresses (module): Sender and recipient address parsing.
    content (module): Content type and transfer encoding inference.
    sender (module): Sessions and the ``send`` adapter.
    errors (module): Exceptions raised by the package.

Example:
    from gmailer import GmailSession, Message

    session = GmailSession(service)
    msg = Message("Hello!", "", ["Test User <test@example.com>"])
    msg.set_body("<html><p>This is a test email.</p></html>")
    msg.add_file("report.pdf")
    msg.send(session)
"""

from .core import MAILER, Message, Part, PartKind
from .errors import (
    AddressFormatError,
    EmptyMessageError,
    GmailerError,
    InvalidNameError,
    NoRecipientError,
    NotInitializedError,
    UnsupportedBodyTypeError,
    UnsupportedEncodingError,
)
from .sender import GmailSession, Session, send

__all__ = [
    "MAILER",
    "Message",
    "Part",
    "PartKind",
    "Session",
    "GmailSession",
    "send",
    "GmailerError",
    "AddressFormatError",
    "NoRecipientError",
    "InvalidNameError",
    "UnsupportedBodyTypeError",
    "EmptyMessageError",
    "UnsupportedEncodingError",
    "NotInitializedError",
]
