"""Delivery of rendered messages through an authorized mail session.

The session is created once by the application (after whatever OAuth flow
it uses) and passed to :func:`send` explicitly. Sessions are shared by all
messages and are read-only from gmailer's point of view; guarding them
across threads is the caller's responsibility.
"""

from base64 import urlsafe_b64encode
from io import BytesIO
from typing import Any, Optional

from .errors import NotInitializedError
from .logger import get_logger

logger = get_logger("Gmailer.sender")


class Session:
    """Interface of an authorized mail session.

    Subclasses report whether credentials are available and submit raw
    messages on behalf of ``identity``.
    """

    identity: str = "me"

    def is_ready(self) -> bool:
        """Returns True when the session can deliver messages."""
        raise NotImplementedError

    def deliver(self, identity: str, raw: str) -> str:
        """Submits a message and returns the id assigned by the remote side.

        Args:
            identity: Account the message is sent as.
            raw: The MIME message, URL-safe base64 encoded without padding.

        Raises:
            NotImplementedError: If called on the base class directly.
        """
        raise NotImplementedError


class GmailSession(Session):
    """Session backed by an authorized Gmail API service object.

    ``service`` is the resource returned by
    ``googleapiclient.discovery.build("gmail", "v1", credentials=...)``.
    Building it (and refreshing its credentials) happens outside gmailer.

    Example:
        session = GmailSession(service)
        message.send(session)
    """

    def __init__(self, service: Any, user_id: str = "me"):
        if not isinstance(user_id, str) or not user_id.strip():
            raise ValueError("User id must be a non-empty string.")
        self.service = service
        self.identity = user_id

    def is_ready(self) -> bool:
        return self.service is not None and hasattr(self.service, "users")

    def deliver(self, identity: str, raw: str) -> str:
        response = (
            self.service.users()
            .messages()
            .send(userId=identity, body={"raw": raw})
            .execute()
        )
        return response.get("id", "")


def encode_raw(data: bytes) -> str:
    """Encodes ``data`` as URL-safe base64 without padding."""
    return urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def send(message, session: Optional[Session]) -> str:
    """Renders ``message`` and submits it through ``session``.

    Rendering and transport errors are raised unchanged; nothing is retried.

    Args:
        message (Message): The message to send. It is left untouched and
            may be sent again.
        session (Session | None): Authorized session.

    Returns:
        str: Id of the delivered message reported by the remote side.

    Raises:
        NotInitializedError: If there is no ready session.
        EmptyMessageError: If the message has no body and no attachments.
    """
    if session is None or not session.is_ready():
        raise NotInitializedError()

    buffer = BytesIO()
    message.write_to(buffer)
    raw = encode_raw(buffer.getvalue())

    message_id = session.deliver(session.identity, raw)
    logger.info("Delivered message %s as %s (%d bytes)", message_id, session.identity, len(raw))
    return message_id
