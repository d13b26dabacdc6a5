"""Exceptions raised while composing and sending messages.

Composition errors derive from ``ValueError`` because they always point at
bad caller input. Errors raised while rendering or sending derive from
``RuntimeError``. Transport and file errors are never wrapped.
"""


class GmailerError(Exception):
    """Base class for every error raised by gmailer."""


class AddressFormatError(GmailerError, ValueError):
    """An address was supplied but could not be parsed."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"{field}: invalid address {value!r}")


class NoRecipientError(GmailerError, ValueError):
    """Neither To nor Cc resolved to at least one address."""

    def __init__(self):
        super().__init__("No recipient specified.")


class InvalidNameError(GmailerError, ValueError):
    """An attachment name does not resolve to a usable file name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Bad file name: {name!r}")


class UnsupportedBodyTypeError(GmailerError, ValueError):
    """Non-text data was offered as the message body."""

    def __init__(self, content_type: str):
        self.content_type = content_type
        super().__init__(f"Unsupported body content type: {content_type}")


class EmptyMessageError(GmailerError, RuntimeError):
    """The message has neither a body nor attachments."""

    def __init__(self):
        super().__init__("Contents are undefined.")


class UnsupportedEncodingError(GmailerError, RuntimeError):
    """A part declares a transfer encoding the serializer cannot produce."""

    def __init__(self, encoding: str):
        self.encoding = encoding
        super().__init__(f"Unsupported transfer encoding: {encoding}")


class NotInitializedError(GmailerError, RuntimeError):
    """Send was attempted without an active session."""

    def __init__(self):
        super().__init__("Mail session not initialized.")
