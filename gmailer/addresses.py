"""Recipient and sender address parsing.

Parsing is tri-state: a blank value is *absent* and yields ``None``, a
well-formed value yields its canonical ``Name <local@domain>`` form, and a
malformed value raises :class:`~gmailer.errors.AddressFormatError`.

Values are parsed with the address-list grammar of the ``email`` package.
Any defect it reports rejects the value instead of being repaired: trailing
junk, an unclosed ``<`` or two mailboxes without a separating comma.
"""

from email.errors import HeaderParseError, ObsoleteHeaderDefect
from email.headerregistry import HeaderRegistry
from email.utils import formataddr
from typing import Iterable, List, Optional

from .errors import AddressFormatError

_registry = HeaderRegistry()

# sender values meaning "send as the authorized user"
SELF_SENDERS = ("", "me")


def _parse(raw: str, field: str) -> List[str]:
    try:
        header = _registry("To", raw)
    except (HeaderParseError, ValueError) as e:
        raise AddressFormatError(field, raw) from e

    # obsolete syntax still yields a well-formed mailbox
    defects = [d for d in header.defects if not isinstance(d, ObsoleteHeaderDefect)]
    if defects or not header.addresses:
        raise AddressFormatError(field, raw)

    parsed = []
    for address in header.addresses:
        if not address.username or not address.domain:
            raise AddressFormatError(field, raw)
        try:
            parsed.append(formataddr((address.display_name, address.addr_spec), charset="utf-8"))
        except UnicodeEncodeError as e:
            # only ASCII addr-specs can be written to the header
            raise AddressFormatError(field, raw) from e
    return parsed


def parse_address(raw: Optional[str], field: str = "From") -> Optional[str]:
    """Parses a single address.

    Args:
        raw (str | None): ``addr``, ``<addr>`` or ``Name <addr>``.
        field (str): Header the address is meant for, used in error messages.

    Returns:
        str | None: The canonical address, or ``None`` if ``raw`` is blank.

    Raises:
        AddressFormatError: If ``raw`` is present but malformed or holds
            more than one address.

    Example:
        parse_address("Test User <test@example.com>")
    """
    if raw is None or not raw.strip():
        return None

    parsed = _parse(raw.strip(), field)
    if len(parsed) != 1:
        raise AddressFormatError(field, raw)
    return parsed[0]


def address_list(raws: Optional[Iterable[str]], field: str = "To") -> Optional[str]:
    """Parses a list of addresses into a single header value.

    Entries keep their input order. Blank entries are skipped; a single
    malformed entry rejects the whole list.

    Args:
        raws (Iterable[str] | None): Raw address strings.
        field (str): Header the list is meant for, used in error messages.

    Returns:
        str | None: Addresses joined by ``", "``, or ``None`` when no address
        was supplied.

    Raises:
        AddressFormatError: If any entry is malformed.
    """
    if not raws:
        return None

    addresses = []
    for raw in raws:
        if raw is None or not raw.strip():
            continue
        addresses.extend(_parse(raw.strip(), field))

    return ", ".join(addresses) if addresses else None


def parse_sender(raw: Optional[str]) -> Optional[str]:
    """Returns the ``From`` value for ``raw``, or ``None`` to send as self."""
    if raw is None or raw.strip() in SELF_SENDERS:
        return None
    return parse_address(raw, "From")
