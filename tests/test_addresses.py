import pytest

from gmailer.addresses import address_list, parse_address, parse_sender
from gmailer.errors import AddressFormatError


def test_address_list_keeps_order_and_count():
    result = address_list([
        "I am<sedykh@gmail.com>",
        "I am too <dmitrys@xyzrd.com>",
        "d3@yandex.ru",
    ])
    assert result == "I am <sedykh@gmail.com>, I am too <dmitrys@xyzrd.com>, d3@yandex.ru"


def test_address_list_without_addresses():
    assert address_list(None) is None
    assert address_list([]) is None
    assert address_list(["", "   "]) is None


def test_address_list_skips_blank_entries():
    assert address_list(["a@b.com", "", "c@d.com"]) == "a@b.com, c@d.com"


def test_address_list_rejects_whole_batch():
    with pytest.raises(AddressFormatError) as exc_info:
        address_list(["good@example.com", "bad"], "Cc")

    assert exc_info.value.field == "Cc"
    assert exc_info.value.value == "bad"


def test_address_list_entry_may_hold_several_addresses():
    assert address_list(["a@b.com, c@d.com"]) == "a@b.com, c@d.com"


def test_parse_address_forms():
    assert parse_address("test@example.com") == "test@example.com"
    assert parse_address("<test@example.com>") == "test@example.com"
    assert parse_address("TestUser <test@example.com>") == "TestUser <test@example.com>"
    assert parse_address('"Doe, John" <john@example.com>') == '"Doe, John" <john@example.com>'


def test_parse_address_encodes_non_ascii_names():
    result = parse_address("Дмитрий Седых <d3@yandex.ru>")
    assert result.startswith("=?utf-8?")
    assert result.endswith(" <d3@yandex.ru>")


def test_parse_address_absent_and_invalid():
    assert parse_address(None) is None
    assert parse_address("  ") is None

    for raw in ("bad", "bad@", "@example.com", "Name <>", "a@b.com, c@d.com", "пример@пример.рф"):
        with pytest.raises(AddressFormatError):
            parse_address(raw)


def test_parse_sender():
    assert parse_sender(None) is None
    assert parse_sender("") is None
    assert parse_sender("me") is None
    assert parse_sender("sender@example.com") == "sender@example.com"
    with pytest.raises(AddressFormatError) as exc_info:
        parse_sender("bad")
    assert exc_info.value.field == "From"


@pytest.mark.parametrize(
    "raw",
    [
        "a@b.com junk",
        "Name <a@b.com",
        "<a@b.com> <c@d.com>",
        "a@b.com <c@d.com>",
        "Name a@b.com>",
        "Name <a@b.com> trailing",
        "a@@b.com",
        "<>",
        "a@b.com;",
    ],
)
def test_malformed_entries_are_rejected_not_repaired(raw):
    with pytest.raises(AddressFormatError) as exc_info:
        address_list([raw])
    assert exc_info.value.value == raw

    with pytest.raises(AddressFormatError):
        parse_address(raw)
