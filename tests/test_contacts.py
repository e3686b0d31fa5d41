import logging

import pytest

from meeting_mailer.errors import ContactParseError
from meeting_mailer.services.contacts import iter_contacts, parse_contacts


def test_header_only_is_empty():
    assert parse_contacts(b"name,email\n") == []


def test_single_row():
    rows = parse_contacts(b"name,email\nAlice,alice@example.com\n")
    assert rows == [{"name": "Alice", "email": "alice@example.com"}]


def test_rows_keep_file_order_and_skip_blank_lines():
    data = "name,email\n\nBob,bob@example.com\n\nCara,cara@example.com\n"
    assert [r["name"] for r in parse_contacts(data)] == ["Bob", "Cara"]


def test_bom_and_whitespace_are_stripped():
    rows = parse_contacts("\ufeffname , email\n Dan , dan@example.com \n".encode("utf-8"))
    assert rows == [{"name": "Dan", "email": "dan@example.com"}]


def test_quoted_cells():
    rows = parse_contacts(b'name,email,role\n"Lee, Ann",ann@example.com,"PM"\n')
    assert rows[0]["name"] == "Lee, Ann"
    assert rows[0]["role"] == "PM"


def test_short_row_is_padded(caplog):
    with caplog.at_level(logging.WARNING):
        rows = parse_contacts(b"name,email,team\nAlice,alice@example.com\nBob,bob@example.com,ops\n")
    assert rows[0] == {"name": "Alice", "email": "alice@example.com", "team": ""}
    assert rows[1]["team"] == "ops"
    assert "padding" in caplog.text


def test_long_row_is_truncated():
    rows = parse_contacts(b"name,email\nAlice,alice@example.com,extra,more\n")
    assert rows == [{"name": "Alice", "email": "alice@example.com"}]


def test_empty_input_has_no_header():
    with pytest.raises(ContactParseError):
        parse_contacts(b"")
    with pytest.raises(ContactParseError):
        parse_contacts(b"\n  \n")


def test_iter_contacts_is_lazy_and_restartable():
    data = b"name,email\nAlice,alice@example.com\nBob,bob@example.com\n"
    gen = iter_contacts(data)
    assert next(gen)["name"] == "Alice"
    # a fresh call starts over
    assert [r["name"] for r in iter_contacts(data)] == ["Alice", "Bob"]


def test_row_over_field_limit_is_skipped(caplog):
    huge = "x" * 200_000
    data = f"name,email\nAlice,alice@example.com\nBob,{huge}\nCara,cara@example.com\n"
    with caplog.at_level(logging.WARNING):
        rows = parse_contacts(data)
    assert rows == [
        {"name": "Alice", "email": "alice@example.com"},
        {"name": "Cara", "email": "cara@example.com"},
    ]
    assert "skipped" in caplog.text
