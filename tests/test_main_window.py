"""Tests for the viewer's display helpers."""

from decimal import Decimal

import pytest

pytest.importorskip("PySide6.QtWidgets")

import coda_builder as cb  # noqa: E402
from codaview.gui.main_window import (  # noqa: E402
    format_amount,
    format_line_item,
    statement_rows,
    transaction_row,
)
from codaview.parser.coda_parser import parse_coda_lines  # noqa: E402


def test_format_amount():
    assert format_amount(Decimal("-1234.5")) == "-1,234.50"


def test_format_line_item():
    (line,) = cb.coda_lines(cb.message("Hello from the bank"))

    item = format_line_item(line)

    assert item.startswith("00001 [Message] 4")
    assert item.endswith("…")


def test_transaction_row_and_statement_rows():
    statement = parse_coda_lines("\n".join(cb.sample_statement()))

    row = transaction_row(statement.transactions[1])
    assert row[:4] == ["0002", "0000", "2026-01-16", "100.00"]
    assert row[6] == "123456789002"

    rows = dict(statement_rows(statement))
    assert rows["Account"] == "BE68539007547034 EUR"
    assert rows["New balance"] == "1,149.50"
    assert rows["Message"] == "Hello from the bank"
