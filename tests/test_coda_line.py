"""Tests for line field accessors and transaction line groups."""

import pytest

import coda_builder as cb
from codaview.errors import CodaLineTypeError, CodaValueError
from codaview.models.coda_line import LineType, TransactionLineGroup


def test_sequence_numbers_and_operation_code():
    (line,) = cb.coda_lines(cb.transaction_part1(42, detail=3, code="10507000"))

    assert line.sequence_number == 42
    assert line.detail_sequence_number == 3
    assert line.operation_code == "07"


def test_information_line_has_sequence_numbers():
    (line,) = cb.coda_lines(cb.information_part3(9, detail=2))

    assert line.sequence_number == 9
    assert line.detail_sequence_number == 2


def test_operation_code_only_on_transaction_part1():
    (line,) = cb.coda_lines(cb.transaction_part2(1))

    with pytest.raises(CodaLineTypeError):
        line.operation_code


def test_sequence_number_not_on_structural_lines():
    (line,) = cb.coda_lines(cb.summary())

    with pytest.raises(CodaLineTypeError):
        line.sequence_number


def test_malformed_sequence_number_reports_line():
    raw = cb.record((0, "21"), (2, "00X1"))
    (line,) = cb.coda_lines(raw)

    with pytest.raises(CodaValueError) as excinfo:
        line.sequence_number

    assert excinfo.value.line_no == 1
    assert excinfo.value.field_name == "sequence_number"


def test_group_properties():
    lines = cb.coda_lines(
        cb.transaction_part1(5),
        cb.transaction_part2(5),
        cb.information_part1(5),
    )
    group = TransactionLineGroup(lines)

    assert len(group) == 3
    assert list(group) == lines
    assert isinstance(group.lines, tuple)
    assert group.sequence_number == 5
    assert group.start_line == 1
    assert group.end_line == 3
    assert group.lines_of_type(LineType.TRANSACTION_PART2) == (lines[1],)
    assert group.first_line_of_type(LineType.TRANSACTION_PART3) is None


def test_empty_group_is_rejected():
    with pytest.raises(ValueError):
        TransactionLineGroup(())
