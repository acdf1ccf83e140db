"""Tests for transaction grouping and collective transaction splitting."""

import logging

import pytest

import coda_builder as cb
from codaview.models.coda_line import TransactionLineGroup
from codaview.parser import transaction_grouper
from codaview.parser.transaction_grouper import (
    group_by_key,
    group_transactions,
    is_collective_transaction,
    split_collective_transactions,
)


def _line_numbers(groups):
    return [[line.line_no for line in group] for group in groups]


class TestGroupTransactions:
    """Grouping by contiguous runs of the sequence number."""

    def test_empty_input(self):
        assert group_transactions([]) == []

    def test_single_line(self):
        lines = cb.coda_lines(cb.transaction_part1(1))
        groups = group_transactions(lines)

        assert len(groups) == 1
        assert groups[0].lines == tuple(lines)

    def test_one_sequence_number_gives_one_group(self):
        lines = cb.coda_lines(
            cb.transaction_part1(4),
            cb.transaction_part2(4),
            cb.transaction_part3(4),
            cb.information_part1(4),
        )

        assert _line_numbers(group_transactions(lines)) == [[1, 2, 3, 4]]

    def test_runs_are_contiguous_not_merged_by_value(self):
        lines = cb.coda_lines(
            cb.transaction_part1(1),
            cb.transaction_part1(2),
            cb.transaction_part2(1),
        )

        assert _line_numbers(group_transactions(lines)) == [[1], [2], [3]]

    def test_sequence_numbers_1_1_2_2_2_3(self):
        lines = cb.coda_lines(
            cb.transaction_part1(1),
            cb.transaction_part2(1),
            cb.transaction_part1(2),
            cb.transaction_part2(2),
            cb.information_part1(2),
            cb.transaction_part1(3),
        )

        groups = split_collective_transactions(group_transactions(lines))

        assert [len(group) for group in groups] == [2, 3, 1]
        assert _line_numbers(groups) == [[1, 2], [3, 4, 5], [6]]

    def test_rejects_structural_lines(self):
        lines = cb.coda_lines(cb.transaction_part1(1), cb.message("not a transaction line"))

        with pytest.raises(ValueError, match="line 2"):
            group_transactions(lines)


def test_group_by_key_uses_given_key():
    lines = cb.coda_lines(
        cb.transaction_part1(1, detail=1),
        cb.transaction_part2(2, detail=1),
        cb.transaction_part1(3, detail=2),
    )

    groups = group_by_key(lines, lambda line: line.detail_sequence_number)

    assert all(isinstance(group, TransactionLineGroup) for group in groups)
    assert _line_numbers(groups) == [[1, 2], [3]]


class TestSplitCollectiveTransactions:
    """Splitting of collective transactions (operation code 07)."""

    def test_non_collective_group_is_passed_through(self):
        groups = group_transactions(cb.coda_lines(
            cb.transaction_part1(1, code="00150000"),
            cb.transaction_part1(1, detail=1, code="00150000"),
            cb.transaction_part2(1, detail=1),
        ))

        result = split_collective_transactions(groups)

        assert result == groups
        assert result[0] is groups[0]

    def test_collective_with_single_transaction_is_kept(self, caplog):
        groups = group_transactions(cb.coda_lines(
            cb.transaction_part1(2, code="10507000"),
            cb.transaction_part2(2),
            cb.transaction_part3(2),
        ))

        with caplog.at_level(logging.INFO, logger="codaview.parser.transaction_grouper"):
            result = split_collective_transactions(groups)

        assert result == groups
        assert "single transaction" in caplog.text

    def test_collective_is_split_by_detail_sequence_number(self):
        lines = cb.coda_lines(
            cb.transaction_part1(7, detail=0, code="10507000"),
            cb.transaction_part2(7, detail=0),
            cb.transaction_part1(7, detail=1, code="50507000"),
            cb.transaction_part2(7, detail=1),
            cb.transaction_part1(7, detail=2, code="50507000"),
            cb.transaction_part2(7, detail=2),
            cb.transaction_part3(7, detail=2),
        )

        result = split_collective_transactions(group_transactions(lines))

        assert [len(group) for group in result] == [2, 3]
        assert _line_numbers(result) == [[3, 4], [5, 6, 7]]

    def test_header_lines_never_appear_in_sub_groups(self):
        lines = cb.coda_lines(
            cb.transaction_part1(5, detail=0, code="10507000"),
            cb.transaction_part1(5, detail=10, code="50507000"),
            cb.transaction_part2(5, detail=10),
            cb.transaction_part2(5, detail=11),
        )

        result = split_collective_transactions(group_transactions(lines))

        assert _line_numbers(result) == [[2, 3], [4]]
        assert all(line.line_no != 1 for group in result for line in group)

    def test_collective_flag_on_any_transaction_part1(self):
        group = TransactionLineGroup(tuple(cb.coda_lines(
            cb.transaction_part1(1, code="10150000"),
            cb.transaction_part1(1, detail=1, code="50107000"),
        )))

        assert is_collective_transaction(group)

    def test_group_order_is_preserved(self):
        lines = cb.coda_lines(
            cb.transaction_part1(1),
            cb.transaction_part1(2, code="10507000"),
            cb.transaction_part1(2, detail=1, code="50507000"),
            cb.transaction_part1(2, detail=2, code="50507000"),
            cb.transaction_part1(3),
        )

        result = split_collective_transactions(group_transactions(lines))

        assert _line_numbers(result) == [[1], [3], [4], [5]]

    def test_empty_split_keeps_group_and_warns(self, monkeypatch, caplog):
        groups = group_transactions(cb.coda_lines(
            cb.transaction_part1(8, code="10507000"),
            cb.transaction_part1(8, detail=1, code="50507000"),
        ))
        monkeypatch.setattr(transaction_grouper, "_group_sub_transactions", lambda group: [])

        with caplog.at_level(logging.WARNING, logger="codaview.parser.transaction_grouper"):
            result = split_collective_transactions(groups)

        assert result == groups
        assert "produced no detail transactions" in caplog.text
