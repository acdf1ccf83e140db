# src/codaview/parser/transaction_grouper.py
"""
取引行・補足情報行を「取引単位」にまとめる処理.

- group_transactions: 連番（sequence number）が変わるたびに新しいグループ
- split_collective_transactions: 集合取引（operation "07"）を
  明細番号ごとの個別取引に分割する
"""

from __future__ import annotations

import logging
from typing import Callable, Hashable, Iterable, List, Sequence

from codaview.models.coda_line import (
    TRANSACTION_OR_INFORMATION_LINE_TYPES,
    CodaLine,
    LineType,
    TransactionLineGroup,
)
from codaview.parser.line_classifier import count_lines_of_type

logger = logging.getLogger(__name__)

COLLECTIVE_OPERATION_CODE = "07"


def group_by_key(
    lines: Iterable[CodaLine],
    key: Callable[[CodaLine], Hashable],
) -> List[TransactionLineGroup]:
    """
    key の値が直前の行と変わるたびに新しいグループを始める。

    並べ替えはしない。同じ値でも間に別の値が挟まれば別グループになる。
    """
    runs: List[List[CodaLine]] = []
    current_key: Hashable = None

    for line in lines:
        line_key = key(line)
        if not runs or line_key != current_key:
            current_key = line_key
            runs.append([])
        runs[-1].append(line)

    return [TransactionLineGroup(tuple(run)) for run in runs]


def group_transactions(lines: Sequence[CodaLine]) -> List[TransactionLineGroup]:
    """
    取引行（2.x）と補足情報行（3.x）を連番ごとにまとめる。

    lines は呼び出し側で 2.x / 3.x だけに絞り込んである前提。
    """
    for line in lines:
        if line.line_type not in TRANSACTION_OR_INFORMATION_LINE_TYPES:
            raise ValueError(
                f"line {line.line_no}: {line.line_type.value} cannot be grouped into a transaction"
            )

    return group_by_key(lines, lambda line: line.sequence_number)


def is_collective_transaction(group: TransactionLineGroup) -> bool:
    return any(
        line.operation_code == COLLECTIVE_OPERATION_CODE
        for line in group.lines_of_type(LineType.TRANSACTION_PART1)
    )


def _group_sub_transactions(group: TransactionLineGroup) -> List[TransactionLineGroup]:
    """
    集合取引の中身を明細番号ごとに分ける。

    2つ目の TransactionPart1 より前の行（集合取引のヘッダ部分）は捨てる。
    """
    part1_count = 0
    detail_lines: List[CodaLine] = []

    for line in group:
        if line.line_type is LineType.TRANSACTION_PART1:
            part1_count += 1
        if part1_count < 2:
            continue
        detail_lines.append(line)

    return group_by_key(detail_lines, lambda line: line.detail_sequence_number)


def split_collective_transactions(groups: Iterable[TransactionLineGroup]) -> List[TransactionLineGroup]:
    """
    集合取引グループを個別取引に展開する。グループ同士の順序は保つ。
    """
    result: List[TransactionLineGroup] = []

    for group in groups:
        if not is_collective_transaction(group):
            result.append(group)
            continue

        # 集合取引の印があるのに中身が1件しかない場合はそのまま
        if count_lines_of_type(group.lines, LineType.TRANSACTION_PART1) == 1:
            logger.info(
                "Collective transaction %s (lines %d-%d) holds a single transaction; kept as is",
                group.sequence_number,
                group.start_line,
                group.end_line,
            )
            result.append(group)
            continue

        sub_groups = _group_sub_transactions(group)
        if not sub_groups:
            logger.warning(
                "Collective transaction %s (lines %d-%d) produced no detail transactions; kept as is",
                group.sequence_number,
                group.start_line,
                group.end_line,
            )
            result.append(group)
            continue

        logger.debug(
            "Collective transaction %s (lines %d-%d) split into %d transactions",
            group.sequence_number,
            group.start_line,
            group.end_line,
            len(sub_groups),
        )
        result.extend(sub_groups)

    return result
