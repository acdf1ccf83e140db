# src/codaview/parser/line_classifier.py

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from codaview.models.coda_line import CODA_LINE_LENGTH, CodaLine, LineType, RawLine

# 1桁目だけで決まる種別
_SINGLE_DISCRIMINANTS: Dict[str, LineType] = {
    "0": LineType.IDENTIFICATION,
    "1": LineType.INITIAL_STATE,
    "4": LineType.MESSAGE,
    "8": LineType.NEW_STATE,
    "9": LineType.SUMMARY,
}

# 1〜2桁目（レコード種別 + article 番号）で決まる種別
_PAIR_DISCRIMINANTS: Dict[str, LineType] = {
    "21": LineType.TRANSACTION_PART1,
    "22": LineType.TRANSACTION_PART2,
    "23": LineType.TRANSACTION_PART3,
    "31": LineType.INFORMATION_PART1,
    "32": LineType.INFORMATION_PART2,
    "33": LineType.INFORMATION_PART3,
}


def detect_line_type(raw: str) -> LineType:
    """
    生テキスト1行からレコード種別を判定する。

    - 長さが 128 でなければ UNRECOGNIZED
    - 先頭1桁、レコード 2 / 3 は先頭2桁で表を引く
    - どれにも当たらなければ UNRECOGNIZED（例外は出さない）
    """
    if len(raw) != CODA_LINE_LENGTH:
        return LineType.UNRECOGNIZED

    line_type = _SINGLE_DISCRIMINANTS.get(raw[0])
    if line_type is not None:
        return line_type

    return _PAIR_DISCRIMINANTS.get(raw[:2], LineType.UNRECOGNIZED)


def classify_line(raw_line: RawLine) -> CodaLine:
    return CodaLine(line_type=detect_line_type(raw_line.raw), raw_line=raw_line)


def classify_lines(raw_lines: Iterable[RawLine]) -> List[CodaLine]:
    return [classify_line(raw_line) for raw_line in raw_lines]


# ─────────────────────────────────────────────────────────
# 行リスト用ヘルパ
# ─────────────────────────────────────────────────────────

def filter_lines_of_types(lines: Iterable[CodaLine], line_types: Iterable[LineType]) -> List[CodaLine]:
    """指定した種別の行だけを、元の順序のまま返す。"""
    wanted = frozenset(line_types)
    return [line for line in lines if line.line_type in wanted]


def first_line_of_type(lines: Iterable[CodaLine], line_type: LineType) -> Optional[CodaLine]:
    return next((line for line in lines if line.line_type is line_type), None)


def count_lines_of_type(lines: Sequence[CodaLine], line_type: LineType) -> int:
    return sum(1 for line in lines if line.line_type is line_type)
