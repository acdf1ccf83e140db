# src/codaview/models/coda_line.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterator, Optional, Tuple

from codaview.errors import CodaLineTypeError
from codaview.parser.field_reader import read_int, read_raw

CODA_LINE_LENGTH = 128


class LineType(Enum):
    """CODA レコード種別（閉じた集合）。"""

    IDENTIFICATION = "Identification"        # 0
    INITIAL_STATE = "InitialState"           # 1
    TRANSACTION_PART1 = "TransactionPart1"   # 21
    TRANSACTION_PART2 = "TransactionPart2"   # 22
    TRANSACTION_PART3 = "TransactionPart3"   # 23
    INFORMATION_PART1 = "InformationPart1"   # 31
    INFORMATION_PART2 = "InformationPart2"   # 32
    INFORMATION_PART3 = "InformationPart3"   # 33
    MESSAGE = "Message"                      # 4
    NEW_STATE = "NewState"                   # 8
    SUMMARY = "Summary"                      # 9
    UNRECOGNIZED = "Unrecognized"


TRANSACTION_LINE_TYPES: FrozenSet[LineType] = frozenset({
    LineType.TRANSACTION_PART1,
    LineType.TRANSACTION_PART2,
    LineType.TRANSACTION_PART3,
})

INFORMATION_LINE_TYPES: FrozenSet[LineType] = frozenset({
    LineType.INFORMATION_PART1,
    LineType.INFORMATION_PART2,
    LineType.INFORMATION_PART3,
})

TRANSACTION_OR_INFORMATION_LINE_TYPES: FrozenSet[LineType] = (
    TRANSACTION_LINE_TYPES | INFORMATION_LINE_TYPES
)

_PART1_ONLY: FrozenSet[LineType] = frozenset({LineType.TRANSACTION_PART1})


@dataclass(frozen=True)
class RawLine:
    """
    ファイル上の1行。

    - line_no: 元ファイル上の行番号（1始まり）
    - raw: 改行を除いた生テキスト（末尾の空白はそのまま）
    """
    line_no: int
    raw: str


@dataclass(frozen=True)
class CodaLine:
    """
    種別を判定済みの1行。

    フィールドは必要になった時点で raw から読む。
    その種別が持たないフィールドを読もうとすると CodaLineTypeError。
    """
    line_type: LineType
    raw_line: RawLine

    @property
    def line_no(self) -> int:
        return self.raw_line.line_no

    @property
    def raw(self) -> str:
        return self.raw_line.raw

    @property
    def sequence_number(self) -> int:
        """取引の連番（3〜6桁目）。"""
        self._require(TRANSACTION_OR_INFORMATION_LINE_TYPES, "sequence_number")
        return read_int(self.raw_line, 2, 4, "sequence_number")

    @property
    def detail_sequence_number(self) -> int:
        """明細番号（7〜10桁目）。集合取引の中の個々の取引を区別する。"""
        self._require(TRANSACTION_OR_INFORMATION_LINE_TYPES, "detail_sequence_number")
        return read_int(self.raw_line, 6, 4, "detail_sequence_number")

    @property
    def operation_code(self) -> str:
        """取引コードのうち operation の2桁（57〜58桁目）。"""
        self._require(_PART1_ONLY, "operation_code")
        return read_raw(self.raw_line, 56, 2, "operation_code")

    def _require(self, allowed: FrozenSet[LineType], field_name: str) -> None:
        if self.line_type not in allowed:
            raise CodaLineTypeError(
                f"line {self.line_no}: {self.line_type.value} has no field {field_name!r}",
                details={"line_no": self.line_no, "line_type": self.line_type.value},
            )


@dataclass(frozen=True)
class TransactionLineGroup:
    """
    1取引分の行のまとまり（空にはならない）。
    """
    lines: Tuple[CodaLine, ...]

    def __post_init__(self) -> None:
        lines = tuple(self.lines)
        if not lines:
            raise ValueError("TransactionLineGroup must contain at least one line")
        object.__setattr__(self, "lines", lines)

    def __iter__(self) -> Iterator[CodaLine]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def sequence_number(self) -> int:
        return self.lines[0].sequence_number

    @property
    def start_line(self) -> int:
        return self.lines[0].line_no

    @property
    def end_line(self) -> int:
        return self.lines[-1].line_no

    def lines_of_type(self, line_type: LineType) -> Tuple[CodaLine, ...]:
        return tuple(line for line in self.lines if line.line_type is line_type)

    def first_line_of_type(self, line_type: LineType) -> Optional[CodaLine]:
        return next((line for line in self.lines if line.line_type is line_type), None)
