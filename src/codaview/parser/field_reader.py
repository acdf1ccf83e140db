# src/codaview/parser/field_reader.py
"""
固定長レコードから個々のフィールドを取り出すヘルパ群.

位置はすべて 0 始まりのオフセットと長さで指定する
（CODA 規格書にある 1 始まりの桁位置から 1 を引いた値）。
値が壊れている場合は CodaValueError を送出し、行番号とフィールド名を添える。
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from codaview.errors import CodaValueError

if TYPE_CHECKING:
    from codaview.models.coda_line import RawLine

AMOUNT_LENGTH = 15
AMOUNT_DECIMALS = 3

SIGN_CREDIT = "0"
SIGN_DEBIT = "1"


def read_raw(line: RawLine, start: int, length: int, field_name: str) -> str:
    """空白を落とさずにそのまま切り出す（連結するテキスト用）。"""
    end = start + length
    if len(line.raw) < end:
        raise CodaValueError(
            field_name,
            line.raw[start:],
            line_no=line.line_no,
            reason=f"line too short for columns {start + 1}-{end}",
        )
    return line.raw[start:end]


def read_text(line: RawLine, start: int, length: int, field_name: str) -> str:
    return read_raw(line, start, length, field_name).strip()


def read_int(line: RawLine, start: int, length: int, field_name: str) -> int:
    """ゼロ埋めされた数字フィールドを int にする。"""
    value = read_raw(line, start, length, field_name)
    digits = value.strip()
    if not digits or not (digits.isascii() and digits.isdigit()):
        raise CodaValueError(field_name, value, line_no=line.line_no, reason="expected digits")
    return int(digits)


def read_amount(
    line: RawLine,
    start: int,
    field_name: str,
    sign_offset: Optional[int] = None,
) -> Decimal:
    """
    15桁（小数3桁）の金額を Decimal で返す。

    - sign_offset: 符号桁の位置（"0" 入金 / "1" 出金）。None なら符号なし
    """
    value = read_raw(line, start, AMOUNT_LENGTH, field_name)
    if not (value.isascii() and value.isdigit()):
        raise CodaValueError(field_name, value, line_no=line.line_no, reason="expected 15 digits")

    amount = Decimal(value).scaleb(-AMOUNT_DECIMALS)

    if sign_offset is None:
        return amount

    sign = read_raw(line, sign_offset, 1, f"{field_name}_sign")
    if sign == SIGN_CREDIT:
        return amount
    if sign == SIGN_DEBIT:
        return -amount
    raise CodaValueError(f"{field_name}_sign", sign, line_no=line.line_no, reason="expected 0 or 1")


def read_date(line: RawLine, start: int, field_name: str) -> Optional[date]:
    """
    DDMMYY 形式の日付を date にする。

    "000000" は日付なしとして None を返す。年は 20YY とみなす。
    """
    value = read_raw(line, start, 6, field_name)
    if not (value.isascii() and value.isdigit()):
        raise CodaValueError(field_name, value, line_no=line.line_no, reason="expected DDMMYY")
    if value == "000000":
        return None

    day = int(value[0:2])
    month = int(value[2:4])
    year = 2000 + int(value[4:6])
    try:
        return date(year, month, day)
    except ValueError as e:
        raise CodaValueError(field_name, value, line_no=line.line_no, reason=str(e)) from e
