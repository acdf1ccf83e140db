# src/codaview/parser/transaction_parser.py

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from codaview.models.coda_line import INFORMATION_LINE_TYPES, CodaLine, LineType, TransactionLineGroup
from codaview.models.statement import CounterpartyAccount, Transaction, TransactionCode
from codaview.parser.field_reader import read_amount, read_date, read_int, read_raw, read_text

# 構造化通信の種別（101 / 102 はベルギーの12桁 OGM 参照番号）
STRUCTURED_OGM_TYPES = ("101", "102")


def normalize_space(text: str) -> str:
    """複数行にまたがるテキストを連結したあと、空白をまとめる。"""
    return " ".join(text.split())


def _parse_transaction_code(part1: CodaLine) -> TransactionCode:
    return TransactionCode(
        type=read_raw(part1.raw_line, 53, 1, "transaction_code_type"),
        family=read_raw(part1.raw_line, 54, 2, "transaction_code_family"),
        operation=read_raw(part1.raw_line, 56, 2, "transaction_code_operation"),
        category=read_raw(part1.raw_line, 58, 3, "transaction_code_category"),
    )


def _parse_counterparty(part2: Optional[CodaLine], part3: Optional[CodaLine]) -> CounterpartyAccount:
    """
    相手方口座。

    2.3 の 11〜47 桁目は「口座番号 + 通貨」。
    旧ベルギー口座番号（12桁 + 空白 + 通貨）と IBAN 形式（34桁 + 通貨）がある。
    """
    bic = read_text(part2.raw_line, 98, 11, "counterparty_bic") if part2 else ""
    if part3 is None:
        return CounterpartyAccount(name="", bic=bic, number="", currency="")

    account = read_raw(part3.raw_line, 10, 37, "counterparty_account")
    name = read_text(part3.raw_line, 47, 35, "counterparty_name")

    if account[:12].isdigit() and account[12] == " ":
        number = account[:12]
        currency = account[13:16].strip()
    else:
        number = account[:34].strip()
        currency = account[34:37].strip()

    return CounterpartyAccount(name=name, bic=bic, number=number, currency=currency)


def _parse_communication(
    part1: Optional[CodaLine],
    part2: Optional[CodaLine],
    part3: Optional[CodaLine],
) -> tuple[str, str]:
    """
    2.1 / 2.2 / 2.3 の通信欄を連結し、(message, structured_message) を返す。
    """
    continuation = ""
    if part2 is not None:
        continuation += read_raw(part2.raw_line, 10, 53, "communication_part2")
    if part3 is not None:
        continuation += read_raw(part3.raw_line, 82, 43, "communication_part3")

    if part1 is None:
        return normalize_space(continuation), ""

    is_structured = read_raw(part1.raw_line, 61, 1, "communication_type") == "1"
    communication = read_raw(part1.raw_line, 62, 53, "communication")

    if is_structured and communication[:3] in STRUCTURED_OGM_TYPES:
        return normalize_space(continuation), communication[3:15]

    return normalize_space(communication + continuation), ""


def _parse_extra_information(lines: List[CodaLine]) -> str:
    pieces: List[str] = []
    for line in lines:
        if line.line_type is LineType.INFORMATION_PART1:
            pieces.append(read_raw(line.raw_line, 40, 73, "information_part1"))
        elif line.line_type is LineType.INFORMATION_PART2:
            pieces.append(read_raw(line.raw_line, 10, 105, "information_part2"))
        elif line.line_type is LineType.INFORMATION_PART3:
            pieces.append(read_raw(line.raw_line, 10, 90, "information_part3"))
    return normalize_space("".join(pieces))


def parse_transaction(group: TransactionLineGroup) -> Transaction:
    """
    取引1件分の行グループから Transaction を組み立てる。

    TransactionPart1 を持たないグループ（補足情報だけ）は金額 0 として扱う。
    """
    part1 = group.first_line_of_type(LineType.TRANSACTION_PART1)
    part2 = group.first_line_of_type(LineType.TRANSACTION_PART2)
    part3 = group.first_line_of_type(LineType.TRANSACTION_PART3)
    information = [line for line in group if line.line_type in INFORMATION_LINE_TYPES]

    head = part1 or group.lines[0]
    message, structured_message = _parse_communication(part1, part2, part3)

    if part1 is not None:
        amount = read_amount(part1.raw_line, 32, "amount", sign_offset=31)
        value_date = read_date(part1.raw_line, 47, "value_date")
        transaction_date = read_date(part1.raw_line, 115, "entry_date")
        statement_sequence_number: Optional[int] = read_int(
            part1.raw_line, 121, 3, "statement_sequence_number"
        )
        bank_reference = read_text(part1.raw_line, 10, 21, "bank_reference")
        transaction_code: Optional[TransactionCode] = _parse_transaction_code(part1)
    else:
        amount = Decimal("0")
        value_date = None
        transaction_date = None
        statement_sequence_number = None
        bank_reference = ""
        transaction_code = None

    customer_reference = read_text(part2.raw_line, 63, 35, "customer_reference") if part2 else ""

    return Transaction(
        sequence_number=head.sequence_number,
        detail_sequence_number=head.detail_sequence_number,
        statement_sequence_number=statement_sequence_number,
        transaction_date=transaction_date,
        value_date=value_date,
        amount=amount,
        bank_reference=bank_reference,
        customer_reference=customer_reference,
        transaction_code=transaction_code,
        message=message,
        structured_message=structured_message,
        counterparty=_parse_counterparty(part2, part3),
        extra_information=_parse_extra_information(information),
        line_numbers=tuple(line.line_no for line in group),
    )
