# src/codaview/parser/statement_parser.py
"""
判定済みの行リストから Statement を組み立てる.

取引部分は transaction_grouper でグループ化・集合取引の分割をしたあと、
グループごとに transaction_parser で Transaction にする。
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from codaview.errors import CodaValueError
from codaview.models.coda_line import TRANSACTION_OR_INFORMATION_LINE_TYPES, CodaLine, LineType
from codaview.models.statement import Account, Statement, Summary, Transaction
from codaview.parser.field_reader import read_amount, read_date, read_int, read_raw, read_text
from codaview.parser.line_classifier import filter_lines_of_types, first_line_of_type
from codaview.parser.transaction_grouper import group_transactions, split_collective_transactions
from codaview.parser.transaction_parser import normalize_space, parse_transaction

logger = logging.getLogger(__name__)

UNKNOWN_DATE = date(1, 1, 1)

# レコード 1 の2桁目: 口座番号の構造
ACCOUNT_BELGIAN = "0"
ACCOUNT_FOREIGN = "1"
ACCOUNT_BELGIAN_IBAN = "2"
ACCOUNT_FOREIGN_IBAN = "3"


def _split_account_number(structure: str, account: str, line: CodaLine) -> tuple[str, str, Optional[str]]:
    """
    37桁の「口座番号 + 通貨」欄を (number, currency, country_code) に分ける。
    """
    if structure == ACCOUNT_BELGIAN:
        return account[0:12].strip(), account[13:16].strip(), "BE"
    if structure == ACCOUNT_FOREIGN:
        return account[0:34].strip(), account[34:37].strip(), None
    if structure == ACCOUNT_BELGIAN_IBAN:
        number = account[0:16].strip()
        return number, account[34:37].strip(), number[:2] or None
    if structure == ACCOUNT_FOREIGN_IBAN:
        number = account[0:34].strip()
        return number, account[34:37].strip(), number[:2] or None

    raise CodaValueError("account_structure", structure, line_no=line.line_no, reason="unknown account structure")


def parse_account(lines: Sequence[CodaLine]) -> Account:
    """
    レコード 0（BIC・企業番号）とレコード 1（口座番号・名義・説明）から口座情報を作る。
    """
    identification = first_line_of_type(lines, LineType.IDENTIFICATION)
    initial_state = first_line_of_type(lines, LineType.INITIAL_STATE)

    bic = ""
    company_identification_number = ""
    if identification is not None:
        bic = read_text(identification.raw_line, 60, 11, "bic")
        company_identification_number = read_text(
            identification.raw_line, 71, 11, "company_identification_number"
        )

    if initial_state is None:
        return Account(
            name="",
            bic=bic,
            company_identification_number=company_identification_number,
            number="",
            currency="",
            country_code=None,
            description="",
        )

    structure = read_raw(initial_state.raw_line, 1, 1, "account_structure")
    number, currency, country_code = _split_account_number(
        structure,
        read_raw(initial_state.raw_line, 5, 37, "account_number_and_currency"),
        initial_state,
    )

    return Account(
        name=read_text(initial_state.raw_line, 64, 26, "account_name"),
        bic=bic,
        company_identification_number=company_identification_number,
        number=number,
        currency=currency,
        country_code=country_code,
        description=read_text(initial_state.raw_line, 90, 35, "account_description"),
    )


def parse_message(lines: Sequence[CodaLine]) -> str:
    """レコード 4（自由記述メッセージ）を連結する。"""
    return normalize_space("".join(read_raw(line.raw_line, 32, 80, "message") for line in lines))


def parse_summary(line: CodaLine) -> Summary:
    return Summary(
        record_count=read_int(line.raw_line, 16, 6, "record_count"),
        debit_amount=read_amount(line.raw_line, 22, "debit_amount"),
        credit_amount=read_amount(line.raw_line, 37, "credit_amount"),
    )


def parse_statement(lines: Sequence[CodaLine]) -> Statement:
    """
    1明細書分の行（ファイル順）から Statement を作る。

    - UNRECOGNIZED 行は読み飛ばす
    - 単独レコード（0 / 1 / 8 / 9）が無い場合は既定値で埋める
    """
    unrecognized = [line.line_no for line in lines if line.line_type is LineType.UNRECOGNIZED]
    if unrecognized:
        logger.debug("Skipping %d unrecognized line(s): %s", len(unrecognized), unrecognized)
    lines = [line for line in lines if line.line_type is not LineType.UNRECOGNIZED]

    statement_date = UNKNOWN_DATE
    is_duplicate = False
    identification = first_line_of_type(lines, LineType.IDENTIFICATION)
    if identification is not None:
        statement_date = read_date(identification.raw_line, 5, "creation_date") or UNKNOWN_DATE
        is_duplicate = read_raw(identification.raw_line, 16, 1, "duplicate_code") == "D"

    initial_balance = Decimal("0")
    sequence_number = 0
    initial_state = first_line_of_type(lines, LineType.INITIAL_STATE)
    if initial_state is not None:
        initial_balance = read_amount(initial_state.raw_line, 43, "initial_balance", sign_offset=42)
        sequence_number = read_int(initial_state.raw_line, 2, 3, "statement_sequence_number")

    new_balance = Decimal("0")
    new_date = UNKNOWN_DATE
    new_state = first_line_of_type(lines, LineType.NEW_STATE)
    if new_state is not None:
        new_balance = read_amount(new_state.raw_line, 42, "new_balance", sign_offset=41)
        new_date = read_date(new_state.raw_line, 57, "new_balance_date") or UNKNOWN_DATE

    summary_line = first_line_of_type(lines, LineType.SUMMARY)
    summary = parse_summary(summary_line) if summary_line is not None else None

    informational_message = parse_message(filter_lines_of_types(lines, [LineType.MESSAGE]))
    account = parse_account(
        filter_lines_of_types(lines, [LineType.IDENTIFICATION, LineType.INITIAL_STATE])
    )

    groups = split_collective_transactions(
        group_transactions(filter_lines_of_types(lines, TRANSACTION_OR_INFORMATION_LINE_TYPES))
    )
    transactions: List[Transaction] = [parse_transaction(group) for group in groups]

    logger.debug(
        "Statement %s for account %s: %d transaction(s)",
        sequence_number,
        account.number or "-",
        len(transactions),
    )

    return Statement(
        date=statement_date,
        account=account,
        sequence_number=sequence_number,
        initial_balance=initial_balance,
        new_balance=new_balance,
        new_date=new_date,
        informational_message=informational_message,
        transactions=tuple(transactions),
        summary=summary,
        is_duplicate=is_duplicate,
    )
