# src/codaview/models/statement.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple


@dataclass(frozen=True)
class Account:
    """
    取引明細の対象口座（レコード 0 と 1 から組み立てる）。
    """
    name: str
    bic: str
    company_identification_number: str
    number: str
    currency: str
    country_code: Optional[str]
    description: str


@dataclass(frozen=True)
class CounterpartyAccount:
    name: str
    bic: str
    number: str
    currency: str


@dataclass(frozen=True)
class TransactionCode:
    """
    8桁の取引コード。

    - type: 1桁（0 単純, 1 顧客による合計, 5 その明細 ...）
    - family: 2桁（01 国内振込, 05 口座振替 ...）
    - operation: 2桁（07 は集合取引）
    - category: 3桁
    """
    type: str
    family: str
    operation: str
    category: str

    def __str__(self) -> str:
        return f"{self.type}{self.family}{self.operation}{self.category}"


@dataclass(frozen=True)
class Transaction:
    sequence_number: int
    detail_sequence_number: int
    statement_sequence_number: Optional[int]
    transaction_date: Optional[date]   # 記帳日
    value_date: Optional[date]         # 起算日
    amount: Decimal                    # 入金は正、出金は負
    bank_reference: str
    customer_reference: str
    transaction_code: Optional[TransactionCode]
    message: str
    structured_message: str
    counterparty: CounterpartyAccount
    extra_information: str = ""
    line_numbers: Tuple[int, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Summary:
    """レコード 9（トレーラ）の件数と合計額。"""
    record_count: int
    debit_amount: Decimal
    credit_amount: Decimal


@dataclass(frozen=True)
class Statement:
    """
    1ファイル = 1取引明細書。
    """
    date: date                     # 作成日
    account: Account
    sequence_number: int
    initial_balance: Decimal
    new_balance: Decimal
    new_date: date
    informational_message: str
    transactions: Tuple[Transaction, ...]
    summary: Optional[Summary] = None
    is_duplicate: bool = False
