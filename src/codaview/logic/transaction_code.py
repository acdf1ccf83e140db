# src/codaview/logic/transaction_code.py

from __future__ import annotations

from typing import Optional

from codaview.code_tables import transaction_family_map, transaction_type_map
from codaview.models.statement import TransactionCode
from codaview.parser.transaction_grouper import COLLECTIVE_OPERATION_CODE


def describe_transaction_code(code: Optional[TransactionCode]) -> str:
    """
    取引コードから「Direct debit / Amount totalised by the customer (collective)」
    のような表示用ラベルを作る。

    表に無いコードはコード値そのものを返す簡易表示にフォールバック。
    """
    if code is None:
        return "-"

    family = transaction_family_map().get(code.family)
    if family is None:
        return f"Transaction code {code}"

    label = family
    type_label = transaction_type_map().get(code.type)
    if type_label:
        label = f"{label} / {type_label}"
    if code.operation == COLLECTIVE_OPERATION_CODE:
        label = f"{label} (collective)"
    return label
