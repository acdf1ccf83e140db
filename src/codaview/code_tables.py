# src/codaview/code_tables.py

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Dict

# data フォルダ内のファイル名対応表
_TABLE_FILES: Dict[str, str] = {
    "transaction_type": "transaction_type.json",
    "transaction_family": "transaction_family.json",
}


@lru_cache(maxsize=None)
def load_code_table(table_name: str) -> Dict[str, str]:
    """
    コード表の JSON を読み込み、コード→ラベルの dict を返す。

    - table_name: "transaction_type" など
    - JSON は codaview/data/ 以下に配置する
    """
    if table_name not in _TABLE_FILES:
        raise KeyError(f"Unknown table name: {table_name}")

    filename = _TABLE_FILES[table_name]

    with resources.files("codaview.data").joinpath(filename).open(
        "r", encoding="utf-8"
    ) as f:
        raw = json.load(f)

    # 1) dict 形式 {"code": "label", ...}
    if isinstance(raw, dict):
        return {str(k): str(v) for k, v in raw.items()}

    # 2) list 形式 [{"code": "...", "label": "..."}, ...]
    if isinstance(raw, list):
        result: Dict[str, str] = {}
        for item in raw:
            code = str(item.get("code", ""))
            label = str(item.get("label", code))
            if code:
                result[code] = label
        return result

    raise ValueError(f"Unsupported JSON format in {filename}")


def transaction_type_map() -> Dict[str, str]:
    return load_code_table("transaction_type")


def transaction_family_map() -> Dict[str, str]:
    return load_code_table("transaction_family")
