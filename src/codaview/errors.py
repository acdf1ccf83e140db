# src/codaview/errors.py
"""
CODA 読み込みで使う例外クラス群.

UNRECOGNIZED な行はエラーではないので、ここには含めない。
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CodaError(Exception):
    """
    CodaView のすべての例外の基底クラス.

    - details: ログ用の追加情報（行番号・フィールド名など）
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.details: Dict[str, Any] = details or {}
        super().__init__(message)


class CodaValueError(CodaError, ValueError):
    """固定位置フィールドの値が壊れている（数字であるべき箇所が数字でない等）."""

    def __init__(
        self,
        field_name: str,
        raw_value: str,
        line_no: Optional[int] = None,
        reason: str = "malformed value",
    ) -> None:
        self.field_name = field_name
        self.raw_value = raw_value
        self.line_no = line_no
        where = f"line {line_no}" if line_no is not None else "unknown line"
        super().__init__(
            f"{where}: {reason} in field {field_name!r}: {raw_value!r}",
            details={"field": field_name, "raw_value": raw_value, "line_no": line_no},
        )


class CodaLineTypeError(CodaError, TypeError):
    """その行種別が持っていないフィールドを要求された."""


class CodaFileError(CodaError, OSError):
    """ファイルを開けない・読めない."""
