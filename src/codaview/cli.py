# src/codaview/cli.py
"""CLI: CODA ファイルを読み込み、明細書を JSON で出力する."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional

from codaview.config import load_settings
from codaview.errors import CodaError
from codaview.log import setup_logging
from codaview.models.statement import Statement
from codaview.parser.coda_parser import read_coda_file


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def statement_to_dict(statement: Statement) -> Dict[str, Any]:
    data = asdict(statement)
    for tx, tx_data in zip(statement.transactions, data["transactions"]):
        tx_data["transaction_code"] = str(tx.transaction_code) if tx.transaction_code else None
    return data


def main(argv: Optional[list[str]] = None) -> int:
    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="Parse a CODA bank statement file into JSON."
    )
    parser.add_argument("coda_path", type=Path, help="Path to CODA file")
    parser.add_argument("-o", "--output", type=Path, help="Output JSON file path")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level (default: %(default)s)",
    )
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        parsed = read_coda_file(args.coda_path, settings.fallback_encodings)
    except CodaError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    indent = 2 if args.pretty or args.output else None
    rendered = json.dumps(
        statement_to_dict(parsed.statement),
        ensure_ascii=False,
        indent=indent,
        default=_json_default,
    )

    if args.output:
        args.output.write_text(rendered + ("\n" if indent is not None else ""), encoding="utf-8")
    else:
        print(rendered)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
