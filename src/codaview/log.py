# src/codaview/log.py
"""
ログ設定の共通ユーティリティ.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
HANDLER_NAME = "codaview"


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """
    ルートロガーを設定する。

    - level: "DEBUG" / "INFO" / "WARNING" / "ERROR"（不明な値は INFO 扱い）
    - log_file: 指定があればファイルにも出力する
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # 2回目以降の呼び出しでは前回追加したハンドラを差し替える
    for handler in list(root_logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)
            handler.close()

    # CLI の JSON 出力と混ざらないよう stderr に出す
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.set_name(HANDLER_NAME)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.set_name(HANDLER_NAME)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
