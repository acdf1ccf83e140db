# src/codaview/config.py
"""
ユーザー設定の読み書き.

保存先:
    ~/.codaview/settings.json
    （環境変数 CODAVIEW_CONFIG_DIR でディレクトリを差し替え可能）

JSON 形式:
    {
      "last_directory": "/home/user/coda",
      "fallback_encodings": ["utf-8-sig", "cp1252", "latin-1"],
      "log_level": "INFO"
    }
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "CODAVIEW_CONFIG_DIR"
SETTINGS_FILE_NAME = "settings.json"

DEFAULT_FALLBACK_ENCODINGS = ["utf-8-sig", "cp1252", "latin-1"]


@dataclass
class Settings:
    last_directory: Optional[str] = None
    fallback_encodings: List[str] = field(default_factory=lambda: list(DEFAULT_FALLBACK_ENCODINGS))
    log_level: str = "INFO"


def config_dir() -> Path:
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".codaview"


def settings_path() -> Path:
    return config_dir() / SETTINGS_FILE_NAME


def load_settings() -> Settings:
    """
    設定を読み込む。

    ファイルが無い・壊れている場合は既定値を返す（壊れていた場合は警告を出す）。
    未知のキーは無視する。
    """
    path = settings_path()
    if not path.exists():
        return Settings()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return Settings()

    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: expected a JSON object", path)
        return Settings()

    settings = Settings()

    last_directory = data.get("last_directory")
    if isinstance(last_directory, str) and last_directory:
        settings.last_directory = last_directory

    encodings = data.get("fallback_encodings")
    if isinstance(encodings, list) and all(isinstance(e, str) for e in encodings) and encodings:
        settings.fallback_encodings = list(encodings)

    log_level = data.get("log_level")
    if isinstance(log_level, str) and log_level:
        settings.log_level = log_level.upper()

    return settings


def save_settings(settings: Settings) -> Path:
    """設定を丸ごと上書き保存し、保存先を返す。"""
    path = settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return path


def remember_directory(directory: Path) -> None:
    """最後に開いたフォルダを記録する（ビューアの「開く」ダイアログ用）。"""
    settings = load_settings()
    settings.last_directory = str(directory)
    try:
        save_settings(settings)
    except OSError as e:
        # 保存に失敗してもアプリ動作は継続
        logger.warning("Could not save settings to %s: %s", settings_path(), e)
