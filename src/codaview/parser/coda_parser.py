# src/codaview/parser/coda_parser.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import chardet

from codaview.config import DEFAULT_FALLBACK_ENCODINGS
from codaview.errors import CodaFileError
from codaview.models.coda_line import CodaLine, RawLine
from codaview.models.statement import Statement
from codaview.parser.line_classifier import classify_lines
from codaview.parser.statement_parser import parse_statement

logger = logging.getLogger(__name__)

# chardet の推定をそのまま採用する最低の確信度
MIN_DETECTION_CONFIDENCE = 0.8


@dataclass(frozen=True)
class ParsedFile:
    """1ファイル分の読み込み結果。"""
    path: Path
    encoding: str
    raw_lines: Tuple[RawLine, ...]
    lines: Tuple[CodaLine, ...]
    statement: Statement


def decode_coda_bytes(
    raw: bytes,
    fallback_encodings: Optional[Sequence[str]] = None,
) -> Tuple[str, str]:
    """
    バイト列をテキスト化し、(text, encoding) を返す。

    - まず chardet の推定（確信度が十分なとき）を試す
    - だめなら fallback_encodings を順に試す
    - 最後の保険として latin-1（必ず成功する）で読む
    """
    candidates: List[str] = []

    guess = chardet.detect(raw)
    guessed = guess.get("encoding")
    if guessed and (guess.get("confidence") or 0.0) >= MIN_DETECTION_CONFIDENCE:
        candidates.append(guessed)

    candidates.extend(fallback_encodings or DEFAULT_FALLBACK_ENCODINGS)

    for enc in candidates:
        try:
            return raw.decode(enc), enc
        except (UnicodeDecodeError, LookupError):
            logger.debug("Decoding with %s failed, trying next encoding", enc)
            continue

    return raw.decode("latin-1"), "latin-1"


def parse_coda_text(text: str) -> List[RawLine]:
    """
    テキスト全体を行単位に分割し、RawLine のリストに変換する。

    行末の空白は CODA では桁の一部なので落とさない。空行は読み飛ばす。
    splitlines() は改ページや NEL でも分割してしまうので改行コードだけで分ける。
    """
    raw_lines: List[RawLine] = []

    for idx, line in enumerate(text.split("\n"), start=1):
        raw = line.rstrip("\r")
        if not raw.strip():
            continue
        raw_lines.append(RawLine(line_no=idx, raw=raw))

    return raw_lines


def parse_coda_lines(text: str) -> Statement:
    """テキストから直接 Statement を作るショートカット。"""
    return parse_statement(classify_lines(parse_coda_text(text)))


def read_coda_file(
    path: Path,
    fallback_encodings: Optional[Sequence[str]] = None,
) -> ParsedFile:
    """
    CODA ファイルを読み込み、行一覧と Statement を作る。

    1ファイル = 1明細書として扱う。
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise CodaFileError(f"Cannot read {path}: {e}", details={"path": str(path)}) from e

    text, encoding = decode_coda_bytes(raw, fallback_encodings)
    raw_lines = parse_coda_text(text)
    lines = classify_lines(raw_lines)

    logger.info("Read %s (%s): %d line(s)", path.name, encoding, len(raw_lines))

    return ParsedFile(
        path=path,
        encoding=encoding,
        raw_lines=tuple(raw_lines),
        lines=tuple(lines),
        statement=parse_statement(lines),
    )
