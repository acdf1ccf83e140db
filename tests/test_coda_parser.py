"""Tests for reading and decoding CODA files."""

import pytest

import coda_builder as cb
from codaview.errors import CodaFileError
from codaview.models.coda_line import LineType
from codaview.parser import coda_parser
from codaview.parser.coda_parser import decode_coda_bytes, parse_coda_text, read_coda_file


def test_parse_coda_text_keeps_trailing_spaces_and_line_numbers():
    text = "0" + " " * 127 + "\r\n\r\n" + "9" + " " * 127 + "\r\n"

    raw_lines = parse_coda_text(text)

    assert [r.line_no for r in raw_lines] == [1, 3]
    assert [len(r.raw) for r in raw_lines] == [128, 128]


def test_parse_coda_text_only_splits_on_newlines():
    raw_lines = parse_coda_text("abc\x0cdef\nxyz")

    assert [r.raw for r in raw_lines] == ["abc\x0cdef", "xyz"]


def test_decode_utf8():
    text, encoding = decode_coda_bytes("Virement reçu".encode("utf-8"))

    assert text == "Virement reçu"
    assert encoding


def test_decode_uses_fallbacks_when_detection_is_unsure(monkeypatch):
    monkeypatch.setattr(coda_parser.chardet, "detect", lambda raw: {"encoding": None, "confidence": 0.0})

    text, encoding = decode_coda_bytes("Société".encode("cp1252"), ["no-such-codec", "ascii", "cp1252"])

    assert text == "Société"
    assert encoding == "cp1252"


def test_decode_falls_back_to_latin1(monkeypatch):
    monkeypatch.setattr(coda_parser.chardet, "detect", lambda raw: {"encoding": "ascii", "confidence": 0.5})

    text, encoding = decode_coda_bytes(b"caf\xe9", ["ascii"])

    assert text == "café"
    assert encoding == "latin-1"


def test_read_coda_file(tmp_path):
    path = tmp_path / "statement.cod"
    path.write_bytes(("\r\n".join(cb.sample_statement()) + "\r\n").encode("latin-1"))

    parsed = read_coda_file(path)

    assert parsed.path == path
    assert len(parsed.raw_lines) == 16
    assert parsed.lines[13].line_type is LineType.UNRECOGNIZED
    assert len(parsed.statement.transactions) == 4


def test_read_missing_file(tmp_path):
    with pytest.raises(CodaFileError):
        read_coda_file(tmp_path / "missing.cod")
