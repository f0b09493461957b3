"""Tests for the token counting command line."""

import runpy
from pathlib import Path

import pytest

MAIN = Path(__file__).resolve().parent.parent / "main.py"


def run_main(monkeypatch, *argv: str) -> None:
    monkeypatch.setattr("sys.argv", ["main.py", *argv])
    runpy.run_path(str(MAIN), run_name="__main__")


def test_main_counts_tokens(monkeypatch, capsys, byte_vocab_file):
    monkeypatch.setenv("TOKCOUNT_DATA_DIR", str(byte_vocab_file.parent))
    run_main(monkeypatch, "gpt-4", "hello")
    out = capsys.readouterr().out
    assert "5 tokens" in out
    assert "prompt price: $0.00015" in out


def test_main_reports_missing_vocabulary(monkeypatch, tmp_path):
    """A missing vocabulary file ends with a one-line error, not a traceback."""
    monkeypatch.setenv("TOKCOUNT_DATA_DIR", str(tmp_path))
    with pytest.raises(SystemExit) as exc_info:
        run_main(monkeypatch, "gpt-4", "hello")
    assert str(exc_info.value.code).startswith("error: vocabulary file does not exist")


def test_main_reports_unknown_model(monkeypatch):
    with pytest.raises(SystemExit) as exc_info:
        run_main(monkeypatch, "llama-2", "hello")
    assert "llama-2" in str(exc_info.value.code)
