"""Unit tests for named encodings, model resolution and data directory config."""

import pytest

import tokcount as tc
from tokcount.errors import EncodingLoadError, ModelNotFoundError, VocabularyError
from tokcount.registry import ENCODINGS, EncodingName


# Model resolution
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "model, expected",
    [
        ("gpt-4", EncodingName.CL100K_BASE),
        ("gpt-4-0613", EncodingName.CL100K_BASE),
        ("gpt-4-32k", EncodingName.CL100K_BASE),
        ("GPT-3.5-turbo-16k", EncodingName.CL100K_BASE),
        ("text-embedding-ada-002", EncodingName.CL100K_BASE),
        ("text-davinci-003", EncodingName.P50K_BASE),
        ("text-davinci-edit-001", EncodingName.P50K_EDIT),
        ("davinci", EncodingName.R50K_BASE),
    ],
)
def test_encoding_name_for_model(model, expected):
    assert tc.encoding_name_for_model(model) is expected


def test_unknown_model_raises():
    with pytest.raises(ModelNotFoundError) as exc_info:
        tc.encoding_name_for_model("llama-2")
    assert exc_info.value.model_name == "llama-2"


# Encoding specs
# ---------------------------------------------------------------------------


def test_list_encodings():
    assert tc.list_encodings() == ["r50k_base", "p50k_base", "p50k_edit", "cl100k_base"]


def test_encoding_name_lookup():
    assert EncodingName.get("CL100K-BASE") is EncodingName.CL100K_BASE
    with pytest.raises(EncodingLoadError):
        EncodingName.get("o200k_base")


def test_cl100k_special_tokens():
    specials = ENCODINGS[EncodingName.CL100K_BASE].special_tokens
    assert specials["<|endoftext|>"] == 100257
    assert specials["<|endofprompt|>"] == 100276
    assert ENCODINGS[EncodingName.P50K_EDIT].vocab_file == "p50k_base.tiktoken"


# Loading
# ---------------------------------------------------------------------------


def test_get_encoding_from_file(byte_vocab_file):
    """A named encoding loads its ranks from the given file."""
    enc = tc.get_encoding("cl100k_base", vocab_path=byte_vocab_file)
    assert enc.name == "cl100k_base"
    assert enc.encode("hi<|endoftext|>") == [ord("h"), ord("i"), 100257]
    # cached per encoding and file
    assert tc.get_encoding("cl100k_base", vocab_path=byte_vocab_file) is enc


def test_get_encoding_from_data_dir(monkeypatch, byte_vocab_file):
    """The data directory env var locates vocabulary files."""
    monkeypatch.setenv("TOKCOUNT_DATA_DIR", str(byte_vocab_file.parent))
    assert tc.get_data_dir() == byte_vocab_file.parent
    enc = tc.encoding_for_model("gpt-4")
    assert enc.decode(enc.encode("hello")) == "hello"


def test_set_data_dir(monkeypatch, tmp_path):
    monkeypatch.delenv("TOKCOUNT_DATA_DIR", raising=False)
    previous = tc.get_data_dir()
    try:
        tc.set_data_dir(tmp_path)
        assert tc.get_data_dir() == tmp_path
    finally:
        tc.set_data_dir(previous)


def test_get_encoding_missing_file(tmp_path):
    with pytest.raises(EncodingLoadError):
        tc.get_encoding("cl100k_base", vocab_path=tmp_path / "missing.tiktoken")


def test_get_encoding_size_mismatch(tmp_path, byte_ranks):
    """A vocabulary that does not match the declared size is rejected."""
    from tokcount.load import dump_vocab

    path = tmp_path / "p50k_base.tiktoken"
    dump_vocab(byte_ranks, path)
    with pytest.raises(VocabularyError):
        tc.get_encoding("p50k_base", vocab_path=path)
