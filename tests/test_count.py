"""Unit tests for text and chat request token counting."""

import pytest

import tokcount as tc
from tokcount.errors import ModelNotFoundError


def test_count_text(byte_vocab_file):
    """Each byte is one token in a single-byte vocabulary."""
    assert tc.count_text("gpt-4", "hello", vocab_path=byte_vocab_file) == 5
    assert tc.count_text("gpt-4", "", vocab_path=byte_vocab_file) == 0


def test_count_request(byte_vocab_file):
    """Request overhead, message overhead and names are all counted."""
    request = tc.ChatRequest(
        model="gpt-3.5-turbo",
        messages=[
            tc.ChatMessage(role="system", content="hi"),
            tc.ChatMessage(role="user", content="hello", name="bob"),
        ],
    )
    # 3 + (3 + 6 + 2) + (3 + 4 + 5 + 1 + 3)
    assert tc.count_request(request, vocab_path=byte_vocab_file) == 30


def test_count_empty_request(byte_vocab_file):
    request = tc.ChatRequest(model="gpt-4")
    assert tc.count_request(request, vocab_path=byte_vocab_file) == 3


def test_count_unknown_model():
    with pytest.raises(ModelNotFoundError):
        tc.count_text("not-a-model", "hello")
