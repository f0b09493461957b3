"""Cross-check against tiktoken's published cl100k_base vocabulary."""

import pytest

tiktoken = pytest.importorskip("tiktoken")

from tokcount.pretrained import from_tiktoken  # noqa: E402


@pytest.fixture(scope="module")
def cl100k():
    """Return (tokcount tokenizer, tiktoken encoding), skipping if data is unavailable."""
    try:
        reference = tiktoken.get_encoding("cl100k_base")
        return from_tiktoken("cl100k_base"), reference
    except Exception as e:
        pytest.skip(f"cl100k_base vocabulary unavailable: {e}")


def test_known_encoding(cl100k):
    tok, _ = cl100k
    assert tok.encode("hello world") == [15339, 1917]


@pytest.mark.parametrize(
    "text",
    [
        "hello world",
        "Hello, world! It's 2024 and I'M here.",
        "café naïve 日本語 🎉",
        "def f(x):\n    return x ** 2\n",
    ],
)
def test_matches_tiktoken(cl100k, text):
    """Ordinary text encodes exactly like tiktoken."""
    tok, reference = cl100k
    assert tok.encode_ordinary(text) == reference.encode_ordinary(text)


def test_special_tokens_match_tiktoken(cl100k):
    tok, reference = cl100k
    text = "hello<|endoftext|>world"
    assert tok.encode(text) == reference.encode(text, allowed_special="all")
