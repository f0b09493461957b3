"""Shared fixtures: small synthetic byte-level vocabularies."""

import pytest

import tokcount as tc
from tokcount.load import dump_vocab

EOT = "<|endoftext|>"
EOT_ID = 100257

# merges on top of the 256 single bytes, in training order
TOY_MERGES = [b"he", b"ll", b"hell", b" w", b"or", b" wor", b"aa"]


@pytest.fixture
def byte_ranks() -> dict[bytes, int]:
    """Return the base 256 single-byte vocabulary."""
    return {bytes([b]): b for b in range(256)}


@pytest.fixture
def toy_ranks(byte_ranks) -> dict[bytes, int]:
    """Return the single-byte vocabulary extended with a few merges."""
    ranks = dict(byte_ranks)
    for idx, tok_bytes in enumerate(TOY_MERGES):
        ranks[tok_bytes] = 256 + idx
    return ranks


@pytest.fixture
def tokenizer(toy_ranks) -> tc.Tokenizer:
    """Return a tokenizer over the toy vocabulary with an end-of-text token."""
    return tc.Tokenizer(
        toy_ranks,
        {EOT: EOT_ID},
        tc.get_pattern("r50k_base"),
        name="toy",
    )


@pytest.fixture
def byte_vocab_file(tmp_path, byte_ranks):
    """Write the single-byte vocabulary as cl100k_base.tiktoken and return its path."""
    path = tmp_path / "cl100k_base.tiktoken"
    dump_vocab(byte_ranks, path)
    return path
