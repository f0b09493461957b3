"""Unit tests for segmentation, special-token scanning and offset translation."""

import pytest

from tokcount.pattern import TokenPattern, compile_special_pattern, get_pattern
from tokcount.errors import PatternError
from tokcount.segment import Segmenter, SpecialTokenScanner, byte_to_char_offset

EOT = "<|endoftext|>"


# Offset translation
# ---------------------------------------------------------------------------


def test_byte_to_char_offset():
    """Byte offsets map to counts of characters started before them."""
    data = "aé日".encode("utf-8")
    assert byte_to_char_offset(data, 0) == 0
    assert byte_to_char_offset(data, 1) == 1
    assert byte_to_char_offset(data, 3) == 2
    assert byte_to_char_offset(data, 6) == 3


def test_byte_to_char_offset_rejects_negative():
    with pytest.raises(ValueError):
        byte_to_char_offset(b"abc", -1)


# Segmenter
# ---------------------------------------------------------------------------


def test_segment_offsets_are_characters():
    """Offsets count characters, not UTF-8 bytes."""
    seg = Segmenter(get_pattern("r50k_base"))
    assert seg.segment("hello world") == [(0, 5), (5, 11)]
    assert seg.segment("日本 語") == [(0, 2), (2, 4)]
    assert seg.pieces("日本 語") == ["日本", " 語"]


def test_segment_skips_unmatched_characters():
    """Characters outside the pattern are not part of any piece."""
    seg = Segmenter(r"\p{L}+")
    assert seg.segment("ab c") == [(0, 2), (3, 4)]


def test_segment_cl100k_contractions_and_numbers():
    """cl100k splits contractions case-insensitively and numbers in threes."""
    seg = Segmenter(TokenPattern.CL100K_BASE.value)
    assert seg.pieces("I'M 12345") == ["I", "'M", " ", "123", "45"]


def test_pattern_lookup():
    """Patterns resolve by name, aliases included."""
    assert get_pattern("p50k-base") == TokenPattern.R50K_BASE.value
    with pytest.raises(PatternError):
        get_pattern("nope")


# Special token scanner
# ---------------------------------------------------------------------------


def test_find_next_special():
    """The nearest special token span is returned in character offsets."""
    scanner = SpecialTokenScanner({EOT: 1})
    assert scanner.find_next("hello<|endoftext|>world") == (5, 18)
    assert scanner.find_next("日本<|endoftext|>") == (2, 15)
    assert scanner.find_next("hello<|endoftext|>world", 6) is None


def test_find_next_skips_disallowed():
    """Disallowed hits are skipped until an allowed one or exhaustion."""
    scanner = SpecialTokenScanner({EOT: 1, "<|pad|>": 2})
    text = "<|endoftext|>a<|pad|>"
    assert scanner.find_next(text, allowed={"<|pad|>"}) == (14, 21)
    assert scanner.find_next(text, allowed=set()) is None


def test_find_next_without_special_tokens():
    """An empty special token set never matches."""
    scanner = SpecialTokenScanner({})
    assert scanner.special_pat is None
    assert scanner.find_next("anything") is None


def test_longer_literal_preferred():
    """A literal that prefixes another does not shadow it."""
    scanner = SpecialTokenScanner({"<|a|>": 1, "<|a|>x": 2})
    assert scanner.find_next("<|a|>x") == (0, 6)


def test_shorter_allowed_literal_inside_disallowed_one():
    """An allowed literal is found even where a longer disallowed literal matches."""
    scanner = SpecialTokenScanner({"<|a|>": 1, "<|a|>x": 2})
    assert scanner.find_next("<|a|>x", allowed={"<|a|>"}) == (0, 5)
    assert scanner.find_next("<|a|>x", allowed={"<|a|>x"}) == (0, 6)
    assert scanner.find_next("<|a|>", allowed={"<|a|>x"}) is None


def test_compile_special_pattern_escapes_literals():
    """Metachars in literals are escaped."""
    pat = compile_special_pattern(["a+b", "c|d"])
    assert pat.search("aab") is None
    assert pat.search("xa+b").span() == (1, 4)
    assert pat.search("c|d").group() == "c|d"
