"""
Text segmentation and special-token scanning.

The ``regex`` module matches on ``str``, so every span produced here is in
code-point offsets. UTF-8 byte offsets only exist once a piece is encoded for
merging; :func:`byte_to_char_offset` is the single bridge back from byte
offsets to character offsets.
"""

from collections.abc import Iterable, Mapping

import regex as re

from .pattern import compile_pattern, compile_special_pattern
from .types import Rank, Span


def byte_to_char_offset(data: bytes, byte_offset: int) -> int:
    """
    Translate a UTF-8 byte offset into a character offset.

    Counts the Unicode scalar values that start in ``data[:byte_offset]``,
    i.e. every byte that is not a continuation byte (``0b10xxxxxx``). An
    offset inside a multi-byte character counts that character as started.
    """
    if byte_offset < 0:
        raise ValueError(f"byte offset must be non-negative, got {byte_offset}")
    return sum(1 for b in data[:byte_offset] if b & 0xC0 != 0x80)


class Segmenter:
    """Split ordinary text into pieces with the segmentation pattern."""

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        if isinstance(pattern, str):
            pattern = compile_pattern(pattern)
        self.compiled_pat: re.Pattern[str] = pattern

    def segment(self, span: str) -> list[Span]:
        """
        Return ``(start, end)`` character offsets of each piece in ``span``.

        Characters the pattern does not match are not part of any piece, so
        callers must not assume full coverage.
        """
        return [m.span() for m in self.compiled_pat.finditer(span)]

    def pieces(self, span: str) -> list[str]:
        """Return the matched pieces of ``span`` as strings."""
        return [span[start:end] for start, end in self.segment(span)]


class SpecialTokenScanner:
    """Locate special token literals in text."""

    def __init__(self, special_toks: Mapping[str, Rank]) -> None:
        self.special_literals = frozenset(special_toks)
        # None when there are no special tokens to look for
        self.special_pat: re.Pattern[str] | None = compile_special_pattern(
            self.special_literals
        )
        # alternations restricted to an allowed subset, keyed by that subset
        self._allowed_pats: dict[frozenset[str], re.Pattern[str] | None] = {}

    def _pattern_for(self, allowed: Iterable[str] | None) -> re.Pattern[str] | None:
        if allowed is None:
            return self.special_pat

        key = self.special_literals.intersection(allowed)
        if key == self.special_literals:
            return self.special_pat
        if key not in self._allowed_pats:
            self._allowed_pats[key] = compile_special_pattern(key)
        return self._allowed_pats[key]

    def find_next(
        self,
        text: str,
        pos: int = 0,
        allowed: Iterable[str] | None = None,
    ) -> Span | None:
        """
        Find the nearest allowed special token at or after ``pos``.

        Only allowed literals take part in the alternation, so a disallowed
        literal never hides an allowed one that starts at the same position.

        :param text: Full text being encoded.
        :param pos: Character offset to start searching from.
        :param allowed: Literals that terminate the search; ``None`` allows all.
        :return: ``(start, end)`` character offsets into ``text`` or ``None``.
        """
        special_pat = self._pattern_for(allowed)
        if special_pat is None:
            return None

        m = special_pat.search(text, pos)
        return None if m is None else m.span()


__all__ = ["byte_to_char_offset", "Segmenter", "SpecialTokenScanner"]
