"""Built-in segmentation patterns and pattern compilation."""

from collections.abc import Iterable
from enum import Enum

import regex as re

from .errors import PatternError


class TokenPattern(str, Enum):
    """
    Segmentation patterns for the supported byte-level BPE encodings.

    Source: https://github.com/openai/tiktoken/blob/main/tiktoken_ext/openai_public.py
    """

    # GPT-2 / GPT-3 era encodings
    R50K_BASE = (
        r"'s|'t|'re|'ve|'m|'ll|'d|"
        r" ?\p{L}+|"
        r" ?\p{N}+|"
        r" ?[^\s\p{L}\p{N}]+|"
        r"\s+(?!\S)|"
        r"\s+"
    )
    # same pattern, enum aliases
    P50K_BASE = R50K_BASE
    P50K_EDIT = R50K_BASE

    # GPT-3.5 / GPT-4
    CL100K_BASE = (
        r"(?i:'s|'t|'re|'ve|'m|'ll|'d)|"
        r"[^\r\n\p{L}\p{N}]?\p{L}+|"
        r"\p{N}{1,3}|"
        r" ?[^\s\p{L}\p{N}]+[\r\n]*|"
        r"\s*[\r\n]+|"
        r"\s+(?!\S)|"
        r"\s+"
    )

    @classmethod
    def get(cls, name: str) -> str:
        """Get patterns by name (case-insensitive)."""
        try:
            return cls[name.upper().replace("-", "_")].value
        except KeyError:
            raise PatternError(
                f"Unknown pattern: {name!r}. "
                f"Valid patterns: {', '.join(list_patterns())}"
            ) from None


def list_patterns() -> list[str]:
    """Return names of all built-in segmentation patterns, aliases included."""
    return list(TokenPattern.__members__)


def get_pattern(name: str) -> str:
    return TokenPattern.get(name)


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """
    Compile and validate a segmentation pattern.

    :param pattern: Regex pattern string to compile.
    :return: Compiled regex pattern.
    :raises PatternError: If pattern is invalid.
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError("invalid regex pattern", pattern=pattern, regex_err=e)


def compile_special_pattern(literals: Iterable[str]) -> re.Pattern[str] | None:
    """
    Compile an alternation that matches any of the special token literals.

    Literals are escaped so regex metachars such as "|" in ``<|endoftext|>``
    match verbatim. Longer literals are tried first so a literal that is a
    prefix of another never shadows it. Returns ``None`` for an empty set,
    since an empty alternation would match the empty string everywhere.

    :raises PatternError: If the alternation fails to compile.
    """
    ordered = sorted(set(literals), key=lambda seq: (-len(seq), seq))
    if not ordered:
        return None
    special_pat = "|".join(re.escape(seq) for seq in ordered)
    try:
        return re.compile(special_pat)
    except re.error as e:
        raise PatternError(
            "invalid special token pattern", pattern=special_pat, regex_err=e
        )


__all__ = [
    "TokenPattern",
    "list_patterns",
    "get_pattern",
    "compile_pattern",
    "compile_special_pattern",
]
