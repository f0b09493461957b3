"""
Core Byte Pair Encoding (BPE) merge operations.
"""

import math
from collections.abc import Mapping
from typing import Final

from typing_extensions import deprecated

from ._sanitise import render_bytes
from .errors import VocabularyError
from .types import Rank, TokenBytes

# rank of a pair that is not in the vocabulary; compares above every real rank
NO_RANK: Final[float] = math.inf


def byte_pair_merge(piece: TokenBytes, ranks: Mapping[TokenBytes, Rank]) -> list[int]:
    """
    Merge the bytes of ``piece`` and return the boundaries of the final units.

    Starts from one unit per byte and repeatedly merges the adjacent pair whose
    concatenation has the lowest rank, leftmost pair first on ties, until no
    adjacent pair is in the vocabulary or a single unit remains.

    Each entry of the merge unit list is ``[byte_start, merge_rank]`` where
    ``merge_rank`` is the rank of merging that unit with its right neighbour.
    A trailing sentinel entry marks the end of the piece. After a merge only
    the ranks of the merged unit and its left neighbour are recomputed, every
    other cached rank stays valid.

    :param piece: Raw bytes of a single piece.
    :param ranks: Vocabulary mapping of token bytes to ranks.
    :return: Byte offsets ``[0, ..., len(piece)]`` delimiting the final units.
    """
    parts: list[list] = [[i, NO_RANK] for i in range(len(piece) + 1)]

    def pair_rank(idx: int) -> Rank | float:
        """Rank of merging unit ``idx`` with unit ``idx + 1``."""
        if idx + 2 < len(parts):
            return ranks.get(piece[parts[idx][0] : parts[idx + 2][0]], NO_RANK)
        return NO_RANK

    for i in range(len(parts) - 2):
        parts[i][1] = pair_rank(i)

    # more than one unit left
    while len(parts) > 2:
        # min() keeps the first of equal keys: leftmost pair wins ties
        min_idx = min(range(len(parts) - 2), key=lambda i: parts[i][1])
        if parts[min_idx][1] == NO_RANK:
            break

        # absorb the right neighbour into the unit at min_idx
        del parts[min_idx + 1]
        parts[min_idx][1] = pair_rank(min_idx)
        if min_idx > 0:
            parts[min_idx - 1][1] = pair_rank(min_idx - 1)

    return [start for start, _ in parts]


def _unit_rank(unit: TokenBytes, ranks: Mapping[TokenBytes, Rank]) -> Rank:
    rank = ranks.get(unit)
    if rank is None:
        # only a single byte can be left without a rank; merged units are
        # in the vocabulary by construction
        raise VocabularyError(
            f"no vocabulary entry for [{render_bytes(unit)}]", invalid_bytes=unit
        )
    return rank


def byte_pair_encode(piece: TokenBytes, ranks: Mapping[TokenBytes, Rank]) -> list[Rank]:
    """
    Encode one piece into ranks using byte pair merges.

    Concatenating the byte strings of the returned ranks reproduces ``piece``.

    :raises VocabularyError: If a byte that survives merging has no single-byte
                             entry, which means the vocabulary is malformed.
    """
    if len(piece) == 1:
        return [_unit_rank(piece, ranks)]

    bounds = byte_pair_merge(piece, ranks)
    return [
        _unit_rank(piece[start:end], ranks) for start, end in zip(bounds, bounds[1:])
    ]


def byte_pair_split(piece: TokenBytes, ranks: Mapping[TokenBytes, Rank]) -> list[TokenBytes]:
    """Split ``piece`` into the byte strings BPE would emit, without rank lookup."""
    if len(piece) <= 1:
        return [piece] if piece else []
    bounds = byte_pair_merge(piece, ranks)
    return [piece[start:end] for start, end in zip(bounds, bounds[1:])]


@deprecated(
    "Reference implementation for documentation only. Use `byte_pair_encode()` for production."
)
def slow_byte_pair_encode(
    piece: TokenBytes, ranks: Mapping[TokenBytes, Rank]
) -> list[Rank]:
    """
    Encode a piece by recomputing every pair rank after each merge.

    Behaves exactly like :func:`byte_pair_encode` but rescans all adjacent
    pairs on every iteration.

    Naive algorithm: O(n^2) rank lookups per merge.
    Incremental implementation: O(1) rank lookups per merge plus an O(n) scan
    for the minimum.

    :param piece: Raw bytes of a single piece.
    :param ranks: Vocabulary mapping of token bytes to ranks.
    :return: Ranks covering ``piece``.
    """
    units: list[TokenBytes] = [bytes([b]) for b in piece]

    while len(units) > 1:
        best_idx = None
        best_rank: Rank | float = NO_RANK
        for i in range(len(units) - 1):
            rank = ranks.get(units[i] + units[i + 1], NO_RANK)
            # strict comparison keeps the leftmost pair on ties
            if rank < best_rank:
                best_idx, best_rank = i, rank
        if best_idx is None:
            break
        units[best_idx : best_idx + 2] = [units[best_idx] + units[best_idx + 1]]

    return [_unit_rank(unit, ranks) for unit in units]


__all__ = [
    "NO_RANK",
    "byte_pair_merge",
    "byte_pair_encode",
    "byte_pair_split",
    "slow_byte_pair_encode",
]
