"""Immutable bidirectional token bytes <-> rank mapping."""

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from ._sanitise import render_bytes
from .errors import VocabularyError
from .types import Rank, TokenBytes

log = logging.getLogger(__name__)


class Vocabulary:
    """
    Bijection between token byte strings and their ranks.

    Lower rank means the byte string was merged earlier during training and
    therefore takes priority during BPE. The rank doubles as the token id.
    """

    __slots__ = ("_ranks", "_decoder", "_max_rank")

    def __init__(self, ranks: Mapping[TokenBytes, Rank]) -> None:
        """
        Validate and freeze ``ranks``.

        :param ranks: Mapping of token byte strings to ranks.
        :raises VocabularyError: If a key is not bytes, a rank is not a
                                 non-negative int, or two keys share a rank.
        """
        encoder: dict[TokenBytes, Rank] = {}
        decoder: dict[Rank, TokenBytes] = {}

        for tok_bytes, rank in ranks.items():
            if not isinstance(tok_bytes, bytes):
                raise VocabularyError(
                    f"token must be bytes, got {type(tok_bytes).__name__}"
                )
            # bool is an int subclass but never a meaningful rank
            if not isinstance(rank, int) or isinstance(rank, bool) or rank < 0:
                raise VocabularyError(
                    f"rank must be a non-negative int, got {rank!r}",
                    invalid_bytes=tok_bytes,
                )
            if rank in decoder:
                raise VocabularyError(
                    f"rank {rank} assigned to both "
                    f"[{render_bytes(decoder[rank])}] and [{render_bytes(tok_bytes)}]",
                    invalid_tok=rank,
                )
            encoder[tok_bytes] = rank
            decoder[rank] = tok_bytes

        self._ranks = MappingProxyType(encoder)
        self._decoder = MappingProxyType(decoder)
        self._max_rank = max(decoder) if decoder else None
        log.debug(f"built vocabulary with {len(encoder)} tokens")

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[TokenBytes, Rank]]) -> "Vocabulary":
        """Build a vocabulary from ``(bytes, rank)`` pairs; later keys overwrite earlier ones."""
        ranks: dict[TokenBytes, Rank] = {}
        for pair in pairs:
            try:
                tok_bytes, rank = pair
            except (TypeError, ValueError) as e:
                raise VocabularyError(f"malformed vocabulary entry: {pair!r}") from e
            ranks[tok_bytes] = rank
        return cls(ranks)

    @property
    def ranks(self) -> Mapping[TokenBytes, Rank]:
        """Read-only view of the bytes -> rank mapping."""
        return self._ranks

    @property
    def max_rank(self) -> Rank | None:
        """Largest rank in the vocabulary, or ``None`` when empty."""
        return self._max_rank

    def lookup_exact(self, tok_bytes: TokenBytes) -> Rank | None:
        """Return the rank of exactly ``tok_bytes`` or ``None``."""
        return self._ranks.get(tok_bytes)

    def has_rank(self, rank: Rank) -> bool:
        return rank in self._decoder

    def rank_to_bytes(self, rank: Rank) -> TokenBytes:
        """
        Return the byte string for ``rank``.

        :raises VocabularyError: If ``rank`` is not in the vocabulary.
        """
        try:
            return self._decoder[rank]
        except KeyError:
            raise VocabularyError(
                "token not found in vocabulary", invalid_tok=rank
            ) from None

    def __contains__(self, tok_bytes: object) -> bool:
        return tok_bytes in self._ranks

    def __len__(self) -> int:
        return len(self._ranks)

    def __iter__(self) -> Iterator[TokenBytes]:
        return iter(self._ranks)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={len(self)})"
