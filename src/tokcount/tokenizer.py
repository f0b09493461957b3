"""
Byte-level BPE tokenizer built from a finished vocabulary.
"""

import logging
import os
from collections.abc import Collection, Mapping
from concurrent.futures import ThreadPoolExecutor
from math import ceil
from types import MappingProxyType

from .bpe import byte_pair_encode
from .errors import SpecialTokenError, TokenizationError, VocabularyError
from .segment import Segmenter, SpecialTokenScanner, byte_to_char_offset
from .strategy import SpecialTokenStrategy
from .types import Rank, TokenBytes
from .vocab import Vocabulary

log = logging.getLogger(__name__)

ENDOFTEXT = "<|endoftext|>"


class Tokenizer:
    """
    Encode text into vocabulary ranks and decode ranks back into text.

    The vocabulary, special tokens and compiled patterns are built once and
    never mutated, so one instance can serve concurrent encode calls.
    """

    def __init__(
        self,
        ranks: Mapping[TokenBytes, Rank] | Vocabulary,
        special_tokens: Mapping[str, Rank],
        pattern: str,
        *,
        name: str = "custom",
        explicit_n_vocab: int | None = None,
    ) -> None:
        """
        Build a tokenizer for one vocabulary configuration.

        :param ranks: Mergeable token bytes -> rank mapping, or a ready Vocabulary.
        :param special_tokens: Special token literal -> id mapping.
        :param pattern: Segmentation regex pattern.
        :param name: Human-readable encoding name.
        :param explicit_n_vocab: Expected total of ranks plus special tokens.
        :raises PatternError: If the pattern or the special token alternation is invalid.
        :raises SpecialTokenError: If a literal is empty or an id collides with the vocabulary.
        :raises VocabularyError: If the vocabulary is malformed or does not match ``explicit_n_vocab``.
        """
        self.name = name
        self.pat = pattern
        self.vocab = ranks if isinstance(ranks, Vocabulary) else Vocabulary(ranks)
        self.special_toks: Mapping[str, Rank] = MappingProxyType(dict(special_tokens))
        self.inverted_special_tokens: Mapping[Rank, str] = MappingProxyType(
            {tok: seq for seq, tok in self.special_toks.items()}
        )
        self._validate_special_tokens()

        self.segmenter = Segmenter(pattern)
        self.scanner = SpecialTokenScanner(self.special_toks)

        if explicit_n_vocab is not None:
            self._validate_n_vocab(explicit_n_vocab)

        log.info(
            f"built tokenizer {self.name!r}: {len(self.vocab)} mergeable tokens, "
            f"{len(self.special_toks)} special tokens"
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name!r}>"

    # Encoding
    # ===================================================================================

    def encode_native(
        self, text: str, allowed_special: Collection[str] | None = None
    ) -> tuple[list[Rank], int]:
        """
        Encode ``text`` and report how many tokens the last piece produced.

        Text is carved into ordinary spans separated by allowed special
        tokens. Each ordinary span is segmented into pieces; a piece that is a
        vocabulary entry is emitted directly, anything else goes through byte
        pair merging. Special tokens are emitted as their own id.

        :param text: Text to encode.
        :param allowed_special: Special literals matched as single tokens;
                                ``None`` allows all registered ones.
        :returns: Token sequence and the token count of the last ordinary
                  piece (0 when the text ends with a special token).
        :raises VocabularyError: If a byte has no single-byte vocabulary entry.
        """
        ranks = self.vocab.ranks
        tokens: list[Rank] = []
        last_piece_token_len = 0
        start = 0

        while True:
            next_special = self.scanner.find_next(text, start, allowed_special)
            end = next_special[0] if next_special is not None else len(text)

            for piece in self.segmenter.pieces(text[start:end]):
                piece_bytes = piece.encode("utf-8")
                # whole piece is a vocabulary entry
                rank = ranks.get(piece_bytes)
                if rank is not None:
                    last_piece_token_len = 1
                    tokens.append(rank)
                    continue

                piece_toks = byte_pair_encode(piece_bytes, ranks)
                last_piece_token_len = len(piece_toks)
                tokens.extend(piece_toks)

            if next_special is None:
                break

            sp_start, sp_end = next_special
            tokens.append(self.special_toks[text[sp_start:sp_end]])
            start = sp_end
            last_piece_token_len = 0

        return tokens, last_piece_token_len

    def encode(
        self, text: str, strategy: SpecialTokenStrategy | None = None
    ) -> list[Rank]:
        """
        Encode text into a sequence of tokens.

        If ``strategy`` is ``None`` every registered special token found in
        the text is kept as an atomic token. Otherwise the strategy selects
        which literals are honoured; the rest are encoded as ordinary text.
        """
        return self.encode_with_last_piece(text, strategy)[0]

    def encode_with_last_piece(
        self, text: str, strategy: SpecialTokenStrategy | None = None
    ) -> tuple[list[Rank], int]:
        """Encode text and also return the token count of the last ordinary piece."""
        allowed = None if strategy is None else strategy.handle(text, self.special_toks)
        return self.encode_native(text, allowed)

    def encode_ordinary(self, text: str) -> list[Rank]:
        """Encode text treating special token literals as ordinary text."""
        return self.encode_native(text, frozenset())[0]

    def encode_batch(
        self,
        texts: list[str],
        strategy: SpecialTokenStrategy | None = None,
        num_workers: int | None = None,
    ) -> list[list[Rank]]:
        """
        Encode many texts, fanning groups of texts out to a thread pool.

        :param texts: Text inputs to encode.
        :param strategy: Optional special token handling strategy.
        :param num_workers: Worker threads; defaults to the CPU count.
        :returns: Encoded token sequences in input order.
        """
        if not texts:
            return []

        if num_workers is None:
            workers = os.cpu_count() or 1
        else:
            workers = max(1, num_workers)  # "0" interpreted as 1 worker

        if workers == 1 or len(texts) == 1:
            return [self.encode(text, strategy) for text in texts]

        # group texts to reduce task-scheduling overhead when the input
        # contains many documents
        target_tasks = min(len(texts), workers * 2)
        group_size = max(1, ceil(len(texts) / target_tasks))
        text_groups = [
            texts[idx : idx + group_size] for idx in range(0, len(texts), group_size)
        ]

        def encode_group(group: list[str]) -> list[list[Rank]]:
            return [self.encode(text, strategy) for text in group]

        with ThreadPoolExecutor(max_workers=workers) as pool:
            encoded_groups = list(pool.map(encode_group, text_groups))
        return [encoded for group in encoded_groups for encoded in group]

    def encode_single_token(self, text_or_bytes: str | bytes) -> Rank:
        """
        Encode text that corresponds to exactly one token.

        :raises TokenizationError: If the input is neither a vocabulary entry
                                   nor a special token.
        """
        if isinstance(text_or_bytes, str):
            piece = text_or_bytes.encode("utf-8")
        else:
            piece = text_or_bytes

        # special tokens are checked before the vocabulary
        for seq, tok in self.special_toks.items():
            if seq.encode("utf-8") == piece:
                return tok
        rank = self.vocab.lookup_exact(piece)
        if rank is not None:
            return rank
        raise TokenizationError(
            f"not a single token in {self.name!r}", input_text=text_or_bytes
        )

    def encode_single_piece(self, text_or_bytes: str | bytes) -> list[Rank]:
        """Encode one piece with BPE, skipping segmentation and special tokens."""
        if isinstance(text_or_bytes, str):
            text_or_bytes = text_or_bytes.encode("utf-8")
        rank = self.vocab.lookup_exact(text_or_bytes)
        if rank is not None:
            return [rank]
        return byte_pair_encode(text_or_bytes, self.vocab.ranks)

    def count(self, text: str, strategy: SpecialTokenStrategy | None = None) -> int:
        """Return the number of tokens ``text`` encodes to."""
        return len(self.encode(text, strategy))

    # Decoding
    # ===================================================================================

    def decode_single_token_bytes(self, token: Rank) -> TokenBytes:
        """
        Return the bytes of one token, special tokens included.

        :raises VocabularyError: If the token is unknown.
        """
        if token in self.inverted_special_tokens:
            return self.inverted_special_tokens[token].encode("utf-8")
        return self.vocab.rank_to_bytes(token)

    def decode_tokens_bytes(self, tokens: list[Rank]) -> list[TokenBytes]:
        """Return the bytes of each token."""
        return [self.decode_single_token_bytes(tok) for tok in tokens]

    def decode_bytes(self, tokens: list[Rank]) -> bytes:
        """Concatenate the bytes of ``tokens``."""
        return b"".join(self.decode_tokens_bytes(tokens))

    def decode(self, tokens: list[Rank], errors: str = "replace") -> str:
        """
        Decode tokens into text.

        :param errors: How to handle invalid UTF-8, passed to ``bytes.decode``.
        :raises VocabularyError: If any token is unknown.
        """
        return self.decode_bytes(tokens).decode("utf-8", errors=errors)

    def decode_with_offsets(self, tokens: list[Rank]) -> tuple[str, list[int]]:
        """
        Decode tokens and return the character offset where each token starts.

        A token that begins in the middle of a multi-byte character reports
        the offset of that character.
        """
        tok_bytes = self.decode_tokens_bytes(tokens)

        offsets: list[int] = []
        char_pos = 0
        for b in tok_bytes:
            # starting on a continuation byte: point at the enclosing character
            if b and 0x80 <= b[0] < 0xC0:
                offsets.append(max(0, char_pos - 1))
            else:
                offsets.append(char_pos)
            char_pos += byte_to_char_offset(b, len(b))

        return b"".join(tok_bytes).decode("utf-8", errors="strict"), offsets

    # Introspection
    # ===================================================================================

    @property
    def special_tokens_set(self) -> frozenset[str]:
        return frozenset(self.special_toks)

    @property
    def max_token_value(self) -> Rank:
        values = [self.vocab.max_rank or 0, *self.special_toks.values()]
        return max(values)

    @property
    def n_vocab(self) -> int:
        """Number of token ids, assuming ids are dense."""
        return self.max_token_value + 1

    @property
    def eot_token(self) -> Rank:
        """Id of ``<|endoftext|>``."""
        try:
            return self.special_toks[ENDOFTEXT]
        except KeyError:
            raise SpecialTokenError(
                f"{self.name!r} has no end-of-text token"
            ) from None

    def token_byte_values(self) -> list[TokenBytes]:
        """Return all mergeable token byte strings sorted bytewise."""
        return sorted(self.vocab)

    # Validation
    # ===================================================================================

    def _validate_special_tokens(self) -> None:
        if "" in self.special_toks:
            raise SpecialTokenError("special token literal must not be empty")

        if len(self.inverted_special_tokens) != len(self.special_toks):
            ids = list(self.special_toks.values())
            duplicates = {
                seq for seq, tok in self.special_toks.items() if ids.count(tok) > 1
            }
            raise SpecialTokenError("duplicate token ids", found_tokens=duplicates)

        for seq, tok in self.special_toks.items():
            if not isinstance(tok, int) or isinstance(tok, bool) or tok < 0:
                raise SpecialTokenError(
                    f"special token id must be a non-negative int, got {tok!r}",
                    found_tokens={seq},
                )

        # ids must not collide with the BPE vocab
        overlapping = {
            seq for seq, tok in self.special_toks.items() if self.vocab.has_rank(tok)
        }
        if overlapping:
            raise SpecialTokenError(
                "special token id overlaps with vocabulary", found_tokens=overlapping
            )

    def _validate_n_vocab(self, explicit_n_vocab: int) -> None:
        actual = len(self.vocab) + len(self.special_toks)
        if actual != explicit_n_vocab:
            raise VocabularyError(
                f"expected {explicit_n_vocab} tokens in {self.name!r}",
                vocab_size=actual,
            )
        if self.max_token_value != explicit_n_vocab - 1:
            raise VocabularyError(
                f"token ids of {self.name!r} are not dense",
                invalid_tok=self.max_token_value,
            )


__all__ = ["ENDOFTEXT", "Tokenizer"]
