"""
Reading and writing vocabulary files.

A vocabulary file holds one ``base64(token) <space> rank`` entry per line.
Blank lines are ignored; any other line that does not split into exactly two
fields on a single space is a fatal load error.
"""

import base64
import binascii
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from ._decorators import measure_time
from .errors import EncodingLoadError
from .types import Rank, Ranks, TokenBytes

VOCAB_SUFFIX: Final[str] = ".tiktoken"

log = logging.getLogger(__name__)


def parse_vocab_bytes(contents: bytes, *, source: str | None = None) -> Ranks:
    """
    Parse vocabulary file contents into a bytes -> rank mapping.

    Later lines overwrite earlier lines that decode to the same token.

    :param contents: Raw file contents.
    :param source: Path reported in errors.
    :raises EncodingLoadError: On a malformed line, invalid base64 or non-integer rank.
    """
    try:
        text = contents.decode("ascii")
    except UnicodeDecodeError as e:
        raise EncodingLoadError("vocabulary file is not ascii", path=source) from e

    ranks: Ranks = {}
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue

        parts = line.split(" ")
        if len(parts) != 2:
            raise EncodingLoadError(
                f"unexpected line format: {line!r}", path=source, line_no=line_no
            )

        b64_tok, rank_str = parts
        try:
            tok_bytes = base64.b64decode(b64_tok, validate=True)
        except binascii.Error as e:
            raise EncodingLoadError(
                f"invalid base64 token: {b64_tok!r}", path=source, line_no=line_no
            ) from e
        try:
            rank = int(rank_str)
        except ValueError:
            raise EncodingLoadError(
                f"rank is not a number: {rank_str!r}", path=source, line_no=line_no
            ) from None

        ranks[tok_bytes] = rank

    log.debug(f"parsed {len(ranks)} vocabulary entries")
    return ranks


@measure_time
def load_vocab_file(path: str | Path) -> Ranks:
    """
    Load a vocabulary file from disk.

    :raises EncodingLoadError: If the file does not exist or is malformed.
    """
    path = Path(path)
    if not path.is_file():
        raise EncodingLoadError("vocabulary file does not exist", path=str(path))

    log.info(f"loading vocabulary from {path}")
    return parse_vocab_bytes(path.read_bytes(), source=str(path))


def dump_vocab(ranks: Mapping[TokenBytes, Rank], path: str | Path) -> None:
    """Write ``ranks`` to ``path`` in vocabulary file format, ordered by rank."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    log.debug(f"saving {len(ranks)} vocabulary entries to {path}")
    with path.open("wb") as f:
        for tok_bytes, rank in sorted(ranks.items(), key=lambda x: x[1]):
            f.write(base64.b64encode(tok_bytes) + b" " + str(rank).encode() + b"\n")


__all__ = ["VOCAB_SUFFIX", "parse_vocab_bytes", "load_vocab_file", "dump_vocab"]
