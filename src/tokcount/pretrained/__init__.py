"""
Tokenizers built from the pretrained vocabularies published with ``tiktoken``.

``tiktoken`` downloads and caches the official vocabulary files, so this is
the simplest way to get a working tokenizer without preparing a data
directory:

"from tokcount.pretrained import from_tiktoken"
"""

import logging

from ..registry import ENCODINGS, EncodingName, list_encodings
from ..tokenizer import Tokenizer

log = logging.getLogger(__name__)


def from_tiktoken(name: str) -> Tokenizer:
    """
    Build a tokenizer from the ``tiktoken`` encoding called ``name``.

    Built-in encodings keep their registered special tokens and vocabulary
    size check; other encodings take everything from ``tiktoken``.

    :raises ImportError: If ``tiktoken`` is not installed.
    """
    try:
        import tiktoken
    except ImportError as e:
        raise ImportError(
            "`tiktoken` is required for pretrained vocabularies; "
            "install it with `pip install tokcount[pretrained]`"
        ) from e

    enc = tiktoken.get_encoding(name)
    # get official merges
    ranks = dict(enc._mergeable_ranks)
    log.info(f"fetched {len(ranks)} ranks for {name!r} from tiktoken")

    if name in list_encodings():
        spec = ENCODINGS[EncodingName(name)]
        return Tokenizer(
            ranks,
            spec.special_tokens,
            spec.pattern,
            name=name,
            explicit_n_vocab=spec.explicit_n_vocab,
        )

    return Tokenizer(
        ranks,
        dict(enc._special_tokens),
        enc._pat_str,
        name=name,
    )


__all__ = ["from_tiktoken"]
