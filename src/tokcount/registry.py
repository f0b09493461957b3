"""Named encodings and model name resolution."""

import functools
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from collections.abc import Mapping
from typing import Final

from ._config import get_data_dir
from .errors import EncodingLoadError, ModelNotFoundError
from .load import VOCAB_SUFFIX, load_vocab_file
from .pattern import TokenPattern
from .tokenizer import ENDOFTEXT, Tokenizer
from .types import Rank

log = logging.getLogger(__name__)

FIM_PREFIX = "<|fim_prefix|>"
FIM_MIDDLE = "<|fim_middle|>"
FIM_SUFFIX = "<|fim_suffix|>"
ENDOFPROMPT = "<|endofprompt|>"


class EncodingName(str, Enum):
    """Byte-level BPE encodings with built-in configurations."""

    R50K_BASE = "r50k_base"
    P50K_BASE = "p50k_base"
    P50K_EDIT = "p50k_edit"
    CL100K_BASE = "cl100k_base"

    @classmethod
    def get(cls, name: str) -> "EncodingName":
        """Get encoding by name (case-insensitive)."""
        try:
            return cls(name.lower().replace("-", "_"))
        except ValueError:
            raise EncodingLoadError(
                f"unknown encoding: {name!r}. "
                f"Valid encodings: {', '.join(list_encodings())}"
            ) from None


@dataclass(frozen=True)
class EncodingSpec:
    """Static configuration of one named encoding."""

    name: EncodingName
    pattern: str
    special_tokens: Mapping[str, Rank]
    # vocabulary file name inside the data directory
    vocab_file: str
    explicit_n_vocab: int | None = None


ENCODINGS: Final[Mapping[EncodingName, EncodingSpec]] = MappingProxyType(
    {
        EncodingName.R50K_BASE: EncodingSpec(
            name=EncodingName.R50K_BASE,
            pattern=TokenPattern.R50K_BASE.value,
            special_tokens=MappingProxyType({ENDOFTEXT: 50256}),
            vocab_file="r50k_base" + VOCAB_SUFFIX,
            explicit_n_vocab=50257,
        ),
        EncodingName.P50K_BASE: EncodingSpec(
            name=EncodingName.P50K_BASE,
            pattern=TokenPattern.P50K_BASE.value,
            special_tokens=MappingProxyType({ENDOFTEXT: 50256}),
            vocab_file="p50k_base" + VOCAB_SUFFIX,
            explicit_n_vocab=50281,
        ),
        # p50k_edit shares the p50k_base vocabulary file
        EncodingName.P50K_EDIT: EncodingSpec(
            name=EncodingName.P50K_EDIT,
            pattern=TokenPattern.P50K_EDIT.value,
            special_tokens=MappingProxyType(
                {
                    ENDOFTEXT: 50256,
                    FIM_PREFIX: 50281,
                    FIM_MIDDLE: 50282,
                    FIM_SUFFIX: 50283,
                }
            ),
            vocab_file="p50k_base" + VOCAB_SUFFIX,
        ),
        EncodingName.CL100K_BASE: EncodingSpec(
            name=EncodingName.CL100K_BASE,
            pattern=TokenPattern.CL100K_BASE.value,
            special_tokens=MappingProxyType(
                {
                    ENDOFTEXT: 100257,
                    FIM_PREFIX: 100258,
                    FIM_MIDDLE: 100259,
                    FIM_SUFFIX: 100260,
                    ENDOFPROMPT: 100276,
                }
            ),
            vocab_file="cl100k_base" + VOCAB_SUFFIX,
        ),
    }
)

# exact model names, checked before prefixes
MODEL_TO_ENCODING: Final[Mapping[str, EncodingName]] = MappingProxyType(
    {
        "gpt-4": EncodingName.CL100K_BASE,
        "gpt-3.5-turbo": EncodingName.CL100K_BASE,
        "text-embedding-ada-002": EncodingName.CL100K_BASE,
        "text-davinci-003": EncodingName.P50K_BASE,
        "text-davinci-002": EncodingName.P50K_BASE,
        "code-davinci-002": EncodingName.P50K_BASE,
        "text-davinci-edit-001": EncodingName.P50K_EDIT,
        "code-davinci-edit-001": EncodingName.P50K_EDIT,
        "text-davinci-001": EncodingName.R50K_BASE,
        "davinci": EncodingName.R50K_BASE,
        "curie": EncodingName.R50K_BASE,
        "babbage": EncodingName.R50K_BASE,
        "ada": EncodingName.R50K_BASE,
        "gpt2": EncodingName.R50K_BASE,
    }
)

# chat model families, e.g. "gpt-4-0613" or "gpt-3.5-turbo-16k"
MODEL_PREFIX_TO_ENCODING: Final[Mapping[str, EncodingName]] = MappingProxyType(
    {
        "gpt-4": EncodingName.CL100K_BASE,
        "gpt-3.5": EncodingName.CL100K_BASE,
    }
)


def list_encodings() -> list[str]:
    """Return names of all built-in encodings."""
    return [enc.value for enc in EncodingName]


def encoding_name_for_model(model_name: str) -> EncodingName:
    """
    Resolve the encoding used by ``model_name``.

    Exact names are matched first, then known model family prefixes.

    :raises ModelNotFoundError: If neither matches.
    """
    name = model_name.strip().lower()
    if name in MODEL_TO_ENCODING:
        return MODEL_TO_ENCODING[name]

    for prefix, enc_name in MODEL_PREFIX_TO_ENCODING.items():
        if name.startswith(prefix):
            return enc_name

    raise ModelNotFoundError(
        "could not map model to an encoding",
        model_name=model_name,
        known_prefixes=list(MODEL_PREFIX_TO_ENCODING),
    )


@functools.cache
def _build_encoding(enc_name: EncodingName, vocab_path: Path) -> Tokenizer:
    spec = ENCODINGS[enc_name]
    ranks = load_vocab_file(vocab_path)
    return Tokenizer(
        ranks,
        spec.special_tokens,
        spec.pattern,
        name=spec.name.value,
        explicit_n_vocab=spec.explicit_n_vocab,
    )


def get_encoding(name: str, vocab_path: str | Path | None = None) -> Tokenizer:
    """
    Return the tokenizer for a named encoding.

    Tokenizers are cached per encoding and vocabulary file, so repeated calls
    are cheap.

    :param name: Encoding name, e.g. "cl100k_base".
    :param vocab_path: Vocabulary file; defaults to the file of that encoding
                       inside the configured data directory.
    :raises EncodingLoadError: If the name is unknown or the file cannot be loaded.

    .. code-block:: python

        enc = get_encoding("cl100k_base")
        tokens = enc.encode("hello world")
    """
    enc_name = EncodingName.get(name)
    if vocab_path is None:
        path = get_data_dir() / ENCODINGS[enc_name].vocab_file
    else:
        path = Path(vocab_path)
    return _build_encoding(enc_name, path.resolve())


def encoding_for_model(model_name: str, vocab_path: str | Path | None = None) -> Tokenizer:
    """Return the tokenizer for the encoding used by ``model_name``."""
    enc_name = encoding_name_for_model(model_name)
    log.debug(f"model {model_name!r} uses encoding {enc_name.value}")
    return get_encoding(enc_name.value, vocab_path)


__all__ = [
    "FIM_PREFIX",
    "FIM_MIDDLE",
    "FIM_SUFFIX",
    "ENDOFPROMPT",
    "EncodingName",
    "EncodingSpec",
    "ENCODINGS",
    "MODEL_TO_ENCODING",
    "MODEL_PREFIX_TO_ENCODING",
    "list_encodings",
    "encoding_name_for_model",
    "get_encoding",
    "encoding_for_model",
]
