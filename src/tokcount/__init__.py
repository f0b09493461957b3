"""tokcount: Byte-level BPE token counting library."""

from ._config import get_data_dir, set_data_dir
from .count import ChatMessage, ChatRequest, count_request, count_text
from .pattern import TokenPattern, get_pattern, list_patterns
from .price import Chat, Embed, get_chat_price, get_embed_price
from .registry import (
    EncodingName,
    encoding_for_model,
    encoding_name_for_model,
    get_encoding,
    list_encodings,
)
from .strategy import (
    AllowAllStrategy,
    AllowCustomStrategy,
    AllowNoneRaiseStrategy,
    AllowNoneStrategy,
    SpecialTokenStrategy,
    get_strategy,
    list_strategies,
)
from .tokenizer import Tokenizer
from .vocab import Vocabulary

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tokcount")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Tokenizer",
    "Vocabulary",
    "TokenPattern",
    "EncodingName",
    "SpecialTokenStrategy",
    "AllowAllStrategy",
    "AllowNoneStrategy",
    "AllowNoneRaiseStrategy",
    "AllowCustomStrategy",
    "ChatMessage",
    "ChatRequest",
    "Chat",
    "Embed",
    "get_encoding",
    "encoding_for_model",
    "encoding_name_for_model",
    "get_strategy",
    "get_pattern",
    "get_data_dir",
    "set_data_dir",
    "count_text",
    "count_request",
    "get_chat_price",
    "get_embed_price",
    "list_encodings",
    "list_patterns",
    "list_strategies",
]
