"""Per-token pricing for chat and embedding models."""

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Final

from .errors import PricingError

# prices are quoted per this many tokens
PRICE_UNIT: Final[int] = 1000


class Chat(str, Enum):
    """Chat models with known prices."""

    GPT_3_5_TURBO_4K = "gpt-3.5-turbo"
    GPT_3_5_TURBO_16K = "gpt-3.5-turbo-16k"
    GPT_4_8K = "gpt-4"
    GPT_4_32K = "gpt-4-32k"

    @classmethod
    def get(cls, name: str) -> "Chat":
        """Get chat model by API name (case-insensitive)."""
        try:
            return cls(name.lower())
        except ValueError:
            raise PricingError(
                f"no price for chat model {name!r}. "
                f"Known models: {', '.join(m.value for m in cls)}"
            ) from None


class Embed(str, Enum):
    """Embedding models with known prices."""

    TEXT_EMBEDDING_ADA_002 = "text-embedding-ada-002"

    @classmethod
    def get(cls, name: str) -> "Embed":
        """Get embedding model by API name (case-insensitive)."""
        try:
            return cls(name.lower())
        except ValueError:
            raise PricingError(
                f"no price for embedding model {name!r}. "
                f"Known models: {', '.join(m.value for m in cls)}"
            ) from None


CHAT_PRICE_INPUT: Final[Mapping[Chat, Decimal]] = MappingProxyType(
    {
        Chat.GPT_3_5_TURBO_4K: Decimal("0.0015"),
        Chat.GPT_3_5_TURBO_16K: Decimal("0.003"),
        Chat.GPT_4_8K: Decimal("0.03"),
        Chat.GPT_4_32K: Decimal("0.06"),
    }
)

CHAT_PRICE_OUTPUT: Final[Mapping[Chat, Decimal]] = MappingProxyType(
    {
        Chat.GPT_3_5_TURBO_4K: Decimal("0.002"),
        Chat.GPT_3_5_TURBO_16K: Decimal("0.004"),
        Chat.GPT_4_8K: Decimal("0.06"),
        Chat.GPT_4_32K: Decimal("0.12"),
    }
)

EMBED_PRICE: Final[Mapping[Embed, Decimal]] = MappingProxyType(
    {
        Embed.TEXT_EMBEDDING_ADA_002: Decimal("0.0001"),
    }
)


def _units(tokens: int) -> Decimal:
    if tokens < 0:
        raise PricingError(f"token count must be non-negative, got {tokens}")
    return Decimal(tokens) / Decimal(PRICE_UNIT)


def get_chat_input_price(model: Chat, tokens: int) -> Decimal:
    return _units(tokens) * CHAT_PRICE_INPUT[model]


def get_chat_output_price(model: Chat, tokens: int) -> Decimal:
    return _units(tokens) * CHAT_PRICE_OUTPUT[model]


def get_chat_price(model: Chat | str, input_tokens: int, output_tokens: int) -> Decimal:
    """
    Price of a chat completion in USD.

    :param model: Chat model or its API name.
    :param input_tokens: Prompt tokens.
    :param output_tokens: Completion tokens.
    :raises PricingError: If the model is unknown or a count is negative.
    """
    if not isinstance(model, Chat):
        model = Chat.get(model)
    return get_chat_input_price(model, input_tokens) + get_chat_output_price(
        model, output_tokens
    )


def get_embed_price(model: Embed | str, tokens: int) -> Decimal:
    """Price of embedding ``tokens`` tokens in USD."""
    if not isinstance(model, Embed):
        model = Embed.get(model)
    return _units(tokens) * EMBED_PRICE[model]


__all__ = [
    "PRICE_UNIT",
    "Chat",
    "Embed",
    "CHAT_PRICE_INPUT",
    "CHAT_PRICE_OUTPUT",
    "EMBED_PRICE",
    "get_chat_input_price",
    "get_chat_output_price",
    "get_chat_price",
    "get_embed_price",
]
