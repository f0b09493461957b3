"""Token counting for plain text and chat requests."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .registry import encoding_for_model

log = logging.getLogger(__name__)

# fixed overhead the chat format adds on top of the message contents
TOKENS_PER_REQUEST: Final[int] = 3
TOKENS_PER_MESSAGE: Final[int] = 3
TOKENS_PER_NAME: Final[int] = 1


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str
    name: str | None = None


@dataclass(frozen=True)
class ChatRequest:
    model: str
    messages: list[ChatMessage] = field(default_factory=list)


def count_text(model: str, text: str, vocab_path: str | Path | None = None) -> int:
    """
    Count the tokens ``text`` encodes to for ``model``.

    :raises ModelNotFoundError: If the model has no known encoding.
    :raises EncodingLoadError: If the encoding's vocabulary cannot be loaded.
    """
    return encoding_for_model(model, vocab_path).count(text)


def count_request(request: ChatRequest, vocab_path: str | Path | None = None) -> int:
    """
    Count the prompt tokens of a chat request.

    Every request costs a fixed overhead, every message a fixed overhead
    plus its role and content, and a named message one more token plus the
    name itself.
    """
    enc = encoding_for_model(request.model, vocab_path)

    count = TOKENS_PER_REQUEST
    for message in request.messages:
        count += TOKENS_PER_MESSAGE
        count += enc.count(message.role)
        count += enc.count(message.content)
        if message.name is not None:
            count += TOKENS_PER_NAME
            count += enc.count(message.name)

    log.debug(
        f"request for {request.model!r} with {len(request.messages)} messages: {count} tokens"
    )
    return count


__all__ = [
    "TOKENS_PER_REQUEST",
    "TOKENS_PER_MESSAGE",
    "TOKENS_PER_NAME",
    "ChatMessage",
    "ChatRequest",
    "count_text",
    "count_request",
]
