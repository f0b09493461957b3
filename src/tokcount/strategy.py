"""Special token handling for tokenization."""

from collections.abc import Mapping
from typing import Final, Literal, overload, override
from abc import ABC, abstractmethod
import logging

from .errors import SpecialTokenError, StrategyError
from .types import Rank

log = logging.getLogger(__name__)

# =========================================================================================

# special token handling strategies


class SpecialTokenStrategy(ABC):
    """
    Base strategy for handling special tokens during encoding.

    A strategy picks which registered special tokens are matched as single
    tokens. Literals that are not allowed are encoded as ordinary text.
    """

    @abstractmethod
    def handle(
        self, text: str, special_toks: Mapping[str, Rank]
    ) -> frozenset[str]:
        """Return the special token literals allowed while encoding ``text``."""


class AllowAllStrategy(SpecialTokenStrategy):
    """Strategy that allows all registered special tokens."""

    @override
    def handle(
        self, text: str, special_toks: Mapping[str, Rank]
    ) -> frozenset[str]:
        """Return all registered special tokens."""
        return frozenset(special_toks)


class AllowNoneRaiseStrategy(SpecialTokenStrategy):
    """Strategy that raises if special tokens are found in text to be encoded."""

    @override
    def handle(
        self, text: str, special_toks: Mapping[str, Rank]
    ) -> frozenset[str]:
        """Raise when text contains disallowed special tokens."""
        found = {seq for seq in special_toks if seq in text}
        if found:
            raise SpecialTokenError(
                "special tokens found in text but not allowed", found_tokens=found
            )
        return frozenset()


class AllowNoneStrategy(SpecialTokenStrategy):
    """Strategy that encodes special token literals as ordinary text."""

    @override
    def handle(
        self, text: str, special_toks: Mapping[str, Rank]
    ) -> frozenset[str]:
        """Ignore special tokens and encode text as normal content."""
        if any(seq in text for seq in special_toks):
            log.warning("special tokens found in text but not allowed")
        return frozenset()


class AllowCustomStrategy(SpecialTokenStrategy):
    """Strategy that allows only specified special tokens."""

    def __init__(self, allowed_subset: set[str]) -> None:
        """Store the special token subset allowed during encoding."""
        super().__init__()
        self.allowed_subset = frozenset(allowed_subset)

    @override
    def handle(
        self, text: str, special_toks: Mapping[str, Rank]
    ) -> frozenset[str]:
        """Return only special tokens present in the allowed subset."""
        unknown = self.allowed_subset.difference(special_toks)
        if unknown:
            log.debug(f"ignoring unregistered special tokens: {sorted(unknown)}")
        return self.allowed_subset.intersection(special_toks)


StrategyName = Literal["all", "none", "none-raise", "custom"]

_SPECIAL_TOKEN_STRATEGIES: Final[dict[str, type[SpecialTokenStrategy]]] = {
    "all": AllowAllStrategy,
    "none": AllowNoneStrategy,
    "none-raise": AllowNoneRaiseStrategy,
    "custom": AllowCustomStrategy,
}


def list_strategies() -> list[str]:
    """Return available special token strategy names."""
    return list(_SPECIAL_TOKEN_STRATEGIES.keys())


@overload
def get_strategy(
    name: Literal["all", "none", "none-raise"],
) -> SpecialTokenStrategy: ...


@overload
def get_strategy(
    name: Literal["custom"], allowed_subset: set[str]
) -> AllowCustomStrategy: ...


def get_strategy(
    name: StrategyName = "all", allowed_subset: set[str] | None = None
) -> SpecialTokenStrategy:
    """
    Create a special token strategy by name.

    :param name: Strategy identifier: "all", "none", "none-raise", or "custom".
    :param allowed_subset: Required for "custom"; tokens allowed during encoding.
    :raises StrategyError: If name is unknown or allowed_subset is missing for custom.

    .. code-block:: python

        strategy = get_strategy("none-raise")
        strategy = get_strategy("custom", allowed_subset={"<|endoftext|>"})
    """
    if name not in _SPECIAL_TOKEN_STRATEGIES:
        raise StrategyError(
            "unknown strategy name",
            invalid_name=name,
            available_strats=list(_SPECIAL_TOKEN_STRATEGIES.keys()),
        )

    if name == "custom":
        if allowed_subset is None:
            raise StrategyError("allowed_subset is required for custom strategy")
        return AllowCustomStrategy(allowed_subset)

    return _SPECIAL_TOKEN_STRATEGIES[name]()


__all__ = [
    "StrategyName",
    "SpecialTokenStrategy",
    "AllowAllStrategy",
    "AllowNoneStrategy",
    "AllowNoneRaiseStrategy",
    "AllowCustomStrategy",
    "list_strategies",
    "get_strategy",
]
