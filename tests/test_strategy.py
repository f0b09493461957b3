"""Unit tests for special token strategies."""

import logging

import pytest

import tokcount as tc
from tokcount.errors import SpecialTokenError, StrategyError

SPECIALS = {"<|endoftext|>": 100257, "<|fim_prefix|>": 100258}


def test_list_strategies():
    assert tc.list_strategies() == ["all", "none", "none-raise", "custom"]


def test_allow_all():
    assert tc.get_strategy("all").handle("text", SPECIALS) == set(SPECIALS)


def test_allow_none_warns(caplog):
    """none returns nothing and warns when literals are present."""
    with caplog.at_level(logging.WARNING, logger="tokcount.strategy"):
        assert tc.get_strategy("none").handle("a<|endoftext|>", SPECIALS) == set()
    assert "not allowed" in caplog.text


def test_allow_none_raise():
    with pytest.raises(SpecialTokenError) as exc_info:
        tc.get_strategy("none-raise").handle("a<|fim_prefix|>", SPECIALS)
    assert exc_info.value.found_tokens == {"<|fim_prefix|>"}
    assert tc.get_strategy("none-raise").handle("plain", SPECIALS) == set()


def test_allow_custom_intersects_registered():
    """Custom subsets are limited to registered tokens."""
    strategy = tc.get_strategy("custom", allowed_subset={"<|fim_prefix|>", "<|x|>"})
    assert isinstance(strategy, tc.AllowCustomStrategy)
    assert strategy.handle("", SPECIALS) == {"<|fim_prefix|>"}


def test_custom_requires_subset():
    with pytest.raises(StrategyError):
        tc.get_strategy("custom")


def test_unknown_strategy():
    with pytest.raises(StrategyError) as exc_info:
        tc.get_strategy("sometimes")
    assert exc_info.value.invalid_name == "sometimes"
