"""Custom exception hierarchy for tokcount errors."""

import regex as re

from .types import Rank


class TokCountError(Exception):
    """Base exception for all tokcount errors."""


class ConfigurationError(TokCountError):
    """Raised when a tokenizer cannot be built for the supplied configuration."""


class PatternError(ConfigurationError):
    """Raised when compiling segmentation or special-token patterns."""

    def __init__(
        self,
        message: str,
        *,
        pattern: str | None = None,
        regex_err: re.error | None = None,
    ) -> None:
        """
        Initialize PatternError with pattern details.

        :param message: Error message.
        :param pattern: The regex pattern that failed.
        :param regex_err: The underlying error from the regex library.
        """
        extra = " "
        if pattern:
            extra += f"(pattern: {pattern!r}) "
        if regex_err:
            extra += f"(reason: {regex_err}) "
        super().__init__(message + extra)
        self.pattern = pattern
        self.regex_err = regex_err


class VocabularyError(ConfigurationError):
    """Raised when the vocabulary is malformed or missing an entry."""

    def __init__(
        self,
        message: str,
        *,
        vocab_size: int | None = None,
        invalid_tok: Rank | None = None,
        invalid_bytes: bytes | None = None,
    ) -> None:
        """Initialize with optional context that gets appended to the message."""
        extra = " "
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        # decoding: token not in vocab
        if invalid_tok is not None:
            extra += f"(invalid token: {invalid_tok}) "
        # encoding: byte sequence with no rank
        if invalid_bytes is not None:
            extra += f"(invalid bytes: {invalid_bytes!r}) "
        super().__init__(message + extra)
        self.vocab_size = vocab_size
        self.invalid_tok = invalid_tok
        self.invalid_bytes = invalid_bytes


class EncodingLoadError(ConfigurationError):
    """Raised when loading a vocabulary file or named encoding fails."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        line_no: int | None = None,
    ) -> None:
        extra = " "
        if path:
            extra += f"(path: {path}) "
        if line_no is not None:
            extra += f"(line: {line_no}) "
        super().__init__(message + extra)
        self.path = path
        self.line_no = line_no


class SpecialTokenError(TokCountError):
    """Raised when special token handling fails."""

    def __init__(self, message: str, *, found_tokens: set[str] | None = None) -> None:
        """Initialize with optional found_tokens that get appended to the message."""
        if found_tokens:
            message = f"{message} (found: {', '.join(sorted(found_tokens))})"
        super().__init__(message)
        self.found_tokens = found_tokens


class StrategyError(TokCountError):
    """Raised when strategy lookup fails."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available_strats: list[str] | None = None,
    ) -> None:
        extra = " "
        if invalid_name:
            extra += f"(available: {available_strats}) (got {invalid_name}) "
        super().__init__(message + extra)
        self.invalid_name = invalid_name
        self.available_strats = available_strats


class ModelNotFoundError(TokCountError):
    """Raised when a model name cannot be mapped to an encoding."""

    def __init__(
        self,
        message: str,
        *,
        model_name: str | None = None,
        known_prefixes: list[str] | None = None,
    ) -> None:
        extra = " "
        if model_name:
            extra += f"(model: {model_name}) "
        if known_prefixes:
            extra += f"(known prefixes: {', '.join(known_prefixes)}) "
        super().__init__(message + extra)
        self.model_name = model_name
        self.known_prefixes = known_prefixes


class TokenizationError(TokCountError):
    """Raised when tokenization fails."""

    def __init__(
        self,
        message: str,
        *,
        input_text: str | bytes | None = None,
    ) -> None:
        if input_text is not None:
            message = f"{message} (input: {input_text!r})"
        super().__init__(message)
        self.input_text = input_text


class PricingError(TokCountError):
    """Raised when a price cannot be computed."""
