"""Token usage extraction and zero-output token estimation."""

from .extraction import extract_anthropic_token_usage
from .estimator import (
    DEFAULT_PLACEHOLDER_TEXT,
    DEFAULT_PLACEHOLDER_TOKEN_COUNT,
    TokenCountEstimator,
)

__all__ = [
    "extract_anthropic_token_usage",
    "TokenCountEstimator",
    "DEFAULT_PLACEHOLDER_TEXT",
    "DEFAULT_PLACEHOLDER_TOKEN_COUNT",
]
