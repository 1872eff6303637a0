"""Central defaults for backends and the invocation pipeline.

Single source of truth for model names, retry settings and token-count
placeholders so no module carries its own literals.
"""
from __future__ import annotations

# Anthropic
ANTHROPIC_DEFAULT_MODEL = "claude-sonnet-4-5"
ANTHROPIC_DEFAULT_BASE_URL = None

# Mock (offline, deterministic)
MOCK_DEFAULT_MODEL = "mock-echo"

# Retry policy
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_DELAY_BASE = 2.0
DEFAULT_MAX_DELAY = 30.0

# Token estimation: user text sent next to tool specifications and its cost
DEFAULT_TOKEN_PLACEHOLDER_TEXT = "dummy"
DEFAULT_TOKEN_PLACEHOLDER_TOKENS = 1

__all__ = [
    "ANTHROPIC_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "MOCK_DEFAULT_MODEL",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_DELAY_BASE",
    "DEFAULT_MAX_DELAY",
    "DEFAULT_TOKEN_PLACEHOLDER_TEXT",
    "DEFAULT_TOKEN_PLACEHOLDER_TOKENS",
]
