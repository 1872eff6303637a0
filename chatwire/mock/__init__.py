"""Mock transport package for deterministic offline runs and tests."""

from .client import MockTransport, count_message_tokens, count_request_tokens

__all__ = ["MockTransport", "count_message_tokens", "count_request_tokens"]
