"""Anthropic backend transport."""

from .client import AnthropicTransport
from .helpers import build_params

__all__ = ["AnthropicTransport", "build_params"]
