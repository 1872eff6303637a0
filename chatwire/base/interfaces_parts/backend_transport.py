"""BackendTransport Protocol (single-class module).

The transport is the only component that talks to the network. It maps a
normalized :class:`ChatRequest` to the backend's wire format and the reply
back to a :class:`ChatResponse`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..models import ChatRequest, ChatResponse


@runtime_checkable
class BackendTransport(Protocol):
    """Minimal contract for a language-model backend.

    Failure handling: raise on failure. Raising a ``ProviderError`` with a
    precise ``ErrorCode`` is preferred; any other exception is classified by
    the dispatcher. Never return a partially filled response to signal an
    error.
    """

    @property
    def provider_name(self) -> str:
        """Canonical provider identifier, e.g. ``"anthropic"``."""
        ...

    def send(self, request: ChatRequest) -> ChatResponse:
        """Execute one request; ``request.max_tokens == 0`` means count-only."""
        ...
