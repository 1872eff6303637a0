"""Anthropic backend transport.

This module implements the :class:`BackendTransport` protocol on top of the
``anthropic`` SDK Messages API (``client.messages.create``).

Key behaviors / architecture notes:
* The SDK's own retries are disabled (``max_retries=0``); the dispatcher owns
  the retry policy so attempts are counted and logged in one place.
* The SDK builds its own HTTP client; the per-call timeout comes from
  ``get_timeout_config``.
* Token-count requests are ordinary ``messages.create`` calls with
  ``max_tokens=0``; the response carries ``usage.input_tokens`` and no
  content.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import anthropic

from ..base.errors import ConfigurationError
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import ChatRequest, ChatResponse
from ..base.timeouts import get_timeout_config
from ..config import get_provider_config
from ..config.defaults import ANTHROPIC_DEFAULT_MODEL
from .chat_helpers import invoke_messages_create, to_chat_response
from .helpers import build_params


class AnthropicTransport:
    """Sends normalized chat requests to Anthropic.

    Parameters:
        api_key: Explicit key; falls back to configuration / environment.
        model: Default model reported by :meth:`default_model`.
        base_url: Optional API base URL override.
        client: Pre-built SDK client (tests, custom wiring).

    Raises:
        ConfigurationError: If no usable API key is available and no client
            was supplied.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Any = None,
    ) -> None:
        cfg = get_provider_config("anthropic")
        self._model = model or cfg.get("model") or ANTHROPIC_DEFAULT_MODEL
        self._base_url = base_url or cfg.get("base_url")
        self._logger = get_logger("chatwire.anthropic")
        if client is not None:
            self._client = client
            return
        key = api_key or cfg.get("api_key")
        if not key or not str(key).strip():
            raise ConfigurationError(
                "Anthropic API key is missing; pass api_key or set ANTHROPIC_API_KEY"
            )
        self._client = self._create_client(key)

    @property
    def provider_name(self) -> str:
        return "anthropic"

    def default_model(self) -> str:
        return self._model

    def send(self, request: ChatRequest) -> ChatResponse:
        """Perform one ``messages.create`` call; failures raise ``ProviderError``."""
        model = request.model or self._model
        params = build_params(request)
        params["model"] = model
        resp = invoke_messages_create(self._client, params, model, self.provider_name)
        response = to_chat_response(resp, provider_name=self.provider_name, model=model)
        normalized_log_event(
            self._logger,
            "anthropic.response",
            LogContext(provider=self.provider_name, model=model),
            phase="finalize",
            tokens=response.token_usage,
            level=logging.DEBUG,
            response_id=response.meta.response_id,
            stop_reason=response.stop_reason,
        )
        return response

    def _create_client(self, api_key: str):
        return anthropic.Anthropic(
            api_key=api_key,
            base_url=self._base_url,
            max_retries=0,
            timeout=get_timeout_config().http_timeout_seconds,
        )


__all__ = ["AnthropicTransport"]
