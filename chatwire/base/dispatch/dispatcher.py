"""Dispatcher: the single path from a finished transcript to the backend.

Both chat invocations and token-count requests go through
:meth:`Dispatcher.send`, so they share one retry policy and one logging
schema. Any exception raised by the transport that is not already a
``ProviderError`` is classified (timeouts, HTTP statuses, message heuristics)
before the retry policy looks at it.

Retry semantics:
    - retryable codes: transient, rate limit, timeout, server error,
      unavailable (see ``RETRYABLE_CODES``);
    - validation/auth/contract failures surface on the first attempt;
    - exhaustion raises ``RetryExhaustedError`` wrapping the last failure.

Logging:
    ``chat.start`` / ``chat.end`` / ``chat.error`` and one ``retry.attempt``
    event per failed attempt, all via ``normalized_log_event``.
"""

from __future__ import annotations

import dataclasses
import time
from typing import Iterable, Optional

from ..dto.tool_specification import ToolSpecification
from ..errors import ConfigurationError, ProviderError, to_provider_error
from ..interfaces import BackendTransport
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import ChatRequest, ChatResponse, Message
from ..resilience.retry import DEFAULT_RETRY_CONFIG, RetryConfig, retry


class Dispatcher:
    """Sends transcripts to a :class:`BackendTransport` under a retry policy.

    Parameters:
        transport: The backend collaborator.
        model: Model name sent with every request; must be non-blank.
        retry_config: Retry policy; defaults to three attempts with
            exponential backoff.

    Raises:
        ConfigurationError: If ``model`` is blank.
    """

    def __init__(
        self,
        transport: BackendTransport,
        model: str,
        retry_config: Optional[RetryConfig] = None,
    ) -> None:
        if not model or not str(model).strip():
            raise ConfigurationError("model name must not be blank")
        self._transport = transport
        self._model = model
        self._retry_config = retry_config or DEFAULT_RETRY_CONFIG
        self._logger = get_logger("chatwire.dispatch")

    @property
    def model(self) -> str:
        return self._model

    @property
    def provider_name(self) -> str:
        return self._transport.provider_name

    @property
    def retry_config(self) -> RetryConfig:
        return self._retry_config

    def send(
        self,
        messages: Iterable[Message],
        tools: Iterable[ToolSpecification] = (),
        max_output_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        *,
        operation: Optional[str] = None,
    ) -> ChatResponse:
        """Dispatch one request and return the backend's normalized response.

        Raises:
            ProviderError: Non-retriable backend failure (unchanged).
            RetryExhaustedError: Every attempt failed with a retriable code.
        """
        request = ChatRequest(
            model=self._model,
            messages=tuple(messages),
            tools=tuple(tools or ()),
            max_tokens=max_output_tokens,
            temperature=temperature,
        )
        ctx = LogContext(provider=self.provider_name, model=self._model, operation=operation)
        attempts = 0

        def _attempt() -> ChatResponse:
            nonlocal attempts
            attempts += 1
            try:
                return self._transport.send(request)
            except ProviderError:
                raise
            except Exception as exc:
                raise to_provider_error(exc, provider=self.provider_name, model=self._model) from exc

        normalized_log_event(
            self._logger,
            "chat.start",
            ctx,
            phase="start",
            messages=len(request.messages),
            tools=len(request.tools),
            max_tokens=request.max_tokens,
            count_only=request.is_count_only,
        )
        t0 = time.perf_counter()
        try:
            response = retry(self._retry_config_for(ctx))(_attempt)()
        except ProviderError as e:
            normalized_log_event(
                self._logger,
                "chat.error",
                ctx,
                phase="finalize",
                attempt=attempts,
                error_code=e.code.value,
                error=e.message,
            )
            raise
        latency_ms = (time.perf_counter() - t0) * 1000.0
        response.meta.attempts = attempts
        if response.meta.latency_ms is None:
            response.meta.latency_ms = latency_ms
        normalized_log_event(
            self._logger,
            "chat.end",
            ctx,
            phase="finalize",
            attempt=attempts,
            tokens=response.token_usage,
            latency_ms=round(latency_ms, 3),
            stop_reason=response.stop_reason,
        )
        return response

    def _retry_config_for(self, ctx: LogContext) -> RetryConfig:
        """Attach a structured attempt logger unless the caller supplied one."""
        if self._retry_config.attempt_logger is not None:
            return self._retry_config
        logger = self._logger

        def _attempt_logger(*, attempt: int, max_attempts: int, delay, error: ProviderError | None) -> None:
            if error is None:
                return
            normalized_log_event(
                logger,
                "retry.attempt",
                ctx,
                phase="retry",
                attempt=attempt,
                max_attempts=max_attempts,
                delay=delay,
                error_code=error.code.value,
                will_retry=delay is not None,
            )

        return dataclasses.replace(self._retry_config, attempt_logger=_attempt_logger)


__all__ = ["Dispatcher"]
