"""Deterministic mock transport for offline use and tests.

Purpose
-------
Implement the ``BackendTransport`` protocol without any network traffic so
the pipeline (builder, validator, dispatcher, memory, estimator) can be
exercised end to end.

Behavior
--------
* Replies come from, in order: the scripted queue (``script``), the
  ``catalog`` keyed by the last user text, or an echo of that text.
* Failures queued with ``fail_next`` are raised before any reply is used.
* Every request is captured in ``requests``.
* Usage is deterministic: input tokens are whitespace-separated words of
  every message, tool call and tool specification plus a fixed overhead;
  output tokens are the reply's words.
* Count-only requests (``max_tokens == 0``) return no message and
  ``stop_reason="max_tokens"``.
"""

from __future__ import annotations

import json
import threading
from collections import deque
from typing import Any, Deque, Iterable, List, Mapping, Optional, Union

from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import (
    ChatRequest,
    ChatResponse,
    Message,
    ProviderMetadata,
    TokenUsage,
)
from ..config.defaults import MOCK_DEFAULT_MODEL

DEFAULT_OVERHEAD_TOKENS = 3

ScriptItem = Union[str, Message, BaseException]


def _words(text: Optional[str]) -> int:
    return len(text.split()) if text else 0


def count_message_tokens(message: Message) -> int:
    """Word-based token count of one message (images count as one token each)."""
    if message.is_structured():
        total = 0
        for part in message.content:  # type: ignore[union-attr]
            total += _words(part.text) if part.type == "text" else 1
    else:
        total = _words(message.content)  # type: ignore[arg-type]
    for call in message.tool_calls:
        total += 1 + _words(call.name.replace("_", " ")) + _words(call.arguments.replace(",", " "))
    return total


def count_request_tokens(request: ChatRequest, overhead: int = DEFAULT_OVERHEAD_TOKENS) -> int:
    total = overhead + sum(count_message_tokens(m) for m in request.messages)
    for tool in request.tools:
        total += _words(tool.name.replace("_", " "))
        total += _words(tool.description)
        total += _words(json.dumps(tool.parameters).replace(",", " "))
    return total


def _last_user_text(request: ChatRequest) -> str:
    for m in reversed(request.messages):
        if m.role == "user":
            return m.text_or_joined().strip()
    return ""


class MockTransport:
    """Backend transport returning deterministic replies.

    Parameters
    ----------
    provider: str, default ``"mock"``
        Logical provider name used for metadata and logging.
    model: str
        Default model reported by :meth:`default_model`.
    script: Iterable of str, Message or exception
        Queue consumed one item per generating call; exceptions are raised.
    catalog: Mapping[str, str]
        Canned replies keyed by the last user text.
    report_usage: bool, default ``True``
        When ``False`` responses carry no token usage.
    overhead_tokens: int
        Fixed per-request input cost.
    """

    def __init__(
        self,
        *,
        provider: str = "mock",
        model: str = MOCK_DEFAULT_MODEL,
        script: Iterable[ScriptItem] = (),
        catalog: Optional[Mapping[str, str]] = None,
        report_usage: bool = True,
        overhead_tokens: int = DEFAULT_OVERHEAD_TOKENS,
    ) -> None:
        self._provider = provider or "mock"
        self._model = model
        self._script: Deque[ScriptItem] = deque(script)
        self._failures: Deque[BaseException] = deque()
        self._catalog = dict(catalog or {})
        self.report_usage = report_usage
        self._overhead = overhead_tokens
        self._lock = threading.Lock()
        self.requests: List[ChatRequest] = []
        self._logger = get_logger(f"chatwire.mock.{self._provider}")

    @property
    def provider_name(self) -> str:
        return self._provider

    def default_model(self) -> str:
        return self._model

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self.requests)

    def fail_next(self, error: BaseException, times: int = 1) -> None:
        """Raise ``error`` on the next ``times`` calls (counting calls included)."""
        with self._lock:
            self._failures.extend([error] * times)

    def queue(self, *items: ScriptItem) -> None:
        with self._lock:
            self._script.extend(items)

    # ------------------------------------------------------------------
    # BackendTransport API

    def send(self, request: ChatRequest) -> ChatResponse:
        model = request.model or self._model
        with self._lock:
            self.requests.append(request)
            failure = self._failures.popleft() if self._failures else None
            item = None
            if failure is None and not request.is_count_only and self._script:
                item = self._script.popleft()
        if failure is not None:
            raise failure
        if isinstance(item, BaseException):
            raise item

        input_tokens = count_request_tokens(request, self._overhead)
        meta = ProviderMetadata(provider_name=self.provider_name, model_name=model, extra={"mock_provider": True})
        ctx = LogContext(provider=self.provider_name, model=model)

        if request.is_count_only:
            usage = TokenUsage(input_tokens=input_tokens, output_tokens=0)
            normalized_log_event(self._logger, "mock.count", ctx, phase="finalize", tokens=usage)
            return ChatResponse(
                message=None,
                meta=meta,
                token_usage=usage if self.report_usage else TokenUsage(),
                stop_reason="max_tokens",
            )

        reply = self._reply_for(request, item)
        usage = TokenUsage(input_tokens=input_tokens, output_tokens=count_message_tokens(reply))
        return ChatResponse(
            message=reply,
            meta=meta,
            token_usage=usage if self.report_usage else TokenUsage(),
            stop_reason="tool_use" if reply.tool_calls else "end_turn",
            raw={"mock": True},
        )

    def _reply_for(self, request: ChatRequest, item: Any) -> Message:
        if isinstance(item, Message):
            return item
        if isinstance(item, str):
            return Message.assistant(item)
        prompt = _last_user_text(request)
        if prompt in self._catalog:
            return Message.assistant(self._catalog[prompt])
        return Message.assistant(f"echo: {prompt}" if prompt else "echo")


__all__ = [
    "MockTransport",
    "count_message_tokens",
    "count_request_tokens",
    "DEFAULT_OVERHEAD_TOKENS",
]
