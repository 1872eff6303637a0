"""Token counting via zero-output requests.

Every estimate is one backend call with ``max_output_tokens=0``: the backend
counts the prompt and generates nothing, and ``usage.input_tokens`` is the
answer. Counting calls go through the
:class:`~chatwire.base.dispatch.Dispatcher`, so they share its retry policy
and logging.

Tool specifications cannot be sent without a message, and a blank text cannot
be sent as an empty content block, so both are measured with a placeholder
user message whose known cost is subtracted afterwards. That cost is an
approximation (the backend may tokenize the placeholder differently in
context), which is why the result is clamped at zero and the placeholder is
configurable.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from ..dispatch import Dispatcher
from ..dto.tool_specification import ToolSpecification
from ..errors import BackendContractError
from ..logging import LogContext, get_logger, log_event
from ..models import ChatResponse, Message, ToolExecutionRequest
from ..utils.templates import is_blank

DEFAULT_PLACEHOLDER_TEXT = "dummy"
DEFAULT_PLACEHOLDER_TOKEN_COUNT = 1


class TokenCountEstimator:
    """Measures prompt-side token cost of texts, messages, tool calls and tools.

    Parameters:
        dispatcher: Dispatcher used for the counting calls.
        placeholder_text: User text sent alongside tool specifications and in
            place of blank text.
        placeholder_token_count: Token cost subtracted for that text.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        placeholder_text: str = DEFAULT_PLACEHOLDER_TEXT,
        placeholder_token_count: int = DEFAULT_PLACEHOLDER_TOKEN_COUNT,
    ) -> None:
        self._dispatcher = dispatcher
        self._placeholder_text = placeholder_text
        self._placeholder_token_count = max(0, int(placeholder_token_count))
        self._logger = get_logger("chatwire.tokens")

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------
    def estimate_token_count_in_text(self, text: str) -> int:
        """Count ``text`` as one user message.

        Blank text is measured as the placeholder message minus its cost, since
        a content block may not be empty.
        """
        if is_blank(text):
            measured = self._count((Message.user(self._placeholder_text),))
            return self._minus_placeholder(measured, "estimate_text")
        return self.estimate_token_count_in_messages([Message.user(text)])

    def estimate_token_count_in_message(self, message: Message) -> int:
        return self.estimate_token_count_in_messages([message])

    def estimate_token_count_in_messages(self, messages: Iterable[Message]) -> int:
        return self._count(tuple(messages))

    def estimate_token_count_in_tool_execution_requests(
        self, requests: Iterable[ToolExecutionRequest]
    ) -> int:
        """Measure tool calls as one assistant message carrying them."""
        calls = tuple(requests)
        if not calls:
            return 0
        return self._count((Message.assistant(tool_calls=calls),))

    def estimate_token_count_in_tool_specifications(
        self, specifications: Iterable[ToolSpecification]
    ) -> int:
        specs = tuple(specifications)
        if not specs:
            return 0
        measured = self._count((Message.user(self._placeholder_text),), tools=specs)
        return self._minus_placeholder(measured, "estimate_tools")

    def estimate_tokens(self, target: Any) -> int:
        """Dispatch on the type of ``target``.

        Accepts a string, a :class:`Message`, or an iterable whose items are
        all messages, all tool execution requests or all tool specifications.
        An empty iterable costs zero.

        Raises:
            TypeError: For any other target shape.
        """
        if target is None:
            raise TypeError("cannot estimate tokens for None")
        if isinstance(target, str):
            return self.estimate_token_count_in_text(target)
        if isinstance(target, Message):
            return self.estimate_token_count_in_message(target)
        if isinstance(target, ToolExecutionRequest):
            return self.estimate_token_count_in_tool_execution_requests([target])
        if isinstance(target, ToolSpecification):
            return self.estimate_token_count_in_tool_specifications([target])
        try:
            items = list(target)
        except TypeError:
            raise TypeError(f"cannot estimate tokens for {type(target).__name__}") from None
        if not items:
            return 0
        if all(isinstance(i, Message) for i in items):
            return self.estimate_token_count_in_messages(items)
        if all(isinstance(i, ToolExecutionRequest) for i in items):
            return self.estimate_token_count_in_tool_execution_requests(items)
        if all(isinstance(i, ToolSpecification) for i in items):
            return self.estimate_token_count_in_tool_specifications(items)
        raise TypeError("mixed or unsupported items; expected messages, tool execution requests or tool specifications")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _count(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolSpecification] = (),
    ) -> int:
        response = self._dispatcher.send(
            messages, tools=tools, max_output_tokens=0, operation="estimate_tokens"
        )
        return self._input_tokens(response)

    def _minus_placeholder(self, measured: int, operation: str) -> int:
        estimate = measured - self._placeholder_token_count
        if estimate < 0:
            log_event(
                self._logger,
                "tokens.estimate_clamped",
                self._ctx(operation),
                level=logging.WARNING,
                measured=measured,
                placeholder_tokens=self._placeholder_token_count,
            )
            return 0
        return estimate

    def _input_tokens(self, response: ChatResponse) -> int:
        count: Optional[int] = response.token_usage.input_tokens
        if count is None:
            raise BackendContractError(
                message="Failed to get token count from backend response: usage.input_tokens missing",
                provider=self._dispatcher.provider_name,
                model=self._dispatcher.model,
            )
        return count

    def _ctx(self, operation: str) -> LogContext:
        return LogContext(
            provider=self._dispatcher.provider_name,
            model=self._dispatcher.model,
            operation=operation,
        )


__all__ = [
    "TokenCountEstimator",
    "DEFAULT_PLACEHOLDER_TEXT",
    "DEFAULT_PLACEHOLDER_TOKEN_COUNT",
]
