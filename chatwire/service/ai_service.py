"""Declarative LLM operations.

An ``AiService`` holds a registry of named operations, each described by an
:class:`~chatwire.base.models.InvocationSpec`. ``invoke`` runs one operation
through the fixed pipeline:

    resolve templates -> read memory -> build sequence -> validate order
    -> dispatch (retry) -> require reply -> write back to memory

Order violations surface before any network I/O. Memory is written only after
the backend call succeeded; a failing write-back raises ``MemoryStoreError``
and does not roll back the model call.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from chatwire.base.dispatch import Dispatcher
from chatwire.base.dto import ToolSpecification
from chatwire.base.errors import BackendContractError, ConfigurationError
from chatwire.base.logging import LogContext, get_logger, log_event
from chatwire.base.memory import MemorySynchronizer
from chatwire.base.messages import MessageSequenceBuilder
from chatwire.base.models import ChatResponse, InvocationSpec, Message
from chatwire.base.tokens import TokenCountEstimator
from chatwire.base.utils.templates import resolve_template, template_variables
from chatwire.base.validation import OrderValidator

DEFAULT_CONVERSATION_ID = "default"


def write_back_messages(stored: Tuple[Message, ...], exchange: Tuple[Message, ...]) -> Tuple[Message, ...]:
    """Return the part of ``exchange`` to append after ``stored``.

    A system turn is only ever stored at the head of a transcript, so leading
    system messages of the exchange are dropped once anything is stored.
    """
    if not stored:
        return exchange
    start = 0
    while start < len(exchange) and exchange[start].role == "system":
        start += 1
    return exchange[start:]


class AiService:
    """Registry and executor for declared LLM operations.

    Parameters:
        dispatcher: Backend dispatcher (model, transport, retry policy).
        memory: Optional memory synchronizer; required by any operation that
            sets ``add_to_memory``.
        estimator: Optional token estimator; a default one sharing
            ``dispatcher`` is created when omitted.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        memory: Optional[MemorySynchronizer] = None,
        estimator: Optional[TokenCountEstimator] = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._memory = memory
        self._estimator = estimator or TokenCountEstimator(dispatcher)
        self._builder = MessageSequenceBuilder()
        self._validator = OrderValidator()
        self._specs: Dict[str, InvocationSpec] = {}
        self._lock = threading.Lock()
        self._logger = get_logger("chatwire.service")

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def memory(self) -> Optional[MemorySynchronizer]:
        return self._memory

    @property
    def estimator(self) -> TokenCountEstimator:
        return self._estimator

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register(self, operation: str, spec: Optional[InvocationSpec] = None) -> InvocationSpec:
        """Validate ``spec`` once and store it under ``operation``.

        Raises:
            ConfigurationError: Blank or duplicate operation name, malformed
                template, or ``add_to_memory`` without a memory synchronizer.
        """
        if not operation or not operation.strip():
            raise ConfigurationError("operation name must not be blank")
        spec = spec or InvocationSpec()
        for template in (spec.system_template, spec.trailing_user_template):
            if template is not None:
                template_variables(template)
        if spec.add_to_memory and self._memory is None:
            raise ConfigurationError(
                f"operation {operation!r} sets add_to_memory but the service has no memory"
            )
        with self._lock:
            if operation in self._specs:
                raise ConfigurationError(f"operation {operation!r} is already registered")
            self._specs[operation] = spec
        log_event(
            self._logger,
            "operation.registered",
            self._ctx(operation),
            add_to_memory=spec.add_to_memory,
            validate_order=spec.validate_order,
            include_system_message=spec.include_system_message,
        )
        return spec

    def operations(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._specs)

    def spec_for(self, operation: str) -> InvocationSpec:
        with self._lock:
            try:
                return self._specs[operation]
            except KeyError:
                raise ConfigurationError(f"unknown operation {operation!r}") from None

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------
    def invoke(
        self,
        operation: str,
        *,
        messages: Optional[Iterable[Message]] = None,
        conversation_id: Optional[str] = None,
        variables: Optional[Mapping[str, Any]] = None,
        tools: Iterable[ToolSpecification] = (),
    ) -> ChatResponse:
        """Run ``operation`` and return the backend response.

        Args:
            operation: Registered operation name.
            messages: Explicit ("dynamic") messages. When ``None`` and a
                conversation id is known, history is read from memory.
            conversation_id: Overrides the operation's conversation id.
            variables: Values for the operation's template placeholders.
            tools: Extra tool specifications for this call only.

        Raises:
            MessageOrderError: Invalid role order (validation enabled).
            ProviderError: Backend failure; ``RetryExhaustedError`` when all
                attempts failed with retriable codes.
            BackendContractError: The backend returned no reply.
            MemoryStoreError: Memory read or write-back failed.
        """
        spec = self.spec_for(operation)
        cid = conversation_id or spec.conversation_id
        ctx = self._ctx(operation, cid)

        system_text = resolve_template(spec.system_template, variables)
        trailing_text = resolve_template(spec.trailing_user_template, variables)

        history: Tuple[Message, ...] = ()
        if messages is None and cid and self._memory is not None:
            history = self._memory.read(cid)

        assembled = self._builder.build(
            spec,
            messages,
            system_text=system_text,
            trailing_user_text=trailing_text,
            history=history,
        )
        if spec.validate_order:
            self._validator.validate(assembled.messages)

        log_event(
            self._logger,
            "invoke.start",
            ctx,
            messages=len(assembled),
            history=assembled.history_length,
        )
        response = self._dispatcher.send(
            assembled.messages,
            tools=tuple(spec.tools) + tuple(tools or ()),
            max_output_tokens=spec.max_output_tokens,
            temperature=spec.temperature,
            operation=operation,
        )
        if response.message is None:
            raise BackendContractError(
                message="backend response carried no reply message",
                provider=self._dispatcher.provider_name,
                model=self._dispatcher.model,
            )

        if spec.add_to_memory and self._memory is not None:
            exchange = assembled.new_messages + (response.message,)
            self._memory.update(
                cid or DEFAULT_CONVERSATION_ID,
                lambda current: current + write_back_messages(current, exchange),
            )

        log_event(
            self._logger,
            "invoke.end",
            ctx,
            stop_reason=response.stop_reason,
            attempts=response.meta.attempts,
            written_to_memory=spec.add_to_memory,
        )
        return response

    def estimate_tokens(self, target: Any) -> int:
        """Prompt-side token count of ``target``; see :class:`TokenCountEstimator`."""
        return self._estimator.estimate_tokens(target)

    def _ctx(self, operation: str, conversation_id: Optional[str] = None) -> LogContext:
        return LogContext(
            provider=self._dispatcher.provider_name,
            model=self._dispatcher.model,
            operation=operation,
            conversation_id=conversation_id,
        )


__all__ = ["AiService", "DEFAULT_CONVERSATION_ID", "write_back_messages"]
