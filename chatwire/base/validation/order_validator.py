"""Role-transition validation for outgoing transcripts.

The validator is a finite-state machine driven by an explicit transition
table keyed by ``(state, message kind)``. A missing table entry is a
violation. Validation never alters the sequence; it either returns or raises
:class:`MessageOrderError`.

Rules encoded by the table:

* any number of leading system messages;
* the first non-system message is a user message;
* consecutive user messages are allowed;
* an assistant message without tool calls is followed by a user message;
* an assistant message with tool calls is followed by one or more tool
  results, after which a user or assistant message may follow;
* system messages outside the leading run are rejected;
* a transcript must not end while tool results are still owed.

Empty and system-only transcripts are accepted.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, Mapping, Tuple

from ..errors import MessageOrderError
from ..models import Message


class OrderState(str, Enum):
    START = "start"
    SEEN_SYSTEM = "seen_system"
    AFTER_USER = "after_user"
    AFTER_ASSISTANT = "after_assistant"
    AWAITING_TOOL_RESULT = "awaiting_tool_result"
    AFTER_TOOL_RESULT = "after_tool_result"


class MessageKind(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    ASSISTANT_TOOL_CALLS = "assistant_tool_calls"
    TOOL_RESULT = "tool"


def kind_of(message: Message) -> MessageKind:
    if message.role == "assistant":
        return MessageKind.ASSISTANT_TOOL_CALLS if message.tool_calls else MessageKind.ASSISTANT
    return MessageKind(message.role)


S, K = OrderState, MessageKind

TRANSITIONS: Mapping[Tuple[OrderState, MessageKind], OrderState] = {
    (S.START, K.SYSTEM): S.SEEN_SYSTEM,
    (S.START, K.USER): S.AFTER_USER,
    (S.SEEN_SYSTEM, K.SYSTEM): S.SEEN_SYSTEM,
    (S.SEEN_SYSTEM, K.USER): S.AFTER_USER,
    (S.AFTER_USER, K.USER): S.AFTER_USER,
    (S.AFTER_USER, K.ASSISTANT): S.AFTER_ASSISTANT,
    (S.AFTER_USER, K.ASSISTANT_TOOL_CALLS): S.AWAITING_TOOL_RESULT,
    (S.AFTER_ASSISTANT, K.USER): S.AFTER_USER,
    (S.AWAITING_TOOL_RESULT, K.TOOL_RESULT): S.AFTER_TOOL_RESULT,
    (S.AFTER_TOOL_RESULT, K.TOOL_RESULT): S.AFTER_TOOL_RESULT,
    (S.AFTER_TOOL_RESULT, K.USER): S.AFTER_USER,
    (S.AFTER_TOOL_RESULT, K.ASSISTANT): S.AFTER_ASSISTANT,
    (S.AFTER_TOOL_RESULT, K.ASSISTANT_TOOL_CALLS): S.AWAITING_TOOL_RESULT,
}

ACCEPTING_STATES = frozenset(set(OrderState) - {S.AWAITING_TOOL_RESULT})

# Human-readable rule per state, used in the error message.
_RULES: Dict[OrderState, str] = {
    S.START: "conversation must begin with a user message after optional system messages",
    S.SEEN_SYSTEM: "conversation must begin with a user message after optional system messages",
    S.AFTER_USER: "a user message must be followed by a user or assistant message",
    S.AFTER_ASSISTANT: "an assistant message without tool calls must be followed by a user message",
    S.AWAITING_TOOL_RESULT: "an assistant message with tool calls must be followed by tool results",
    S.AFTER_TOOL_RESULT: "tool results must be followed by more tool results, a user or an assistant message",
}

_SYSTEM_RULE = "system messages are only allowed at the start of the conversation"


def _expected_roles(state: OrderState) -> Tuple[str, ...]:
    roles = []
    for (src, kind) in TRANSITIONS:
        if src is not state:
            continue
        role = "assistant" if kind is K.ASSISTANT_TOOL_CALLS else kind.value
        if role not in roles:
            roles.append(role)
    return tuple(roles)


class OrderValidator:
    """Checks that a transcript follows the conversational role rules."""

    def __init__(self, transitions: Mapping[Tuple[OrderState, MessageKind], OrderState] = TRANSITIONS) -> None:
        self._transitions = transitions

    def validate(self, messages: Iterable[Message]) -> None:
        """Raise :class:`MessageOrderError` unless ``messages`` is well ordered."""
        state = S.START
        seen = 0
        for position, message in enumerate(messages):
            kind = kind_of(message)
            nxt = self._transitions.get((state, kind))
            if nxt is None:
                rule = _SYSTEM_RULE if kind is K.SYSTEM else _RULES[state]
                raise MessageOrderError(
                    rule,
                    position=position,
                    expected=_expected_roles(state),
                    actual=message.role,
                )
            state = nxt
            seen = position + 1
        if state not in ACCEPTING_STATES:
            raise MessageOrderError(
                _RULES[state],
                position=seen,
                expected=_expected_roles(state),
                actual=None,
            )

    def is_valid(self, messages: Iterable[Message]) -> bool:
        try:
            self.validate(messages)
        except MessageOrderError:
            return False
        return True


def validate_message_order(messages: Iterable[Message]) -> None:
    """Module-level convenience around a default :class:`OrderValidator`."""
    OrderValidator().validate(messages)


__all__ = [
    "OrderState",
    "MessageKind",
    "TRANSITIONS",
    "OrderValidator",
    "validate_message_order",
]
