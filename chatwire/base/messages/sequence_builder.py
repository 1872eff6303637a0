"""Assembly of the outgoing message sequence for one invocation.

Sources, in timeline order:

1. conversation history read from memory (only when the caller supplied no
   explicit messages);
2. the caller's explicit ("dynamic") messages, unchanged and in order;
3. one user message built from the trailing-user template.

The system template is placed in front of everything, but only when
``include_system_message`` is set, the resolved text is non-blank and the
history + dynamic base does not already open with a system message. A
transcript therefore never starts with two system turns.

The builder is pure: templates arrive already resolved, history arrives
already read, and nothing is validated here.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..models import InvocationSpec, Message
from ..utils.templates import is_blank


@dataclass(frozen=True)
class AssembledSequence:
    """Result of :meth:`MessageSequenceBuilder.build`.

    Attributes:
        messages: The final sequence to dispatch.
        new_messages: The subset of ``messages`` that did not come from
            memory, in order; these are the write-back candidates.
        history_length: Number of messages taken from memory.
    """

    messages: Tuple[Message, ...]
    new_messages: Tuple[Message, ...]
    history_length: int = 0

    def __len__(self) -> int:
        return len(self.messages)


class MessageSequenceBuilder:
    """Merges template, memory and caller messages per an ``InvocationSpec``."""

    def build(
        self,
        spec: InvocationSpec,
        dynamic: Optional[Iterable[Message]] = None,
        *,
        system_text: Optional[str] = None,
        trailing_user_text: Optional[str] = None,
        history: Iterable[Message] = (),
    ) -> AssembledSequence:
        dynamic_messages = tuple(dynamic) if dynamic is not None else ()
        history_messages = tuple(history)

        base: Tuple[Message, ...] = history_messages + dynamic_messages
        fresh: List[Message] = list(dynamic_messages)
        prefix: Tuple[Message, ...] = ()

        if spec.include_system_message and not is_blank(system_text):
            if not (base and base[0].role == "system"):
                system = Message.system(system_text)  # type: ignore[arg-type]
                prefix = (system,)
                fresh.insert(0, system)

        suffix: Tuple[Message, ...] = ()
        if not is_blank(trailing_user_text):
            user = Message.user(trailing_user_text)  # type: ignore[arg-type]
            suffix = (user,)
            fresh.append(user)

        return AssembledSequence(
            messages=prefix + base + suffix,
            new_messages=tuple(fresh),
            history_length=len(history_messages),
        )


def build_message_sequence(
    spec: InvocationSpec,
    dynamic: Optional[Iterable[Message]] = None,
    *,
    system_text: Optional[str] = None,
    trailing_user_text: Optional[str] = None,
    history: Iterable[Message] = (),
) -> Tuple[Message, ...]:
    """Convenience wrapper returning only the final sequence."""
    return MessageSequenceBuilder().build(
        spec,
        dynamic,
        system_text=system_text,
        trailing_user_text=trailing_user_text,
        history=history,
    ).messages


__all__ = ["AssembledSequence", "MessageSequenceBuilder", "build_message_sequence"]
