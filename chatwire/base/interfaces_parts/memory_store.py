"""ChatMemoryStore Protocol (single-class module).

Interface for the per-conversation message log used by the memory
synchronizer. Implementations only need whole-sequence reads and writes;
locking and append semantics live in ``MemorySynchronizer``.
"""

from __future__ import annotations

from typing import Protocol, Sequence, Tuple, runtime_checkable

from ..models import Message


@runtime_checkable
class ChatMemoryStore(Protocol):
    """Keyed storage of conversation transcripts."""

    def get_messages(self, conversation_id: str) -> Tuple[Message, ...]:  # pragma: no cover - interface
        """Return the stored transcript, or an empty tuple when absent.

        Parameters
        ----------
        conversation_id:
            Unique identifier for the conversation.
        """
        ...

    def set_messages(self, conversation_id: str, messages: Sequence[Message]) -> None:  # pragma: no cover - interface
        """Replace the stored transcript for ``conversation_id``.

        The replacement must be atomic from the point of view of readers:
        they see either the old or the new transcript, never a mix.
        """
        ...

    def delete_messages(self, conversation_id: str) -> None:  # pragma: no cover - interface
        """Forget the transcript for ``conversation_id`` (no-op when absent)."""
        ...
