"""In-memory implementation of ChatMemoryStore.

Reference store for development, tests and single-process services. Each
conversation is held as an immutable tuple that is replaced wholesale on
write, so readers never observe a half-written transcript.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..models import Message


class InMemoryChatMemoryStore:
    """Dictionary-backed transcript store.

    Parameters
    ----------
    max_messages:
        Optional window size. When set, writes keep only the most recent
        ``max_messages`` messages; a leading system message is always kept
        and tool results orphaned by the cut are dropped. ``None`` (default)
        keeps everything.

    Thread safety: individual operations are atomic. Read-modify-write
    sequences must be serialized by the caller (see ``MemorySynchronizer``).
    """

    def __init__(self, max_messages: Optional[int] = None) -> None:
        if max_messages is not None and max_messages < 1:
            raise ValueError("max_messages must be a positive integer")
        self._max_messages = max_messages
        self._conversations: Dict[str, Tuple[Message, ...]] = {}
        self._lock = threading.Lock()

    def get_messages(self, conversation_id: str) -> Tuple[Message, ...]:
        with self._lock:
            return self._conversations.get(conversation_id, ())

    def set_messages(self, conversation_id: str, messages: Sequence[Message]) -> None:
        snapshot = self._apply_window(tuple(messages))
        with self._lock:
            self._conversations[conversation_id] = snapshot

    def delete_messages(self, conversation_id: str) -> None:
        with self._lock:
            self._conversations.pop(conversation_id, None)

    def list_conversations(self) -> List[str]:
        """List all conversation IDs."""
        with self._lock:
            return list(self._conversations.keys())

    def get_conversation_stats(self, conversation_id: str) -> Dict[str, Any]:
        """Return message count and role breakdown for one conversation."""
        messages = self.get_messages(conversation_id)
        roles: Dict[str, int] = {}
        for m in messages:
            roles[m.role] = roles.get(m.role, 0) + 1
        return {
            "message_count": len(messages),
            "roles": roles,
            "exists": conversation_id in self._conversations,
        }

    def _apply_window(self, messages: Tuple[Message, ...]) -> Tuple[Message, ...]:
        limit = self._max_messages
        if limit is None or len(messages) <= limit:
            return messages
        head: Tuple[Message, ...] = ()
        body = messages
        if messages[0].role == "system":
            head, body = messages[:1], messages[1:]
        keep = max(limit - len(head), 0)
        tail = list(body[len(body) - keep:]) if keep else []
        while tail and tail[0].role == "tool":
            tail.pop(0)
        return head + tuple(tail)


__all__ = ["InMemoryChatMemoryStore"]
