"""Serialized access to per-conversation transcripts.

``MemorySynchronizer`` sits between the invocation pipeline and a
:class:`ChatMemoryStore`. It owns a keyed lock map: every read and every
read-modify-write for one conversation id runs under that id's lock, while
different ids never contend. Updates build a new tuple and hand it to the
store in one ``set_messages`` call, so the stored transcript is swapped,
never mutated in place.

``append`` is plain concatenation. Callers that need a conditional write
(e.g. keep a single leading system turn) use ``update`` with a function of
the current transcript, which runs under the same lock.

Store failures are re-raised as :class:`MemoryStoreError`.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Iterable, Iterator, Optional, Tuple

from ..errors import MemoryStoreError
from ..interfaces import ChatMemoryStore
from ..logging import get_logger, log_event
from ..models import Message
from .in_memory_store import InMemoryChatMemoryStore

Transform = Callable[[Tuple[Message, ...]], Iterable[Message]]


class MemorySynchronizer:
    """Keyed-lock wrapper giving atomic read / append over a memory store."""

    def __init__(self, store: Optional[ChatMemoryStore] = None) -> None:
        self._store: ChatMemoryStore = store if store is not None else InMemoryChatMemoryStore()
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._logger = get_logger("chatwire.memory")

    @property
    def store(self) -> ChatMemoryStore:
        return self._store

    def _lock_for(self, conversation_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(conversation_id)
            if lock is None:
                lock = self._locks[conversation_id] = threading.Lock()
            return lock

    @contextmanager
    def exclusive(self, conversation_id: str) -> Iterator[None]:
        """Hold the per-conversation lock for the duration of the block."""
        _check_id(conversation_id)
        with self._lock_for(conversation_id):
            yield

    def read(self, conversation_id: str) -> Tuple[Message, ...]:
        """Return the stored transcript (empty when the conversation is unknown)."""
        with self.exclusive(conversation_id):
            return self._get(conversation_id)

    def append(self, conversation_id: str, messages: Iterable[Message]) -> None:
        """Append ``messages`` to the transcript in one atomic swap."""
        incoming = tuple(messages)
        if not incoming:
            return
        self.update(conversation_id, lambda current: current + incoming)

    def update(self, conversation_id: str, transform: Transform) -> Tuple[Message, ...]:
        """Replace the transcript with ``transform(current)`` under the conversation lock.

        Returns the stored transcript. Nothing is written when the transform
        returns the current transcript unchanged.
        """
        with self.exclusive(conversation_id):
            current = self._get(conversation_id)
            updated = tuple(transform(current))
            if updated == current:
                return current
            try:
                self._store.set_messages(conversation_id, updated)
            except Exception as exc:
                raise MemoryStoreError(conversation_id, "write", exc) from exc
        log_event(
            self._logger,
            "memory.update",
            None,
            level=logging.DEBUG,
            conversation_id=conversation_id,
            previous=len(current),
            stored=len(updated),
        )
        return updated

    def clear(self, conversation_id: str) -> None:
        """Forget the transcript for ``conversation_id``."""
        with self.exclusive(conversation_id):
            try:
                self._store.delete_messages(conversation_id)
            except Exception as exc:
                raise MemoryStoreError(conversation_id, "delete", exc) from exc

    def _get(self, conversation_id: str) -> Tuple[Message, ...]:
        try:
            return tuple(self._store.get_messages(conversation_id) or ())
        except Exception as exc:
            raise MemoryStoreError(conversation_id, "read", exc) from exc


def _check_id(conversation_id: str) -> None:
    if not isinstance(conversation_id, str) or not conversation_id.strip():
        raise ValueError("conversation_id must be a non-blank string")


__all__ = ["MemorySynchronizer"]
