"""Conversation memory: reference store and synchronized access."""

from .in_memory_store import InMemoryChatMemoryStore
from .synchronizer import MemorySynchronizer

__all__ = ["InMemoryChatMemoryStore", "MemorySynchronizer"]
