"""Single-class protocol modules re-exported by ``chatwire.base.interfaces``."""

from .backend_transport import BackendTransport
from .memory_store import ChatMemoryStore

__all__ = ["BackendTransport", "ChatMemoryStore"]
