"""
Backend-agnostic interfaces (Protocols) for the pipeline's collaborators.

Re-exports the single-class modules under ``chatwire.base.interfaces_parts``.
"""

from __future__ import annotations

from .interfaces_parts import BackendTransport, ChatMemoryStore

__all__ = ["BackendTransport", "ChatMemoryStore"]
