"""
Errors raised by the invocation pipeline itself (not by the backend).

- ``ConfigurationError``: setup-time problems (blank model name or API key,
  malformed template, invalid operation registration).
- ``MessageOrderError``: the order validator rejected a transcript. Subclasses
  ``ValueError`` because the caller supplied an invalid argument.
- ``MemoryStoreError``: the memory collaborator failed while reading or
  writing a conversation.
"""
from __future__ import annotations

from typing import Optional, Tuple


class ConfigurationError(ValueError):
    """Raised at setup time when required configuration is missing or invalid."""


class MessageOrderError(ValueError):
    """A message sequence violates the conversational role-transition rules.

    Attributes:
        position: Zero-based index of the offending message (``len(sequence)``
            when the sequence ended too early).
        expected: Roles that would have been accepted at ``position``.
        actual: Role found at ``position`` (``None`` at end of sequence).
        rule: Short description of the violated rule.
    """

    def __init__(
        self,
        rule: str,
        *,
        position: int,
        expected: Tuple[str, ...],
        actual: Optional[str],
    ) -> None:
        self.rule = rule
        self.position = position
        self.expected = expected
        self.actual = actual
        found = f"got '{actual}'" if actual is not None else "reached end of sequence"
        super().__init__(
            f"Invalid message order: {rule} "
            f"(position {position}: expected {' or '.join(expected)}, {found})"
        )


class MemoryStoreError(RuntimeError):
    """The conversation memory store failed; wraps the underlying exception."""

    def __init__(self, conversation_id: str, operation: str, cause: Exception) -> None:
        self.conversation_id = conversation_id
        self.operation = operation
        self.cause = cause
        super().__init__(f"memory {operation} failed for conversation '{conversation_id}': {cause}")


__all__ = ["ConfigurationError", "MessageOrderError", "MemoryStoreError"]
