"""
ChatResponse DTO representing normalized backend responses.

``message`` is absent for count-only requests (no generation happened). ``raw`` is
for debugging only and is excluded from serialization.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .message import Message
from .provider_metadata import ProviderMetadata
from .token_usage import EMPTY_USAGE, TokenUsage


@dataclass
class ChatResponse:
    """Backend-agnostic response from one dispatched call.

    Attributes:
        message: The assistant reply, or ``None`` when nothing was generated.
        token_usage: Reported token accounting.
        stop_reason: Backend stop reason (``"end_turn"``, ``"max_tokens"``,
            ``"tool_use"``...).
        meta: Execution metadata.
        raw: Optional native response object for diagnostics only.
    """

    message: Optional[Message]
    meta: ProviderMetadata
    token_usage: TokenUsage = EMPTY_USAGE
    stop_reason: Optional[str] = None
    raw: Optional[Any] = None

    @property
    def text(self) -> Optional[str]:
        if self.message is None:
            return None
        return self.message.text_or_joined() or None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary excluding raw backend objects."""
        return {
            "message": self.message.to_dict() if self.message else None,
            "token_usage": self.token_usage.to_dict(),
            "stop_reason": self.stop_reason,
            "raw": None,
            "meta": self.meta.to_dict(),
        }


__all__ = ["ChatResponse"]
