"""
ChatRequest DTO for provider-agnostic backend calls.

Transports map this normalized request to their wire format. ``max_tokens=0``
marks a count-only request: the backend must only count input tokens.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from .message import Message

if TYPE_CHECKING:
    from ..dto.tool_specification import ToolSpecification


@dataclass
class ChatRequest:
    """Normalized request sent to a backend transport.

    Attributes:
        model: Target model identifier.
        messages: Ordered messages, exactly as they should be sent.
        tools: Tool specifications, passed through opaquely.
        max_tokens: Maximum output tokens; ``0`` requests no generation.
        temperature: Sampling temperature when supported.
        extra: Escape hatch for adapter-specific controls.
    """

    model: str
    messages: Tuple[Message, ...]
    tools: Tuple["ToolSpecification", ...] = ()
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.messages = tuple(self.messages)
        self.tools = tuple(self.tools or ())

    @property
    def is_count_only(self) -> bool:
        return self.max_tokens == 0

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation of the request."""
        tools: List[Dict[str, Any]] = [t.model_dump() for t in self.tools]
        return {
            "model": self.model,
            "messages": [m.to_dict() for m in self.messages],
            "tools": tools or None,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "extra": self.extra,
        }


__all__ = ["ChatRequest"]
