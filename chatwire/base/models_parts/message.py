"""
Message DTO shared by the builder, validator, memory and transports.

Defines the immutable `Message` dataclass and the `Role` literal. Content may
be plain text or a tuple of `ContentPart` objects. Tool calls are only legal
on assistant messages; tool-result messages carry the id of the call they
answer.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Literal, Optional, Tuple, Union

from .content_part import ContentPart
from .tool_execution_request import ToolExecutionRequest


# Message roles; "tool" carries the result of a tool execution.
Role = Literal["system", "user", "assistant", "tool"]

ROLES: Tuple[str, ...] = ("system", "user", "assistant", "tool")


@dataclass(frozen=True)
class Message:
    """One conversational turn.

    Attributes:
        role: ``"system"``, ``"user"``, ``"assistant"`` or ``"tool"``.
        content: Plain text, or a tuple of `ContentPart` items. Lists passed
            at construction are frozen into tuples.
        tool_calls: Tool invocations requested by an assistant message.
        tool_call_id: For ``"tool"`` messages, the id of the answered call.
        tool_name: For ``"tool"`` messages, the name of the executed tool.

    Raises:
        ValueError: On an unknown role, or tool calls on a non-assistant
            message.
    """

    role: Role
    content: Union[str, Tuple[ContentPart, ...]] = ""
    tool_calls: Tuple[ToolExecutionRequest, ...] = ()
    tool_call_id: Optional[str] = None
    tool_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"unknown message role: {self.role!r}")
        if self.content is None:
            object.__setattr__(self, "content", "")
        elif not isinstance(self.content, (str, tuple)):
            object.__setattr__(self, "content", tuple(self.content))
        if not isinstance(self.tool_calls, tuple):
            object.__setattr__(self, "tool_calls", tuple(self.tool_calls))
        if self.tool_calls and self.role != "assistant":
            raise ValueError(f"tool calls are only allowed on assistant messages, not '{self.role}'")

    # ---- constructors ----
    @classmethod
    def system(cls, text: str) -> "Message":
        return cls(role="system", content=text)

    @classmethod
    def user(cls, content: Union[str, Iterable[ContentPart]]) -> "Message":
        return cls(role="user", content=content if isinstance(content, str) else tuple(content))

    @classmethod
    def assistant(cls, text: str = "", tool_calls: Iterable[ToolExecutionRequest] = ()) -> "Message":
        return cls(role="assistant", content=text, tool_calls=tuple(tool_calls))

    @classmethod
    def tool_result(cls, tool_call_id: str, tool_name: str, text: str) -> "Message":
        return cls(role="tool", content=text, tool_call_id=tool_call_id, tool_name=tool_name)

    # ---- inspection ----
    def is_structured(self) -> bool:
        """Return True if the content is a tuple of parts."""
        return isinstance(self.content, tuple)

    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)

    def text_or_joined(self) -> str:
        """Return a flattened string view of the content.

        Text parts are joined with newlines; non-text parts appear as a
        bracketed type token, e.g. ``[image]``.
        """
        if isinstance(self.content, str):
            return self.content
        parts: List[str] = []
        for p in self.content:
            parts.append(p.text if p.text else f"[{p.type}]")
        return "\n".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "role": self.role,
            "content": (
                self.content if isinstance(self.content, str)
                else [p.to_dict() for p in self.content]
            ),
        }
        if self.tool_calls:
            out["tool_calls"] = [t.to_dict() for t in self.tool_calls]
        if self.tool_call_id is not None:
            out["tool_call_id"] = self.tool_call_id
        if self.tool_name is not None:
            out["tool_name"] = self.tool_name
        return out


__all__ = ["Message", "Role", "ROLES"]
