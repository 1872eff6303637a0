"""Anthropic helpers module.

Purpose:
- Translate a normalized ``ChatRequest`` into keyword arguments for
  ``client.messages.create`` without touching the SDK, so the mapping can be
  tested offline.

Mapping rules:
- System messages are lifted into the top-level ``system`` parameter.
- User/assistant content becomes content blocks; image parts become url or
  base64 ``image`` blocks.
- Assistant tool calls become ``tool_use`` blocks.
- Tool results become ``tool_result`` blocks inside a ``user`` turn;
  consecutive results share one turn as the Messages API requires.
- Tool specifications become ``{name, description, input_schema}``.
- ``max_tokens`` defaults to ``DEFAULT_MAX_TOKENS``; an explicit ``0`` is
  kept for token-count requests.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..base.dto import ToolSpecification
from ..base.models import ChatRequest, ContentPart, Message

DEFAULT_MAX_TOKENS = 1024


def _part_block(part: ContentPart) -> Dict[str, Any]:
    """Map one ``ContentPart`` to an Anthropic content block."""
    if part.type == "image" and part.data:
        if "url" in part.data:
            return {"type": "image", "source": {"type": "url", "url": part.data["url"]}}
        return {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": part.data.get("media_type", "image/png"),
                "data": part.data.get("base64", ""),
            },
        }
    if part.type == "text":
        return {"type": "text", "text": part.text or ""}
    return {"type": "text", "text": part.text if part.text is not None else f"[{part.type}]"}


def _content_blocks(message: Message) -> List[Dict[str, Any]]:
    if message.is_structured():
        return [_part_block(p) for p in message.content]  # type: ignore[union-attr]
    text = message.content
    return [{"type": "text", "text": text}] if text else []


def _assistant_blocks(message: Message) -> List[Dict[str, Any]]:
    blocks = _content_blocks(message)
    for call in message.tool_calls:
        blocks.append(
            {
                "type": "tool_use",
                "id": call.id,
                "name": call.name,
                "input": call.arguments_dict(),
            }
        )
    return blocks


def _tool_result_block(message: Message) -> Dict[str, Any]:
    return {
        "type": "tool_result",
        "tool_use_id": message.tool_call_id,
        "content": message.text_or_joined(),
    }


def to_anthropic_messages(messages: List[Message]) -> tuple[Optional[str], List[Dict[str, Any]]]:
    """Split ``messages`` into ``(system, messages)`` for the Messages API.

    Returns:
        The newline-joined system text (``None`` when absent) and the list
        of ``{"role", "content"}`` turns.
    """
    system_parts: List[str] = []
    turns: List[Dict[str, Any]] = []
    for m in messages:
        if m.role == "system":
            system_parts.append(m.text_or_joined())
        elif m.role == "tool":
            block = _tool_result_block(m)
            last = turns[-1] if turns else None
            if last and last["role"] == "user" and last.get("_tool_results"):
                last["content"].append(block)
            else:
                turns.append({"role": "user", "content": [block], "_tool_results": True})
        elif m.role == "assistant":
            turns.append({"role": "assistant", "content": _assistant_blocks(m)})
        else:
            blocks = _content_blocks(m)
            # a turn needs at least one block
            turns.append({"role": "user", "content": blocks or [{"type": "text", "text": ""}]})
    for t in turns:
        t.pop("_tool_results", None)
    system = "\n".join(p for p in system_parts if p) or None
    return system, turns


def to_anthropic_tool(spec: ToolSpecification) -> Dict[str, Any]:
    tool: Dict[str, Any] = {"name": spec.name, "input_schema": dict(spec.parameters)}
    if spec.description:
        tool["description"] = spec.description
    return tool


def build_params(request: ChatRequest) -> Dict[str, Any]:
    """Build keyword arguments for ``client.messages.create``.

    Parameters:
        request: Normalized chat request.

    Returns:
        dict: Parameters with ``None`` values omitted.
    """
    system, turns = to_anthropic_messages(list(request.messages))
    params: Dict[str, Any] = {
        "model": request.model,
        "max_tokens": DEFAULT_MAX_TOKENS if request.max_tokens is None else request.max_tokens,
        "messages": turns,
    }
    if system:
        params["system"] = system
    if request.temperature is not None:
        params["temperature"] = request.temperature
    if request.tools:
        params["tools"] = [to_anthropic_tool(t) for t in request.tools]
    params.update(request.extra or {})
    return params


__all__ = [
    "DEFAULT_MAX_TOKENS",
    "build_params",
    "to_anthropic_messages",
    "to_anthropic_tool",
]
