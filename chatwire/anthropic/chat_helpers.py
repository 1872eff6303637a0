"""Anthropic non-streaming chat helpers.

Purpose:
- Wrap ``client.messages.create`` so SDK exceptions leave as classified
  ``ProviderError`` instances.
- Turn the SDK response (or an equivalent mapping) into a normalized
  ``ChatResponse``: text and ``tool_use`` blocks into one assistant
  ``Message``, usage via ``extract_anthropic_token_usage``.

Retries are not handled here; the dispatcher owns the retry policy.
"""

from __future__ import annotations

import json
from typing import Any, List, Mapping, Optional

from ..base.errors import to_provider_error
from ..base.models import ChatResponse, Message, ProviderMetadata, ToolExecutionRequest
from ..base.tokens import extract_anthropic_token_usage


def _field(obj: Any, key: str, default: Any = None) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key, default)
    return getattr(obj, key, default)


def extract_text(resp: Any) -> str:
    """Return the newline-joined text blocks of ``resp``."""
    parts = [
        _field(block, "text") or ""
        for block in (_field(resp, "content") or [])
        if _field(block, "type") == "text"
    ]
    return "\n".join(p for p in parts if p)


def extract_tool_calls(resp: Any) -> List[ToolExecutionRequest]:
    """Map ``tool_use`` blocks to :class:`ToolExecutionRequest` (arguments as JSON text)."""
    calls: List[ToolExecutionRequest] = []
    for block in _field(resp, "content") or []:
        if _field(block, "type") != "tool_use":
            continue
        calls.append(
            ToolExecutionRequest(
                id=_field(block, "id") or "",
                name=_field(block, "name") or "",
                arguments=json.dumps(_field(block, "input") or {}),
            )
        )
    return calls


def to_reply_message(resp: Any) -> Optional[Message]:
    """Build the assistant reply, or ``None`` when the response has no content blocks."""
    if not (_field(resp, "content") or []):
        return None
    return Message.assistant(extract_text(resp), tool_calls=extract_tool_calls(resp))


def invoke_messages_create(client: Any, params: dict, model: str, provider_name: str):
    """Call ``client.messages.create`` with error mapping.

    Raises:
        ProviderError: On any underlying SDK exception, classified by status
            code or message heuristics.
    """
    try:
        return client.messages.create(**params)
    except Exception as e:
        raise to_provider_error(e, provider=provider_name, model=model) from e


def to_chat_response(resp: Any, *, provider_name: str, model: str) -> ChatResponse:
    meta = ProviderMetadata(
        provider_name=provider_name,
        model_name=_field(resp, "model") or model,
        response_id=_field(resp, "id"),
    )
    return ChatResponse(
        message=to_reply_message(resp),
        meta=meta,
        token_usage=extract_anthropic_token_usage(resp),
        stop_reason=_field(resp, "stop_reason"),
        raw=resp,
    )


__all__ = [
    "extract_text",
    "extract_tool_calls",
    "to_reply_message",
    "invoke_messages_create",
    "to_chat_response",
]
