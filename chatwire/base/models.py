"""
Provider-agnostic domain models (DTOs) public surface.

Re-exports the one-class-per-file implementations under
``chatwire.base.models_parts``.
"""

from .models_parts import (
    EMPTY_USAGE,
    ROLES,
    ChatRequest,
    ChatResponse,
    ContentPart,
    ContentPartType,
    InvocationSpec,
    Message,
    ProviderMetadata,
    Role,
    TokenUsage,
    ToolExecutionRequest,
)

__all__ = [
    "ContentPart",
    "ContentPartType",
    "ToolExecutionRequest",
    "Message",
    "Role",
    "ROLES",
    "TokenUsage",
    "EMPTY_USAGE",
    "ProviderMetadata",
    "ChatRequest",
    "ChatResponse",
    "InvocationSpec",
]
