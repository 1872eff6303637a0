"""Models parts package public surface.

Re-exports individual DTOs; `chatwire.base.models` remains the primary stable
import path.
"""

from .content_part import ContentPart, ContentPartType
from .tool_execution_request import ToolExecutionRequest
from .message import Message, Role, ROLES
from .token_usage import TokenUsage, EMPTY_USAGE
from .provider_metadata import ProviderMetadata
from .chat_request import ChatRequest
from .chat_response import ChatResponse
from .invocation_spec import InvocationSpec

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
