"""chatwire package

Declarative LLM invocation pipeline: message sequence assembly, role-order
validation, synchronized conversation memory, a retrying dispatcher and
zero-output token estimation, over pluggable backend transports.

Public API (re-exported):
    - Version: ``__version__``
    - Service: :class:`AiService`, :class:`InvocationSpec`, :func:`create_service`
    - Messages: :class:`Message`, :class:`ContentPart`,
      :class:`ToolExecutionRequest`, :class:`ToolSpecification`
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode` and the
      pipeline errors
"""

from .base.dto import ToolSpecification
from .base.errors import (
    BackendContractError,
    ConfigurationError,
    ErrorCode,
    MemoryStoreError,
    MessageOrderError,
    ProviderError,
    RetryExhaustedError,
)
from .base.factory import create_service
from .base.memory import InMemoryChatMemoryStore, MemorySynchronizer
from .base.models import ChatResponse, ContentPart, InvocationSpec, Message, ToolExecutionRequest
from .service import AiService

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AiService",
    "InvocationSpec",
    "create_service",
    "Message",
    "ContentPart",
    "ToolExecutionRequest",
    "ToolSpecification",
    "ChatResponse",
    "InMemoryChatMemoryStore",
    "MemorySynchronizer",
    "ErrorCode",
    "ProviderError",
    "BackendContractError",
    "RetryExhaustedError",
    "ConfigurationError",
    "MessageOrderError",
    "MemoryStoreError",
]
