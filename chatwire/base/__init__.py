"""
Pipeline base package.

Exports the backend-agnostic contracts, DTOs and pipeline components:

- Models (DTOs): messages, requests, responses, invocation specs
- Interfaces: backend transport and memory store protocols
- Components: sequence builder, order validator, memory synchronizer,
  dispatcher, token estimator
- Factory: lazy creation of transports by canonical name
"""

from .dispatch import Dispatcher
from .dto import ToolSpecification
from .errors import (
    BackendContractError,
    ConfigurationError,
    ErrorCode,
    MemoryStoreError,
    MessageOrderError,
    ProviderError,
    RetryExhaustedError,
)
from .factory import ProviderFactory, UnknownProviderError, create_service
from .interfaces import BackendTransport, ChatMemoryStore
from .memory import InMemoryChatMemoryStore, MemorySynchronizer
from .messages import AssembledSequence, MessageSequenceBuilder
from .models import (
    ChatRequest,
    ChatResponse,
    ContentPart,
    InvocationSpec,
    Message,
    ProviderMetadata,
    Role,
    TokenUsage,
    ToolExecutionRequest,
)
from .resilience import RetryConfig
from .timeouts import TimeoutConfig, get_timeout_config
from .tokens import TokenCountEstimator
from .validation import OrderValidator, validate_message_order

__all__ = [
    # Models
    "ChatRequest",
    "ChatResponse",
    "ContentPart",
    "InvocationSpec",
    "Message",
    "ProviderMetadata",
    "Role",
    "TokenUsage",
    "ToolExecutionRequest",
    "ToolSpecification",
    # Interfaces
    "BackendTransport",
    "ChatMemoryStore",
    # Components
    "AssembledSequence",
    "MessageSequenceBuilder",
    "OrderValidator",
    "validate_message_order",
    "InMemoryChatMemoryStore",
    "MemorySynchronizer",
    "Dispatcher",
    "RetryConfig",
    "TokenCountEstimator",
    "TimeoutConfig",
    "get_timeout_config",
    # Errors
    "ErrorCode",
    "ProviderError",
    "BackendContractError",
    "RetryExhaustedError",
    "ConfigurationError",
    "MessageOrderError",
    "MemoryStoreError",
    # Factory
    "ProviderFactory",
    "UnknownProviderError",
    "create_service",
]
