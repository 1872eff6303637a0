"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `chatwire.base.errors` for the stable surface.
"""

from .error_code import ErrorCode, RETRYABLE_CODES
from .provider_error import BackendContractError, ProviderError, RetryExhaustedError
from .pipeline_errors import ConfigurationError, MemoryStoreError, MessageOrderError
from .classification import classify_exception, to_provider_error

__all__ = [
    "ErrorCode",
    "RETRYABLE_CODES",
    "ProviderError",
    "BackendContractError",
    "RetryExhaustedError",
    "ConfigurationError",
    "MessageOrderError",
    "MemoryStoreError",
    "classify_exception",
    "to_provider_error",
]
