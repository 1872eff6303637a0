"""Unified error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``chatwire.base.errors_parts`` to keep a single stable import path.
"""

from .errors_parts import (
    RETRYABLE_CODES,
    BackendContractError,
    ConfigurationError,
    ErrorCode,
    MemoryStoreError,
    MessageOrderError,
    ProviderError,
    RetryExhaustedError,
    classify_exception,
    to_provider_error,
)

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
