"""
Normalized backend error codes (taxonomy).

Defines the `ErrorCode` enumeration used by transports, the dispatcher retry
policy and structured logging. Values are lowercase snake_case and are a
stable public contract for log consumers.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    TRANSIENT = "transient"
    UNSUPPORTED = "unsupported"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    SERVER_ERROR = "server_error"
    UNAVAILABLE = "unavailable"
    CONTRACT = "contract"
    RETRY_EXHAUSTED = "retry_exhausted"
    UNKNOWN = "unknown"


# Codes the dispatcher treats as transient by default.
RETRYABLE_CODES = (
    ErrorCode.TRANSIENT,
    ErrorCode.RATE_LIMIT,
    ErrorCode.TIMEOUT,
    ErrorCode.SERVER_ERROR,
    ErrorCode.UNAVAILABLE,
)


__all__ = ["ErrorCode", "RETRYABLE_CODES"]
