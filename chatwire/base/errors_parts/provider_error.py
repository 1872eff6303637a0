"""
Structured backend error exception types.

`ProviderError` wraps transport/SDK exceptions with a normalized `ErrorCode`
so the retry policy and logging can reason about failures uniformly. The two
subclasses mark failures the dispatcher never retries: a broken backend
contract, and an exhausted retry budget.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a structured backend error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        provider: Provider key where the error originated (e.g., ``"anthropic"``).
        model: Optional model name associated with the failure.
        retryable: Hint for upstream retry logic (not authoritative).
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


@dataclass
class BackendContractError(ProviderError):
    """The backend answered, but without a field the core relies on.

    Raised for responses that omit token usage or the reply message. These are
    surfaced immediately and never retried.
    """

    code: ErrorCode = ErrorCode.CONTRACT
    message: str = "backend response violated the expected contract"
    provider: str = "unknown"


@dataclass
class RetryExhaustedError(ProviderError):
    """Every attempt allowed by the retry policy failed with a retriable error.

    Attributes:
        attempts: Number of attempts that were made.
        last_error: The final underlying :class:`ProviderError`.
    """

    code: ErrorCode = ErrorCode.RETRY_EXHAUSTED
    message: str = "retry attempts exhausted"
    provider: str = "unknown"
    attempts: int = 0
    last_error: Optional[ProviderError] = None

    @classmethod
    def wrap(cls, last_error: ProviderError, attempts: int) -> "RetryExhaustedError":
        return cls(
            message=f"gave up after {attempts} attempt(s): {last_error.message}",
            provider=last_error.provider,
            model=last_error.model,
            retryable=False,
            raw=last_error,
            attempts=attempts,
            last_error=last_error,
        )


__all__ = ["ProviderError", "BackendContractError", "RetryExhaustedError"]
