from __future__ import annotations

import functools
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Protocol, TypeVar

from ..errors import (
    RETRYABLE_CODES,
    ConfigurationError,
    ErrorCode,
    ProviderError,
    RetryExhaustedError,
)

T = TypeVar("T")


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: ProviderError | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    delay_base: float = 2.0  # exponential base (base**attempt)
    max_delay: float = 30.0
    retryable_codes: tuple[ErrorCode, ...] = RETRYABLE_CODES
    attempt_logger: AttemptLogger | None = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay_base < 0:
            raise ConfigurationError(f"delay_base must be >= 0, got {self.delay_base}")

    def delays(self) -> Iterable[float]:
        for attempt in range(self.max_attempts - 1):
            yield min(self.delay_base**attempt, self.max_delay)

    def is_retryable(self, error: ProviderError) -> bool:
        return error.code in self.retryable_codes and not isinstance(
            error, RetryExhaustedError
        )


DEFAULT_RETRY_CONFIG = RetryConfig()


def retry(config: RetryConfig = DEFAULT_RETRY_CONFIG):
    """Return a decorator applying the standardized retry policy.

    - Only ``ProviderError`` instances are considered; anything else propagates.
    - Codes outside ``config.retryable_codes`` surface immediately, unchanged.
    - Exponential backoff ``delay_base ** attempt`` capped at ``max_delay``.
    - When the last attempt also fails with a retryable code the error is
      wrapped in :class:`RetryExhaustedError`.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            last_exc: ProviderError | None = None
            schedule = list(config.delays()) + [None]  # final attempt has no delay
            for attempt, delay in enumerate(schedule):
                try:
                    result = func(*args, **kwargs)
                except ProviderError as e:
                    last_exc = e
                    retryable = config.is_retryable(e)
                    if config.attempt_logger:
                        config.attempt_logger(
                            attempt=attempt,
                            max_attempts=config.max_attempts,
                            delay=delay if retryable else None,
                            error=e,
                        )
                    if not retryable:
                        raise
                    if delay is None:
                        break
                    time.sleep(delay)
                    continue
                if config.attempt_logger:
                    config.attempt_logger(
                        attempt=attempt,
                        max_attempts=config.max_attempts,
                        delay=None,
                        error=None,
                    )
                return result
            if last_exc is None:  # pragma: no cover - loop always runs at least once
                raise RuntimeError("retry: reached terminal state without captured exception")
            raise RetryExhaustedError.wrap(last_exc, attempts=config.max_attempts) from last_exc

        return wrapper

    return decorator


def call_with_retry(func: Callable[[], T], config: RetryConfig = DEFAULT_RETRY_CONFIG) -> T:
    """Invoke ``func`` once under ``config``; convenience for closures."""
    return retry(config)(func)()


__all__ = [
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "retry",
    "call_with_retry",
]
