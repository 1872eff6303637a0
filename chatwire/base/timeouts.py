"""Timeout configuration for backend transports.

The timeout is read from the environment once and cached, so transports never
carry hard-coded numeric literals. The core does not enforce deadlines
itself: the transport's SDK client does, and a deadline surfaces as a
``TIMEOUT``-classified failure that the dispatcher may retry.

Supported environment variable (optional, positive float):
    CHATWIRE_HTTP_TIMEOUT_SECONDS
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values in seconds.

    Attributes:
        http_timeout_seconds: Overall timeout for one backend call.
    """

    http_timeout_seconds: float = 60.0


_CACHED: Optional[TimeoutConfig] = None


def _parse_env_float(name: str, default: float) -> float:
    """Read a positive float from ``name``; fall back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED  # noqa: PLW0603 - documented module cache
    if _CACHED is None:
        defaults = TimeoutConfig()
        _CACHED = TimeoutConfig(
            http_timeout_seconds=_parse_env_float(
                "CHATWIRE_HTTP_TIMEOUT_SECONDS", defaults.http_timeout_seconds
            ),
        )
    return _CACHED


def reset_timeout_config() -> None:
    """Drop the cached configuration so the next call re-reads the environment."""
    global _CACHED  # noqa: PLW0603
    _CACHED = None


__all__ = ["TimeoutConfig", "get_timeout_config", "reset_timeout_config"]
