"""Pytest configuration for the chatwire test suite.

Provides mock-transport based fixtures so the whole pipeline can be exercised
offline, a no-op ``time.sleep`` for retry tests, and isolation of the
config/timeout caches between tests.
"""

from __future__ import annotations

import logging
import time
from typing import Iterator, List

import pytest

from chatwire.base.dispatch import Dispatcher
from chatwire.base.logging import get_logger
from chatwire.base.memory import MemorySynchronizer
from chatwire.base.resilience import RetryConfig
from chatwire.base.timeouts import reset_timeout_config
from chatwire.base.tokens import TokenCountEstimator
from chatwire.config import reset_config_cache
from chatwire.mock import MockTransport
from chatwire.service import AiService


class ListHandler(logging.Handler):
    """Capture formatted log messages into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep config files, .env and mock toggles from leaking between tests."""
    monkeypatch.delenv("CHATWIRE_CONFIG_FILE", raising=False)
    monkeypatch.delenv("CHATWIRE_USE_MOCKS", raising=False)
    monkeypatch.delenv("CHATWIRE_HTTP_TIMEOUT_SECONDS", raising=False)
    monkeypatch.setenv("DOTENV_FILE", "__chatwire_tests_no_dotenv__")
    reset_config_cache()
    reset_timeout_config()
    yield
    reset_config_cache()
    reset_timeout_config()


@pytest.fixture()
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> List[float]:
    """Replace ``time.sleep`` with a recorder and return the recorded delays."""
    delays: List[float] = []
    monkeypatch.setattr(time, "sleep", lambda d: delays.append(d))
    return delays


@pytest.fixture()
def enable_mock_providers(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Enable mock transports via environment toggle for the duration of a test."""
    monkeypatch.setenv("CHATWIRE_USE_MOCKS", "1")
    yield
    monkeypatch.delenv("CHATWIRE_USE_MOCKS", raising=False)


@pytest.fixture()
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture()
def dispatcher(transport: MockTransport) -> Dispatcher:
    return Dispatcher(transport, "mock-echo", RetryConfig(max_attempts=3, delay_base=1.0))


@pytest.fixture()
def memory() -> MemorySynchronizer:
    return MemorySynchronizer()


@pytest.fixture()
def estimator(dispatcher: Dispatcher) -> TokenCountEstimator:
    return TokenCountEstimator(dispatcher)


@pytest.fixture()
def service(dispatcher: Dispatcher, memory: MemorySynchronizer, estimator: TokenCountEstimator) -> AiService:
    return AiService(dispatcher, memory, estimator)


@pytest.fixture()
def log_capture() -> Iterator[ListHandler]:
    """Attach a list handler to the shared ``chatwire`` logger."""
    base = get_logger()
    handler = ListHandler()
    base.addHandler(handler)
    previous = base.level
    base.setLevel(logging.DEBUG)
    yield handler
    base.removeHandler(handler)
    base.setLevel(previous)
