from __future__ import annotations

import types

import httpx

from chatwire.base.errors import (
    ErrorCode,
    ProviderError,
    classify_exception,
    to_provider_error,
)


def test_classify_provider_error_passthrough():
    e = ProviderError(code=ErrorCode.AUTH, message="nope", provider="x")
    assert classify_exception(e) is ErrorCode.AUTH  # nosec B101 - assert is appropriate in unit tests


def test_classify_http_status_mapping():
    # Direct attr
    e1 = types.SimpleNamespace(status_code=404)
    assert classify_exception(e1) is ErrorCode.NOT_FOUND  # nosec B101 - assert is appropriate in unit tests
    # response.status_code
    e2 = types.SimpleNamespace(response=types.SimpleNamespace(status_code=503))
    assert classify_exception(e2) is ErrorCode.UNAVAILABLE  # nosec B101 - assert is appropriate in unit tests
    assert classify_exception(types.SimpleNamespace(status_code=529)) is ErrorCode.UNAVAILABLE  # nosec B101
    assert classify_exception(types.SimpleNamespace(status_code=429)) is ErrorCode.RATE_LIMIT  # nosec B101
    assert classify_exception(types.SimpleNamespace(status_code=599)) is ErrorCode.SERVER_ERROR  # nosec B101


def test_classify_timeouts_and_transport_errors():
    assert classify_exception(TimeoutError()) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ReadTimeout("slow")) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ConnectError("refused")) is ErrorCode.TRANSIENT  # nosec B101


def test_classify_heuristics():
    assert classify_exception(Exception("rate limit exceeded")) is ErrorCode.RATE_LIMIT  # nosec B101 - assert is appropriate in unit tests
    assert classify_exception(Exception("timed out waiting")) is ErrorCode.TIMEOUT  # nosec B101 - assert is appropriate in unit tests
    assert classify_exception(Exception("unsupported parameter")) is ErrorCode.UNSUPPORTED  # nosec B101 - assert is appropriate in unit tests
    assert classify_exception(Exception("Connection reset by peer")) is ErrorCode.TRANSIENT  # nosec B101
    assert classify_exception(Exception("random")) is ErrorCode.UNKNOWN  # nosec B101 - assert is appropriate in unit tests


def test_to_provider_error_sets_retryable_hint():
    err = to_provider_error(Exception("overloaded"), provider="anthropic", model="m")
    assert err.code is ErrorCode.UNAVAILABLE  # nosec B101
    assert err.retryable  # nosec B101
    assert err.provider == "anthropic" and err.model == "m"  # nosec B101
    bad = to_provider_error(types.SimpleNamespace(status_code=401), provider="p")  # type: ignore[arg-type]
    assert bad.code is ErrorCode.AUTH and not bad.retryable  # nosec B101
