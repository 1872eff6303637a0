"""Offline tests for the Anthropic request mapping and transport wiring."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from chatwire.anthropic import AnthropicTransport, build_params
from chatwire.anthropic import client as anthropic_client
from chatwire.anthropic.chat_helpers import to_chat_response
from chatwire.anthropic.helpers import DEFAULT_MAX_TOKENS
from chatwire.base.dto import ToolSpecification
from chatwire.base.errors import ConfigurationError, ErrorCode, ProviderError
from chatwire.base.models import ChatRequest, ContentPart, Message, ToolExecutionRequest
from chatwire.base.timeouts import TimeoutConfig, get_timeout_config, reset_timeout_config


def _req(*messages, **kw) -> ChatRequest:
    return ChatRequest(model="claude-test", messages=messages, **kw)


def test_system_messages_lifted_and_joined():
    params = build_params(_req(Message.system("one"), Message.system("two"), Message.user("hi")))
    assert params["system"] == "one\ntwo"  # nosec B101
    assert params["messages"] == [{"role": "user", "content": [{"type": "text", "text": "hi"}]}]  # nosec B101


def test_max_tokens_default_and_count_only_zero():
    assert build_params(_req(Message.user("hi")))["max_tokens"] == DEFAULT_MAX_TOKENS  # nosec B101
    assert build_params(_req(Message.user("hi"), max_tokens=0))["max_tokens"] == 0  # nosec B101


def test_optional_fields_omitted_when_unset():
    params = build_params(_req(Message.user("hi")))
    assert "system" not in params and "temperature" not in params and "tools" not in params  # nosec B101


def test_tool_calls_and_results_mapping():
    call_a = ToolExecutionRequest(id="t1", name="get_weather", arguments='{"city": "Paris"}')
    call_b = ToolExecutionRequest(id="t2", name="get_time", arguments="")
    params = build_params(
        _req(
            Message.user("weather and time?"),
            Message.assistant("", tool_calls=[call_a, call_b]),
            Message.tool_result("t1", "get_weather", "sunny"),
            Message.tool_result("t2", "get_time", "noon"),
        )
    )
    turns = params["messages"]
    assert [t["role"] for t in turns] == ["user", "assistant", "user"]  # nosec B101
    assert turns[1]["content"] == [  # nosec B101
        {"type": "tool_use", "id": "t1", "name": "get_weather", "input": {"city": "Paris"}},
        {"type": "tool_use", "id": "t2", "name": "get_time", "input": {}},
    ]
    assert turns[2]["content"] == [  # nosec B101
        {"type": "tool_result", "tool_use_id": "t1", "content": "sunny"},
        {"type": "tool_result", "tool_use_id": "t2", "content": "noon"},
    ]
    assert all("_tool_results" not in t for t in turns)  # nosec B101


def test_image_parts_and_empty_user_turn():
    params = build_params(
        _req(
            Message.user(
                [
                    ContentPart.text_part("describe"),
                    ContentPart.image_url("https://img.test/a.png"),
                    ContentPart.image_base64("AAAA", media_type="image/jpeg"),
                ]
            ),
            Message.assistant("ok"),
            Message.user(""),
        )
    )
    blocks = params["messages"][0]["content"]
    assert blocks[1] == {"type": "image", "source": {"type": "url", "url": "https://img.test/a.png"}}  # nosec B101
    assert blocks[2]["source"] == {"type": "base64", "media_type": "image/jpeg", "data": "AAAA"}  # nosec B101
    assert params["messages"][-1]["content"] == [{"type": "text", "text": ""}]  # nosec B101


def test_tools_temperature_and_extra():
    tool = ToolSpecification(name="lookup", description="Find a record", parameters={"type": "object"})
    params = build_params(
        _req(Message.user("q"), tools=[tool, ToolSpecification(name="bare")], temperature=0.3, extra={"top_k": 5})
    )
    assert params["tools"] == [  # nosec B101
        {"name": "lookup", "input_schema": {"type": "object"}, "description": "Find a record"},
        {"name": "bare", "input_schema": {"type": "object", "properties": {}}},
    ]
    assert params["temperature"] == 0.3 and params["top_k"] == 5  # nosec B101


class _FakeMessages:
    def __init__(self, result=None, error=None):
        self.calls = []
        self._result = result
        self._error = error

    def create(self, **params):
        self.calls.append(params)
        if self._error is not None:
            raise self._error
        return self._result


def _transport(result=None, error=None):
    messages = _FakeMessages(result, error)
    return AnthropicTransport(client=SimpleNamespace(messages=messages), model="claude-test"), messages


def test_transport_maps_text_and_tool_use_response():
    resp = {
        "id": "msg_1",
        "model": "claude-test",
        "stop_reason": "tool_use",
        "content": [
            {"type": "text", "text": "Let me check."},
            {"type": "tool_use", "id": "t1", "name": "get_weather", "input": {"city": "Oslo"}},
        ],
        "usage": {"input_tokens": 21, "output_tokens": 9},
    }
    transport, fake = _transport(result=resp)
    out = transport.send(_req(Message.user("weather in Oslo?")))
    assert fake.calls[0]["model"] == "claude-test"  # nosec B101
    assert out.text == "Let me check."  # nosec B101
    assert out.message.tool_calls[0].name == "get_weather"  # nosec B101
    assert json.loads(out.message.tool_calls[0].arguments) == {"city": "Oslo"}  # nosec B101
    assert out.token_usage.input_tokens == 21 and out.token_usage.output_tokens == 9  # nosec B101
    assert out.meta.response_id == "msg_1" and out.stop_reason == "tool_use"  # nosec B101


def test_count_only_response_has_no_message():
    resp = {"id": "msg_2", "content": [], "stop_reason": "max_tokens", "usage": {"input_tokens": 14, "output_tokens": 0}}
    out = to_chat_response(resp, provider_name="anthropic", model="claude-test")
    assert out.message is None  # nosec B101
    assert out.token_usage.input_tokens == 14  # nosec B101


def test_transport_errors_are_classified():
    err = RuntimeError("overloaded")
    err.status_code = 529  # type: ignore[attr-defined]
    transport, _ = _transport(error=err)
    with pytest.raises(ProviderError) as ei:
        transport.send(_req(Message.user("hi")))
    assert ei.value.code is ErrorCode.UNAVAILABLE  # nosec B101
    assert ei.value.provider == "anthropic"  # nosec B101
    assert ei.value.__cause__ is err  # nosec B101


def test_missing_api_key_is_a_configuration_error(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("CLAUDE_API_KEY", raising=False)
    with pytest.raises(ConfigurationError):
        AnthropicTransport()


def test_placeholder_key_is_ignored(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "changeme")
    monkeypatch.delenv("CLAUDE_API_KEY", raising=False)
    with pytest.raises(ConfigurationError):
        AnthropicTransport()


def test_sdk_client_built_without_sdk_retries(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-unit")
    transport = AnthropicTransport()
    assert transport._client.max_retries == 0  # nosec B101
    assert transport.provider_name == "anthropic"  # nosec B101


class _RecordingAnthropic:
    instances: list = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        type(self).instances.append(self)


def test_sdk_client_takes_timeout_from_environment(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-unit")
    monkeypatch.setenv("CHATWIRE_HTTP_TIMEOUT_SECONDS", "12.5")
    reset_timeout_config()
    monkeypatch.setattr(_RecordingAnthropic, "instances", [])
    monkeypatch.setattr(anthropic_client.anthropic, "Anthropic", _RecordingAnthropic)
    AnthropicTransport(base_url="https://anthropic.example")
    kwargs = _RecordingAnthropic.instances[-1].kwargs
    assert kwargs["api_key"] == "sk-ant-unit"  # nosec B101
    assert kwargs["max_retries"] == 0 and kwargs["timeout"] == 12.5  # nosec B101
    assert kwargs["base_url"] == "https://anthropic.example"  # nosec B101
    assert "http_client" not in kwargs  # nosec B101


@pytest.mark.parametrize("raw", ["not-a-number", "-3", ""])
def test_invalid_timeout_falls_back_to_default(monkeypatch, raw):
    monkeypatch.setenv("CHATWIRE_HTTP_TIMEOUT_SECONDS", raw)
    reset_timeout_config()
    assert get_timeout_config().http_timeout_seconds == TimeoutConfig().http_timeout_seconds  # nosec B101


def test_send_logs_the_sdk_response(monkeypatch, log_capture):
    monkeypatch.setenv("CHATWIRE_LOG_LEVEL", "DEBUG")
    resp = {"id": "msg_3", "content": [{"type": "text", "text": "hi"}], "stop_reason": "end_turn",
            "usage": {"input_tokens": 5, "output_tokens": 1}}
    transport, _ = _transport(result=resp)
    transport.send(_req(Message.user("hello")))
    events = [json.loads(m) for m in log_capture.messages]
    logged = [e for e in events if e["event"] == "anthropic.response"]
    assert logged and logged[-1]["response_id"] == "msg_3"  # nosec B101
    assert logged[-1]["stop_reason"] == "end_turn" and logged[-1]["phase"] == "finalize"  # nosec B101
