"""Configuration merge order, retry config parsing and service wiring."""

from __future__ import annotations

import json
import os

import pytest

from chatwire.base.errors import ConfigurationError
from chatwire.base.factory import (
    ProviderFactory,
    UnknownProviderError,
    build_retry_config,
    create_service,
)
from chatwire.base.models import InvocationSpec, Message
from chatwire.config import CONFIG_FILE_ENV, get_model, get_provider_config, reset_config_cache
from chatwire.config.env import get_env_var_candidates, is_placeholder, resolve_provider_key
from chatwire.mock import MockTransport


def _use_config_file(monkeypatch, path) -> None:
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    reset_config_cache()


def test_defaults_without_file_or_env(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_MODEL", raising=False)
    cfg = get_provider_config("anthropic")
    assert cfg["model"] == "claude-sonnet-4-5"  # nosec B101
    assert cfg["retry"]["max_attempts"] == 3  # nosec B101
    assert cfg["token_placeholder_text"] == "dummy"  # nosec B101
    assert get_model("mock") == "mock-echo"  # nosec B101


def test_json_file_then_env_then_overrides(monkeypatch, tmp_path):
    path = tmp_path / "chatwire.json"
    path.write_text(
        json.dumps({"anthropic": {"model": "from-file", "retry": {"max_attempts": 5, "delay_base": 1.5}}}),
        encoding="utf-8",
    )
    _use_config_file(monkeypatch, path)
    monkeypatch.delenv("ANTHROPIC_MODEL", raising=False)
    cfg = get_provider_config("anthropic")
    assert cfg["model"] == "from-file"  # nosec B101
    assert cfg["retry"] == {"max_attempts": 5, "delay_base": 1.5, "max_delay": 30.0}  # nosec B101

    monkeypatch.setenv("ANTHROPIC_MODEL", "from-env")
    monkeypatch.setenv("ANTHROPIC_MAX_ATTEMPTS", "7")
    cfg = get_provider_config("anthropic")
    assert cfg["model"] == "from-env"  # nosec B101
    assert cfg["retry"]["max_attempts"] == "7" and cfg["retry"]["delay_base"] == 1.5  # nosec B101

    cfg = get_provider_config("anthropic", {"model": "from-code", "api_key": None})
    assert cfg["model"] == "from-code"  # nosec B101


def test_yaml_file_is_accepted(monkeypatch, tmp_path):
    path = tmp_path / "chatwire.yaml"
    path.write_text(
        "mock:\n  model: yaml-model\n  token_placeholder_text: placeholder-x\n",
        encoding="utf-8",
    )
    _use_config_file(monkeypatch, path)
    monkeypatch.delenv("MOCK_MODEL", raising=False)
    monkeypatch.delenv("MOCK_TOKEN_PLACEHOLDER_TEXT", raising=False)
    cfg = get_provider_config("mock")
    assert cfg["model"] == "yaml-model"  # nosec B101
    assert cfg["token_placeholder_text"] == "placeholder-x"  # nosec B101


def test_dotenv_file_supplies_missing_keys(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("# credentials\nANTHROPIC_API_KEY='sk-ant-from-dotenv'\n", encoding="utf-8")
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("CLAUDE_API_KEY", raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(env_file))
    reset_config_cache()
    try:
        assert get_provider_config("anthropic")["api_key"] == "sk-ant-from-dotenv"  # nosec B101
    finally:
        os.environ.pop("ANTHROPIC_API_KEY", None)


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, False),
        ("sk-ant-real", False),
        ("changeme", True),
        ("YOUR_PLACEHOLDER_KEY", True),
        ("test_key", True),
        ("https://example.invalid", True),
    ],
)
def test_placeholder_detection(value, expected):
    assert is_placeholder(value) is expected  # nosec B101


def test_alias_key_used_when_canonical_is_unset(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.setenv("CLAUDE_API_KEY", "sk-alias")
    assert list(get_env_var_candidates("anthropic")) == ["ANTHROPIC_API_KEY", "CLAUDE_API_KEY"]  # nosec B101
    assert resolve_provider_key("anthropic") == ("sk-alias", "CLAUDE_API_KEY")  # nosec B101


def test_build_retry_config_parses_strings():
    cfg = build_retry_config({"retry": {"max_attempts": "4", "delay_base": "0.5", "max_delay": "2"}})
    assert cfg.max_attempts == 4 and cfg.delay_base == 0.5 and cfg.max_delay == 2.0  # nosec B101


@pytest.mark.parametrize("retry", [{"max_attempts": "many"}, {"max_attempts": 0}, {"delay_base": -1}])
def test_build_retry_config_rejects_bad_values(retry):
    with pytest.raises(ConfigurationError):
        build_retry_config({"retry": retry})


def test_factory_creates_mock_and_rejects_unknown():
    t = ProviderFactory.create("mock", model="m1")
    assert isinstance(t, MockTransport) and t.default_model() == "m1"  # nosec B101
    with pytest.raises(UnknownProviderError):
        ProviderFactory.create("nope")
    assert set(ProviderFactory.supported()) == {"anthropic", "mock"}  # nosec B101


def test_mock_toggle_reroutes_real_providers(enable_mock_providers):
    t = ProviderFactory.create("anthropic", model="claude-x", api_key="ignored")
    assert isinstance(t, MockTransport)  # nosec B101
    assert t.provider_name == "anthropic"  # nosec B101


def test_create_service_wires_pipeline_from_config(monkeypatch):
    monkeypatch.setenv("MOCK_MAX_ATTEMPTS", "2")
    monkeypatch.setenv("MOCK_TOKEN_PLACEHOLDER_TEXT", "x")
    svc = create_service("mock")
    assert svc.dispatcher.model == "mock-echo"  # nosec B101
    assert svc.dispatcher.retry_config.max_attempts == 2  # nosec B101
    assert svc.memory is not None  # nosec B101

    svc.register("chat", InvocationSpec(add_to_memory=True, conversation_id="c"))
    resp = svc.invoke("chat", messages=[Message.user("hello")])
    assert resp.text == "echo: hello"  # nosec B101
    assert len(svc.memory.read("c")) == 2  # nosec B101
    assert svc.estimate_tokens("one two") == 5  # nosec B101


def test_create_service_with_explicit_transport_and_model():
    transport = MockTransport(provider="custom")
    svc = create_service("mock", model="pinned", transport=transport)
    assert svc.dispatcher.provider_name == "custom"  # nosec B101
    assert svc.dispatcher.model == "pinned"  # nosec B101


def test_create_service_rejects_bad_placeholder_tokens(monkeypatch):
    monkeypatch.setenv("MOCK_TOKEN_PLACEHOLDER_TOKENS", "one")
    with pytest.raises(ConfigurationError):
        create_service("mock")
