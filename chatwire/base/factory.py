"""Transport factory and service wiring.

Purpose
-------
Create ``BackendTransport`` instances from a canonical provider name and wire
a ready-to-use :class:`~chatwire.service.AiService` (transport, dispatcher,
memory synchronizer, token estimator) from configuration.

Transports are imported lazily with ``importlib`` so that importing the
factory never pulls in SDKs that are not used.

Mock mode
---------
When ``CHATWIRE_USE_MOCKS`` is set to a truthy value every provider name
resolves to the offline mock transport (reporting the requested provider
name), so higher layers can run without credentials or network access.
"""

from __future__ import annotations

import os
from importlib import import_module
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Tuple, Type

from ..config import get_provider_config
from .errors import ConfigurationError
from .resilience.retry import RetryConfig

if TYPE_CHECKING:
    from ..service.ai_service import AiService
    from .memory import MemorySynchronizer

USE_MOCKS_ENV = "CHATWIRE_USE_MOCKS"


class UnknownProviderError(Exception):
    """Raised when a provider cannot be resolved or initialized."""


def mocks_enabled() -> bool:
    return os.getenv(USE_MOCKS_ENV, "").strip().lower() in {"1", "true", "yes", "on"}


class ProviderFactory:
    """Create backend transports based on a canonical name (e.g. ``"anthropic"``)."""

    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "anthropic": {"module": "chatwire.anthropic.client", "class": "AnthropicTransport"},
        "mock": {"module": "chatwire.mock.client", "class": "MockTransport"},
    }

    @classmethod
    def create(cls, provider: str, **kwargs: Any) -> Any:
        """Create a transport instance.

        Raises
        ------
        UnknownProviderError
            Unknown provider, import failure, or missing adapter class.
        ConfigurationError
            Propagated unchanged from the transport constructor (e.g. a
            missing API key).
        """
        name = (provider or "").lower().strip()
        if mocks_enabled() and name != "mock":
            kwargs = {"provider": name, **{k: v for k, v in kwargs.items() if k == "model"}}
            name = "mock"
        spec = cls._PROVIDERS.get(name)
        if not spec:
            raise UnknownProviderError(f"Unknown provider '{provider}'")

        module_path, class_name = spec["module"], spec["class"]
        try:
            mod = import_module(module_path)
        except ImportError as exc:
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{provider}': {exc}"
            ) from exc
        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}' for provider '{provider}'"
            ) from exc
        try:
            return klass(**kwargs)
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{provider}' transport constructor: {exc}"
            ) from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        return tuple(cls._PROVIDERS.keys())


def build_retry_config(cfg: Mapping[str, Any]) -> RetryConfig:
    """Build a :class:`RetryConfig` from a merged provider config's ``retry`` block.

    Raises:
        ConfigurationError: Non-numeric or out-of-range values.
    """
    raw = cfg.get("retry") or {}
    defaults = RetryConfig()
    try:
        max_attempts = int(raw.get("max_attempts", defaults.max_attempts))
        delay_base = float(raw.get("delay_base", defaults.delay_base))
        max_delay = float(raw.get("max_delay", defaults.max_delay))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"invalid retry configuration {dict(raw)!r}: {exc}") from exc
    return RetryConfig(max_attempts=max_attempts, delay_base=delay_base, max_delay=max_delay)


def create_service(
    provider: str = "anthropic",
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    memory: Optional["MemorySynchronizer"] = None,
    retry_config: Optional[RetryConfig] = None,
    transport: Any = None,
) -> "AiService":
    """Wire an ``AiService`` for ``provider`` from configuration.

    Explicit arguments win over configuration. A fresh in-memory
    synchronizer is created when ``memory`` is omitted.
    """
    from ..service.ai_service import AiService
    from .dispatch import Dispatcher
    from .memory import MemorySynchronizer
    from .tokens import TokenCountEstimator

    cfg = get_provider_config(provider, {"model": model, "api_key": api_key})
    if transport is None:
        kwargs: Dict[str, Any] = {"model": cfg.get("model")}
        if (provider or "").lower().strip() != "mock" and not mocks_enabled():
            kwargs["api_key"] = cfg.get("api_key")
        transport = ProviderFactory.create(provider, **kwargs)

    resolved_model = cfg.get("model")
    if not resolved_model:
        raise ConfigurationError(f"no model configured for provider '{provider}'")
    dispatcher = Dispatcher(transport, resolved_model, retry_config or build_retry_config(cfg))
    try:
        placeholder_tokens = int(cfg.get("token_placeholder_tokens", 1))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"token_placeholder_tokens must be an integer, got {cfg.get('token_placeholder_tokens')!r}"
        ) from exc
    estimator = TokenCountEstimator(
        dispatcher,
        placeholder_text=str(cfg.get("token_placeholder_text") or "dummy"),
        placeholder_token_count=placeholder_tokens,
    )
    return AiService(dispatcher, memory or MemorySynchronizer(), estimator)


__all__ = [
    "ProviderFactory",
    "UnknownProviderError",
    "USE_MOCKS_ENV",
    "mocks_enabled",
    "build_retry_config",
    "create_service",
]
