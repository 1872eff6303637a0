"""Unified configuration layer.

Merge order (later wins)
------------------------
1. Built-in defaults (``config.defaults``)
2. Optional external config file (JSON or YAML) pointed to by
   ``CHATWIRE_CONFIG_FILE``
3. Environment variables
4. In-code overrides passed to ``get_provider_config``

Environment Variable Conventions
--------------------------------
<PROVIDER>_MODEL, <PROVIDER>_API_KEY, <PROVIDER>_BASE_URL,
<PROVIDER>_MAX_ATTEMPTS, <PROVIDER>_TOKEN_PLACEHOLDER_TEXT,
<PROVIDER>_TOKEN_PLACEHOLDER_TOKENS; e.g. ``ANTHROPIC_MODEL``.
The API key additionally falls back to the canonical names in ``config.env``.

External Config File
--------------------
JSON is tried first, then YAML. Structure example:

```
anthropic:
  model: claude-sonnet-4-5
  retry:
    max_attempts: 4
    delay_base: 1.5
  token_placeholder_text: dummy
  token_placeholder_tokens: 1
```

Public API
----------
* get_provider_config(provider, overrides=None) -> dict
* get_model(provider) -> str | None
* reset_config_cache()
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    ANTHROPIC_DEFAULT_MODEL,
    DEFAULT_DELAY_BASE,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DELAY,
    DEFAULT_TOKEN_PLACEHOLDER_TEXT,
    DEFAULT_TOKEN_PLACEHOLDER_TOKENS,
    MOCK_DEFAULT_MODEL,
)
from .env import is_placeholder, resolve_provider_key

CONFIG_FILE_ENV = "CHATWIRE_CONFIG_FILE"

_COMMON_DEFAULTS: Dict[str, Any] = {
    "retry": {
        "max_attempts": DEFAULT_MAX_ATTEMPTS,
        "delay_base": DEFAULT_DELAY_BASE,
        "max_delay": DEFAULT_MAX_DELAY,
    },
    "token_placeholder_text": DEFAULT_TOKEN_PLACEHOLDER_TEXT,
    "token_placeholder_tokens": DEFAULT_TOKEN_PLACEHOLDER_TOKENS,
}

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "anthropic": {"model": ANTHROPIC_DEFAULT_MODEL},
    "mock": {"model": MOCK_DEFAULT_MODEL},
}

ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
    "max_attempts": "MAX_ATTEMPTS",
    "token_placeholder_text": "TOKEN_PLACEHOLDER_TEXT",
    "token_placeholder_tokens": "TOKEN_PLACEHOLDER_TOKENS",
}

_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Existing
    environment variables win unless they hold a placeholder value.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    if not path or not Path(path).exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE = data
    return data


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None:
            out[field] = val
    if "max_attempts" in out:
        out["retry"] = {"max_attempts": out.pop("max_attempts")}
    return out


def _merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge, except nested ``retry`` mappings which merge key-wise."""
    out = dict(base)
    for k, v in extra.items():
        if k == "retry" and isinstance(v, dict):
            out["retry"] = {**(out.get("retry") or {}), **v}
        else:
            out[k] = v
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    Values read from the environment or a file keep their raw types; callers
    coerce numbers.
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = _merge(_COMMON_DEFAULTS, DEFAULTS.get(name, {}))

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg = _merge(cfg, file_cfg)

    cfg = _merge(cfg, _env_overrides(name))

    if not cfg.get("api_key") or is_placeholder(cfg.get("api_key")):
        key, _ = resolve_provider_key(name)
        if key:
            cfg["api_key"] = key
        else:
            cfg.pop("api_key", None)

    if overrides:
        cfg = _merge(cfg, {k: v for k, v in overrides.items() if v is not None})
    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


def reset_config_cache() -> None:
    """Forget the cached config file and .env state (tests)."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


__all__ = [
    "CONFIG_FILE_ENV",
    "DEFAULTS",
    "get_provider_config",
    "get_model",
    "reset_config_cache",
]
