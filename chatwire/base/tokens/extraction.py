"""Token usage extraction from raw backend responses.

Backends report usage under different shapes: SDK objects with a ``usage``
attribute, or plain mappings with a ``"usage"`` key. The helpers here turn
either into a :class:`TokenUsage`.

Failure modes
-------------
* No usage at all → ``EMPTY_USAGE`` (never raises)
* Non-integer / negative values → ``None`` for that field

Callers that *require* a count (the token estimator) check the resulting
field and raise a contract error themselves; extraction stays side-effect free.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..models import EMPTY_USAGE, TokenUsage


def _coerce_int(value: Any) -> Optional[int]:
    """Coerce ``value`` to a non-negative ``int`` or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        iv = int(value)
    except (TypeError, ValueError):
        return None
    return iv if iv >= 0 else None


def _read(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def extract_anthropic_token_usage(raw_response: Any) -> TokenUsage:
    """Map Anthropic-style ``usage.input_tokens`` / ``usage.output_tokens``.

    Args:
        raw_response: SDK ``Message`` object, a mapping, or ``None``.

    Returns:
        TokenUsage: Parsed counts; ``EMPTY_USAGE`` when nothing is reported.
    """
    if raw_response is None:
        return EMPTY_USAGE
    usage_obj = _read(raw_response, "usage")
    if usage_obj is None:
        return EMPTY_USAGE
    return TokenUsage(
        input_tokens=_coerce_int(_read(usage_obj, "input_tokens")),
        output_tokens=_coerce_int(_read(usage_obj, "output_tokens")),
        total_tokens=_coerce_int(_read(usage_obj, "total_tokens")),
    )


__all__ = ["extract_anthropic_token_usage"]
