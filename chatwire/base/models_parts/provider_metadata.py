"""
Backend call metadata model.

Diagnostic metadata (provider, model, latency, request ids, attempts) attached
to every `ChatResponse` for observability.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ProviderMetadata:
    """Execution metadata for a backend call.

    Attributes:
        provider_name: Canonical provider key (e.g., ``"anthropic"``).
        model_name: Resolved model name used for the call.
        request_id: Backend request identifier when available.
        response_id: Backend response identifier when available.
        latency_ms: Latency of the successful attempt, in milliseconds.
        attempts: How many attempts the dispatcher made.
        extra: JSON-serializable map for adapter-specific diagnostics.
    """

    provider_name: str
    model_name: str
    request_id: Optional[str] = None
    response_id: Optional[str] = None
    latency_ms: Optional[float] = None
    attempts: int = 1
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["ProviderMetadata"]
