"""Token accounting reported by the backend for a single call."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class TokenUsage:
    """Input/output token counts; ``None`` means the backend did not report it.

    ``total_tokens`` is derived when both components are known and no total
    was reported.
    """

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    def __post_init__(self) -> None:
        if self.total_tokens is None and self.input_tokens is not None and self.output_tokens is not None:
            object.__setattr__(self, "total_tokens", self.input_tokens + self.output_tokens)

    def is_empty(self) -> bool:
        return self.input_tokens is None and self.output_tokens is None and self.total_tokens is None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


EMPTY_USAGE = TokenUsage()


__all__ = ["TokenUsage", "EMPTY_USAGE"]
