"""Tool specification DTO passed through to the backend.

The core never interprets a tool specification; it only validates that the
shape is usable and forwards it. Token estimation measures its cost.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ToolSpecification(BaseModel):
    """A tool the model may call.

    Attributes:
        name: Unique, non-blank tool name.
        description: Optional human-readable description shown to the model.
        parameters: JSON Schema describing the tool's argument object.
            Defaults to an object schema with no properties.

    Notes:
        Instances are frozen so they can be shared across concurrent calls.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    parameters: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("tool name must not be blank")
        return value


__all__ = ["ToolSpecification"]
