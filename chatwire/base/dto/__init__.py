"""Pydantic DTOs for data crossing the backend boundary."""

from .tool_specification import ToolSpecification

__all__ = ["ToolSpecification"]
