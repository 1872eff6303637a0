"""Tool call requested by the model inside an assistant message."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ToolExecutionRequest:
    """A single tool invocation requested by the model.

    Attributes:
        id: Backend-assigned identifier; tool results refer back to it.
        name: Name of the tool to execute.
        arguments: Arguments as JSON text, exactly as the backend produced them.
    """

    id: str
    name: str
    arguments: str = "{}"

    def arguments_dict(self) -> Dict[str, Any]:
        """Parse ``arguments`` into a mapping; blank arguments yield ``{}``."""
        if not self.arguments.strip():
            return {}
        parsed = json.loads(self.arguments)
        if not isinstance(parsed, dict):
            raise ValueError(f"tool arguments for '{self.name}' are not a JSON object")
        return parsed

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "arguments": self.arguments}


__all__ = ["ToolExecutionRequest"]
