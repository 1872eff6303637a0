"""Invocation service: declared operations over the chat pipeline."""

from chatwire.base.models import InvocationSpec

from .ai_service import DEFAULT_CONVERSATION_ID, AiService, write_back_messages

__all__ = ["AiService", "InvocationSpec", "DEFAULT_CONVERSATION_ID", "write_back_messages"]
