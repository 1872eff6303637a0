"""Transcript validation."""

from .order_validator import (
    TRANSITIONS,
    MessageKind,
    OrderState,
    OrderValidator,
    validate_message_order,
)

__all__ = ["OrderValidator", "OrderState", "MessageKind", "TRANSITIONS", "validate_message_order"]
