"""Message sequence assembly."""

from .sequence_builder import AssembledSequence, MessageSequenceBuilder, build_message_sequence

__all__ = ["AssembledSequence", "MessageSequenceBuilder", "build_message_sequence"]
