from __future__ import annotations

from chatwire.base.messages import MessageSequenceBuilder, build_message_sequence
from chatwire.base.models import InvocationSpec, Message


def test_empty_input_yields_empty_sequence():
    assert build_message_sequence(InvocationSpec()) == ()  # nosec B101


def test_system_template_prepended():
    seq = build_message_sequence(
        InvocationSpec(), [Message.user("What is Java?")], system_text="You are a helpful assistant"
    )
    assert seq == (  # nosec B101
        Message.system("You are a helpful assistant"),
        Message.user("What is Java?"),
    )


def test_system_not_duplicated_when_dynamic_starts_with_system():
    dynamic = [Message.system("caller system"), Message.user("hi")]
    seq = build_message_sequence(InvocationSpec(), dynamic, system_text="template system")
    assert [m.role for m in seq] == ["system", "user"]  # nosec B101
    assert seq[0].content == "caller system"  # nosec B101


def test_system_not_duplicated_when_history_starts_with_system():
    history = [Message.system("old"), Message.user("q"), Message.assistant("a")]
    result = MessageSequenceBuilder().build(
        InvocationSpec(), None, system_text="new", history=history, trailing_user_text="next"
    )
    assert [m.role for m in result.messages] == ["system", "user", "assistant", "user"]  # nosec B101
    assert result.history_length == 3  # nosec B101
    assert result.new_messages == (Message.user("next"),)  # nosec B101


def test_include_system_message_false_skips_template():
    seq = build_message_sequence(
        InvocationSpec(include_system_message=False), [Message.user("q")], system_text="sys"
    )
    assert seq == (Message.user("q"),)  # nosec B101


def test_blank_templates_are_ignored():
    seq = build_message_sequence(
        InvocationSpec(), [Message.user("q")], system_text="   ", trailing_user_text=""
    )
    assert seq == (Message.user("q"),)  # nosec B101


def test_trailing_user_appended_last_and_dynamic_order_kept():
    dynamic = [Message.user("a"), Message.assistant("b"), Message.user("c")]
    result = MessageSequenceBuilder().build(
        InvocationSpec(), dynamic, system_text="sys", trailing_user_text="tail"
    )
    assert [m.content for m in result.messages] == ["sys", "a", "b", "c", "tail"]  # nosec B101
    assert result.new_messages == result.messages  # nosec B101
    assert len(result) == 5  # nosec B101


def test_history_precedes_dynamic():
    history = [Message.user("h1"), Message.assistant("h2")]
    result = MessageSequenceBuilder().build(
        InvocationSpec(), [Message.user("d1")], history=history
    )
    assert [m.content for m in result.messages] == ["h1", "h2", "d1"]  # nosec B101
    assert result.new_messages == (Message.user("d1"),)  # nosec B101
