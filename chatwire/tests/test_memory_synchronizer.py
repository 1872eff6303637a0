"""Tests for the memory synchronizer and the in-memory store."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from chatwire.base.errors import MemoryStoreError
from chatwire.base.memory import InMemoryChatMemoryStore, MemorySynchronizer
from chatwire.base.models import Message


def test_read_unknown_conversation_is_empty(memory):
    assert memory.read("nope") == ()  # nosec B101


def test_append_then_read(memory):
    memory.append("c1", [Message.user("hi"), Message.assistant("hello")])
    memory.append("c1", [Message.user("again")])
    assert [m.content for m in memory.read("c1")] == ["hi", "hello", "again"]  # nosec B101


def test_append_is_plain_concatenation(memory):
    memory.append("c1", [Message.system("ctx"), Message.user("q1")])
    memory.append("c1", [Message.system("ctx"), Message.user("q2")])
    stored = memory.read("c1")
    assert [m.role for m in stored] == ["system", "user", "system", "user"]  # nosec B101
    assert [m.content for m in stored] == ["ctx", "q1", "ctx", "q2"]  # nosec B101


def test_update_applies_transform_under_lock(memory):
    memory.append("c1", [Message.system("sys"), Message.user("q")])
    updated = memory.update("c1", lambda current: current[1:] + (Message.assistant("a"),))
    assert [m.content for m in updated] == ["q", "a"]  # nosec B101
    assert memory.read("c1") == updated  # nosec B101


def test_update_without_change_does_not_write():
    class _CountingStore(InMemoryChatMemoryStore):
        writes = 0

        def set_messages(self, conversation_id, messages):
            type(self).writes += 1
            super().set_messages(conversation_id, messages)

    sync = MemorySynchronizer(_CountingStore())
    sync.update("c1", lambda current: current)
    assert _CountingStore.writes == 0  # nosec B101
    assert sync.read("c1") == ()  # nosec B101


def test_clear_forgets_conversation(memory):
    memory.append("c1", [Message.user("hi")])
    memory.clear("c1")
    assert memory.read("c1") == ()  # nosec B101


def test_blank_conversation_id_rejected(memory):
    with pytest.raises(ValueError):
        memory.read("  ")


def test_concurrent_appends_are_not_lost():
    """N threads appending k messages each must leave N*k messages."""
    sync = MemorySynchronizer()
    threads, per_thread = 16, 25
    barrier = threading.Barrier(threads)

    def worker(t: int) -> None:
        barrier.wait()
        for i in range(per_thread):
            sync.append("shared", [Message.user(f"{t}-{i}")])

    with ThreadPoolExecutor(max_workers=threads) as pool:
        list(pool.map(worker, range(threads)))

    stored = sync.read("shared")
    assert len(stored) == threads * per_thread  # nosec B101
    assert len({m.content for m in stored}) == threads * per_thread  # nosec B101


def test_concurrent_multi_message_batches_are_not_lost():
    """Batches that open with a system turn are appended whole, never merged."""
    sync = MemorySynchronizer()
    threads = 8
    barrier = threading.Barrier(threads)

    def worker(i: int) -> None:
        barrier.wait()
        sync.append("shared", [Message.system("ctx"), Message.user(f"q{i}")])

    with ThreadPoolExecutor(max_workers=threads) as pool:
        list(pool.map(worker, range(threads)))

    stored = sync.read("shared")
    assert len(stored) == 2 * threads  # nosec B101
    assert sorted(m.content for m in stored if m.role == "user") == sorted(
        f"q{i}" for i in range(threads)
    )  # nosec B101
    for system, user in zip(stored[::2], stored[1::2]):
        assert system.role == "system" and user.role == "user"  # nosec B101


def test_different_keys_do_not_block_each_other():
    sync = MemorySynchronizer()
    entered = threading.Event()
    other_done = threading.Event()

    def hold_a() -> None:
        with sync.exclusive("a"):
            entered.set()
            assert other_done.wait(timeout=5)  # nosec B101

    t = threading.Thread(target=hold_a)
    t.start()
    assert entered.wait(timeout=5)  # nosec B101
    sync.append("b", [Message.user("x")])
    other_done.set()
    t.join(timeout=5)
    assert sync.read("b") == (Message.user("x"),)  # nosec B101


class _BrokenStore(InMemoryChatMemoryStore):
    def set_messages(self, conversation_id, messages):
        raise OSError("disk full")


def test_store_failure_wrapped_as_memory_store_error():
    sync = MemorySynchronizer(_BrokenStore())
    with pytest.raises(MemoryStoreError) as ei:
        sync.append("c1", [Message.user("hi")])
    assert ei.value.operation == "write"  # nosec B101
    assert isinstance(ei.value.cause, OSError)  # nosec B101


def test_window_keeps_leading_system_and_drops_orphan_tool_results():
    store = InMemoryChatMemoryStore(max_messages=3)
    store.set_messages(
        "c",
        [
            Message.system("s"),
            Message.user("q1"),
            Message.assistant("a1"),
            Message.tool_result("c1", "f", "r"),
            Message.user("q2"),
        ],
    )
    kept = store.get_messages("c")
    assert [m.role for m in kept] == ["system", "user"]  # nosec B101
    stats = store.get_conversation_stats("c")
    assert stats["message_count"] == 2 and stats["exists"]  # nosec B101
    assert store.list_conversations() == ["c"]  # nosec B101


def test_stored_value_is_immutable_tuple(memory):
    memory.append("c1", [Message.user("hi")])
    assert isinstance(memory.store.get_messages("c1"), tuple)  # nosec B101
