"""Unit tests for application pool – TagIndex."""

from __future__ import annotations

from cachepool.application.pool import TagIndex
from cachepool.kernel.storage import TAG_NAMESPACE, InMemoryBackend, WriteBatch


def _index_with(backend: InMemoryBackend, **memberships: list[str]) -> TagIndex:
    index = TagIndex(backend)
    batch = WriteBatch()
    for key, tags in memberships.items():
        index.attach_on_save(key, frozenset(tags), frozenset(), batch)
    backend.apply(batch)
    return index


class TestTagIndex:
    def test_attach_on_save_adds_memberships(self, memory_backend: InMemoryBackend) -> None:
        _index_with(memory_backend, k1=["a", "b"])
        assert memory_backend.members(TAG_NAMESPACE, "a") == {"k1"}
        assert memory_backend.members(TAG_NAMESPACE, "b") == {"k1"}

    def test_attach_on_save_leaves_previous_tags(self, memory_backend: InMemoryBackend) -> None:
        index = _index_with(memory_backend, k1=["a", "b"])
        batch = WriteBatch()
        index.attach_on_save("k1", frozenset({"b", "c"}), frozenset({"a", "b"}), batch)
        memory_backend.apply(batch)
        assert memory_backend.members(TAG_NAMESPACE, "a") == set()
        assert memory_backend.members(TAG_NAMESPACE, "b") == {"k1"}
        assert memory_backend.members(TAG_NAMESPACE, "c") == {"k1"}

    def test_remove(self, memory_backend: InMemoryBackend) -> None:
        index = _index_with(memory_backend, k1=["a"], k2=["a"])
        batch = WriteBatch()
        index.remove("k1", {"a"}, batch)
        memory_backend.apply(batch)
        assert memory_backend.members(TAG_NAMESPACE, "a") == {"k2"}

    def test_keys_for_unions_tags(self, memory_backend: InMemoryBackend) -> None:
        index = _index_with(memory_backend, k1=["a"], k2=["b"], k3=["c"])
        assert index.keys_for({"a", "b"}) == {"k1", "k2"}
        assert index.keys_for({"unknown"}) == set()

    def test_keys_for_includes_staged(self, memory_backend: InMemoryBackend) -> None:
        index = _index_with(memory_backend, k1=["a"])
        index.set_tags("pending", {"a", "z"})
        assert index.keys_for({"a"}) == {"k1", "pending"}
        assert index.keys_for({"z"}) == {"pending"}

    def test_unstage_and_reset(self, memory_backend: InMemoryBackend) -> None:
        index = TagIndex(memory_backend)
        index.set_tags("p1", {"a"})
        index.set_tags("p2", {"a"})
        index.unstage("p1")
        assert index.staged_tags("p1") == frozenset()
        assert index.keys_for({"a"}) == {"p2"}
        index.reset()
        assert index.keys_for({"a"}) == set()

    def test_drop(self, memory_backend: InMemoryBackend) -> None:
        index = _index_with(memory_backend, k1=["a", "b"])
        batch = WriteBatch()
        index.drop({"a"}, batch)
        memory_backend.apply(batch)
        assert memory_backend.members(TAG_NAMESPACE, "a") == set()
        assert memory_backend.members(TAG_NAMESPACE, "b") == {"k1"}
