"""Application pool – TagIndex."""
from __future__ import annotations

from collections.abc import Iterable

from cachepool.kernel.storage import TAG_NAMESPACE, Backend, WriteBatch


class TagIndex:
    """Bidirectional tag bookkeeping.

    ``tag -> keys`` is persisted as back-end sets; ``key -> tags`` travels
    with each :class:`~cachepool.kernel.storage.StoreEntry`.  Tags of items
    that are only staged in the deferred queue live in an in-memory overlay
    until commit, so invalidation also reaches uncommitted items.

    Every removal of a key, whatever the reason, must go through
    :meth:`remove`; otherwise a later item reusing the key would inherit
    stale tag memberships.
    """

    def __init__(self, backend: Backend) -> None:
        self._backend = backend
        self._staged: dict[str, frozenset[str]] = {}

    def set_tags(self, key: str, tags: Iterable[str]) -> None:
        """Record the tags of a deferred item (overlay only)."""
        self._staged[key] = frozenset(tags)

    def staged_tags(self, key: str) -> frozenset[str]:
        return self._staged.get(key, frozenset())

    def unstage(self, key: str) -> None:
        self._staged.pop(key, None)

    def reset(self) -> None:
        self._staged.clear()

    def attach_on_save(
        self,
        key: str,
        tags: frozenset[str],
        previous: frozenset[str],
        batch: WriteBatch,
    ) -> None:
        """Make *tags* authoritative for *key* as part of a persisting batch.

        *previous* is the tag set currently persisted for the key; the key
        leaves every one of those tags that is not in the new set.
        """
        for tag in previous - tags:
            batch.remove_member(TAG_NAMESPACE, tag, key)
        for tag in tags:
            batch.add_member(TAG_NAMESPACE, tag, key)

    def remove(self, key: str, tags: Iterable[str], batch: WriteBatch) -> None:
        """Strip *key* from every tag it held."""
        for tag in tags:
            batch.remove_member(TAG_NAMESPACE, tag, key)

    def keys_for(self, tags: Iterable[str]) -> set[str]:
        """Every key, persisted or staged, currently carrying any of *tags*."""
        tags = set(tags)
        keys: set[str] = set()
        for members in self._backend.members_many(TAG_NAMESPACE, tags).values():
            keys.update(members)
        keys.update(key for key, staged in self._staged.items() if staged & tags)
        return keys

    def drop(self, tags: Iterable[str], batch: WriteBatch) -> None:
        for tag in tags:
            batch.drop_set(TAG_NAMESPACE, tag)


__all__ = ["TagIndex"]
