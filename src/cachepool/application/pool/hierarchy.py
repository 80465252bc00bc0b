"""Application pool – HierarchyIndex.

Hierarchical keys start with the delimiter and are read as paths:
``|users|4711|followers`` has the ancestors ``|users|4711``, ``|users`` and
the root ``|``.  Each ancestor is persisted as a node set holding its
direct children, so the keys under a path are found by walking that path's
subtree; the cost grows with the number of matching nodes, never with
the total number of keys.
"""
from __future__ import annotations

from collections.abc import Iterable

from cachepool.kernel.storage import NODE_NAMESPACE, Backend, WriteBatch


class HierarchyIndex:
    """Delimiter-segmented path index enabling "delete everything under".

    Deleting ``|a|b`` removes ``|a|b`` itself and every key under
    ``|a|b|`` but never a sibling such as ``|a|bc``.  Deleting the root
    removes every hierarchical key and leaves keys that do not start with
    the delimiter alone.
    """

    def __init__(self, backend: Backend, delimiter: str = "|") -> None:
        if len(delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {delimiter!r}")
        self._backend = backend
        self._delimiter = delimiter

    @property
    def delimiter(self) -> str:
        return self._delimiter

    @property
    def root(self) -> str:
        return self._delimiter

    def is_hierarchical(self, key: str) -> bool:
        return key.startswith(self._delimiter)

    def parent(self, path: str) -> str | None:
        """Return the parent path, or ``None`` for the root or a flat key."""
        if path == self.root or not self.is_hierarchical(path):
            return None
        cut = path.rfind(self._delimiter)
        return self.root if cut == 0 else path[:cut]

    def covers(self, path: str, key: str) -> bool:
        """True when *key* is *path* or lies under it."""
        if key == path:
            return True
        prefix = path if path.endswith(self._delimiter) else path + self._delimiter
        return key.startswith(prefix)

    def register(self, key: str, batch: WriteBatch) -> None:
        """Link *key* and all its ancestors up to the root."""
        child = key
        parent = self.parent(child)
        while parent is not None:
            batch.add_member(NODE_NAMESPACE, parent, child)
            child, parent = parent, self.parent(parent)

    def unlink(self, key: str, batch: WriteBatch) -> None:
        parent = self.parent(key)
        if parent is not None:
            batch.remove_member(NODE_NAMESPACE, parent, key)

    def collect(self, path: str, pending: Iterable[str] = ()) -> set[str]:
        """Return *path* plus every known path beneath it.

        *pending* are keys that exist only in the deferred queue (not yet
        linked into the persisted tree); those under *path* are included.

        A path ending in the delimiter, such as ``|a|b|``, has no node of
        its own: its keys are filed under ``|a|b``.  The walk starts there
        and keeps only what the path covers, so ``|a|b`` itself survives.
        """
        anchor = path
        if path != self.root and path.endswith(self._delimiter):
            anchor = path[:-1]
        found = {anchor}
        frontier = [anchor]
        while frontier:
            children = self._backend.members_many(NODE_NAMESPACE, frontier)
            frontier = []
            for members in children.values():
                for child in members:
                    if child not in found:
                        found.add(child)
                        frontier.append(child)
        found.update(pending)
        return {key for key in found if self.covers(path, key)} | {path}

    def detach(self, collected: Iterable[str], batch: WriteBatch) -> None:
        """Drop the node sets of a collected subtree and unhook it from the rest of the tree."""
        collected = set(collected)
        for node in collected:
            batch.drop_set(NODE_NAMESPACE, node)
            parent = self.parent(node)
            if parent is not None and parent not in collected:
                batch.remove_member(NODE_NAMESPACE, parent, node)

    def prune(self, keys: Iterable[str], batch: WriteBatch) -> None:
        """Unlink removed *keys* that no longer lead anywhere.

        A key whose node still lists children stays linked so the paths
        below it remain reachable.  Once a key is unlinked its parent is
        examined the same way, unless the parent is itself a stored entry;
        interior nodes left empty by expiry therefore disappear too.
        """
        candidates = {key for key in keys if self._prunable(key, batch)}
        while candidates:
            children = self._backend.members_many(NODE_NAMESPACE, sorted(candidates))
            parents: set[str] = set()
            for key in sorted(candidates, key=self._depth, reverse=True):
                if self._remaining(key, children.get(key, set()), batch):
                    continue
                self.unlink(key, batch)
                parents.add(self.parent(key))  # type: ignore[arg-type]
            parents = {parent for parent in parents if self._prunable(parent, batch)}
            stored = self._backend.read(sorted(parents)) if parents else {}
            candidates = {
                parent for parent in parents
                if parent not in stored or parent in batch.deletes
            }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _depth(self, path: str) -> int:
        return path.count(self._delimiter)

    def _prunable(self, key: str, batch: WriteBatch) -> bool:
        parent = self.parent(key)
        return (
            parent is not None
            and key not in batch.puts
            and (NODE_NAMESPACE, parent) not in batch.dropped
        )

    def _remaining(self, key: str, stored: set[str], batch: WriteBatch) -> set[str]:
        ref = (NODE_NAMESPACE, key)
        if ref in batch.dropped:
            stored = set()
        return (stored - batch.removed.get(ref, set())) | batch.added.get(ref, set())


__all__ = ["HierarchyIndex"]
