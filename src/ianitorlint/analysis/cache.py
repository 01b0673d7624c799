"""Pass-scoped score memo and cycle guard.

This module provides:
- ScoreCache: finalized scores keyed by ``TypeNode.identity``, plus the
  set of identities currently on the scorer's recursion stack

Keys are identities, never structural values, so two identical but
distinct annotations get separate entries. A cache belongs to exactly one
analysis pass; build a new one per file.
"""

from __future__ import annotations


class ScoreCache:
    """Identity-keyed score table and active-visit set.

    Usage:
        cache = ScoreCache()
        if cache.has(node.identity):
            return cache.get(node.identity)
        if cache.is_active(node.identity):
            return CYCLE_SENTINEL
        cache.mark(node.identity)
        ...
        cache.unmark(node.identity)
        cache.put(node.identity, score)
    """

    def __init__(self) -> None:
        self._scores: dict[int, float] = {}
        self._active: set[int] = set()

    def has(self, identity: int) -> bool:
        return identity in self._scores

    def get(self, identity: int) -> float:
        """Return the cached score. Raises KeyError when absent; check ``has`` first."""
        return self._scores[identity]

    def put(self, identity: int, score: float) -> None:
        self._scores[identity] = score

    def mark(self, identity: int) -> None:
        """Record entry into a node's scoring."""
        self._active.add(identity)

    def unmark(self, identity: int) -> None:
        """Record exit from a node's scoring."""
        self._active.discard(identity)

    def is_active(self, identity: int) -> bool:
        return identity in self._active

    @property
    def active_count(self) -> int:
        return len(self._active)

    def clear(self) -> None:
        self._scores.clear()
        self._active.clear()

    def __len__(self) -> int:
        return len(self._scores)


__all__ = ["ScoreCache"]
