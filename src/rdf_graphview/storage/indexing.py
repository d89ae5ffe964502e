"""
Position indexes for the triple store.

One index per triple position (subject, predicate, object) maps a term value
to the triple ids holding it, in insertion order.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterator


@dataclass
class IndexStats:
    """Statistics for an index."""
    position: str
    num_keys: int
    num_entries: int
    memory_bytes: int


class PositionIndex:
    """
    Index from term value to the ids of triples holding it in one position.

    Ids are appended in insertion order, so every lookup returns ids in the
    order the triples were stored.

    Example:
        idx = PositionIndex("subject")
        idx.add("ex:alice", 0)
        idx.lookup("ex:alice")   # [0]
    """

    def __init__(self, position: str):
        """
        Args:
            position: Name of the indexed position ("subject", "predicate", "object")
        """
        self.position = position
        self._entries: dict[str, list[int]] = {}
        self._num_entries = 0

    def add(self, key: str, triple_id: int) -> None:
        self._entries.setdefault(key, []).append(triple_id)
        self._num_entries += 1

    def discard(self, key: str, triple_id: int) -> bool:
        """
        Remove one triple id from a key's posting list.

        Returns:
            True if the id was present.
        """
        ids = self._entries.get(key)
        if not ids:
            return False
        try:
            ids.remove(triple_id)
        except ValueError:
            return False
        if not ids:
            del self._entries[key]
        self._num_entries -= 1
        return True

    def lookup(self, key: str) -> list[int]:
        """Return the triple ids for ``key`` (a copy, possibly empty)."""
        return list(self._entries.get(key, ()))

    def count(self, key: str) -> int:
        return len(self._entries.get(key, ()))

    def keys(self) -> Iterator[str]:
        return iter(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._num_entries = 0

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> IndexStats:
        memory = sys.getsizeof(self._entries)
        for key, ids in self._entries.items():
            memory += sys.getsizeof(key) + sys.getsizeof(ids)
        return IndexStats(
            position=self.position,
            num_keys=len(self._entries),
            num_entries=self._num_entries,
            memory_bytes=memory,
        )
