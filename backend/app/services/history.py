"""Bounded most-recent-first history of issued keys."""

from collections import deque
from dataclasses import dataclass

DEFAULT_HISTORY_LIMIT = 5


@dataclass(frozen=True)
class HistoryEntry:
    domain: str
    token: str


class HistoryCache:
    """Keeps the last `limit` issued keys, newest first.

    One cache belongs to one session. It has no owner field, so it must never
    be shared between users.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self.limit = limit
        self._entries: deque[HistoryEntry] = deque(maxlen=limit)

    def record(self, entry: HistoryEntry) -> None:
        """Prepend an entry, dropping the oldest one beyond the limit."""
        self._entries.appendleft(entry)

    def entries(self) -> tuple[HistoryEntry, ...]:
        """Return a snapshot of all entries, most recent first."""
        return tuple(self._entries)

    def get(self, index: int) -> HistoryEntry:
        """Return the entry at `index` in most-recent-first order.

        Raises:
            IndexError: If no entry exists at that position
        """
        if index < 0 or index >= len(self._entries):
            raise IndexError(f"No history entry at position {index}")
        return self._entries[index]

    def reuse(self, entry: HistoryEntry) -> tuple[str, str]:
        """Return the domain and token of an entry for display. Nothing is re-derived."""
        return entry.domain, entry.token

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
