"""
Preference cache abstraction.

Holds derived UserPreferences keyed by session id between requests.
The engine receives a cache instance; any PreferenceCache (e.g. a shared
external cache) can be injected.
Values are replaced whole; concurrent fills for one key are last-writer-wins.
"""

from collections import OrderedDict
from typing import Optional, Protocol

from giftrank.models.preferences import UserPreferences


class PreferenceCache(Protocol):
    """Protocol for preference caching with explicit invalidation."""

    def get(self, session_id: str) -> Optional[UserPreferences]:
        ...

    def set(self, session_id: str, preferences: UserPreferences) -> None:
        ...

    def invalidate(self, session_id: str) -> None:
        ...

    def clear(self) -> None:
        ...


class LRUPreferenceCache:
    """In-process preference cache bounded to max_size entries (least recently used evicted)."""

    def __init__(self, max_size: int = 1024):
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        self._max_size = max_size
        self._entries: "OrderedDict[str, UserPreferences]" = OrderedDict()

    def get(self, session_id: str) -> Optional[UserPreferences]:
        prefs = self._entries.get(session_id)
        if prefs is not None:
            self._entries.move_to_end(session_id)
        return prefs

    def set(self, session_id: str, preferences: UserPreferences) -> None:
        self._entries[session_id] = preferences
        self._entries.move_to_end(session_id)
        while len(self._entries) > self._max_size:
            self._entries.popitem(last=False)

    def invalidate(self, session_id: str) -> None:
        self._entries.pop(session_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
