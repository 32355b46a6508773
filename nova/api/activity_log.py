from __future__ import annotations

import threading

from nova.models.entities import ActivityEntry
from nova.models.enums import Feature

PREVIEW_LIMIT = 100


def preview(prompt: str, limit: int = PREVIEW_LIMIT) -> str:
    if len(prompt) > limit:
        return prompt[: limit - 3] + "..."
    return prompt


class InMemoryActivityLog:
    """Newest-first activity feed, capped at ``capacity`` entries."""

    def __init__(self, capacity: int = 100) -> None:
        self._capacity = capacity
        self._entries: list[ActivityEntry] = []
        self._lock = threading.Lock()

    def record(self, feature: Feature, prompt: str, status: int) -> ActivityEntry:
        entry = ActivityEntry(feature=feature, prompt_preview=preview(prompt), status=status)
        with self._lock:
            self._entries.insert(0, entry)
            del self._entries[self._capacity :]
        return entry

    def entries(self) -> list[ActivityEntry]:
        with self._lock:
            return list(self._entries)
