from __future__ import annotations

import threading
from typing import Protocol, Sequence

from .model import NotificationLogEntry


class NotificationLogRepository(Protocol):
    """Append-only delivery log of the local gateway."""

    def append(self, entry: NotificationLogEntry) -> None:
        raise NotImplementedError

    def list_recent(self) -> Sequence[NotificationLogEntry]:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class InMemoryNotificationLog:
    # Written from the outbound worker thread, read from request threads.
    def __init__(self):
        self._entries: list[NotificationLogEntry] = []
        self._lock = threading.Lock()

    def append(self, entry: NotificationLogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def list_recent(self) -> Sequence[NotificationLogEntry]:
        with self._lock:
            return list(reversed(self._entries))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
