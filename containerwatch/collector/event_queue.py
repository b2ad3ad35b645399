# ContainerWatch - Buffer of raw event payloads between stream and normalizer
from __future__ import annotations

import threading
from typing import Any


class EventQueue:
    """Arrival-ordered buffer; the stream thread appends, the processing cycle drains."""

    def __init__(self) -> None:
        self._items: list[Any] = []
        self._lock = threading.Lock()

    def append(self, payload: Any) -> None:
        with self._lock:
            self._items.append(payload)

    def drain(self) -> list[Any]:
        with self._lock:
            items, self._items = self._items, []
        return items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
