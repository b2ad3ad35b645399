# ContainerWatch - Event stream connection health
from __future__ import annotations

import threading

logger = __import__("logging").getLogger("containerwatch.collector.health")


class ConnectionMonitor:
    """Tracks whether the event stream is connected.

    Liveness is optimistic: until the stream is known to be closed (or a
    connect attempt failed) ``is_alive`` reports ``True``.
    """

    def __init__(self) -> None:
        self._connected: bool | None = None
        self._reason = ""
        self._lock = threading.Lock()

    def is_alive(self) -> bool:
        return self._connected is not False

    @property
    def last_error(self) -> str:
        return self._reason

    def mark_connected(self) -> None:
        with self._lock:
            self._connected = True
            self._reason = ""

    def mark_disconnected(self, reason: str = "") -> None:
        with self._lock:
            was_alive = self._connected is not False
            self._connected = False
            self._reason = reason
        if was_alive:
            logger.warning("Docker state connection loss.%s", f" ({reason})" if reason else "")
