# ContainerWatch - Notification sinks (log, append-only JSONL, fan-out)
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable

from containerwatch.log import level_for
from containerwatch.models import NormalizedNotification

logger = __import__("logging").getLogger("containerwatch.reporter")
notification_logger = __import__("logging").getLogger("containerwatch.notifications")


class LoggingNotificationSink:
    def deliver(self, notification: NormalizedNotification) -> None:
        notification_logger.log(level_for(notification.severity), "%s", notification.to_string())


class JsonlNotificationSink:
    """Appends one JSON record per notification; call start() before delivering."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._file: Any = None

    def start(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self._path, "a")

    def stop(self) -> None:
        if self._file:
            self._file.close()
            self._file = None

    def deliver(self, notification: NormalizedNotification) -> None:
        if not self._file:
            logger.warning("JSONL sink %s not started; dropping notification %s", self._path, notification.title)
            return
        line = json.dumps({"ts": datetime.utcnow().isoformat() + "Z", "payload": notification.to_dict()}) + "\n"
        self._file.write(line)
        self._file.flush()


class MultiSink:
    def __init__(self, sinks: Iterable[Any]) -> None:
        self.sinks = list(sinks)

    def start(self) -> None:
        for s in self.sinks:
            if hasattr(s, "start"):
                s.start()

    def stop(self) -> None:
        for s in self.sinks:
            if hasattr(s, "stop"):
                s.stop()

    def deliver(self, notification: NormalizedNotification) -> None:
        for s in self.sinks:
            try:
                s.deliver(notification)
            except Exception as e:
                logger.warning("Sink %s failed: %s", type(s).__name__, e)


def build_sink(config: dict[str, Any]) -> MultiSink:
    notif = config.get("notifications", {})
    log_dir = Path(config.get("agent", {}).get("log_dir", "/var/log/containerwatch"))
    sinks: list[Any] = []
    for name in notif.get("sinks", ["log"]):
        if name == "log":
            sinks.append(LoggingNotificationSink())
        elif name == "jsonl":
            sinks.append(JsonlNotificationSink(notif.get("jsonl_file") or log_dir / "notifications.jsonl"))
        else:
            logger.warning("Unknown notification sink: %s", name)
    return MultiSink(sinks)
