# ContainerWatch - Docker event stream reader
from __future__ import annotations

import threading
from typing import Any

from containerwatch.collector.event_queue import EventQueue
from containerwatch.collector.health import ConnectionMonitor

logger = __import__("logging").getLogger("containerwatch.collector.docker")


class EventStreamError(ConnectionError):
    pass


class DockerEventStream:
    """Reads ``/events`` from the Docker API on a background thread into an EventQueue."""

    def __init__(self, config: dict[str, Any], queue: EventQueue, monitor: ConnectionMonitor | None = None) -> None:
        self.config = config
        self._queue = queue
        self.monitor = monitor or ConnectionMonitor()
        docker_cfg = config.get("docker", {})
        self._url = docker_cfg.get("url") or ""
        self._timeout = docker_cfg.get("timeout_sec", 60)
        self._client: Any = None
        self._stream: Any = None
        self._thread: threading.Thread | None = None
        self._closing = False

    def _get_client(self) -> Any:
        if self._client is None:
            import docker

            if self._url:
                self._client = docker.DockerClient(base_url=self._url, timeout=self._timeout)
            else:
                self._client = docker.from_env(timeout=self._timeout)
        return self._client

    def is_alive(self) -> bool:
        return self.monitor.is_alive()

    def is_streaming(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def connect(self) -> None:
        try:
            client = self._get_client()
            client.ping()
        except Exception as e:
            self._client = None
            self.monitor.mark_disconnected(str(e))
            raise EventStreamError("Connection to Docker API failed.") from e
        logger.debug("Connected to Docker API at %s", self._url or "environment default")

    def send_request(self) -> None:
        """Open the event stream unless it is running or undrained events are pending."""
        if len(self._queue) or self.is_streaming():
            return
        self.connect()
        self._close_stream()
        try:
            self._stream = self._client.events(decode=True)
        except Exception as e:
            self.monitor.mark_disconnected(str(e))
            raise EventStreamError("Docker event request failed.") from e
        self._closing = False
        self.monitor.mark_connected()
        self._thread = threading.Thread(target=self._read, args=(self._stream,), name="docker-events", daemon=True)
        self._thread.start()
        logger.debug("Docker event request sent.")

    def _read(self, stream: Any) -> None:
        reason = "event stream ended"
        try:
            for payload in stream:
                self._queue.append(payload)
        except Exception as e:
            reason = str(e) or type(e).__name__
        if not self._closing:
            self.monitor.mark_disconnected(reason)

    def _close_stream(self) -> None:
        if self._stream is not None:
            try:
                self._stream.close()
            except Exception as e:
                logger.debug("Closing Docker event stream failed: %s", e)
            self._stream = None
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None

    def close(self) -> None:
        self._closing = True
        self._close_stream()
        if self._client is not None:
            self._client.close()
            self._client = None
