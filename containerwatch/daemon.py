# ContainerWatch - Daemon orchestrator
from __future__ import annotations

import asyncio
import logging
from typing import Any

from containerwatch.collector.docker_events import DockerEventStream, EventStreamError
from containerwatch.collector.event_queue import EventQueue
from containerwatch.event_filter import ConfigEventFilter
from containerwatch.normalizer import EventNormalizer
from containerwatch.reporter.sinks import build_sink

logger = logging.getLogger("containerwatch")


class Daemon:
    def __init__(self, config: dict[str, Any], stream: DockerEventStream | None = None) -> None:
        self.config = config
        docker_cfg = config.get("docker", {})
        events_cfg = config.get("events", {})
        self._interval = float(events_cfg.get("poll_interval_sec", 1.0))
        self._running = False
        self._task: asyncio.Task[Any] | None = None
        self.queue = EventQueue()
        self._stream = stream or DockerEventStream(config, self.queue)
        self._sink = build_sink(config)
        event_filter = ConfigEventFilter.from_config(events_cfg.get("filter"))
        if event_filter is None:
            logger.warning("No event filter configured; all Docker events will be rejected")
        self._normalizer = EventNormalizer(
            event_filter,
            self._sink,
            machine_id=docker_cfg.get("machine_id") or "",
            verbose=bool(docker_cfg.get("verbose")),
        )
        self.emitted = 0

    def shutdown(self) -> None:
        self._running = False

    async def run(self) -> None:
        self._running = True
        logger.info("ContainerWatch daemon starting")
        self._sink.start()
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._connect)
        self._task = asyncio.create_task(self._run_event_processor())
        await self._task

    async def cleanup(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._stream.close)
        self._normalizer.run_cycle(self.queue)
        self._sink.stop()
        logger.info("ContainerWatch daemon stopped")

    def _connect(self) -> None:
        try:
            self._stream.send_request()
        except EventStreamError as e:
            logger.warning("%s %s", e, self._stream.monitor.last_error)

    def run_once(self) -> int:
        if not self._stream.is_alive():
            self._connect()
        emitted = len(self._normalizer.run_cycle(self.queue))
        self.emitted += emitted
        return emitted

    async def _run_event_processor(self) -> None:
        # Docker SDK calls block; keep them off the event loop
        loop = asyncio.get_running_loop()
        while self._running:
            try:
                await loop.run_in_executor(None, self.run_once)
            except Exception as e:
                logger.exception("Event processor error: %s", e)
            await asyncio.sleep(self._interval)
