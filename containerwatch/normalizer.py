# ContainerWatch - Normalizer: raw runtime event -> severity-tagged notification
from __future__ import annotations

import json
from typing import Any, Iterable, Mapping, Protocol

from containerwatch.collector.event_queue import EventQueue
from containerwatch.event_filter import EventFilter, is_allowed
from containerwatch.log import TRACE
from containerwatch.models import SOURCE_TAG, UNKNOWN_TIME, NormalizedNotification, RawEvent, Severity
from containerwatch.scope import resolve_scope
from containerwatch.tables import display_name, severity_of

logger = __import__("logging").getLogger("containerwatch.normalizer")


class NotificationSink(Protocol):
    def deliver(self, notification: NormalizedNotification) -> None:
        ...


def _dump(payload: Any) -> str:
    return json.dumps(payload, default=str, sort_keys=True)


def render_title(event: RawEvent) -> str:
    if event.action and event.category:
        return event.category[0].upper() + event.category[1:] + " " + display_name(event.action)
    return event.action


def render_body(event: RawEvent) -> str:
    body = f"Event: {event.action}" if event.action else ""
    if event.actor_attributes is not None:
        if event.image:
            body += f"; Image: {event.image}"
        if event.name is not None:
            body += f"; Name: {event.name}"
    return body


class EventNormalizer:
    """Filters, classifies, scopes and renders runtime events, one at a time.

    Every failure is local to the event being handled: it is logged and the
    event is dropped (or, for an unresolvable scope, rendered without an entity
    clause), so a bad event never stops the rest of the batch.
    """

    def __init__(
        self,
        event_filter: EventFilter | None,
        sink: NotificationSink,
        machine_id: str = "",
        verbose: bool = False,
    ) -> None:
        self._filter = event_filter
        self._sink = sink
        self._machine_id = machine_id
        self._verbose = verbose

    def render(self, event: RawEvent, severity: Severity) -> NormalizedNotification:
        ts = event.timestamp_seconds if event.timestamp_seconds is not None else UNKNOWN_TIME
        return NormalizedNotification(
            timestamp_seconds=ts,
            title=render_title(event),
            body=render_body(event),
            scope=resolve_scope(event, self._machine_id),
            severity=severity,
            tags={"source": SOURCE_TAG},
        )

    def handle_event(self, payload: Any) -> NormalizedNotification | None:
        if payload is None:
            logger.error("Docker event error: event is null.")
            return None
        if not isinstance(payload, Mapping):
            logger.error("Docker event error: JSON is not an object: %r", payload)
            return None
        event = RawEvent.from_payload(payload)
        logger.debug("Docker EVENT: type=%s, status=%s", event.category, event.action)

        if not is_allowed(self._filter, event.category, event.action):
            logger.debug("Docker EVENT: status not permitted by filter: %s:%s", event.category, event.action)
            logger.log(TRACE, "%s", _dump(payload))
            return None

        severity = severity_of(event.action)
        if severity is None:
            logger.error("Docker EVENT: status not supported: %s", event.action)
            logger.debug("%s", _dump(payload))
            return None
        logger.debug("Docker EVENT: severity for %s=%s", event.action, severity.name)
        if self._verbose:
            print(_dump(payload))

        notification = self.render(event, severity)
        try:
            self._sink.deliver(notification)
        except Exception as e:
            logger.exception("Notification delivery failed: %s", e)
        logger.log(TRACE, "Docker EVENT: scheduled for sending\n%s", notification.to_string())
        return notification

    def process(self, payloads: Iterable[Any]) -> list[NormalizedNotification]:
        out: list[NormalizedNotification] = []
        for payload in payloads:
            notification = self.handle_event(payload)
            if notification is not None:
                out.append(notification)
        return out

    def run_cycle(self, queue: EventQueue) -> list[NormalizedNotification]:
        return self.process(queue.drain())
