# ContainerWatch - Data models (RawEvent, NormalizedNotification, Severity)
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

# --- Constants ---

UNKNOWN_TIME = 2**64 - 1
SOURCE_TAG = "container-runtime"


# --- Enums ---


class Severity(int, Enum):
    INFORMATION = 0
    WARNING = 1


# --- Payload helpers ---


def _as_text(value: Any) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _as_epoch(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if isinstance(value, int) and 0 <= value <= UNKNOWN_TIME:
        return value
    return None


def _get_string(payload: Mapping[str, Any], key: str) -> str:
    return _as_text(payload.get(key)) or ""


# --- Core entities ---


@dataclass(frozen=True)
class RawEvent:
    """One runtime event as received from the stream.

    ``actor_attributes`` is ``None`` when the payload has no ``Actor`` object or
    its ``Attributes`` member is not an object.
    """

    category: str
    action: str
    actor_id: str = ""
    actor_attributes: Mapping[str, str] | None = None
    timestamp_seconds: int | None = None
    payload: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RawEvent":
        action = _get_string(payload, "Action")
        if not action:
            action = _get_string(payload, "status")
        attributes: dict[str, str] | None = None
        actor = payload.get("Actor")
        if isinstance(actor, Mapping):
            attrib = actor.get("Attributes")
            if isinstance(attrib, Mapping):
                attributes = {}
                for k, v in attrib.items():
                    text = _as_text(v)
                    if text is not None:
                        attributes[str(k)] = text
        return cls(
            category=_get_string(payload, "Type"),
            action=action,
            actor_id=_get_string(payload, "id"),
            actor_attributes=attributes,
            timestamp_seconds=_as_epoch(payload.get("time")),
            payload=payload,
        )

    @property
    def image(self) -> str:
        return (self.actor_attributes or {}).get("image", "")

    @property
    def name(self) -> str | None:
        return (self.actor_attributes or {}).get("name")


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


@dataclass(frozen=True)
class NormalizedNotification:
    timestamp_seconds: int
    title: str
    body: str
    scope: str
    severity: Severity
    tags: Mapping[str, str] = field(default_factory=lambda: {"source": SOURCE_TAG})

    def to_string(self) -> str:
        """Render the notification in the text form downstream consumers parse."""
        lines = [
            f"timestamp: {self.timestamp_seconds}",
            f"name: {_quote(self.title)}",
            f"description: {_quote(self.body)}",
            f"scope: {_quote(self.scope)}",
        ]
        if self.tags:
            lines.append("tags:")
            for k, v in self.tags.items():
                lines.append(f"  {_quote(k)}: {_quote(v)}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp_seconds,
            "title": self.title,
            "body": self.body,
            "scope": self.scope,
            "tags": dict(self.tags),
            "severity": self.severity.name.lower(),
        }
