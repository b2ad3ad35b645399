# ContainerWatch - Event filter: which category/action pairs may propagate
from __future__ import annotations

from typing import Any, Mapping, Protocol

from containerwatch.tables import CATEGORY_ACTIONS

logger = __import__("logging").getLogger("containerwatch.filter")

WILDCARDS = ("all", "*")


class EventFilter(Protocol):
    def allows_all(self, category: str | None = None) -> bool:
        ...

    def allows(self, category: str, action: str) -> bool:
        ...


def is_allowed(event_filter: EventFilter | None, category: str, action: str) -> bool:
    """Global allow, then category-wide allow, then exact match; no filter denies all."""
    if event_filter is None:
        return False
    if event_filter.allows_all():
        return True
    if not category:
        return False
    if event_filter.allows_all(category):
        return True
    if not action:
        return False
    return event_filter.allows(category, action)


class ConfigEventFilter:
    """Filter built from the ``events.filter`` config value."""

    def __init__(self, everything: bool = False, rules: Mapping[str, Any] | None = None) -> None:
        self._everything = everything
        self._whole_categories: set[str] = set()
        self._actions: dict[str, set[str]] = {}
        for category, actions in (rules or {}).items():
            if category not in CATEGORY_ACTIONS:
                logger.warning("Unknown event category in filter: %s", category)
            if isinstance(actions, str):
                if actions in WILDCARDS:
                    self._whole_categories.add(category)
                else:
                    self._actions.setdefault(category, set()).add(actions)
            else:
                self._actions.setdefault(category, set()).update(str(a) for a in actions or [])

    @classmethod
    def from_config(cls, value: Any) -> "ConfigEventFilter | None":
        if value is None:
            return None
        if isinstance(value, str):
            if value in WILDCARDS:
                return cls(everything=True)
            raise ValueError(f"events.filter must be 'all', '*' or a mapping, not {value!r}")
        if isinstance(value, Mapping):
            return cls(rules=value)
        raise ValueError(f"events.filter must be 'all', '*' or a mapping, not {type(value).__name__}")

    def allows_all(self, category: str | None = None) -> bool:
        if category is None:
            return self._everything
        return self._everything or category in self._whole_categories

    def allows(self, category: str, action: str) -> bool:
        return action in self._actions.get(category, ())
