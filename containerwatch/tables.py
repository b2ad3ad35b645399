# ContainerWatch - Static action tables: categories, severities, display names
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from containerwatch.models import Severity

CONTAINER_ACTIONS = frozenset({
    "attach", "commit", "copy", "create", "destroy", "die", "exec_create", "exec_start",
    "export", "kill", "oom", "pause", "rename", "resize", "restart", "start", "stop",
    "top", "unpause", "update",
})
IMAGE_ACTIONS = frozenset({"delete", "import", "pull", "push", "tag", "untag"})
VOLUME_ACTIONS = frozenset({"create", "mount", "unmount", "destroy"})
NETWORK_ACTIONS = frozenset({"create", "connect", "disconnect", "destroy"})

CATEGORY_ACTIONS: Mapping[str, frozenset[str]] = MappingProxyType({
    "container": CONTAINER_ACTIONS,
    "image": IMAGE_ACTIONS,
    "volume": VOLUME_ACTIONS,
    "network": NETWORK_ACTIONS,
})

_WARNING_ACTIONS = {"destroy", "die", "kill", "oom", "restart"}

# Keyed by action alone: "create" and "destroy" appear in several categories
# and must classify identically in all of them.
SEVERITY_MAP: Mapping[str, Severity] = MappingProxyType({
    action: Severity.WARNING if action in _WARNING_ACTIONS else Severity.INFORMATION
    for actions in CATEGORY_ACTIONS.values()
    for action in actions
})

DISPLAY_NAMES: Mapping[str, str] = MappingProxyType({
    # container
    "attach": "Attached",
    "commit": "Committed",
    "copy": "Copied",
    "create": "Created",
    "destroy": "Destroyed",
    "die": "Died",
    "exec_create": "Exec Created",
    "exec_start": "Exec Started",
    "export": "Exported",
    "kill": "Killed",
    "oom": "Out of Memory",
    "pause": "Paused",
    "rename": "Renamed",
    "resize": "Resized",
    "restart": "Restarted",
    "start": "Started",
    "stop": "Stopped",
    "top": "Top",
    "unpause": "Unpaused",
    "update": "Updated",
    # image
    "delete": "Deleted",
    "import": "Imported",
    "pull": "Pulled",
    "push": "Pushed",
    "tag": "Tagged",
    "untag": "Untagged",
    # volume
    "mount": "Mounted",
    "unmount": "Unmounted",
    # network
    "connect": "Connected",
    "disconnect": "Disconnected",
})


def severity_of(action: str) -> Severity | None:
    return SEVERITY_MAP.get(action)


def display_name(action: str) -> str:
    return DISPLAY_NAMES.get(action, action)


def is_image_event(action: str) -> bool:
    return action in IMAGE_ACTIONS
