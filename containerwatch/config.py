# ContainerWatch - Configuration loader
from __future__ import annotations

import os
from importlib.resources import files
from pathlib import Path
from typing import Any

import yaml

from containerwatch.event_filter import WILDCARDS

ENV_VAR = "CONTAINERWATCH_CONFIG"


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    path = path or os.environ.get(ENV_VAR)
    if path:
        path = Path(path)
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            return _merge_over_defaults(data)
    # Package-bundled config
    cfg = files("containerwatch") / "config" / "default.yaml"
    if cfg.is_file():
        data = yaml.safe_load(cfg.read_text()) or {}
        return _merge_over_defaults(data)
    return _default_config()


def _merge_over_defaults(data: dict[str, Any]) -> dict[str, Any]:
    out = _deep_merge(_default_config(), data)
    # A filter given in the file replaces the default one instead of widening it
    events = data.get("events")
    if isinstance(events, dict) and "filter" in events:
        out["events"]["filter"] = events["filter"]
    return out


def _default_config() -> dict[str, Any]:
    return {
        "agent": {
            "name": "containerwatch",
            "log_level": "INFO",
            "log_dir": "/var/log/containerwatch",
        },
        "docker": {
            "url": "",
            "timeout_sec": 60,
            "machine_id": "",
            "verbose": False,
        },
        "events": {
            "filter": {
                "container": "all",
                "image": "all",
                "volume": ["create", "destroy", "mount", "unmount"],
                "network": ["connect", "disconnect"],
            },
            "poll_interval_sec": 1.0,
        },
        "notifications": {
            "sinks": ["log"],
            "jsonl_file": "",
        },
    }


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def get_default_config() -> dict[str, Any]:
    """Return the default configuration dict (no file merge)."""
    return _default_config()


def save_config(path: str | Path, data: dict[str, Any]) -> None:
    """Write config dict to YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)


def _parse_scalar(value: Any) -> Any:
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    if isinstance(value, str) and value.isdigit():
        return int(value)
    if isinstance(value, str) and value.replace(".", "", 1).isdigit():
        return float(value)
    return value


def set_config_key(data: dict[str, Any], key: str, value: Any) -> None:
    """Set a nested key using dot notation (e.g. 'docker.machine_id' or 'notifications.sinks.1')."""
    parts = key.split(".")
    cur: Any = data
    for i, p in enumerate(parts[:-1]):
        nxt = parts[i + 1]
        if p not in cur:
            cur[p] = [] if nxt.isdigit() else {}
        cur = cur[p]
        if nxt.isdigit() and not isinstance(cur, list):
            raise ValueError(f"Cannot set {key}: '{p}' is not a list")
        if not nxt.isdigit() and not isinstance(cur, dict):
            raise ValueError(f"Cannot set {key}: '{p}' is not a dict")
    last = parts[-1]
    value = _parse_scalar(value)
    if isinstance(cur, list):
        idx = int(last)
        while len(cur) <= idx:
            cur.append(None)
        cur[idx] = value
    else:
        cur[last] = value


def validate_config(config: dict[str, Any]) -> list[str]:
    """Validate config; return list of error messages (empty if valid)."""
    errs: list[str] = []
    if not config.get("agent"):
        errs.append("Missing 'agent' section")
    docker_cfg = config.get("docker", {})
    if not isinstance(docker_cfg.get("timeout_sec", 60), (int, float)) or docker_cfg.get("timeout_sec", 60) <= 0:
        errs.append("docker.timeout_sec must be a positive number")
    events = config.get("events", {})
    flt = events.get("filter")
    if flt is None:
        errs.append("events.filter is not set; every event will be rejected")
    elif isinstance(flt, str) and flt not in WILDCARDS:
        errs.append("events.filter must be 'all', '*' or a mapping of category -> actions")
    elif isinstance(flt, dict):
        for category, actions in flt.items():
            if not isinstance(actions, (str, list)):
                errs.append(f"events.filter.{category} must be 'all', '*' or a list of actions")
    elif not isinstance(flt, (str, dict)):
        errs.append("events.filter must be 'all', '*' or a mapping of category -> actions")
    ival = events.get("poll_interval_sec", 1.0)
    if not isinstance(ival, (int, float)) or ival <= 0:
        errs.append("events.poll_interval_sec must be a positive number")
    sinks = config.get("notifications", {}).get("sinks", [])
    if not isinstance(sinks, list):
        errs.append("notifications.sinks must be a list")
    else:
        for s in sinks:
            if s not in ("log", "jsonl"):
                errs.append(f"Unknown notification sink: {s}")
    return errs
