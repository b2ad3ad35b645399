# ContainerWatch - CLI: run, replay a capture, inspect tables, manage config
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from containerwatch import __version__
from containerwatch.config import ENV_VAR, load_config, save_config, set_config_key, validate_config
from containerwatch.log import setup_logging


def cmd_replay(config: dict, path: str, machine_id: str | None, as_json: bool) -> int:
    """Normalize a JSON-lines capture of Docker events and print the notifications."""
    import json

    from containerwatch.collector.event_queue import EventQueue
    from containerwatch.collector.replay import read_event_file
    from containerwatch.event_filter import ConfigEventFilter
    from containerwatch.normalizer import EventNormalizer
    from containerwatch.reporter.sinks import build_sink

    queue = EventQueue()
    read_event_file(path, queue)
    docker_cfg = config.get("docker", {})
    sink = build_sink(config)
    sink.start()
    try:
        normalizer = EventNormalizer(
            ConfigEventFilter.from_config(config.get("events", {}).get("filter")),
            sink,
            machine_id=machine_id if machine_id is not None else docker_cfg.get("machine_id") or "",
            verbose=bool(docker_cfg.get("verbose")),
        )
        notifications = normalizer.run_cycle(queue)
    finally:
        sink.stop()
    for n in notifications:
        print(json.dumps(n.to_dict()) if as_json else n.to_string() + "\n")
    return len(notifications)


def cmd_tables() -> None:
    from containerwatch.tables import CATEGORY_ACTIONS, display_name, severity_of

    for category, actions in CATEGORY_ACTIONS.items():
        print(f"{category}:")
        for action in sorted(actions):
            print(f"  {action:<12} {display_name(action):<15} {severity_of(action).name.lower()}")


def cmd_config_show(config_path: str | None) -> None:
    """Print merged config as YAML."""
    import yaml
    config = load_config(config_path)
    print(yaml.safe_dump(config, default_flow_style=False, allow_unicode=True, sort_keys=False))


def cmd_config_validate(config_path: str | None) -> None:
    """Validate config file and print errors."""
    config = load_config(config_path)
    errs = validate_config(config)
    if not errs:
        print("Config is valid.")
        return
    for e in errs:
        print(f"Error: {e}", file=sys.stderr)
    sys.exit(1)


def cmd_config_set(config_path: str | None, key: str, value: str, output_path: str | None) -> None:
    """Set a config key (dot notation) and save."""
    path = config_path or os.environ.get(ENV_VAR)
    if not path or not Path(path).exists():
        print("Error: No config file found. Pass --config with an existing file.", file=sys.stderr)
        sys.exit(1)
    path = Path(path)
    config = load_config(path)
    try:
        set_config_key(config, key, value)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    out = Path(output_path or path)
    save_config(out, config)
    print(f"Set {key} = {value!r}; saved to {out}")


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(prog="containerwatch", description="Docker event normalizer")
    ap.add_argument("--config", "-c", help="Config file path")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = ap.add_subparsers(dest="command")

    sub.add_parser("run", help="Run the daemon (same as no subcommand)")

    p_replay = sub.add_parser("replay", help="Normalize a JSON-lines capture of Docker events")
    p_replay.add_argument("file", help="Capture file, one event per line")
    p_replay.add_argument("--machine-id", help="Override docker.machine_id")
    p_replay.add_argument("--json", action="store_true", help="Print notifications as JSON lines")

    sub.add_parser("tables", help="Show known actions with display names and severities")

    p_config = sub.add_parser("config", help="config show|validate|set")
    p_config_sub = p_config.add_subparsers(dest="config_cmd", required=True)
    p_config_sub.add_parser("show", help="Show merged config (YAML)")
    p_config_sub.add_parser("validate", help="Validate config file")
    p_config_set = p_config_sub.add_parser("set", help="Set a key (e.g. docker.machine_id=00:11:22:33:44:55)")
    p_config_set.add_argument("key", help="Dot-separated key")
    p_config_set.add_argument("value", help="Value (string; true/false and numbers auto-parsed)")
    p_config_set.add_argument("--output", "-o", help="Write to this path instead of --config")

    args = ap.parse_args(argv)
    config_path = getattr(args, "config", None)
    config = load_config(config_path)
    setup_logging(config.get("agent", {}).get("log_level", "INFO"))

    if args.command in (None, "run"):
        from containerwatch.main import run_daemon
        run_daemon(config)
    elif args.command == "replay":
        cmd_replay(config, args.file, args.machine_id, args.json)
    elif args.command == "tables":
        cmd_tables()
    elif args.command == "config":
        if args.config_cmd == "show":
            cmd_config_show(config_path)
        elif args.config_cmd == "validate":
            cmd_config_validate(config_path)
        elif args.config_cmd == "set":
            cmd_config_set(config_path, args.key, args.value, getattr(args, "output", None))


if __name__ == "__main__":
    main()
