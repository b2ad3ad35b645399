#!/usr/bin/env python3
"""
ContainerWatch - generate Docker lifecycle events for manual testing.

Usage:
  # Terminal 1: start the daemon
  containerwatch --config containerwatch/config/default.yaml

  # Terminal 2: run a short-lived container (create, start, die, destroy ...)
  python3 scripts/simulate_events.py docker

  # Or write a capture file and replay it without a Docker daemon:
  python3 scripts/simulate_events.py capture /tmp/events.jsonl
  containerwatch replay /tmp/events.jsonl
"""
from __future__ import annotations

import json
import sys
import time

SAMPLE_EVENTS = [
    {"Type": "image", "Action": "pull", "id": "busybox:latest",
     "Actor": {"ID": "busybox:latest", "Attributes": {"name": "busybox"}}},
    {"Type": "container", "Action": "create", "id": "4f6a0c1e2b3d4a5f6e7d8c9b0a1f2e3d",
     "Actor": {"ID": "4f6a0c1e2b3d4a5f6e7d8c9b0a1f2e3d", "Attributes": {"image": "busybox", "name": "cw-sim"}}},
    {"Type": "container", "Action": "start", "id": "4f6a0c1e2b3d4a5f6e7d8c9b0a1f2e3d",
     "Actor": {"ID": "4f6a0c1e2b3d4a5f6e7d8c9b0a1f2e3d", "Attributes": {"image": "busybox", "name": "cw-sim"}}},
    {"Type": "container", "status": "die", "id": "4f6a0c1e2b3d4a5f6e7d8c9b0a1f2e3d",
     "Actor": {"ID": "4f6a0c1e2b3d4a5f6e7d8c9b0a1f2e3d", "Attributes": {"image": "busybox", "name": "cw-sim", "exitCode": "1"}}},
    {"Type": "image", "Action": "untag", "id": "sha256:9d5226e6ce3fb6aee2822206a5ef85f38c303d2b37bfc894b419fca2c0501269",
     "Actor": {"ID": "sha256:9d5226e6ce3fb6aee2822206a5ef85f38c303d2b37bfc894b419fca2c0501269",
               "Attributes": {"name": "sha256:9d5226e6ce3fb6aee2822206a5ef85f38c303d2b37bfc894b419fca2c0501269"}}},
    {"Type": "network", "Action": "frobnicate", "id": "b0d6e8f1a2c3"},
    None,
]


def run_container() -> None:
    import docker

    client = docker.from_env()
    print("Running busybox (exits with status 1) ...")
    client.containers.run("busybox", ["sh", "-c", "sleep 2; exit 1"], name=f"cw-sim-{int(time.time())}", remove=True, detach=False)


def write_capture(path: str) -> None:
    now = int(time.time())
    with open(path, "w") as f:
        for i, ev in enumerate(SAMPLE_EVENTS):
            if ev is not None:
                ev = {**ev, "time": now + i}
            f.write(json.dumps(ev) + "\n")
    print(f"Wrote {len(SAMPLE_EVENTS)} events to {path}")


def main() -> None:
    mode = (sys.argv[1:] or ["capture"])[0]
    if mode == "docker":
        try:
            run_container()
        except Exception as e:
            print(f"Container run finished: {e}")
    elif mode == "capture":
        write_capture(sys.argv[2] if len(sys.argv) > 2 else "events.jsonl")
    else:
        print(__doc__)
        sys.exit(1)


if __name__ == "__main__":
    main()
