# ContainerWatch - Replay a captured event stream (JSON lines) into the queue
from __future__ import annotations

import json
from pathlib import Path

from containerwatch.collector.event_queue import EventQueue

logger = __import__("logging").getLogger("containerwatch.collector.replay")


def read_event_file(path: str | Path, queue: EventQueue) -> int:
    """Queue one payload per non-blank line; unparseable lines are queued as None."""
    count = 0
    with open(path) as f:
        for lineno, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                payload = json.loads(line)
            except json.JSONDecodeError as e:
                logger.debug("Line %d of %s is not JSON: %s", lineno, path, e)
                payload = None
            queue.append(payload)
            count += 1
    return count
