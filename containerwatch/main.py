#!/usr/bin/env python3
# ContainerWatch - Daemon entrypoint
from __future__ import annotations

import asyncio
import logging
import signal
import sys

from containerwatch.config import load_config, validate_config
from containerwatch.log import setup_logging

logger = logging.getLogger("containerwatch")


def _config_path_from_argv() -> str | None:
    if "--config" not in sys.argv and "-c" not in sys.argv:
        return None
    for i, a in enumerate(sys.argv[1:], 1):
        if a in ("--config", "-c") and i < len(sys.argv) - 1:
            return sys.argv[i + 1]
    return None


def run_daemon(config: dict) -> None:
    from containerwatch.daemon import Daemon

    for err in validate_config(config):
        logger.warning("Config: %s", err)
    daemon = Daemon(config)
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    def shutdown():
        daemon.shutdown()

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, shutdown)
        except NotImplementedError:
            pass

    try:
        loop.run_until_complete(daemon.run())
    except KeyboardInterrupt:
        pass
    finally:
        loop.run_until_complete(daemon.cleanup())
        loop.close()


def main() -> None:
    # Any positional arg (run, replay, config ...) goes to the CLI; none runs the daemon
    positionals = [a for a in sys.argv[1:] if not a.startswith("-")]
    config_path = _config_path_from_argv()
    if config_path in positionals:
        positionals.remove(config_path)
    if positionals or "--help" in sys.argv or "-h" in sys.argv:
        from containerwatch.cli import main as cli_main
        cli_main()
        return
    config = load_config(config_path)
    setup_logging(config.get("agent", {}).get("log_level", "INFO"))
    run_daemon(config)


if __name__ == "__main__":
    main()
