# ContainerWatch - Logging helpers (TRACE level, severity -> logging level)
from __future__ import annotations

import logging

from containerwatch.models import Severity

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_SEVERITY_LEVELS = {
    Severity.INFORMATION: logging.INFO,
    Severity.WARNING: logging.WARNING,
}


def level_for(severity: Severity) -> int:
    return _SEVERITY_LEVELS.get(severity, logging.INFO)


def setup_logging(level: str | int = "INFO") -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
