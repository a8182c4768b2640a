"""Logging for critpath.

The ``critpath`` logger has two levels on top of the standard ones, chosen
with ``-v`` on the command line:

    0  errors only
    1  CHANGES  tasks joining or leaving the critical path, dropped edges
    2  CHECKS   graph building, pass summaries, flag writes
    3  DEBUG    per-task timings from each pass
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

CHANGES_LEVEL = 25
CHECKS_LEVEL = 15

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

VERBOSITY_SILENT = 0
VERBOSITY_CHANGES = 1
VERBOSITY_CHECKS = 2
VERBOSITY_DEBUG = 3

# Index is the verbosity
_LEVELS = (logging.ERROR, CHANGES_LEVEL, CHECKS_LEVEL, logging.DEBUG)


class CritpathLogger(logging.Logger):
    """Logger with one method per verbosity level."""

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)

    def timing(self, pass_name: str, task_id: str, **fields: int | None) -> None:
        """Trace one task's timings after a pass sets them.

        Example output: ``  forward build: ES=3 EF=8``
        """
        if self.isEnabledFor(logging.DEBUG):
            values = " ".join(f"{name}={value}" for name, value in fields.items())
            self._log(logging.DEBUG, "  %s %s: %s", (pass_name, task_id, values))


def get_logger() -> CritpathLogger:
    """Return the shared ``critpath`` logger."""
    logging.setLoggerClass(CritpathLogger)
    logger = logging.getLogger("critpath")
    assert isinstance(logger, CritpathLogger)
    return logger


def level_for_verbosity(verbosity: int) -> int:
    """Map a ``-v`` count to a logging level; out of range values are clamped."""
    return _LEVELS[max(VERBOSITY_SILENT, min(verbosity, VERBOSITY_DEBUG))]


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Send critpath log records to ``stream`` (stderr by default) at ``verbosity``.

    Warnings such as dropped dependency edges show from verbosity 1 up.
    Safe to call again; earlier handlers are replaced.
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(level_for_verbosity(verbosity))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and hand records back to the root logger (used by tests)."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)
    logger.propagate = True


def checks_enabled() -> bool:
    """True when checks output is shown (verbosity 2 or more)."""
    return get_logger().isEnabledFor(CHECKS_LEVEL)
