"""Process-wide state shared by CLI commands and services."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .service import ProjectLocks


class _Context:
    """Config path chosen on the command line plus the lock registry for recomputations."""

    def __init__(self) -> None:
        self.config_path: Path | None = None
        self.project_locks: ProjectLocks | None = None


_context = _Context()


def get_config_path() -> Path | None:
    """Config file given via --config, if any."""
    return _context.config_path


def set_config_path(path: Path | None) -> None:
    _context.config_path = path


def get_project_locks() -> ProjectLocks:
    """Lock registry shared by every service in this process.

    Created on first use; all recomputations of one project in the process
    go through the same lock.
    """
    if _context.project_locks is None:
        from .service import ProjectLocks

        _context.project_locks = ProjectLocks()
    return _context.project_locks


def reset() -> None:
    """Forget the config path and lock registry."""
    _context.config_path = None
    _context.project_locks = None
