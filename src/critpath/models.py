"""Data models for critpath."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

VALID_PRIORITIES = ("low", "medium", "normal", "high")
DEFAULT_PRIORITY = "normal"


def normalize_priority(value: str | None) -> str:
    """Lower-case a priority and fall back to 'normal' when it is unknown."""
    if not value:
        return DEFAULT_PRIORITY
    lowered = value.strip().lower()
    return lowered if lowered in VALID_PRIORITIES else DEFAULT_PRIORITY


def _default_dependencies() -> frozenset[str]:
    return frozenset()


@dataclass(frozen=True)
class TaskRef:
    """Read-only view of one task as handed to the engine.

    Only ``id``, the two dates and ``dependencies`` affect scheduling; the
    remaining fields ride along for summaries.
    """

    id: str
    start_date: date | datetime | None = None
    due_date: date | datetime | None = None
    dependencies: frozenset[str] = field(default_factory=_default_dependencies)
    title: str = ""
    assignee: str | None = None
    priority: str = DEFAULT_PRIORITY

    def __post_init__(self) -> None:
        # Accept any iterable of IDs from callers
        if not isinstance(self.dependencies, frozenset):
            object.__setattr__(self, "dependencies", frozenset(self.dependencies))
        object.__setattr__(self, "priority", normalize_priority(self.priority))


class RiskLevel(str, Enum):
    """Schedule risk of a single task."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class Project:
    """A project snapshot: identity plus its non-deleted tasks."""

    id: str
    name: str = ""
    tasks: list[TaskRef] = field(default_factory=list)
    critical_flags: dict[str, bool] = field(default_factory=dict)

    def get_task_by_id(self, task_id: str) -> TaskRef | None:
        """Get a task by its ID."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None
