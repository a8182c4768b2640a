"""Task summaries and risk assessment for critical path reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from .config import SummaryConfig, SummarySort
from .engine import CriticalPathResult, TaskTiming
from .exceptions import CritpathError, CycleDetectedError, InvalidDurationError, InvalidGraphError
from .models import RiskLevel, TaskRef


def assess_risk(task: TaskRef, dependency_threshold: int = 2) -> RiskLevel:
    """Rate how likely a task is to slip.

    Tasks without a full date range, high priority tasks and tasks with
    many dependencies are high risk; medium priority is medium risk.
    """
    if task.start_date is None or task.due_date is None:
        return RiskLevel.HIGH
    if task.priority == "high":
        return RiskLevel.HIGH
    if len(task.dependencies) > dependency_threshold:
        return RiskLevel.HIGH
    if task.priority == "medium":
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class TaskSummary:
    """Display record for one task on the critical path."""

    id: str
    title: str
    assignee: str | None
    due_date: date | datetime | None
    duration: int
    timing: TaskTiming
    risk: RiskLevel

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "assignee": self.assignee,
            "dueDate": _iso(self.due_date),
            "duration": self.duration,
            **self.timing.as_dict(),
            "risk": self.risk.value,
            "isOnCriticalPath": self.timing.is_critical,
        }


def _default_summaries() -> list[TaskSummary]:
    return []


@dataclass
class CriticalPathReport:
    """Critical path of one project, ready for display."""

    project_id: str
    result: CriticalPathResult
    critical_path: list[TaskSummary] = field(default_factory=_default_summaries)

    def to_response(self) -> dict[str, Any]:
        """Success envelope as served by the task API."""
        return {
            "status": True,
            "projectId": self.project_id,
            "projectDuration": self.result.project_duration,
            "criticalPath": [summary.as_dict() for summary in self.critical_path],
            "warnings": list(self.result.warnings),
        }


def _sort_key(summary: TaskSummary, sort_by: SummarySort) -> tuple[Any, ...]:
    if sort_by == SummarySort.EARLIEST_START:
        return (summary.timing.earliest_start, summary.id)
    if sort_by == SummarySort.TITLE:
        return (summary.title.lower(), summary.id)
    return (summary.id,)


def build_report(
    project_id: str,
    tasks: list[TaskRef],
    result: CriticalPathResult,
    config: SummaryConfig | None = None,
) -> CriticalPathReport:
    """Attach task details and risk to the critical path IDs of ``result``."""
    summary_config = config or SummaryConfig()
    task_by_id = {task.id: task for task in tasks}

    summaries: list[TaskSummary] = []
    for task_id in result.critical_path_ids:
        task = task_by_id[task_id]
        timing = result.timings[task_id]
        summaries.append(
            TaskSummary(
                id=task_id,
                title=task.title or task_id,
                assignee=task.assignee,
                due_date=task.due_date,
                duration=timing.earliest_finish - timing.earliest_start,
                timing=timing,
                risk=assess_risk(task, summary_config.risk_dependency_threshold),
            )
        )

    summaries.sort(key=lambda s: _sort_key(s, summary_config.sort_by))
    return CriticalPathReport(project_id=project_id, result=result, critical_path=summaries)


def error_message(error: Exception) -> str:
    """User-facing message for an engine failure."""
    if isinstance(error, CycleDetectedError):
        return (
            "Project has a circular dependency and cannot be scheduled "
            f"({' -> '.join(error.cycle)})"
        )
    if isinstance(error, InvalidDurationError):
        return f"Task '{error.task_id}' has an invalid duration"
    if isinstance(error, InvalidGraphError):
        return f"Project tasks are inconsistent: {error}"
    if isinstance(error, CritpathError):
        return str(error)
    return "Server error while calculating critical path"


def error_response(error: Exception) -> dict[str, Any]:
    """Error envelope as served by the task API."""
    return {"status": False, "message": error_message(error)}
