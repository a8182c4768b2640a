"""High-level critical path service."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from .config import UnifiedConfig
from .engine import DurationResolver, compute_critical_path
from .logger import get_logger
from .store import TaskStore
from .summary import CriticalPathReport, build_report

logger = get_logger()


class ProjectLocks:
    """Registry of per-project locks.

    Recomputations for the same project run one at a time so that a stale
    result can never overwrite the flags written by a newer one. Different
    projects never share a lock.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def get(self, project_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(project_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[project_id] = lock
            return lock

    @contextmanager
    def hold(self, project_id: str) -> Iterator[None]:
        """Hold the lock of ``project_id`` for the duration of the block."""
        with self.get(project_id):
            yield


class CriticalPathService:
    """Coordinates a task store and the engine.

    - analyze(): fetch the snapshot and compute, without persisting
    - recompute(): fetch, compute and persist flags under the project lock
    """

    def __init__(
        self,
        store: TaskStore,
        config: UnifiedConfig | None = None,
        locks: ProjectLocks | None = None,
        duration_resolver: DurationResolver | None = None,
    ):
        """Initialize the service.

        Args:
            store: Source of task snapshots and sink for critical flags
            config: Optional unified configuration
            locks: Optional shared lock registry (share one per process)
            duration_resolver: Optional override for task durations
        """
        self.store = store
        self.config = config or UnifiedConfig()
        self.locks = locks or ProjectLocks()
        self.duration_resolver = duration_resolver

    def analyze(self, project_id: str) -> CriticalPathReport:
        """Compute the critical path of a project without persisting it."""
        tasks = self.store.list_tasks(project_id)
        result = compute_critical_path(
            tasks,
            duration_resolver=self.duration_resolver,
            config=self.config.engine,
        )
        return build_report(project_id, tasks, result, self.config.summary)

    def recompute(
        self, project_id: str, previous: set[str] | None = None
    ) -> CriticalPathReport:
        """Compute the critical path and persist the flags.

        Args:
            project_id: Project to recompute
            previous: IDs previously on the critical path, used only to log changes

        Returns:
            The report for the freshly computed critical path
        """
        with self.locks.hold(project_id):
            report = self.analyze(project_id)
            critical_ids = report.result.critical_path_ids
            self.store.mark_critical_path(project_id, critical_ids)

        if previous is not None:
            current = set(critical_ids)
            for task_id in sorted(current - previous):
                logger.changes(f"{project_id}: '{task_id}' is now on the critical path")
            for task_id in sorted(previous - current):
                logger.changes(f"{project_id}: '{task_id}' left the critical path")

        return report
