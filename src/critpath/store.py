"""Task stores: where snapshots come from and critical flags go to."""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

from ruamel.yaml import YAML

from .exceptions import ParseError, ProjectNotFoundError
from .logger import get_logger
from .models import TaskRef
from .parser import load_project

logger = get_logger()


class TaskStore(Protocol):
    """Protocol for the persistence layer around the engine."""

    def list_tasks(self, project_id: str) -> list[TaskRef]:
        """Return all non-deleted tasks of a project."""
        ...

    def mark_critical_path(self, project_id: str, critical_ids: Iterable[str]) -> None:
        """Flag every task of the project as on or off the critical path.

        Implementations must apply all flags of one call atomically.
        """
        ...


class InMemoryTaskStore:
    """Dict-backed task store, mainly for tests and embedding."""

    def __init__(self, projects: dict[str, list[TaskRef]] | None = None):
        self._tasks: dict[str, list[TaskRef]] = {
            project_id: list(tasks) for project_id, tasks in (projects or {}).items()
        }
        self._flags: dict[str, dict[str, bool]] = {}

    def add_task(self, project_id: str, task: TaskRef) -> None:
        self._tasks.setdefault(project_id, []).append(task)

    def list_tasks(self, project_id: str) -> list[TaskRef]:
        return list(self._tasks.get(project_id, []))

    def mark_critical_path(self, project_id: str, critical_ids: Iterable[str]) -> None:
        ids = set(critical_ids)
        flags = {task.id: task.id in ids for task in self._tasks.get(project_id, [])}
        # Single assignment so readers see either the old or the new flags
        self._flags[project_id] = flags

    def critical_flags(self, project_id: str) -> dict[str, bool]:
        """Current flags of a project (empty until first marked)."""
        return dict(self._flags.get(project_id, {}))


class YamlTaskStore:
    """Task store backed by one project snapshot YAML file.

    Flags are written back with ruamel.yaml so comments and key order in
    the file survive, then swapped into place with os.replace.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _check_project(self, project_id: str, found_id: str) -> None:
        if project_id != found_id:
            raise ProjectNotFoundError(
                f"Project '{project_id}' not found in {self.path} (file holds '{found_id}')"
            )

    def list_tasks(self, project_id: str) -> list[TaskRef]:
        project = load_project(self.path)
        self._check_project(project_id, project.id)
        return project.tasks

    def mark_critical_path(self, project_id: str, critical_ids: Iterable[str]) -> None:
        ids = set(critical_ids)
        yaml_rt = YAML()
        yaml_rt.preserve_quotes = True  # type: ignore[assignment]

        with self.path.open(encoding="utf-8") as f:
            data: Any = yaml_rt.load(f)  # type: ignore[no-untyped-call]

        if not isinstance(data, dict) or "project" not in data:
            raise ParseError(f"{self.path} is not a project snapshot")
        self._check_project(project_id, str(data["project"]["id"]))

        tasks: Any = data.get("tasks") or {}
        changed = 0
        for task_id in list(tasks.keys()):
            body = tasks[task_id]
            if body is None:
                body = {}
                tasks[task_id] = body
            flag = str(task_id) in ids and not body.get("trashed", False)
            if body.get("is_on_critical_path") != flag:
                changed += 1
            body["is_on_critical_path"] = flag

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml_rt.dump(data, f)  # type: ignore[no-untyped-call]
            # mkstemp creates 0600; keep the snapshot's own permissions
            shutil.copymode(self.path, tmp_name)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.checks(f"Updated {changed} critical path flags in {self.path}")
