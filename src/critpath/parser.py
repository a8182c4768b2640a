"""YAML parser for project snapshot files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
from .models import Project, TaskRef
from .schemas import ProjectSchema


class ProjectParser:
    """Parser for project snapshot YAML files.

    Trashed tasks are left out of the snapshot, matching what a task store
    hands to the engine.
    """

    def parse_file(self, file_path: Path | str) -> Project:
        """Parse a YAML file into a Project."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse YAML: {e}") from e

        if not isinstance(data, dict):
            raise ParseError("YAML must contain a dictionary at the root level")

        return self.parse_data(data)  # type: ignore[arg-type]

    def parse_data(self, data: dict[str, Any]) -> Project:
        """Parse already-loaded YAML data into a Project."""
        try:
            schema = ProjectSchema(**data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid YAML structure: {e}") from e

        tasks: list[TaskRef] = []
        critical_flags: dict[str, bool] = {}
        for task_id, task_data in schema.tasks.items():
            if task_data.trashed:
                continue
            tasks.append(
                TaskRef(
                    id=task_id,
                    start_date=task_data.start_date,
                    due_date=task_data.due_date,
                    dependencies=frozenset(task_data.dependencies),
                    title=task_data.title or task_id,
                    assignee=task_data.assignee,
                    priority=task_data.priority or "normal",
                )
            )
            critical_flags[task_id] = bool(task_data.is_on_critical_path)

        return Project(
            id=schema.project.id,
            name=schema.project.name,
            tasks=tasks,
            critical_flags=critical_flags,
        )


def load_project(path: Path | str) -> Project:
    """Load a project snapshot from a YAML file."""
    return ProjectParser().parse_file(path)
