"""Pydantic schemas for project snapshot YAML data."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class TaskSchema(BaseModel):
    """Schema for a single task entry."""

    title: str = ""
    start_date: date | datetime | None = None
    due_date: date | datetime | None = None
    dependencies: list[str] = Field(default_factory=list)
    assignee: str | None = None
    priority: str | None = None
    trashed: bool = False
    is_on_critical_path: bool | None = None

    @field_validator("dependencies", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Ensure value is a list of strings."""
        if v is None:
            return []
        if isinstance(v, list):
            return [str(item) for item in v]  # type: ignore[misc]
        return [str(v)]

    @field_validator("start_date", "due_date", mode="before")
    @classmethod
    def parse_iso(cls, v: Any) -> Any:
        """Accept ISO strings, with or without a time part."""
        if isinstance(v, str):
            text = v.strip()
            if not text:
                return None
            if "T" in text or " " in text:
                return datetime.fromisoformat(text)
            return date.fromisoformat(text)
        return v


class ProjectInfoSchema(BaseModel):
    """Schema for the project header."""

    id: str
    name: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id_to_string(cls, v: Any) -> str:
        """Ensure the project ID is a string."""
        return str(v)


class ProjectSchema(BaseModel):
    """Schema for the entire project snapshot file."""

    project: ProjectInfoSchema
    tasks: dict[str, TaskSchema] = Field(default_factory=dict)

    @field_validator("tasks", mode="before")
    @classmethod
    def coerce_task_ids(cls, v: Any) -> Any:
        """Stringify task IDs and allow empty task bodies."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(k): (body if body is not None else {}) for k, body in v.items()}  # type: ignore[misc]
        return v
