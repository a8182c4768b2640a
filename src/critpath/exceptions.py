"""Custom exceptions for critpath."""

from __future__ import annotations


class CritpathError(Exception):
    """Base exception for all critpath errors."""

    pass


class ValidationError(CritpathError):
    """Raised when a task snapshot cannot be scheduled."""

    pass


class CycleDetectedError(ValidationError):
    """Raised when the dependency relation contains a cycle.

    The ``cycle`` attribute lists the task IDs of one concrete cycle, each
    followed by a task it depends on, with the first ID repeated at the end.
    """

    def __init__(self, cycle: list[str], unresolved: list[str] | None = None):
        self.cycle = cycle
        self.unresolved = unresolved or sorted(set(cycle))
        super().__init__(f"Circular dependency detected: {' -> '.join(cycle)}")


class InvalidGraphError(ValidationError):
    """Raised when the task graph is structurally invalid (e.g. duplicate IDs)."""

    pass


class InvalidDurationError(ValidationError):
    """Raised when a duration resolver returns a non-positive or non-integer value."""

    def __init__(self, task_id: str, value: object):
        self.task_id = task_id
        self.value = value
        super().__init__(
            f"Duration for task '{task_id}' must be a positive integer, got {value!r}"
        )


class ParseError(CritpathError):
    """Raised when a snapshot or config file cannot be parsed."""

    pass


class ProjectNotFoundError(CritpathError):
    """Raised when a task store does not hold the requested project."""

    pass
