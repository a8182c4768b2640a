"""Protocol definitions for the critical path engine."""

from typing import Protocol

from critpath.models import TaskRef


class DurationResolver(Protocol):
    """Protocol for deriving a task's duration in whole time units."""

    def __call__(self, task: TaskRef) -> int:
        """Return the duration of ``task``.

        Args:
            task: Task to measure

        Returns:
            A positive integer; anything else is rejected with InvalidDurationError
        """
        ...
