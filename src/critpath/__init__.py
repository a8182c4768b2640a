"""critpath - critical path scheduling for project task snapshots."""

from .engine import CriticalPathResult, TaskTiming, compute_critical_path
from .exceptions import CritpathError, CycleDetectedError, InvalidDurationError, InvalidGraphError
from .models import TaskRef

__version__ = "0.1.0"

__all__ = [
    "TaskRef",
    "TaskTiming",
    "CriticalPathResult",
    "compute_critical_path",
    "CritpathError",
    "CycleDetectedError",
    "InvalidDurationError",
    "InvalidGraphError",
]
