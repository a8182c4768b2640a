"""Entry point of the critical path engine."""

from __future__ import annotations

from collections.abc import Iterable

from critpath.logger import get_logger
from critpath.models import TaskRef

from .builder import build_graph
from .config import EngineConfig
from .core import CriticalPathResult
from .duration import DateSpanDurationResolver
from .passes import backward_pass, forward_pass
from .protocols import DurationResolver
from .slack import collect_timings, compute_slack, extract_critical_path

logger = get_logger()


def compute_critical_path(
    tasks: Iterable[TaskRef],
    *,
    duration_resolver: DurationResolver | None = None,
    config: EngineConfig | None = None,
) -> CriticalPathResult:
    """Compute timings and the critical path for one project snapshot.

    The graph is rebuilt from scratch on every call and nothing is kept
    afterwards, so concurrent calls for different projects are independent.
    No I/O is performed.

    Args:
        tasks: All non-deleted tasks of one project
        duration_resolver: Optional override for task durations
        config: Optional engine configuration (default duration)

    Returns:
        CriticalPathResult with the zero-slack task IDs and every task's timing

    Raises:
        CycleDetectedError: If the dependencies contain a cycle
        InvalidGraphError: If task IDs are duplicated
        InvalidDurationError: If ``duration_resolver`` returns a non-positive value
    """
    engine_config = config or EngineConfig()
    resolver = duration_resolver or DateSpanDurationResolver(engine_config.default_duration_days)

    graph = build_graph(tasks, resolver)
    if not graph.nodes:
        return CriticalPathResult(critical_path_ids=(), timings={}, project_duration=0)

    forward_pass(graph)
    project_duration = backward_pass(graph)
    compute_slack(graph)

    critical_ids = extract_critical_path(graph)
    logger.checks(
        f"Critical path: {len(critical_ids)} of {len(graph.nodes)} tasks, "
        f"duration {project_duration}"
    )

    return CriticalPathResult(
        critical_path_ids=critical_ids,
        timings=collect_timings(graph),
        project_duration=project_duration,
        warnings=tuple(graph.warnings),
    )
