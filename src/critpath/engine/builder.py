"""Graph construction and acyclicity checking."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from typing import NoReturn

from critpath.exceptions import CycleDetectedError, InvalidGraphError
from critpath.logger import checks_enabled, get_logger
from critpath.models import TaskRef

from .core import GraphNode, TaskGraph
from .duration import DateSpanDurationResolver, checked_duration
from .protocols import DurationResolver

logger = get_logger()


def build_graph(
    tasks: Iterable[TaskRef],
    resolver: DurationResolver | None = None,
) -> TaskGraph:
    """Build the dependency graph for one project snapshot.

    Dependencies on IDs outside the snapshot are dropped with a warning.
    A task depending on itself keeps that edge and is reported as a cycle.

    Args:
        tasks: Tasks of one project
        resolver: Duration resolver (defaults to DateSpanDurationResolver())

    Returns:
        TaskGraph with dependencies, dependents and a topological order

    Raises:
        InvalidGraphError: If two tasks share an ID
        InvalidDurationError: If the resolver returns an invalid duration
        CycleDetectedError: If the dependency relation has a cycle
    """
    task_list = list(tasks)
    resolve = resolver or DateSpanDurationResolver()

    nodes: dict[str, GraphNode] = {}
    for task in task_list:
        if task.id in nodes:
            raise InvalidGraphError(f"Duplicate task ID '{task.id}' in snapshot")
        nodes[task.id] = GraphNode(id=task.id, duration=checked_duration(resolve, task))

    warnings: list[str] = []
    for task in task_list:
        node = nodes[task.id]
        for dep_id in sorted(task.dependencies):
            if dep_id not in nodes:
                message = f"Task '{task.id}' depends on unknown task '{dep_id}' - dependency ignored"
                logger.warning(message)
                warnings.append(message)
                continue
            node.dependencies.add(dep_id)
            nodes[dep_id].dependents.add(task.id)

    if checks_enabled():
        edge_count = sum(len(node.dependencies) for node in nodes.values())
        logger.checks(f"Built graph: {len(nodes)} tasks, {edge_count} dependencies")

    order = topological_order(nodes)
    return TaskGraph(nodes=nodes, order=order, warnings=warnings)


def topological_order(nodes: dict[str, GraphNode]) -> list[str]:
    """Compute a topological ordering with Kahn's algorithm.

    Ties are broken by ascending ID so the order is reproducible.

    Raises:
        CycleDetectedError: If some node is never released
    """
    in_degree = {node_id: len(node.dependencies) for node_id, node in nodes.items()}
    queue = deque(sorted(node_id for node_id, degree in in_degree.items() if degree == 0))
    result: list[str] = []

    while queue:
        node_id = queue.popleft()
        result.append(node_id)

        for dependent_id in sorted(nodes[node_id].dependents):
            in_degree[dependent_id] -= 1
            if in_degree[dependent_id] == 0:
                queue.append(dependent_id)

    if len(result) != len(nodes):
        raise_cycle(nodes, set(nodes) - set(result))

    return result


def find_cycle(nodes: dict[str, GraphNode], candidates: set[str]) -> list[str]:
    """Find one cycle among ``candidates`` by depth-first search over dependencies.

    Returns:
        The cycle as "a requires b requires ... a", or the sorted candidates
        if they contain no cycle
    """
    visiting: set[str] = set()
    done: set[str] = set()

    for start in sorted(candidates):
        if start in done:
            continue
        path = [start]
        visiting.add(start)
        stack = [iter(sorted(nodes[start].dependencies & candidates))]

        while stack:
            dep_id = next(stack[-1], None)
            if dep_id is None:
                stack.pop()
                finished = path.pop()
                visiting.discard(finished)
                done.add(finished)
                continue
            if dep_id in visiting:
                return path[path.index(dep_id) :] + [dep_id]
            if dep_id in done:
                continue
            path.append(dep_id)
            visiting.add(dep_id)
            stack.append(iter(sorted(nodes[dep_id].dependencies & candidates)))

    return sorted(candidates)


def raise_cycle(nodes: dict[str, GraphNode], unresolved: set[str]) -> NoReturn:
    """Raise CycleDetectedError describing one cycle among ``unresolved``."""
    cycle = find_cycle(nodes, unresolved)
    logger.debug(f"Unresolved tasks after topological sort: {', '.join(sorted(unresolved))}")
    raise CycleDetectedError(cycle, sorted(unresolved))
