"""Forward and backward passes over the task graph.

Both passes release a node only when its pending counter (dependencies for
the forward pass, dependents for the backward pass) reaches zero, so every
node is processed exactly once regardless of its timing values.
"""

from __future__ import annotations

from collections import deque

from critpath.logger import get_logger

from .builder import raise_cycle
from .core import TaskGraph

logger = get_logger()


def forward_pass(graph: TaskGraph) -> list[str]:
    """Assign earliest start and finish to every node.

    A node's earliest start is the largest earliest finish among its
    dependencies, or 0 for a source node.

    Returns:
        Node IDs in the order they were processed

    Raises:
        CycleDetectedError: If some node is never released
    """
    nodes = graph.nodes
    pending = {node_id: len(node.dependencies) for node_id, node in nodes.items()}
    candidate_start = dict.fromkeys(nodes, 0)

    queue = deque(node_id for node_id in sorted(nodes) if pending[node_id] == 0)
    processed: list[str] = []

    while queue:
        node_id = queue.popleft()
        node = nodes[node_id]

        # All dependencies are done, so the candidate is final
        node.earliest_start = candidate_start[node_id]
        node.earliest_finish = node.earliest_start + node.duration
        processed.append(node_id)

        logger.timing("forward", node_id, ES=node.earliest_start, EF=node.earliest_finish)

        for dependent_id in sorted(node.dependents):
            candidate_start[dependent_id] = max(candidate_start[dependent_id], node.earliest_finish)
            pending[dependent_id] -= 1
            if pending[dependent_id] == 0:
                queue.append(dependent_id)

    if len(processed) != len(nodes):
        raise_cycle(nodes, set(nodes) - set(processed))

    logger.checks(f"Forward pass processed {len(processed)} tasks")
    return processed


def backward_pass(graph: TaskGraph) -> int:
    """Assign latest finish and start to every node.

    Must run after forward_pass. Every sink finishes at the project
    duration; any other node's latest finish is the smallest latest start
    among its dependents.

    Returns:
        The project duration (0 for an empty graph)

    Raises:
        CycleDetectedError: If some node is never released
    """
    nodes = graph.nodes
    if not nodes:
        return 0
    sinks = graph.sinks()
    if not sinks:
        raise_cycle(nodes, set(nodes))

    project_duration = max(_earliest_finish(graph, sink_id) for sink_id in sinks)

    pending = {node_id: len(node.dependents) for node_id, node in nodes.items()}
    candidate_finish: dict[str, int] = dict.fromkeys(sinks, project_duration)

    queue = deque(sinks)
    processed = 0

    while queue:
        node_id = queue.popleft()
        node = nodes[node_id]

        node.latest_finish = candidate_finish[node_id]
        node.latest_start = node.latest_finish - node.duration
        processed += 1

        logger.timing("backward", node_id, LS=node.latest_start, LF=node.latest_finish)

        for dep_id in sorted(node.dependencies):
            current = candidate_finish.get(dep_id)
            if current is None or node.latest_start < current:
                candidate_finish[dep_id] = node.latest_start
            pending[dep_id] -= 1
            if pending[dep_id] == 0:
                queue.append(dep_id)

    if processed != len(nodes):
        unresolved = {node_id for node_id, node in nodes.items() if node.latest_finish is None}
        raise_cycle(nodes, unresolved)

    logger.checks(f"Backward pass processed {processed} tasks, project duration {project_duration}")
    return project_duration


def _earliest_finish(graph: TaskGraph, node_id: str) -> int:
    finish = graph.nodes[node_id].earliest_finish
    if finish is None:
        raise RuntimeError(f"Backward pass requires forward pass results (missing '{node_id}')")
    return finish
