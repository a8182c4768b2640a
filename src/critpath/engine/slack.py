"""Slack calculation and critical path extraction."""

from __future__ import annotations

from critpath.exceptions import InvalidGraphError

from .core import TaskGraph, TaskTiming


def compute_slack(graph: TaskGraph) -> None:
    """Set ``slack = latest_start - earliest_start`` on every node.

    Raises:
        InvalidGraphError: If a node has negative slack or missing pass results
    """
    for node_id in sorted(graph.nodes):
        node = graph.nodes[node_id]
        if node.latest_start is None or node.earliest_start is None:
            raise InvalidGraphError(f"Task '{node_id}' was not reached by both passes")
        slack = node.latest_start - node.earliest_start
        if slack < 0:
            raise InvalidGraphError(f"Task '{node_id}' has negative slack ({slack})")
        node.slack = slack


def extract_critical_path(graph: TaskGraph) -> tuple[str, ...]:
    """Return the IDs of all zero-slack nodes, ascending."""
    return tuple(node_id for node_id in sorted(graph.nodes) if graph.nodes[node_id].slack == 0)


def collect_timings(graph: TaskGraph) -> dict[str, TaskTiming]:
    """Freeze per-node timings into TaskTiming values, keyed in ascending ID order."""
    timings: dict[str, TaskTiming] = {}
    for node_id in sorted(graph.nodes):
        node = graph.nodes[node_id]
        assert node.earliest_start is not None and node.earliest_finish is not None
        assert node.latest_start is not None and node.latest_finish is not None
        assert node.slack is not None
        timings[node_id] = TaskTiming(
            earliest_start=node.earliest_start,
            earliest_finish=node.earliest_finish,
            latest_start=node.latest_start,
            latest_finish=node.latest_finish,
            slack=node.slack,
        )
    return timings
