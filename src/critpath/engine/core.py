"""Core dataclasses for the critical path engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Timing fields owned by exactly one pass each
TIMING_FIELDS = frozenset(
    {"earliest_start", "earliest_finish", "latest_start", "latest_finish", "slack"}
)


def _default_id_set() -> set[str]:
    return set()


def _default_str_list() -> list[str]:
    return []


@dataclass
class GraphNode:
    """One task inside a single engine invocation.

    Timing fields start out as None and may be assigned exactly once;
    a second assignment raises RuntimeError.
    """

    id: str
    duration: int
    dependencies: set[str] = field(default_factory=_default_id_set)
    dependents: set[str] = field(default_factory=_default_id_set)
    earliest_start: int | None = None
    earliest_finish: int | None = None
    latest_start: int | None = None
    latest_finish: int | None = None
    slack: int | None = None

    def __setattr__(self, name: str, value: Any) -> None:
        if name in TIMING_FIELDS and getattr(self, name, None) is not None:
            raise RuntimeError(f"{name} of node '{self.id}' is already set")
        super().__setattr__(name, value)

    @property
    def is_source(self) -> bool:
        """True if the node has no dependencies."""
        return not self.dependencies

    @property
    def is_sink(self) -> bool:
        """True if no other node depends on this one."""
        return not self.dependents


@dataclass
class TaskGraph:
    """Arena of nodes keyed by task ID, built once per invocation."""

    nodes: dict[str, GraphNode]
    order: list[str]  # A topological order (dependencies first)
    warnings: list[str] = field(default_factory=_default_str_list)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def sources(self) -> list[str]:
        """IDs of nodes without dependencies, ascending."""
        return sorted(node_id for node_id, node in self.nodes.items() if node.is_source)

    def sinks(self) -> list[str]:
        """IDs of nodes without dependents, ascending."""
        return sorted(node_id for node_id, node in self.nodes.items() if node.is_sink)

    def edges(self) -> list[tuple[str, str]]:
        """All (dependency, dependent) pairs, sorted."""
        return sorted(
            (dep_id, node_id) for node_id, node in self.nodes.items() for dep_id in node.dependencies
        )


@dataclass(frozen=True)
class TaskTiming:
    """Final schedule numbers for one task, in whole time units."""

    earliest_start: int
    earliest_finish: int
    latest_start: int
    latest_finish: int
    slack: int

    @property
    def is_critical(self) -> bool:
        return self.slack == 0

    def as_dict(self) -> dict[str, int]:
        return {
            "earliestStart": self.earliest_start,
            "earliestFinish": self.earliest_finish,
            "latestStart": self.latest_start,
            "latestFinish": self.latest_finish,
            "slack": self.slack,
        }


@dataclass(frozen=True)
class CriticalPathResult:
    """Complete result of one engine invocation."""

    critical_path_ids: tuple[str, ...]
    timings: dict[str, TaskTiming]
    project_duration: int
    warnings: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.timings
