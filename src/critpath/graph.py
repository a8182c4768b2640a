"""Graph generation in DOT format."""

from __future__ import annotations

from enum import Enum

from .engine import CriticalPathResult
from .models import Project, TaskRef

CRITICAL_FILL = "lightcoral"
DEFAULT_FILL = "white"


class GraphView(Enum):
    """Types of graph views available."""

    ALL = "all"
    CRITICAL_PATH = "critical-path"


class GraphGenerator:
    """Generate dependency graphs in DOT format with critical tasks highlighted."""

    def __init__(self, project: Project, result: CriticalPathResult):
        self.project = project
        self.result = result
        self.critical_ids = set(result.critical_path_ids)

    def generate(self, view: GraphView = GraphView.ALL) -> str:
        """Generate a DOT graph based on the specified view."""
        if view == GraphView.ALL:
            return self._generate(self.project.tasks, "ProjectSchedule")
        if view == GraphView.CRITICAL_PATH:
            tasks = [task for task in self.project.tasks if task.id in self.critical_ids]
            return self._generate(tasks, "CriticalPath")
        raise ValueError(f"Unknown view: {view}")

    def _generate(self, tasks: list[TaskRef], graph_name: str) -> str:
        included = {task.id for task in tasks}

        lines = [f"digraph {graph_name} {{"]
        lines.append("  rankdir=LR;")
        lines.append("  node [shape=box];")
        lines.append("")

        for task in sorted(tasks, key=lambda t: t.id):
            lines.append(f"  {self._format_node(task)}")
        lines.append("")

        lines.append("  // Dependencies (finish-to-start)")
        for task in sorted(tasks, key=lambda t: t.id):
            for dep_id in sorted(task.dependencies):
                # Dangling references never became edges
                if dep_id in included:
                    lines.append(f"  {self._format_edge(dep_id, task.id)}")

        lines.append("}")
        return "\n".join(lines)

    def _escape_label(self, label: str) -> str:
        """Escape special characters in DOT labels."""
        return label.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")

    def _quote_id(self, node_id: str) -> str:
        return '"' + self._escape_label(node_id) + '"'

    def _format_node(self, task: TaskRef) -> str:
        label = self._escape_label(task.title or task.id)
        timing = self.result.timings.get(task.id)
        if timing is not None:
            label += f"\\nES {timing.earliest_start} / LF {timing.latest_finish} / slack {timing.slack}"

        attrs = [f'label="{label}"', "style=filled"]
        if task.id in self.critical_ids:
            attrs.append(f'fillcolor="{CRITICAL_FILL}"')
            attrs.append("penwidth=2")
        else:
            attrs.append(f'fillcolor="{DEFAULT_FILL}"')

        return f"{self._quote_id(task.id)} [{', '.join(attrs)}];"

    def _format_edge(self, from_id: str, to_id: str) -> str:
        edge = f"{self._quote_id(from_id)} -> {self._quote_id(to_id)}"
        if from_id in self.critical_ids and to_id in self.critical_ids:
            # Both ends critical; only tight edges lie on the path
            from_timing = self.result.timings[from_id]
            to_timing = self.result.timings[to_id]
            if from_timing.earliest_finish == to_timing.earliest_start:
                return f'{edge} [color="red", penwidth=2];'
        return f"{edge};"
