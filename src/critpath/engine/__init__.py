"""Critical path engine.

Pipeline per invocation:
- build_graph: tasks -> TaskGraph (dangling edges dropped, cycles rejected)
- forward_pass: earliest start/finish
- backward_pass: latest start/finish anchored to the project duration
- compute_slack / extract_critical_path: zero-slack tasks

Main entry point:
- compute_critical_path: run the whole pipeline on a task snapshot
"""

from .builder import build_graph, find_cycle, topological_order
from .compute import compute_critical_path
from .config import EngineConfig
from .core import CriticalPathResult, GraphNode, TaskGraph, TaskTiming
from .duration import DateSpanDurationResolver, checked_duration, resolve_duration, span_days
from .passes import backward_pass, forward_pass
from .protocols import DurationResolver
from .slack import collect_timings, compute_slack, extract_critical_path

__all__ = [
    # Core dataclasses
    "GraphNode",
    "TaskGraph",
    "TaskTiming",
    "CriticalPathResult",
    # Configuration
    "EngineConfig",
    # Protocols
    "DurationResolver",
    # Duration resolution
    "DateSpanDurationResolver",
    "checked_duration",
    "resolve_duration",
    "span_days",
    # Graph building
    "build_graph",
    "find_cycle",
    "topological_order",
    # Passes
    "forward_pass",
    "backward_pass",
    # Slack and extraction
    "compute_slack",
    "extract_critical_path",
    "collect_timings",
    # Entry point
    "compute_critical_path",
]
