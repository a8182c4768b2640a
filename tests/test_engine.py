"""Tests for compute_critical_path."""

import logging
from datetime import date

import pytest

from critpath import TaskRef, compute_critical_path
from critpath.engine import EngineConfig, TaskTiming
from critpath.exceptions import CycleDetectedError, InvalidDurationError, InvalidGraphError
from tests.conftest import assert_valid_timings, task


class TestLinearChain:
    """A(3) -> B(2) -> C(1)."""

    @pytest.fixture
    def tasks(self) -> list[TaskRef]:
        return [task("A", 3), task("B", 2, "A"), task("C", 1, "B")]

    def test_earliest_times(self, tasks: list[TaskRef]) -> None:
        result = compute_critical_path(tasks)

        assert (result.timings["A"].earliest_start, result.timings["A"].earliest_finish) == (0, 3)
        assert (result.timings["B"].earliest_start, result.timings["B"].earliest_finish) == (3, 5)
        assert (result.timings["C"].earliest_start, result.timings["C"].earliest_finish) == (5, 6)

    def test_project_duration_and_latest_finish(self, tasks: list[TaskRef]) -> None:
        result = compute_critical_path(tasks)

        assert result.project_duration == 6
        assert result.timings["C"].latest_finish == 6

    def test_every_task_is_critical(self, tasks: list[TaskRef]) -> None:
        result = compute_critical_path(tasks)

        assert all(timing.slack == 0 for timing in result.timings.values())
        assert result.critical_path_ids == ("A", "B", "C")
        assert_valid_timings(result, tasks)


class TestDiamond:
    """A(3); B(2) and C(5) depend on A; D(1) depends on B and C."""

    @pytest.fixture
    def tasks(self) -> list[TaskRef]:
        return [
            task("A", 3),
            task("B", 2, "A"),
            task("C", 5, "A"),
            task("D", 1, "B", "C"),
        ]

    def test_project_duration_follows_longest_branch(self, tasks: list[TaskRef]) -> None:
        result = compute_critical_path(tasks)

        assert result.project_duration == 9

    def test_short_branch_has_slack(self, tasks: list[TaskRef]) -> None:
        result = compute_critical_path(tasks)

        assert result.timings["B"] == TaskTiming(
            earliest_start=3, earliest_finish=5, latest_start=6, latest_finish=8, slack=3
        )

    def test_critical_path_excludes_short_branch(self, tasks: list[TaskRef]) -> None:
        result = compute_critical_path(tasks)

        assert result.critical_path_ids == ("A", "C", "D")
        assert result.timings["D"].earliest_start == 8
        assert_valid_timings(result, tasks)


class TestDisconnectedTasks:
    """Isolated tasks alongside a chain."""

    def test_isolated_task_next_to_chain(self) -> None:
        """An isolated task is its own sink and finishes at the project duration."""
        tasks = [task("A", 3), task("B", 2, "A"), task("solo", 1)]
        result = compute_critical_path(tasks)

        solo = result.timings["solo"]
        assert solo.earliest_start == 0
        assert solo.latest_finish == result.project_duration == 5
        assert solo.slack == 4
        assert "solo" not in result.critical_path_ids
        assert_valid_timings(result, tasks)

    def test_isolated_task_as_long_as_project(self) -> None:
        """An isolated task spanning the whole project is trivially critical."""
        tasks = [task("A", 3), task("B", 2, "A"), task("solo", 5)]
        result = compute_critical_path(tasks)

        solo = result.timings["solo"]
        assert solo.earliest_start == solo.latest_start == 0
        assert result.critical_path_ids == ("A", "B", "solo")

    def test_single_task(self) -> None:
        result = compute_critical_path([task("only", 4)])

        assert result.critical_path_ids == ("only",)
        assert result.project_duration == 4

    def test_all_isolated_default_durations(self) -> None:
        """Tasks without dates all take one day and all are critical."""
        tasks = [task("x"), task("y"), task("z")]
        result = compute_critical_path(tasks)

        assert result.project_duration == 1
        assert result.critical_path_ids == ("x", "y", "z")


class TestCycles:
    """Cycle detection aborts without a timing table."""

    def test_two_task_cycle(self) -> None:
        tasks = [task("A", 1, "B"), task("B", 1, "A")]

        with pytest.raises(CycleDetectedError) as exc_info:
            compute_critical_path(tasks)

        assert set(exc_info.value.cycle) == {"A", "B"}
        assert exc_info.value.cycle[0] == exc_info.value.cycle[-1]

    def test_self_dependency_is_a_cycle(self) -> None:
        tasks = [task("A", 1), task("B", 1, "B", "A")]

        with pytest.raises(CycleDetectedError) as exc_info:
            compute_critical_path(tasks)

        assert exc_info.value.cycle == ["B", "B"]

    def test_cycle_downstream_of_valid_tasks(self) -> None:
        """Tasks before the cycle do not hide it, and tasks after it are reported as unresolved."""
        tasks = [
            task("start", 2),
            task("loop1", 1, "start", "loop3"),
            task("loop2", 1, "loop1"),
            task("loop3", 1, "loop2"),
            task("after", 1, "loop3"),
        ]

        with pytest.raises(CycleDetectedError) as exc_info:
            compute_critical_path(tasks)

        assert set(exc_info.value.cycle) == {"loop1", "loop2", "loop3"}
        assert "start" not in exc_info.value.unresolved
        assert "after" in exc_info.value.unresolved

    def test_error_message_names_cycle(self) -> None:
        with pytest.raises(CycleDetectedError, match="Circular dependency detected: A -> B -> A"):
            compute_critical_path([task("A", 1, "B"), task("B", 1, "A")])


class TestIdempotence:
    """Repeated runs on the same snapshot."""

    def test_two_runs_are_identical(self) -> None:
        tasks = [
            task("A", 3),
            task("B", 2, "A"),
            task("C", 5, "A"),
            task("D", 1, "B", "C"),
            task("E", 4),
        ]

        first = compute_critical_path(tasks)
        second = compute_critical_path(tasks)

        assert first == second
        assert list(first.timings) == list(second.timings)
        assert repr(first) == repr(second)

    def test_input_order_does_not_matter(self) -> None:
        tasks = [task("A", 3), task("B", 2, "A"), task("C", 5, "A"), task("D", 1, "B", "C")]

        forward = compute_critical_path(tasks)
        backward = compute_critical_path(list(reversed(tasks)))

        assert forward == backward
        assert list(forward.timings) == ["A", "B", "C", "D"]


class TestDanglingDependencies:
    """Dependencies on tasks outside the snapshot."""

    def test_dangling_dependency_is_ignored(self) -> None:
        with_dangling = [task("A", 3), task("B", 2, "A", "deleted-task")]
        without = [task("A", 3), task("B", 2, "A")]

        result = compute_critical_path(with_dangling)

        assert result.timings == compute_critical_path(without).timings
        assert "deleted-task" not in result.timings

    def test_dangling_dependency_produces_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.WARNING, logger="critpath")

        result = compute_critical_path([task("A", 1, "ghost")])

        assert result.warnings == ("Task 'A' depends on unknown task 'ghost' - dependency ignored",)
        assert "ghost" in caplog.text
        assert result.critical_path_ids == ("A",)

    def test_only_dangling_dependencies_makes_a_source(self) -> None:
        result = compute_critical_path([task("A", 2, "x", "y"), task("B", 1, "A")])

        assert result.timings["A"].earliest_start == 0
        assert len(result.warnings) == 2


class TestEdgeCases:
    """Empty input, duplicate IDs and duration overrides."""

    def test_empty_snapshot(self) -> None:
        result = compute_critical_path([])

        assert result.critical_path_ids == ()
        assert result.timings == {}
        assert result.project_duration == 0
        assert result.is_empty

    def test_duplicate_ids_rejected(self) -> None:
        with pytest.raises(InvalidGraphError, match="Duplicate task ID 'A'"):
            compute_critical_path([task("A", 1), task("A", 2)])

    def test_custom_duration_resolver(self) -> None:
        durations = {"A": 4, "B": 6}
        tasks = [TaskRef(id="A"), TaskRef(id="B", dependencies=frozenset({"A"}))]

        result = compute_critical_path(tasks, duration_resolver=lambda t: durations[t.id])

        assert result.project_duration == 10
        assert result.timings["B"].earliest_start == 4

    @pytest.mark.parametrize("bad_value", [0, -3, 1.5, True, None])
    def test_custom_resolver_invalid_value(self, bad_value: object) -> None:
        with pytest.raises(InvalidDurationError) as exc_info:
            compute_critical_path([TaskRef(id="A")], duration_resolver=lambda t: bad_value)  # type: ignore[arg-type,return-value]

        assert exc_info.value.task_id == "A"

    def test_config_default_duration(self) -> None:
        tasks = [TaskRef(id="A"), TaskRef(id="B", dependencies=frozenset({"A"}))]

        result = compute_critical_path(tasks, config=EngineConfig(default_duration_days=3))

        assert result.project_duration == 6

    def test_zero_start_times_propagate(self) -> None:
        """Many sources with earliest start 0 still release their dependents."""
        tasks = [task(f"s{i}", 1) for i in range(5)]
        tasks.append(task("join", 2, *(f"s{i}" for i in range(5))))

        result = compute_critical_path(tasks)

        assert result.timings["join"].earliest_start == 1
        assert result.project_duration == 3
        assert_valid_timings(result, tasks)

    def test_larger_dag_invariants(self) -> None:
        """A layered graph with crossing edges satisfies every invariant."""
        tasks: list[TaskRef] = []
        for layer in range(6):
            for slot in range(4):
                task_id = f"L{layer}_{slot}"
                duration = (layer * 7 + slot * 3) % 5 + 1
                deps = [f"L{layer - 1}_{(slot + k) % 4}" for k in (0, 1)] if layer else []
                tasks.append(task(task_id, duration, *deps))

        result = compute_critical_path(tasks)

        assert_valid_timings(result, tasks)
        assert result.critical_path_ids
        # Some first-layer task starts the critical chain and some last-layer task ends it
        assert any(tid.startswith("L0_") for tid in result.critical_path_ids)
        assert any(tid.startswith("L5_") for tid in result.critical_path_ids)

    def test_dates_as_datetimes(self) -> None:
        from datetime import datetime

        tasks = [
            TaskRef(
                id="A",
                start_date=datetime(2025, 1, 1, 9, 0),
                due_date=datetime(2025, 1, 2, 10, 0),
            ),
            TaskRef(id="B", start_date=date(2025, 1, 1), due_date=date(2025, 1, 1)),
        ]

        result = compute_critical_path(tasks)

        assert result.timings["A"].earliest_finish == 2
        assert result.timings["B"].earliest_finish == 1
