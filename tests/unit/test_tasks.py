"""Tests for task graph construction and phase scheduling."""

import threading
import time

import pytest

from iconpack.config.project import BuildContext, ProjectPaths
from iconpack.config.settings import FontSettings, IconConfig
from iconpack.core.errors import StageError
from iconpack.pipeline.tasks import (
    Phase,
    Scheduler,
    Task,
    TaskGraph,
    build_task_graph,
)


@pytest.fixture
def ctx(tmp_path):
    config = IconConfig(
        colors={"red": "#f00", "green": "#0f0"},
        sizes={"small": 16, "medium": 32, "large": 64},
        font=FontSettings(name="test-icons", classname="ti"),
    )
    return BuildContext(config=config, paths=ProjectPaths(tmp_path), version="1.0.0")


def test_graph_fans_out_per_configuration_key(ctx):
    """Test one task per color and per size, in the fixed phase order."""
    graph = build_task_graph(ctx)

    assert [phase.name for phase in graph] == ["render", "rasterize", "package"]
    assert [[t.name for t in phase.tasks] for phase in graph] == [
        ["colorize-red", "colorize-green", "iconfont"],
        ["rasterize-small", "rasterize-medium", "rasterize-large"],
        ["zip"],
    ]


def test_graph_task_lookup(ctx):
    """Test named task lookup."""
    graph = build_task_graph(ctx)

    assert graph.task("rasterize-large").name == "rasterize-large"
    with pytest.raises(KeyError, match="rasterize-huge"):
        graph.task("rasterize-huge")


def test_context_archive_path(ctx, tmp_path):
    """Test the archive is named after the font and the package version."""
    assert ctx.archive_name == "test-icons-1.0.0.zip"
    assert ctx.archive_path == (tmp_path / "test-icons-1.0.0.zip").resolve()


def test_phase_runs_tasks_concurrently():
    """Test tasks in one phase overlap in time."""
    barrier = threading.Barrier(3, timeout=5)
    phase = Phase("p", tuple(Task(f"t{i}", barrier.wait) for i in range(3)))

    Scheduler(TaskGraph((phase,))).run()


def test_phases_are_separated_by_barriers():
    """Test no task of a phase starts before the previous phase has finished."""
    events = []
    lock = threading.Lock()

    def record(name, delay=0.0):
        def action():
            with lock:
                events.append(f"{name}:start")
            time.sleep(delay)
            with lock:
                events.append(f"{name}:end")

        return action

    graph = TaskGraph(
        (
            Phase(
                "one",
                (Task("slow", record("slow", 0.2)), Task("fast", record("fast"))),
            ),
            Phase("two", (Task("next", record("next")),)),
        )
    )

    Scheduler(graph).run()

    assert events.index("next:start") > events.index("slow:end")
    assert events.index("next:start") > events.index("fast:end")


def test_failure_aborts_later_phases():
    """Test a failing task surfaces its error and stops the build."""
    ran = []

    def fail():
        raise ValueError("bad input")

    graph = TaskGraph(
        (
            Phase("one", (Task("ok", lambda: ran.append("ok")), Task("broken", fail))),
            Phase("two", (Task("never", lambda: ran.append("never")),)),
        )
    )

    with pytest.raises(StageError) as excinfo:
        Scheduler(graph).run()

    assert excinfo.value.task == "broken"
    assert excinfo.value.phase == "one"
    assert isinstance(excinfo.value.__cause__, ValueError)
    assert "bad input" in str(excinfo.value)
    assert "never" not in ran


def test_empty_phase_is_skipped():
    """Test a phase without tasks (e.g. no sizes) does not block the build."""
    ran = []
    graph = TaskGraph(
        (Phase("empty", ()), Phase("after", (Task("t", lambda: ran.append("t")),)))
    )

    Scheduler(graph).run()

    assert ran == ["t"]
