"""
Task graph construction and phase scheduling.

The graph is a fixed sequence of phases. Tasks inside a phase run
concurrently; a phase starts only after every task of the previous one has
finished. The first failure cancels whatever has not started yet and stops
the build.
"""

from collections.abc import Callable, Iterator
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from functools import partial

from iconpack.config.project import BuildContext
from iconpack.core.errors import StageError
from iconpack.operations.archive import archive
from iconpack.operations.font import make_font
from iconpack.operations.rasterize import rasterize
from iconpack.operations.recolor import colorize
from iconpack.utils.logging import logger

FONT_TASK = "iconfont"
ARCHIVE_TASK = "zip"


def colorize_task_name(color_key: str) -> str:
    return f"colorize-{color_key}"


def rasterize_task_name(size_key: str) -> str:
    return f"rasterize-{size_key}"


@dataclass(frozen=True)
class Task:
    """A named unit of work."""

    name: str
    action: Callable[[], object]

    def run(self) -> None:
        self.action()


@dataclass(frozen=True)
class Phase:
    """Tasks that run concurrently, bounded by barriers on both sides."""

    name: str
    tasks: tuple[Task, ...]


@dataclass(frozen=True)
class TaskGraph:
    """Ordered phases of a build."""

    phases: tuple[Phase, ...]

    def __iter__(self) -> Iterator[Phase]:
        return iter(self.phases)

    @property
    def tasks(self) -> list[Task]:
        return [task for phase in self.phases for task in phase.tasks]

    def task(self, name: str) -> Task:
        """Look up a task by name."""
        for task in self.tasks:
            if task.name == name:
                return task
        known = ", ".join(t.name for t in self.tasks)
        raise KeyError(f"Unknown task '{name}' (known: {known})")


def build_task_graph(ctx: BuildContext) -> TaskGraph:
    """
    Build the task graph from configuration.

    Phases:
      1. render   - colorize-<color> for each color, plus iconfont
      2. rasterize - rasterize-<size> for each size
      3. package  - zip
    """
    colorize_tasks = [
        Task(colorize_task_name(key), partial(colorize, ctx, key))
        for key in ctx.config.colors
    ]
    rasterize_tasks = [
        Task(rasterize_task_name(key), partial(rasterize, ctx, key))
        for key in ctx.config.sizes
    ]
    return TaskGraph(
        (
            Phase(
                "render",
                (*colorize_tasks, Task(FONT_TASK, partial(make_font, ctx))),
            ),
            Phase("rasterize", tuple(rasterize_tasks)),
            Phase("package", (Task(ARCHIVE_TASK, partial(archive, ctx)),)),
        )
    )


class Scheduler:
    """Runs a TaskGraph phase by phase."""

    def __init__(self, graph: TaskGraph, max_workers: int | None = None):
        self.graph = graph
        self.max_workers = max_workers

    def run_phase(self, phase: Phase) -> None:
        """
        Run every task of a phase concurrently and wait for all of them.

        Raises:
            StageError: For the first task that failed
        """
        if not phase.tasks:
            return

        workers = self.max_workers or len(phase.tasks)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(task.run): task for task in phase.tasks}
            _, pending = wait(futures, return_when=FIRST_EXCEPTION)

            for future in pending:
                future.cancel()

        # Tasks already running when the failure happened have now finished;
        # report the failure that came first in task order
        for future, task in futures.items():
            if future.cancelled():
                continue
            error = future.exception()
            if error is not None:
                raise StageError(task.name, phase.name, error) from error

    def run(self) -> None:
        """Run all phases in order."""
        total = len(self.graph.phases)
        for i, phase in enumerate(self.graph, 1):
            names = ", ".join(task.name for task in phase.tasks)
            logger.info(f"[{i}/{total}] Running {phase.name}: {names}")
            self.run_phase(phase)
            logger.info(f"{phase.name} completed")
