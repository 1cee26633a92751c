"""
Build pipeline orchestration.

Runs the task graph, or selected tasks from it, and turns failures into a
non-zero exit status.
"""

import sys
from collections.abc import Sequence

from iconpack.config.project import BuildContext
from iconpack.core.errors import IconpackError
from iconpack.pipeline.tasks import Scheduler, build_task_graph
from iconpack.utils.logging import logger


def run_all(ctx: BuildContext) -> None:
    """
    Run the complete build.

    Build pipeline:
      1. render    - colorize-<color> (one per color) and iconfont, concurrently
      2. rasterize - rasterize-<size> (one per size), concurrently
      3. package   - zip

    Args:
        ctx: Loaded build context
    """
    graph = build_task_graph(ctx)
    logger.info(
        f"Building {ctx.config.font.name} {ctx.version} "
        f"({len(graph.tasks)} tasks in {len(graph.phases)} phases)"
    )

    try:
        Scheduler(graph).run()
    except IconpackError as e:
        logger.error(f"Build failed: {e}")
        sys.exit(1)

    logger.info("All steps completed successfully")


def run_tasks(ctx: BuildContext, names: Sequence[str]) -> None:
    """Run named tasks one after another, in the order given."""
    graph = build_task_graph(ctx)

    try:
        tasks = [graph.task(name) for name in names]
    except KeyError as e:
        logger.error(e.args[0])
        sys.exit(1)

    for i, task in enumerate(tasks, 1):
        logger.info(f"[{i}/{len(tasks)}] Running {task.name}")
        try:
            task.run()
            logger.info(f"{task.name} completed")
        except (IconpackError, OSError) as e:
            logger.error(f"{task.name} failed: {e}")
            sys.exit(1)
