"""
Main CLI entry point for iconpack.
"""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import click

from iconpack import __version__


@dataclass(frozen=True)
class ProjectOptions:
    """Global options shared by every command."""

    root: Path
    config_file: Path | None
    package_version: str | None


def load_build_context(options: ProjectOptions, *, incremental: bool = True):
    """Load the build context, exiting with status 1 on configuration errors."""
    from iconpack.config.project import load_context
    from iconpack.core.errors import ConfigError
    from iconpack.utils.logging import logger

    try:
        return load_context(
            options.root,
            options.config_file,
            options.package_version,
            incremental=incremental,
        )
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Icon project directory.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file. Defaults to <root>/config.yaml.",
)
@click.option(
    "--package-version",
    type=str,
    default=None,
    help="Package version. Defaults to the version in <root>/package.json.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(click_ctx, root, config_file, package_version, verbose):
    """Icon package build system."""
    if verbose:
        logging.getLogger("iconpack").setLevel(logging.DEBUG)
    click_ctx.obj = ProjectOptions(root, config_file, package_version)


@cli.command()
@click.pass_obj
def tasks(options):
    """List build tasks by phase."""
    from iconpack.pipeline.tasks import build_task_graph

    graph = build_task_graph(load_build_context(options))
    for i, phase in enumerate(graph, 1):
        click.echo(f"{i}. {phase.name}")
        for task in phase.tasks:
            click.echo(f"   {task.name}")


@cli.group()
def build():
    """Build commands."""
    pass


@build.command("all")
@click.option(
    "--force", is_flag=True, help="Rebuild bitmaps even when they are up to date."
)
@click.pass_obj
def build_all(options, force):
    """Run complete build pipeline."""
    from iconpack.pipeline.runner import run_all

    run_all(load_build_context(options, incremental=not force))


@build.command()
@click.option(
    "--color",
    "colors",
    multiple=True,
    help="Palette key to build (repeatable). Defaults to every color.",
)
@click.pass_obj
def colorize(options, colors):
    """Write recolored SVGs to dist/svg/."""
    from iconpack.pipeline.runner import run_tasks
    from iconpack.pipeline.tasks import colorize_task_name

    ctx = load_build_context(options)
    keys = colors or tuple(ctx.config.colors)
    run_tasks(ctx, [colorize_task_name(key) for key in keys])


@build.command()
@click.option(
    "--size",
    "sizes",
    multiple=True,
    help="Size key to build (repeatable). Defaults to every size.",
)
@click.option(
    "--force", is_flag=True, help="Rebuild bitmaps even when they are up to date."
)
@click.pass_obj
def rasterize(options, sizes, force):
    """Write PNG bitmaps to dist/png/."""
    from iconpack.pipeline.runner import run_tasks
    from iconpack.pipeline.tasks import rasterize_task_name

    ctx = load_build_context(options, incremental=not force)
    keys = sizes or tuple(ctx.config.sizes)
    run_tasks(ctx, [rasterize_task_name(key) for key in keys])


@build.command()
@click.pass_obj
def iconfont(options):
    """Generate the icon font, stylesheet and demo page."""
    from iconpack.pipeline.runner import run_tasks
    from iconpack.pipeline.tasks import FONT_TASK

    run_tasks(load_build_context(options), [FONT_TASK])


@build.command("zip")
@click.pass_obj
def zip_(options):
    """Pack the project into <fontName>-<version>.zip."""
    from iconpack.pipeline.runner import run_tasks
    from iconpack.pipeline.tasks import ARCHIVE_TASK

    run_tasks(load_build_context(options), [ARCHIVE_TASK])


@build.command()
@click.argument("names", nargs=-1, required=True)
@click.pass_obj
def run(options, names):
    """Run named tasks (see `iconpack tasks`)."""
    from iconpack.pipeline.runner import run_tasks

    run_tasks(load_build_context(options), names)


@build.command()
@click.pass_obj
def clean(options):
    """Remove build artifacts (dist/ and the archive)."""
    from iconpack.operations.clean import clean as do_clean

    do_clean(load_build_context(options))


@cli.command()
@click.pass_obj
def validate(options):
    """Validate the dist/ tree against the configuration."""
    from iconpack.pipeline.validate import validate_dist

    validate_dist(load_build_context(options))


if __name__ == "__main__":
    cli()
