"""
Clean operation.

Removes generated artifacts so the next build starts from scratch.
"""

import shutil
from pathlib import Path

from iconpack.config.project import BuildContext
from iconpack.utils.logging import logger


def clean_directory(path: Path) -> None:
    """
    Delete a directory.

    Args:
        path: Path of the directory to delete
    """
    if path.exists():
        logger.info(f"Removing {path}/")
        shutil.rmtree(path)
        logger.info(f"Removed {path}/")
    else:
        logger.info(f"{path}/ does not exist (skipped)")


def clean(ctx: BuildContext) -> None:
    """Remove the dist directory and the current archive."""
    logger.info("Cleaning build artifacts")

    clean_directory(ctx.paths.dist_dir)
    if ctx.archive_path.exists():
        ctx.archive_path.unlink()
        logger.info(f"Removed {ctx.archive_path}")

    logger.info("Clean complete")
