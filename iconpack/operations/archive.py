"""
Archive operations.

Packs the project tree into ``<fontName>-<version>.zip``.
"""

import os
import zipfile
from collections.abc import Iterator, Sequence
from fnmatch import fnmatch
from pathlib import Path

from iconpack.config.project import BuildContext
from iconpack.core.errors import ArchiveError
from iconpack.utils.logging import logger


def is_excluded(relative: Path, patterns: Sequence[str]) -> bool:
    """True when the path's name or any parent directory matches a pattern."""
    return any(
        fnmatch(part, pattern) for part in relative.parts for pattern in patterns
    )


def iter_archive_files(
    root: Path, patterns: Sequence[str], output: Path
) -> Iterator[Path]:
    """
    Walk ``root`` in sorted order, skipping excluded paths and ``output``.

    Excluded directories are pruned without being descended into.
    """
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        dirnames[:] = sorted(
            d
            for d in dirnames
            if not is_excluded((current / d).relative_to(root), patterns)
        )
        for filename in sorted(filenames):
            path = current / filename
            if path.resolve() == output:
                continue
            if is_excluded(path.relative_to(root), patterns):
                continue
            yield path


def archive(ctx: BuildContext) -> Path:
    """
    Bundle the project tree into the versioned archive.

    Returns:
        Path of the written archive

    Raises:
        ArchiveError: If the archive cannot be written
    """
    root = ctx.paths.root
    output = ctx.archive_path
    patterns = ctx.config.archive.exclude

    files = list(iter_archive_files(root, patterns, output))
    logger.info(f"Archiving {len(files)} files into {output.name}")

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for path in files:
                zf.write(path, path.relative_to(root).as_posix())
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveError(f"Failed to write {output}: {e}") from e

    size = output.stat().st_size / 1024 / 1024
    logger.info(f"Created {output} ({size:.2f} MB)")
    return output
