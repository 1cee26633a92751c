"""
Asset I/O utilities for reading, writing, and traversing source files.
"""

from collections.abc import Iterator
from dataclasses import dataclass, replace
from pathlib import Path, PurePosixPath


@dataclass(frozen=True)
class Asset:
    """
    One file flowing through a stage.

    ``relative`` is the path below the glob base, so that sub-directories of
    ``source/`` are mirrored under each output directory.
    """

    path: Path
    relative: PurePosixPath
    content: bytes

    @property
    def basename(self) -> str:
        return self.relative.name

    @property
    def stem(self) -> str:
        return self.relative.stem

    def renamed(self, stem: str, suffix: str | None = None) -> "Asset":
        """Return a copy with a new file stem (and optionally suffix)."""
        suffix = self.relative.suffix if suffix is None else suffix
        return replace(self, relative=self.relative.with_name(stem + suffix))

    def with_content(self, content: bytes) -> "Asset":
        return replace(self, content=content)

    def target(self, dest_dir: Path) -> Path:
        """Location of this asset below ``dest_dir``."""
        return dest_dir.joinpath(*self.relative.parts)


def iter_asset_paths(directory: Path, pattern: str) -> Iterator[Path]:
    """
    Iterate over files matching pattern, sorted by path.

    Args:
        directory: Glob base directory
        pattern: Glob pattern to match (``**`` recurses)

    Yields:
        Paths to matching files
    """
    files = sorted(p for p in directory.glob(pattern) if p.is_file())
    return iter(files)


def read_asset(path: Path, base: Path) -> Asset:
    """Read one file into an Asset relative to ``base``."""
    relative = PurePosixPath(path.relative_to(base).as_posix())
    return Asset(path=path, relative=relative, content=path.read_bytes())


def iter_assets(directory: Path, pattern: str) -> Iterator[Asset]:
    """Read every file matching ``pattern`` below ``directory``."""
    for path in iter_asset_paths(directory, pattern):
        yield read_asset(path, directory)


def write_asset(asset: Asset, dest_dir: Path) -> Path:
    """Write an asset below ``dest_dir``, creating parent directories."""
    target = asset.target(dest_dir)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(asset.content)
    return target


def is_up_to_date(source: Path, target: Path) -> bool:
    """True when ``target`` exists and is strictly newer than ``source``."""
    if not target.exists():
        return False
    return target.stat().st_mtime_ns > source.stat().st_mtime_ns
