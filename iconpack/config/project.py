"""
Build context: the configuration, project paths and package version handed
to the scheduler and every stage.
"""

from dataclasses import dataclass
from pathlib import Path

from iconpack.config import paths
from iconpack.config.settings import (
    MAX_CODEPOINT,
    IconConfig,
    load_config,
    load_package_version,
)
from iconpack.core.assets import iter_asset_paths
from iconpack.core.errors import ConfigError


@dataclass(frozen=True)
class ProjectPaths:
    """Absolute locations inside one icon project."""

    root: Path

    @property
    def source_dir(self) -> Path:
        return self.root / paths.SOURCE_DIR

    @property
    def templates_dir(self) -> Path:
        return self.root / paths.TEMPLATES_DIR

    @property
    def dist_dir(self) -> Path:
        return self.root / paths.DIST_DIR

    @property
    def svg_dir(self) -> Path:
        return self.root / paths.SVG_DIR

    @property
    def png_dir(self) -> Path:
        return self.root / paths.PNG_DIR

    @property
    def fonts_dir(self) -> Path:
        return self.root / paths.FONTS_DIR

    @property
    def css_dir(self) -> Path:
        return self.root / paths.CSS_DIR

    @property
    def demo_dir(self) -> Path:
        return self.root / paths.DEMO_DIR

    @property
    def demo_css_dir(self) -> Path:
        return self.root / paths.DEMO_CSS_DIR

    @property
    def config_file(self) -> Path:
        return self.root / paths.CONFIG_FILE

    @property
    def config_example_file(self) -> Path:
        return self.root / paths.CONFIG_EXAMPLE_FILE

    @property
    def package_file(self) -> Path:
        return self.root / paths.PACKAGE_FILE


@dataclass(frozen=True)
class BuildContext:
    """Everything a build needs, loaded once per process."""

    config: IconConfig
    paths: ProjectPaths
    version: str
    incremental: bool = True

    @property
    def archive_name(self) -> str:
        return f"{self.config.font.name}-{self.version}.zip"

    @property
    def archive_path(self) -> Path:
        output_root = self.paths.root / self.config.archive.output_root
        return (output_root / self.archive_name).resolve()


def check_codepoint_range(config: IconConfig, project: ProjectPaths) -> None:
    """
    Make sure every font source gets a valid Unicode codepoint.

    Raises:
        ConfigError: If the assigned range would run past U+10FFFF
    """
    count = len(list(iter_asset_paths(project.source_dir, paths.FONT_GLOB)))
    last = config.font.start_codepoint + max(count, 1) - 1
    if last > MAX_CODEPOINT:
        raise ConfigError(
            f"{count} icons starting at {config.font.start_codepoint:#x} "
            f"run past U+10FFFF"
        )


def load_context(
    root: Path,
    config_file: Path | None = None,
    version: str | None = None,
    *,
    incremental: bool = True,
) -> BuildContext:
    """
    Load configuration and package metadata for the project at ``root``.

    Args:
        root: Icon project directory
        config_file: Configuration overriding ``<root>/config.yaml``
        version: Package version overriding ``package.json``
        incremental: Whether the rasterize stage may skip up-to-date targets
    """
    project = ProjectPaths(root.resolve())
    config = load_config(
        config_file or project.config_file, project.config_example_file
    )
    check_codepoint_range(config, project)
    if version is None:
        version = load_package_version(project.package_file)
    return BuildContext(
        config=config, paths=project, version=version, incremental=incremental
    )
