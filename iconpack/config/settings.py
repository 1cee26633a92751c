"""
Build configuration loading.

Reads the palette, size map and font metadata from ``config.yaml``, falling
back to the project's ``config.example.yaml`` when the former does not exist.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from iconpack.core.errors import ConfigError
from iconpack.utils.logging import logger

KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

# First codepoint handed out to glyphs (Private Use Area)
DEFAULT_START_CODEPOINT = 0xEA01
MAX_CODEPOINT = 0x10FFFF
FONT_FORMATS = ("ttf", "woff")

DEFAULT_EXCLUDES = (
    ".git",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    "*.zip",
)


@dataclass(frozen=True)
class FontSettings:
    """Icon font metadata."""

    name: str
    classname: str
    start_codepoint: int = DEFAULT_START_CODEPOINT
    formats: tuple[str, ...] = FONT_FORMATS


@dataclass(frozen=True)
class ArchiveSettings:
    """Where the archive goes and what it leaves out."""

    output_root: str = "."
    exclude: tuple[str, ...] = DEFAULT_EXCLUDES


@dataclass(frozen=True)
class IconConfig:
    """Validated build configuration, immutable for the whole run."""

    colors: dict[str, str]
    sizes: dict[str, int]
    font: FontSettings
    archive: ArchiveSettings = field(default_factory=ArchiveSettings)


def _read_yaml(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def read_config_file(primary: Path, fallback: Path) -> tuple[Any, Path]:
    """
    Read raw YAML data, falling back only when the primary file is absent.

    Returns:
        Parsed YAML document and the path it was read from
    """
    try:
        return _read_yaml(primary), primary
    except FileNotFoundError:
        logger.info(f"{primary} not found, using {fallback}")
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read {primary}: {e}") from e

    try:
        return _read_yaml(fallback), fallback
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read {fallback}: {e}") from e


def _require_mapping(data: Any, key: str, source: Path) -> dict:
    value = data.get(key)
    if not isinstance(value, dict) or not value:
        raise ConfigError(f"{source}: '{key}' must be a non-empty mapping")
    return value


def _check_key(key: Any, section: str, source: Path) -> str:
    name = str(key)
    if not KEY_PATTERN.match(name):
        raise ConfigError(
            f"{source}: {section} key '{name}' is not usable as a filename suffix"
        )
    return name


def parse_colors(data: dict, source: Path) -> dict[str, str]:
    colors = {}
    for key, value in _require_mapping(data, "colors", source).items():
        name = _check_key(key, "colors", source)
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"{source}: color '{name}' must be a non-empty string")
        colors[name] = value.strip()
    return colors


def parse_sizes(data: dict, source: Path) -> dict[str, int]:
    sizes = {}
    for key, value in _require_mapping(data, "sizes", source).items():
        name = _check_key(key, "sizes", source)
        # bool is an int subclass; `small: yes` is a typo, not a width
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigError(f"{source}: size '{name}' must be a positive integer")
        sizes[name] = value
    return sizes


def parse_font(data: dict, source: Path) -> FontSettings:
    font = data.get("font")
    if not isinstance(font, dict):
        raise ConfigError(f"{source}: 'font' section is missing")

    for key in ("name", "classname"):
        value = font.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"{source}: 'font.{key}' must be a non-empty string")

    start = font.get("start_codepoint", DEFAULT_START_CODEPOINT)
    if isinstance(start, str):
        try:
            start = int(start, 16)
        except ValueError as e:
            msg = f"{source}: invalid font.start_codepoint '{start}'"
            raise ConfigError(msg) from e
    if isinstance(start, bool) or not isinstance(start, int) or start <= 0:
        raise ConfigError(f"{source}: invalid font.start_codepoint '{start}'")
    if start > MAX_CODEPOINT:
        raise ConfigError(
            f"{source}: font.start_codepoint {start:#x} is beyond U+10FFFF"
        )

    formats = font.get("formats", list(FONT_FORMATS))
    if not isinstance(formats, list) or not all(isinstance(f, str) for f in formats):
        raise ConfigError(f"{source}: 'font.formats' must be a list of names")
    formats = tuple(formats)
    unknown = [f for f in formats if f not in FONT_FORMATS]
    if not formats or unknown:
        raise ConfigError(
            f"{source}: font.formats must be a subset of {', '.join(FONT_FORMATS)}"
        )

    return FontSettings(
        name=font["name"].strip(),
        classname=font["classname"].strip(),
        start_codepoint=start,
        formats=formats,
    )


def parse_archive(data: dict, source: Path) -> ArchiveSettings:
    archive = data.get("archive") or {}
    if not isinstance(archive, dict):
        raise ConfigError(f"{source}: 'archive' must be a mapping")

    output_root = archive.get("output_root", ".")
    if not isinstance(output_root, str) or not output_root:
        raise ConfigError(f"{source}: 'archive.output_root' must be a path string")

    exclude = archive.get("exclude")
    if exclude is None:
        return ArchiveSettings(output_root=output_root)
    if not isinstance(exclude, list) or not all(isinstance(p, str) for p in exclude):
        raise ConfigError(f"{source}: 'archive.exclude' must be a list of patterns")
    # The previous archive is never packed, whatever the user lists
    patterns = tuple(dict.fromkeys([*exclude, "*.zip"]))
    return ArchiveSettings(output_root=output_root, exclude=patterns)


def load_config(primary: Path, fallback: Path) -> IconConfig:
    """
    Load and validate the build configuration.

    Args:
        primary: Project configuration (usually config.yaml)
        fallback: Example configuration used when primary does not exist

    Returns:
        Validated configuration

    Raises:
        ConfigError: If neither file can be read or a required field is invalid
    """
    data, source = read_config_file(primary, fallback)
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: expected a mapping at the top level")

    config = IconConfig(
        colors=parse_colors(data, source),
        sizes=parse_sizes(data, source),
        font=parse_font(data, source),
        archive=parse_archive(data, source),
    )
    logger.debug(
        f"Loaded {source}: {len(config.colors)} colors, {len(config.sizes)} sizes"
    )
    return config


def load_package_version(path: Path) -> str:
    """Read the ``version`` field from the project's package metadata."""
    try:
        metadata = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"Failed to read package metadata {path}: {e}") from e

    version = metadata.get("version") if isinstance(metadata, dict) else None
    if not isinstance(version, str) or not version:
        raise ConfigError(f"{path}: 'version' field is missing")
    return version
