"""
Rasterize operations.

Converts the recolored SVG set into PNG bitmaps, one set per configured size.
"""

from iconpack.config.paths import RASTER_GLOB
from iconpack.config.project import BuildContext
from iconpack.core.assets import (
    Asset,
    is_up_to_date,
    iter_asset_paths,
    read_asset,
    write_asset,
)
from iconpack.core.naming import rasterized_name
from iconpack.core.raster import svg_to_png
from iconpack.utils.logging import logger


def rasterize_asset(asset: Asset, width: int, size_key: str) -> Asset:
    """Convert one SVG asset into a PNG asset of the given width."""
    png = svg_to_png(asset.content, width, str(asset.relative))
    return asset.with_content(png).renamed(
        rasterized_name(asset.stem, size_key), ".png"
    )


def rasterize(ctx: BuildContext, size_key: str) -> list[Asset]:
    """
    Rasterize every recolored SVG at one configured size into dist/png/.

    Targets newer than their source are left alone unless incremental builds
    are disabled.

    Returns:
        Assets written in this run
    """
    width = ctx.config.sizes[size_key]
    svg_dir = ctx.paths.svg_dir
    png_dir = ctx.paths.png_dir

    sources = list(iter_asset_paths(svg_dir, RASTER_GLOB))
    if not sources:
        logger.warning(f"No SVG files found in {svg_dir}/")
        logger.warning("  Run colorize first")
        return []

    logger.info(f"Rasterizing {len(sources)} icons at {width}px ({size_key})")

    written: list[Asset] = []
    skipped = 0
    for path in sources:
        relative = path.relative_to(svg_dir)
        name = rasterized_name(path.stem, size_key) + ".png"
        target = png_dir / relative.parent / name

        if ctx.incremental and is_up_to_date(path, target):
            logger.debug(f"Up to date: {target}")
            skipped += 1
            continue

        asset = rasterize_asset(read_asset(path, svg_dir), width, size_key)
        write_asset(asset, png_dir)
        logger.debug(f"Created {target}")
        written.append(asset)

    logger.info(f"{size_key}: {len(written)} written, {skipped} up to date")
    return written
