"""
Recolor operations.

Produces one minified, recolored copy of every source SVG per palette entry.
"""

from collections.abc import Iterable

from iconpack.config.paths import RECOLOR_GLOB
from iconpack.config.project import BuildContext
from iconpack.core.assets import Asset, iter_assets, write_asset
from iconpack.core.errors import EngineError
from iconpack.core.naming import recolored_name
from iconpack.core.svg import recolor_svg
from iconpack.utils.logging import logger


def recolor(
    sources: Iterable[Asset], color_key: str, color_value: str
) -> list[Asset]:
    """
    Recolor assets in memory.

    Args:
        sources: Original SVG assets
        color_key: Palette key used as the filename suffix
        color_value: Value written to every ``fill`` attribute

    Returns:
        New assets named ``<normalized stem>-<color_key>.svg``

    Raises:
        EngineError: If two sources normalize to the same output name
    """
    outputs = []
    claimed: dict[str, Asset] = {}
    for asset in sources:
        output = asset.with_content(
            recolor_svg(asset.content, color_value, str(asset.relative))
        ).renamed(recolored_name(asset.stem, color_key))

        key = str(output.relative)
        if key in claimed:
            raise EngineError(
                f"{claimed[key].relative} and {asset.relative} "
                f"would both be written as {key}"
            )
        claimed[key] = asset
        outputs.append(output)
    return outputs


def colorize(ctx: BuildContext, color_key: str) -> list[Asset]:
    """Recolor every source SVG with one palette entry and write to dist/svg/."""
    color_value = ctx.config.colors[color_key]
    sources = list(iter_assets(ctx.paths.source_dir, RECOLOR_GLOB))

    if not sources:
        logger.warning(f"No SVG files found in {ctx.paths.source_dir}/")
        return []

    logger.info(f"Recoloring {len(sources)} icons as {color_key} ({color_value})")

    outputs = recolor(sources, color_key, color_value)
    for asset in outputs:
        target = write_asset(asset, ctx.paths.svg_dir)
        logger.debug(f"Created {target}")

    logger.info(f"Wrote {len(outputs)} {color_key} icons to {ctx.paths.svg_dir}/")
    return outputs
