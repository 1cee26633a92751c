"""
Build output validation.

Checks a finished dist/ tree against the configuration.
"""

import sys

from fontTools.ttLib import TTFont, TTLibError
from PIL import UnidentifiedImageError

from iconpack.config.paths import FONT_GLOB, RECOLOR_GLOB
from iconpack.config.project import BuildContext
from iconpack.core.assets import iter_asset_paths
from iconpack.core.naming import rasterized_name, recolored_name
from iconpack.core.raster import png_size
from iconpack.operations.font import template_tasks
from iconpack.utils.logging import logger


def check_recolored_svgs(ctx: BuildContext) -> bool:
    """Every source icon has one recolored copy per color."""
    success = True
    source_dir = ctx.paths.source_dir
    sources = list(iter_asset_paths(source_dir, RECOLOR_GLOB))

    for color_key in ctx.config.colors:
        missing = []
        for path in sources:
            relative = path.relative_to(source_dir)
            name = recolored_name(path.stem, color_key) + ".svg"
            if not (ctx.paths.svg_dir / relative.parent / name).exists():
                missing.append(name)
        if missing:
            logger.error(f"{color_key}: missing {', '.join(missing)}")
            success = False
        else:
            logger.info(f"{color_key}: {len(sources)} recolored icons")

    return success


def check_bitmaps(ctx: BuildContext) -> bool:
    """Every recolored icon has a PNG per size, at the configured width."""
    success = True
    svg_dir = ctx.paths.svg_dir
    recolored = list(iter_asset_paths(svg_dir, RECOLOR_GLOB))

    for size_key, width in ctx.config.sizes.items():
        bad = 0
        for path in recolored:
            relative = path.relative_to(svg_dir)
            target = (
                ctx.paths.png_dir
                / relative.parent
                / (rasterized_name(path.stem, size_key) + ".png")
            )
            if not target.exists():
                logger.error(f"Missing {target}")
                bad += 1
                continue
            try:
                actual, _ = png_size(target)
            except UnidentifiedImageError:
                logger.error(f"{target.name}: not a readable image")
                bad += 1
                continue
            if actual != width:
                logger.error(f"{target.name}: width {actual} (expected {width})")
                bad += 1

        if bad:
            success = False
        else:
            logger.info(f"{size_key}: {len(recolored)} bitmaps at {width}px")

    return success


def check_font(ctx: BuildContext) -> bool:
    """The font maps one codepoint per source icon."""
    expected = len(list(iter_asset_paths(ctx.paths.source_dir, FONT_GLOB)))
    font_path = ctx.paths.fonts_dir / f"{ctx.config.font.name}.ttf"

    if "ttf" not in ctx.config.font.formats:
        logger.info("TrueType output disabled (skipped)")
        return True

    try:
        font = TTFont(font_path)
    except (OSError, TTLibError) as e:
        logger.error(f"Failed to load font: {e}")
        return False

    cmap = font.getBestCmap() or {}
    font.close()

    if len(cmap) != expected:
        logger.error(f"Font maps {len(cmap)} codepoints (expected {expected})")
        return False

    logger.info(f"Font maps {len(cmap)} glyphs")
    return True


def check_text_artifacts(ctx: BuildContext) -> bool:
    """Stylesheet, demo stylesheet and demo page exist."""
    success = True
    for task in template_tasks(ctx):
        if task.output_path.exists():
            logger.info(f"{task.output_path.name} is present")
        else:
            logger.error(f"Missing {task.output_path}")
            success = False
    return success


def validate_dist(ctx: BuildContext) -> None:
    """Run all validation checks."""
    logger.info(f"Validating {ctx.paths.dist_dir}")

    checks = [
        ("Recolored SVGs", check_recolored_svgs),
        ("Bitmaps", check_bitmaps),
        ("Icon font", check_font),
        ("Text artifacts", check_text_artifacts),
    ]

    all_passed = True
    for name, check in checks:
        logger.info(f"--- {name} ---")
        if not check(ctx):
            all_passed = False

    if all_passed:
        logger.info("All checks passed")
    else:
        logger.error("Some checks failed")
        sys.exit(1)
