"""
Icon font operations.

Builds the icon font from the original (uncolored) SVG set and renders the
stylesheet, demo stylesheet and demo page from the glyph metadata.

Font writing and template rendering run concurrently. The templates wait on
a single future that only the font engine call site resolves, once.
"""

from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from iconpack.config.paths import FONT_GLOB
from iconpack.config.project import BuildContext
from iconpack.core.assets import Asset, iter_assets
from iconpack.core.font import GlyphSet, build_font, compile_glyphs, save_font
from iconpack.core.templates import (
    TemplateTask,
    create_environment,
    render_task,
)
from iconpack.utils.logging import logger

# Relative location of dist/fonts/ as seen from dist/css/ and dist/demo/
FONT_PATH = "../fonts/"


def template_tasks(ctx: BuildContext) -> list[TemplateTask]:
    """The three text artifacts rendered from the glyph metadata."""
    return [
        TemplateTask(
            "iconfont-stylesheet.css", ctx.paths.css_dir, ctx.config.font.name
        ),
        TemplateTask("iconfont-demo.css", ctx.paths.demo_css_dir, "demo"),
        TemplateTask("iconfont-demo.html", ctx.paths.demo_dir, "index"),
    ]


def write_fonts(
    ctx: BuildContext, sources: Sequence[Asset], glyphs_ready: Future
) -> None:
    """
    Compile glyphs, publish the GlyphSet, then write every font format.

    ``glyphs_ready`` is resolved here and nowhere else: with the GlyphSet on
    success, with the engine error otherwise.
    """
    font_settings = ctx.config.font
    try:
        glyph_set, outlines, advances = compile_glyphs(sources, font_settings)
    except BaseException as e:
        glyphs_ready.set_exception(e)
        raise
    glyphs_ready.set_result(glyph_set)
    logger.info(f"Compiled {len(glyph_set)} glyphs")

    font = build_font(
        glyph_set, outlines, advances, font_settings.name, ctx.version
    )
    for fmt in font_settings.formats:
        path = ctx.paths.fonts_dir / f"{font_settings.name}.{fmt}"
        save_font(font, path, flavor=None if fmt == "ttf" else fmt)
        logger.info(f"Created {path}")


def render_templates_when_ready(
    ctx: BuildContext, task: TemplateTask, glyphs_ready: Future
) -> None:
    """Block until the GlyphSet is published, then render one template."""
    glyph_set: GlyphSet = glyphs_ready.result()
    context = {
        "glyphs": glyph_set,
        "font_name": ctx.config.font.name,
        "class_name": ctx.config.font.classname,
        "version": ctx.version,
        "font_path": FONT_PATH,
        "formats": ctx.config.font.formats,
    }
    render_task(create_environment(ctx.paths.templates_dir), task, context)


def make_font(ctx: BuildContext) -> GlyphSet:
    """
    Run the font stage.

    Returns:
        The GlyphSet assigned by the font engine

    Raises:
        EngineError: If there are no source icons or one is rejected
    """
    sources = list(iter_assets(ctx.paths.source_dir, FONT_GLOB))
    logger.info(f"Building {ctx.config.font.name} from {len(sources)} icons")

    tasks = template_tasks(ctx)
    glyphs_ready: Future = Future()

    # One worker per job so the renders can never starve the producer
    with ThreadPoolExecutor(max_workers=1 + len(tasks)) as executor:
        futures = [executor.submit(write_fonts, ctx, sources, glyphs_ready)]
        futures += [
            executor.submit(render_templates_when_ready, ctx, task, glyphs_ready)
            for task in tasks
        ]
        for future in futures:
            future.result()

    logger.info("Icon font complete")
    return glyphs_ready.result()
