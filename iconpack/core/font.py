"""
Icon font generation.

Turns a set of SVG icons into a TrueType font with one glyph per icon,
mapped to consecutive Private Use Area codepoints.
"""

import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from fontTools.fontBuilder import FontBuilder
from fontTools.misc.timeTools import timestampSinceEpoch
from fontTools.pens.cu2quPen import Cu2QuPen
from fontTools.pens.transformPen import TransformPen
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.svgLib.path import SVGPath
from fontTools.ttLib import TTFont
from fontTools.ttLib.tables._g_l_y_f import Glyph as Outline

from iconpack.config.settings import FontSettings
from iconpack.core.assets import Asset
from iconpack.core.errors import EngineError
from iconpack.core.svg import parse_svg, view_box

# Vertical metrics (font units)
UNITS_PER_EM = 1000
ASCENT = 850
DESCENT = -150

# Maximum error (font units) when approximating cubic curves with quadratics
CU2QU_MAX_ERR = 1.0


@dataclass(frozen=True)
class Glyph:
    """One icon glyph as assigned by the font engine."""

    name: str
    codepoint: int
    source: str

    @property
    def char(self) -> str:
        return chr(self.codepoint)

    @property
    def hex(self) -> str:
        return f"{self.codepoint:x}"

    @property
    def glyph_name(self) -> str:
        """PostScript glyph name used inside the font."""
        return f"uni{self.codepoint:04X}"


@dataclass(frozen=True)
class GlyphSet:
    """Glyph metadata for a whole font, shared read-only by the templates."""

    glyphs: tuple[Glyph, ...]

    def __iter__(self) -> Iterator[Glyph]:
        return iter(self.glyphs)

    def __len__(self) -> int:
        return len(self.glyphs)


def assign_codepoints(sources: Sequence[Asset], start: int) -> GlyphSet:
    """Give each source a codepoint in sorted filename order."""
    ordered = sorted(sources, key=lambda asset: asset.basename)
    return GlyphSet(
        tuple(
            Glyph(name=asset.stem, codepoint=start + i, source=str(asset.relative))
            for i, asset in enumerate(ordered)
        )
    )


def build_timestamp() -> int:
    """Font timestamp: SOURCE_DATE_EPOCH when set, else the Unix epoch."""
    return timestampSinceEpoch(int(os.environ.get("SOURCE_DATE_EPOCH", "0")))


def draw_glyph(asset: Asset) -> tuple[Outline, int]:
    """
    Draw one SVG icon into a TrueType glyph scaled to the em square.

    Returns:
        (glyph, advance width)

    Raises:
        EngineError: If the SVG cannot be parsed or drawn
    """
    name = str(asset.relative)
    box = view_box(parse_svg(asset.content, name), name)
    scale = UNITS_PER_EM / box.height

    # SVG y grows downward; the top of the viewBox lands on the ascender
    transform = (scale, 0, 0, -scale, -box.x * scale, ASCENT + box.y * scale)

    tt_pen = TTGlyphPen(None)
    # Flipping y reverses contour direction; TrueType wants clockwise outers
    quadratic_pen = Cu2QuPen(tt_pen, CU2QU_MAX_ERR, reverse_direction=True)
    pen = TransformPen(quadratic_pen, transform)
    try:
        SVGPath.fromstring(asset.content).draw(pen)
    except Exception as e:
        raise EngineError(f"{name}: cannot convert outlines to a glyph ({e})") from e

    return tt_pen.glyph(), round(box.width * scale)


def compile_glyphs(
    sources: Sequence[Asset], settings: FontSettings
) -> tuple[GlyphSet, dict[str, Outline], dict[str, int]]:
    """
    Build glyph metadata and outlines for every source icon.

    Returns:
        (GlyphSet, outlines keyed by font glyph name, advance widths)

    Raises:
        EngineError: If there are no sources or one of them is rejected
    """
    if not sources:
        raise EngineError("No source icons to build a font from")

    glyph_set = assign_codepoints(sources, settings.start_codepoint)
    by_source = {str(asset.relative): asset for asset in sources}

    outlines = {}
    advances = {}
    for glyph in glyph_set:
        outline, advance = draw_glyph(by_source[glyph.source])
        outlines[glyph.glyph_name] = outline
        advances[glyph.glyph_name] = advance

    return glyph_set, outlines, advances


def build_font(
    glyph_set: GlyphSet,
    outlines: dict[str, Outline],
    advances: dict[str, int],
    family: str,
    version: str,
) -> TTFont:
    """Assemble a TrueType font from compiled glyphs."""
    fb = FontBuilder(UNITS_PER_EM, isTTF=True)

    glyph_order = [".notdef"] + [glyph.glyph_name for glyph in glyph_set]
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap({glyph.codepoint: glyph.glyph_name for glyph in glyph_set})

    glyphs = {".notdef": TTGlyphPen(None).glyph(), **outlines}
    fb.setupGlyf(glyphs)

    glyf = fb.font["glyf"]
    metrics = {".notdef": (UNITS_PER_EM, 0)}
    for name, advance in advances.items():
        metrics[name] = (advance, getattr(glyf[name], "xMin", 0))
    fb.setupHorizontalMetrics(metrics)

    fb.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
    fb.setupNameTable(
        {
            "familyName": family,
            "styleName": "Regular",
            "version": f"Version {version}",
        }
    )
    fb.setupOS2(
        sTypoAscender=ASCENT,
        sTypoDescender=DESCENT,
        usWinAscent=ASCENT,
        usWinDescent=-DESCENT,
    )
    fb.setupPost()

    timestamp = build_timestamp()
    fb.font["head"].created = timestamp
    fb.font["head"].modified = timestamp
    return fb.font


def save_font(font: TTFont, path: Path, flavor: str | None = None) -> None:
    """Save a font (optionally as WOFF) with the pinned head timestamps kept."""
    font.flavor = flavor
    font.recalcTimestamp = False
    path.parent.mkdir(parents=True, exist_ok=True)
    font.save(path)
