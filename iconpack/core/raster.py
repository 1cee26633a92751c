"""
SVG rasterization through cairosvg.
"""

from pathlib import Path

import cairosvg
from PIL import Image

from iconpack.core.errors import EngineError


def svg_to_png(content: bytes, width: int, name: str) -> bytes:
    """
    Render SVG markup to PNG at ``width`` pixels, preserving aspect ratio.

    Raises:
        EngineError: If cairosvg cannot render the document
    """
    try:
        return cairosvg.svg2png(bytestring=content, output_width=width)
    except Exception as e:
        raise EngineError(f"{name}: rasterization failed ({e})") from e


def png_size(path: Path) -> tuple[int, int]:
    """Return (width, height) of a bitmap on disk."""
    with Image.open(path) as img:
        return img.size
