"""
Project layout constants.

Centralizes path definitions to avoid magic strings in individual stages.
All paths are relative to the icon project root.
"""

from pathlib import Path

PACKAGE_DIR = Path(__file__).parent.parent
BUNDLED_TEMPLATES_DIR = PACKAGE_DIR / "templates"

# Inputs
CONFIG_FILE = "config.yaml"
CONFIG_EXAMPLE_FILE = "config.example.yaml"
PACKAGE_FILE = "package.json"
SOURCE_DIR = Path("source")
TEMPLATES_DIR = Path("templates")

# Outputs
DIST_DIR = Path("dist")
SVG_DIR = DIST_DIR / "svg"
PNG_DIR = DIST_DIR / "png"
FONTS_DIR = DIST_DIR / "fonts"
CSS_DIR = DIST_DIR / "css"
DEMO_DIR = DIST_DIR / "demo"
DEMO_CSS_DIR = DEMO_DIR / "css"

# Source globs
RECOLOR_GLOB = "**/*.svg"
FONT_GLOB = "*.svg"
RASTER_GLOB = "**/*.svg"
