"""
Artifact naming rules.

Source icons carry a three-digit ordering prefix (``001_star.svg``) that only
exists to sort them on disk. Generated artifacts drop it.
"""

import re

# Stacked prefixes (``001_002_star``) are stripped together so that
# normalizing an already normalized name never changes it again.
ORDERING_PREFIX = re.compile(r"^(?:\d{3}_)+")


def normalize(basename: str) -> str:
    """Strip the leading ``NNN_`` ordering prefix, if present."""
    return ORDERING_PREFIX.sub("", basename, count=1)


def recolored_name(stem: str, color_key: str) -> str:
    """Name of a recolored SVG, e.g. ``001_star`` -> ``star-red``."""
    return f"{normalize(stem)}-{color_key}"


def rasterized_name(stem: str, size_key: str) -> str:
    """Name of a bitmap variant, e.g. ``star-red`` -> ``star-red--small``."""
    return f"{normalize(stem)}--{size_key}"
