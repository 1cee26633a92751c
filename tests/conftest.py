"""Shared pytest fixtures."""

import json

import pytest

from iconpack.config.project import load_context

STAR_SVG = """<?xml version="1.0" encoding="UTF-8"?>
<!-- exported from an editor -->
<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" width="24" height="24">
  <title>star</title>
  <path fill="#000000" d="M12 2l3.09 6.26L22 9.27l-5 4.87L18.18 21 12 17.77 5.82 21 7 14.14l-5-4.87 6.91-1.01z"/>
</svg>
"""

CONFIG_YAML = """\
colors:
  red: "#ff0000"
sizes:
  small: 16
font:
  name: test-icons
  classname: ti
"""


@pytest.fixture
def icon_project(tmp_path):
    """Create a minimal icon project with one source icon."""
    root = tmp_path / "project"
    (root / "source").mkdir(parents=True)
    (root / "source" / "001_star.svg").write_text(STAR_SVG, encoding="utf-8")
    (root / "config.yaml").write_text(CONFIG_YAML, encoding="utf-8")
    (root / "package.json").write_text(
        json.dumps({"name": "test-icons", "version": "1.2.3"}), encoding="utf-8"
    )
    return root


@pytest.fixture
def build_ctx(icon_project):
    """Build context for the icon project fixture."""
    return load_context(icon_project)
