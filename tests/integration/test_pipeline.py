"""
End-to-end build tests.

Run the full pipeline against a temporary icon project and inspect dist/.
"""

import os
import xml.etree.ElementTree as ET
import zipfile

import pytest
from fontTools.ttLib import TTFont

from iconpack.config.project import load_context
from iconpack.core.errors import EngineError
from iconpack.core.raster import png_size
from iconpack.operations.font import make_font
from iconpack.operations.rasterize import rasterize
from iconpack.operations.recolor import colorize
from iconpack.pipeline.runner import run_all

SVG_NS = "{http://www.w3.org/2000/svg}"


def snapshot(directory):
    """Map relative path -> bytes for every file below directory."""
    return {
        path.relative_to(directory).as_posix(): path.read_bytes()
        for path in sorted(directory.rglob("*"))
        if path.is_file()
    }


def test_end_to_end_build(build_ctx):
    """Test the documented scenario: one red star rasterized at 16px, then zipped."""
    root = build_ctx.paths.root

    run_all(build_ctx)

    svg = root / "dist" / "svg" / "star-red.svg"
    path = ET.parse(svg).getroot().find(f"{SVG_NS}path")
    assert path.get("fill") == "#ff0000"

    png = root / "dist" / "png" / "star-red--small.png"
    assert png_size(png)[0] == 16

    font = TTFont(root / "dist" / "fonts" / "test-icons.ttf")
    assert font.getBestCmap() == {0xEA01: "uniEA01"}
    font.close()
    assert (root / "dist" / "fonts" / "test-icons.woff").exists()

    stylesheet = (root / "dist" / "css" / "test-icons.css").read_text()
    assert '.ti-star:before { content: "\\ea01"; }' in stylesheet
    assert 'url("../fonts/test-icons.ttf?v=1.2.3")' in stylesheet
    assert "ti-star" in (root / "dist" / "demo" / "index.html").read_text()
    assert (root / "dist" / "demo" / "css" / "demo.css").exists()

    archive = root / "test-icons-1.2.3.zip"
    with zipfile.ZipFile(archive) as zf:
        names = set(zf.namelist())
    expected = {
        f"dist/{p}" for p in snapshot(root / "dist")
    } | {"source/001_star.svg", "config.yaml", "package.json"}
    assert names == expected


def test_rebuild_is_byte_identical(build_ctx):
    """Test a second build on unchanged inputs reproduces dist/ exactly."""
    run_all(build_ctx)
    first = snapshot(build_ctx.paths.dist_dir)

    forced = load_context(build_ctx.paths.root, incremental=False)
    run_all(forced)

    assert snapshot(build_ctx.paths.dist_dir) == first


def test_archive_skips_previous_archives_and_caches(build_ctx):
    """Test dependency caches and older archives stay out of the archive."""
    root = build_ctx.paths.root
    (root / "node_modules" / "pkg").mkdir(parents=True)
    (root / "node_modules" / "pkg" / "index.js").write_text("")
    (root / "test-icons-1.0.0.zip").write_bytes(b"old")

    run_all(build_ctx)

    with zipfile.ZipFile(root / "test-icons-1.2.3.zip") as zf:
        names = zf.namelist()
    assert not any(name.startswith("node_modules") for name in names)
    assert not any(name.endswith(".zip") for name in names)


def test_archive_output_root_inside_project(icon_project):
    """Test an archive written under dist/ does not contain itself."""
    config = icon_project / "config.yaml"
    config.write_text(config.read_text() + "archive:\n  output_root: dist\n")
    ctx = load_context(icon_project)

    run_all(ctx)

    archive = icon_project / "dist" / "test-icons-1.2.3.zip"
    with zipfile.ZipFile(archive) as zf:
        assert "dist/test-icons-1.2.3.zip" not in zf.namelist()
        assert "dist/svg/star-red.svg" in zf.namelist()


def test_font_rejection_stops_before_rasterize(build_ctx):
    """Test a source the font engine rejects aborts the build before bitmaps."""
    root = build_ctx.paths.root
    # Parses as XML (recoloring succeeds) but has no drawing area for a glyph
    (root / "source" / "002_empty.svg").write_text(
        '<svg xmlns="http://www.w3.org/2000/svg"><path fill="#000" d="M0 0"/></svg>'
    )

    with pytest.raises(SystemExit) as excinfo:
        run_all(build_ctx)

    assert excinfo.value.code == 1
    assert not (root / "dist" / "png").exists()
    assert not (root / "test-icons-1.2.3.zip").exists()


def test_malformed_source_fails_build(build_ctx):
    """Test malformed markup is fatal."""
    root = build_ctx.paths.root
    (root / "source" / "002_broken.svg").write_text("<svg><path></svg>")

    with pytest.raises(SystemExit):
        run_all(build_ctx)

    assert not (root / "dist" / "png").exists()


def test_rasterize_skips_up_to_date_targets(build_ctx):
    """Test newer targets are kept and stale ones are rebuilt."""
    colorize(build_ctx, "red")
    rasterize(build_ctx, "small")

    source = build_ctx.paths.svg_dir / "star-red.svg"
    target = build_ctx.paths.png_dir / "star-red--small.png"
    os.utime(source, (1_000_000, 1_000_000))

    target.write_bytes(b"sentinel")
    os.utime(target, (2_000_000, 2_000_000))
    assert rasterize(build_ctx, "small") == []
    assert target.read_bytes() == b"sentinel"

    os.utime(target, (500_000, 500_000))
    written = rasterize(build_ctx, "small")
    assert [asset.basename for asset in written] == ["star-red--small.png"]
    assert png_size(target)[0] == 16


def test_rasterize_force_ignores_timestamps(icon_project):
    """Test incremental checks can be disabled entirely."""
    ctx = load_context(icon_project, incremental=False)
    colorize(ctx, "red")
    rasterize(ctx, "small")

    target = ctx.paths.png_dir / "star-red--small.png"
    os.utime(target, (4_000_000_000, 4_000_000_000))

    assert len(rasterize(ctx, "small")) == 1


def test_recolor_preserves_subdirectories(build_ctx):
    """Test nested sources land in matching output directories."""
    nested = build_ctx.paths.source_dir / "arrows"
    nested.mkdir()
    (nested / "010_up.svg").write_text(
        (build_ctx.paths.source_dir / "001_star.svg").read_text()
    )

    outputs = colorize(build_ctx, "red")

    assert sorted(str(a.relative) for a in outputs) == [
        "arrows/up-red.svg",
        "star-red.svg",
    ]
    assert (build_ctx.paths.svg_dir / "arrows" / "up-red.svg").exists()


def test_font_uses_top_level_sources_only(build_ctx):
    """Test the font is built from source/*.svg, not nested directories."""
    nested = build_ctx.paths.source_dir / "extra"
    nested.mkdir()
    (nested / "bad.svg").write_text("<svg><broken></svg>")

    glyphs = make_font(build_ctx)

    assert [g.name for g in glyphs] == ["001_star"]


def test_project_templates_override_bundled(build_ctx):
    """Test a project template replaces the bundled one of the same name."""
    templates = build_ctx.paths.templates_dir
    templates.mkdir()
    (templates / "iconfont-demo.css").write_text(
        "{% for glyph in glyphs %}{{ glyph.name | glyph_name }} {% endfor %}"
    )

    make_font(build_ctx)

    assert (build_ctx.paths.demo_css_dir / "demo.css").read_text() == "star "


def test_rasterize_preserves_aspect_ratio(build_ctx):
    """Test a wide icon keeps its proportions at the configured width."""
    (build_ctx.paths.source_dir / "004_wide.svg").write_text(
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 48 24">'
        '<rect fill="#000" width="48" height="24"/></svg>'
    )
    colorize(build_ctx, "red")
    rasterize(build_ctx, "small")

    assert png_size(build_ctx.paths.png_dir / "wide-red--small.png") == (16, 8)
    assert png_size(build_ctx.paths.png_dir / "star-red--small.png") == (16, 16)


def test_colliding_output_names_fail(build_ctx):
    """Test two sources that normalize to one name are reported, not overwritten."""
    source = build_ctx.paths.source_dir
    (source / "002_star.svg").write_text((source / "001_star.svg").read_text())

    with pytest.raises(EngineError, match="002_star.svg"):
        colorize(build_ctx, "red")

    assert not build_ctx.paths.svg_dir.exists()
