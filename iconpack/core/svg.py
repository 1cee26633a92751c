"""
SVG minification and recoloring.

Works on ``xml.etree.ElementTree`` trees. The parser already drops comments,
processing instructions and the doctype; the passes below remove editor
noise, collapse redundant groups and rewrite ``fill`` attributes.
"""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from iconpack.core.errors import EngineError

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)

# Namespaces written by drawing tools, never needed for rendering
EDITOR_NAMESPACES = {
    "http://www.inkscape.org/namespaces/inkscape",
    "http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd",
    "http://www.bohemiancoding.com/sketch/ns",
    "http://ns.adobe.com/AdobeIllustrator/10.0/",
    "http://ns.adobe.com/Graphs/1.0/",
    "http://ns.adobe.com/SaveForWeb/1.0/",
    "http://ns.adobe.com/Extensibility/1.0/",
    "http://ns.adobe.com/Variables/1.0/",
    "http://ns.adobe.com/ImageReplacement/1.0/",
    "http://ns.adobe.com/GenericCustomNamespace/1.0/",
    "http://ns.adobe.com/XPath/1.0/",
    "http://purl.org/dc/elements/1.1/",
    "http://creativecommons.org/ns#",
    "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
}

REMOVED_ELEMENTS = {"metadata", "title", "desc"}

# A group carrying one of these cannot be dissolved without changing rendering
# or breaking references to it
PINNED_GROUP_ATTRIBUTES = {"id", "class", "style", "clip-path", "mask", "filter"}

VIEWBOX_SPLIT = re.compile(r"[\s,]+")
LENGTH = re.compile(r"^\s*([0-9.]+)")


def local_name(tag: str) -> str:
    """Tag or attribute name without its ``{namespace}``."""
    return tag.rsplit("}", 1)[-1]


def namespace(tag: str) -> str | None:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def parse_svg(content: bytes, name: str) -> ET.Element:
    """
    Parse SVG markup.

    Raises:
        EngineError: If the markup is malformed or not an ``<svg>`` document
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise EngineError(f"{name}: malformed SVG ({e})") from e
    if local_name(root.tag) != "svg":
        tag = local_name(root.tag)
        raise EngineError(f"{name}: root element is <{tag}>, not <svg>")
    return root


def serialize_svg(root: ET.Element) -> bytes:
    return ET.tostring(root, encoding="unicode").encode("utf-8")


@dataclass(frozen=True)
class ViewBox:
    """The user-space rectangle an icon is drawn in."""

    x: float
    y: float
    width: float
    height: float


def view_box(root: ET.Element, name: str) -> ViewBox:
    """
    Read ``viewBox``, falling back to ``width``/``height``.

    Raises:
        EngineError: If neither gives a non-empty drawing area
    """
    raw = root.get("viewBox")
    if raw:
        try:
            values = [float(v) for v in VIEWBOX_SPLIT.split(raw.strip())]
            x, y, width, height = values
        except ValueError as e:
            raise EngineError(f"{name}: invalid viewBox '{raw}'") from e
    else:
        x = y = 0.0
        width = _length(root.get("width"))
        height = _length(root.get("height"))

    if width <= 0 or height <= 0:
        raise EngineError(f"{name}: SVG has no drawing area (viewBox/width/height)")
    return ViewBox(x, y, width, height)


def _length(value: str | None) -> float:
    if value is None:
        return 0.0
    match = LENGTH.match(value)
    return float(match.group(1)) if match else 0.0


def _strip_editor_data(element: ET.Element) -> None:
    for key in list(element.attrib):
        if namespace(key) in EDITOR_NAMESPACES:
            del element.attrib[key]

    for child in list(element):
        if (
            namespace(child.tag) in EDITOR_NAMESPACES
            or local_name(child.tag) in REMOVED_ELEMENTS
        ):
            element.remove(child)
        else:
            _strip_editor_data(child)


def _strip_whitespace(element: ET.Element) -> None:
    if element.text is not None and not element.text.strip():
        element.text = None
    if element.tail is not None and not element.tail.strip():
        element.tail = None
    for child in element:
        _strip_whitespace(child)


def _is_container(element: ET.Element) -> bool:
    return local_name(element.tag) in {"g", "defs"}


def _remove_empty_containers(element: ET.Element) -> None:
    for child in list(element):
        _remove_empty_containers(child)
        if _is_container(child) and len(child) == 0 and not child.text:
            element.remove(child)


def _move_group_attributes(group: ET.Element, child: ET.Element) -> bool:
    """Push a single-child group's attributes down. False on conflict."""
    for key in group.attrib:
        if key in child.attrib and key != "transform":
            return False
    for key, value in group.attrib.items():
        if key == "transform" and "transform" in child.attrib:
            child.set("transform", f"{value} {child.get('transform')}")
        else:
            child.set(key, value)
    return True


def _collapse_groups(element: ET.Element) -> None:
    index = 0
    while index < len(element):
        child = element[index]
        _collapse_groups(child)

        pinned = PINNED_GROUP_ATTRIBUTES & set(child.attrib)
        if local_name(child.tag) != "g" or pinned:
            index += 1
            continue

        movable = len(child) == 1 and _move_group_attributes(child, child[0])
        if child.attrib and not movable:
            index += 1
            continue

        # Replace the group with its children
        children = list(child)
        element.remove(child)
        for offset, grandchild in enumerate(children):
            element.insert(index + offset, grandchild)
        index += len(children)


def minify(root: ET.Element) -> ET.Element:
    """Remove editor data and whitespace, collapse redundant groups (in place)."""
    _strip_editor_data(root)
    _strip_whitespace(root)
    _remove_empty_containers(root)
    _collapse_groups(root)
    return root


def recolor(root: ET.Element, color: str) -> int:
    """
    Set ``fill`` to ``color`` on every element that has a fill attribute.

    Elements without ``fill`` are left untouched.

    Returns:
        Number of rewritten attributes
    """
    count = 0
    for element in root.iter():
        if "fill" in element.attrib:
            element.set("fill", color)
            count += 1
    return count


def recolor_svg(content: bytes, color: str, name: str) -> bytes:
    """Minify and recolor one SVG document."""
    root = minify(parse_svg(content, name))
    recolor(root, color)
    return serialize_svg(root)
