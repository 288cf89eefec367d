"""Regenerate derived documents from an updated prototype.

Two artifacts are always produced:

- Document view: a self-contained HTML page with one section per frame and
  one tagged node per text element (``data-id`` carries the element id).
- Structured view: a nested ``document -> canvas -> frame -> node`` object
  in the shape design tools import.

Frames appear in the order they are first encountered and elements keep
their relative order inside a frame. Both views are pure functions of the
prototype apart from the generation timestamp, which callers may pin.

Missing layout metadata never fails: geometry and font fields fall back to
the defaults below.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from lxml import etree

from app.models.enums import ComponentType
from app.schemas.prototype import Prototype, TextElement, utc_now
from pipeline.roundtrip.sheet import format_number

logger = logging.getLogger(__name__)

DEFAULT_FRAME_NAME = "Default Frame"
DEFAULT_X = 0
DEFAULT_Y = 0
DEFAULT_WIDTH = 100
DEFAULT_HEIGHT = 20
DEFAULT_FONT_SIZE = 16
DEFAULT_FONT_FAMILY = "default"
DEFAULT_FONT_WEIGHT = "400"

HTML_MEDIA_TYPE = "text/html"
JSON_MEDIA_TYPE = "application/json"
SVG_MEDIA_TYPE = "image/svg+xml"
SVG_NS = "http://www.w3.org/2000/svg"

# Component type -> HTML tag for the document view.
TAG_BY_COMPONENT: dict[ComponentType, str] = {
    ComponentType.HEADING: "h2",
    ComponentType.BUTTON: "button",
    ComponentType.LINK: "a",
    ComponentType.LABEL: "label",
    ComponentType.CONTENT: "p",
    ComponentType.NAVIGATION: "nav",
}
DEFAULT_TAG = "span"

# Characters libxml2 refuses in text and attribute values.
_XML_INCOMPATIBLE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")

STYLESHEET = """
body { font-family: -apple-system, 'Segoe UI', Roboto, sans-serif;
       margin: 0; padding: 20px; background: #f8fafc; line-height: 1.6; }
.prototype-container { max-width: 1200px; margin: 0 auto; }
.prototype-header, .frame { background: white; padding: 24px;
       border-radius: 12px; box-shadow: 0 1px 3px rgba(0,0,0,0.1);
       margin-bottom: 24px; }
.frame-title { color: #1e293b; border-bottom: 2px solid #e2e8f0;
       padding-bottom: 12px; }
.text-element { display: block; margin: 12px 0; padding: 8px 12px;
       background: #f1f5f9; border-radius: 6px;
       border-left: 3px solid #3b82f6; }
.button-element { background: #3b82f6; color: white; border: none;
       cursor: pointer; }
.link-element { color: #0ea5e9; }
"""


@dataclass(frozen=True)
class Artifact:
    """One generated document."""

    name: str
    media_type: str
    content: Any  # str for markup, dict for the structured view


@dataclass(frozen=True)
class RegeneratedArtifacts:
    """Both views generated from one prototype."""

    document_view: Artifact
    structured_view: Artifact


@dataclass(frozen=True)
class ResolvedBox:
    """Bounding box with defaults filled in."""

    x: float
    y: float
    width: float
    height: float

    def as_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


# =============================================================================
# Shared helpers
# =============================================================================


def group_by_frame(
    elements: tuple[TextElement, ...] | list[TextElement],
) -> list[tuple[str, list[TextElement]]]:
    """Partition elements by frame name, keeping first-seen frame order."""
    groups: dict[str, list[TextElement]] = {}
    for element in elements:
        groups.setdefault(element.frame_name or DEFAULT_FRAME_NAME, []).append(element)
    return list(groups.items())


def resolve_box(element: TextElement) -> ResolvedBox:
    box = element.bounding_box

    def pick(value: float | None, default: float) -> float:
        return default if value is None else value

    if box is None:
        return ResolvedBox(DEFAULT_X, DEFAULT_Y, DEFAULT_WIDTH, DEFAULT_HEIGHT)
    return ResolvedBox(
        x=pick(box.x, DEFAULT_X),
        y=pick(box.y, DEFAULT_Y),
        width=pick(box.width, DEFAULT_WIDTH),
        height=pick(box.height, DEFAULT_HEIGHT),
    )


def resolve_style(element: TextElement) -> dict[str, Any]:
    return {
        "fontFamily": element.font_family or DEFAULT_FONT_FAMILY,
        "fontSize": element.font_size if element.font_size else DEFAULT_FONT_SIZE,
        "fontWeight": element.font_weight or DEFAULT_FONT_WEIGHT,
    }


def count_changed(updated: Prototype, previous: Prototype | None = None) -> int:
    """Count elements whose text was replaced by the most recent apply.

    With ``previous`` (the pre-apply prototype) the count is compared by
    text. Without it, apply's stamp is used: the elements it changed carry a
    ``last_modified`` equal to the prototype's ``last_updated``.
    """
    if previous is not None:
        before = {element.id: element.original_text for element in previous.text_elements}
        return sum(
            1
            for element in updated.text_elements
            if element.id in before and before[element.id] != element.original_text
        )
    return sum(
        1
        for element in updated.text_elements
        if element.last_modified is not None
        and element.last_modified == updated.last_updated
    )


def safe_file_stem(name: str) -> str:
    """Prototype name reduced to a filesystem-safe stem."""
    return re.sub(r"[^a-zA-Z0-9]", "_", name) or "prototype"


def _xml_text(value: str) -> str:
    return _XML_INCOMPATIBLE.sub("", value)


# =============================================================================
# Document view
# =============================================================================


def _inline_style(element: TextElement) -> str:
    styles: list[str] = []
    if element.font_size:
        styles.append(f"font-size: {format_number(element.font_size)}px")
    if element.font_weight:
        styles.append(f"font-weight: {element.font_weight}")
    return "; ".join(styles)


def render_document_view(prototype: Prototype, generated_at: datetime) -> str:
    """Render the HTML document view."""
    html = etree.Element("html", lang="en")
    head = etree.SubElement(html, "head")
    etree.SubElement(head, "meta", charset="UTF-8")
    title = etree.SubElement(head, "title")
    title.text = _xml_text(f"{prototype.name} - Updated Prototype")
    style = etree.SubElement(head, "style")
    style.text = STYLESHEET

    body = etree.SubElement(html, "body")
    container = etree.SubElement(body, "div", {"class": "prototype-container"})

    header = etree.SubElement(container, "header", {"class": "prototype-header"})
    heading = etree.SubElement(header, "h1")
    heading.text = _xml_text(prototype.name)
    for label, value in (
        ("Updated", generated_at.isoformat()),
        ("Total Elements", str(len(prototype.text_elements))),
        ("Source", prototype.source.value),
    ):
        line = etree.SubElement(header, "p", {"class": "meta"})
        strong = etree.SubElement(line, "strong")
        strong.text = f"{label}:"
        strong.tail = f" {value}"

    for frame_name, elements in group_by_frame(prototype.text_elements):
        section = etree.SubElement(
            container, "section", {"class": "frame", "data-frame": _xml_text(frame_name)}
        )
        frame_title = etree.SubElement(section, "h2", {"class": "frame-title"})
        frame_title.text = _xml_text(frame_name)

        for element in elements:
            tag = TAG_BY_COMPONENT.get(element.component_type, DEFAULT_TAG)
            node = etree.SubElement(
                section,
                tag,
                {
                    "class": f"text-element {element.component_type.value}-element",
                    "data-id": _xml_text(element.id),
                },
            )
            inline = _inline_style(element)
            if inline:
                node.set("style", inline)
            node.text = _xml_text(element.original_text)

    return etree.tostring(
        html,
        method="html",
        encoding="unicode",
        pretty_print=True,
        doctype="<!DOCTYPE html>",
    )


# =============================================================================
# Structured view
# =============================================================================


def _node(element: TextElement) -> dict[str, Any]:
    return {
        "id": element.id,
        "name": element.component_path or element.id,
        "type": "text",
        "characters": element.original_text,
        "style": resolve_style(element),
        "boundingBox": resolve_box(element).as_dict(),
        "componentPath": element.component_path,
        "componentType": element.component_type.value,
    }


def render_structured_view(
    prototype: Prototype,
    generated_at: datetime,
    previous: Prototype | None = None,
) -> dict[str, Any]:
    """Build the nested document/canvas/frame/node structure."""
    groups = group_by_frame(prototype.text_elements)
    frames = [
        {
            "id": f"1:{index}",
            "name": frame_name,
            "type": "FRAME",
            "children": [_node(element) for element in elements],
        }
        for index, (frame_name, elements) in enumerate(groups, start=1)
    ]
    return {
        "document": {
            "id": "0:0",
            "name": prototype.name,
            "type": "DOCUMENT",
            "children": [
                {"id": "0:1", "name": "Page 1", "type": "CANVAS", "children": frames}
            ],
        },
        "metadata": {
            "name": prototype.name,
            "source": prototype.source.value,
            "generatedAt": generated_at.isoformat(),
            "totalElements": len(prototype.text_elements),
            "changedElements": count_changed(prototype, previous),
            "frames": len(groups),
        },
    }


# =============================================================================
# Entry point
# =============================================================================


def regenerate(
    updated: Prototype,
    previous: Prototype | None = None,
    generated_at: datetime | None = None,
) -> RegeneratedArtifacts:
    """Generate the document view and structured view for a prototype.

    Args:
        updated: Prototype after apply.
        previous: Prototype before apply, used for the changed-element count.
        generated_at: Timestamp embedded in both views. Defaults to now.

    Returns:
        RegeneratedArtifacts with both views.
    """
    timestamp = generated_at or utc_now()
    stem = safe_file_stem(updated.name)

    document = Artifact(
        name=f"{stem}_document.html",
        media_type=HTML_MEDIA_TYPE,
        content=render_document_view(updated, timestamp),
    )
    structured = Artifact(
        name=f"{stem}_structure.json",
        media_type=JSON_MEDIA_TYPE,
        content=render_structured_view(updated, timestamp, previous),
    )
    logger.info(
        f"Regenerated {updated.name!r}: {len(updated.text_elements)} elements, "
        f"{structured.content['metadata']['frames']} frames"
    )
    return RegeneratedArtifacts(document_view=document, structured_view=structured)


# =============================================================================
# Supplementary exports
# =============================================================================


def render_layout_svg(prototype: Prototype) -> str:
    """Lay frames out vertically as SVG groups with positioned text nodes."""
    frame_x, frame_width, frame_height, frame_gap = 50, 800, 600, 100
    groups = group_by_frame(prototype.text_elements)

    svg = etree.Element(f"{{{SVG_NS}}}svg", nsmap={None: SVG_NS})
    title = etree.SubElement(
        svg,
        f"{{{SVG_NS}}}text",
        {"x": "50", "y": "30", "font-size": "24", "font-weight": "700"},
    )
    title.text = _xml_text(f"{prototype.name} - Updated Design")

    current_y = 50
    for frame_name, elements in groups:
        group = etree.SubElement(svg, f"{{{SVG_NS}}}g", {"data-frame": _xml_text(frame_name)})
        etree.SubElement(
            group,
            f"{{{SVG_NS}}}rect",
            x=str(frame_x),
            y=str(current_y),
            width=str(frame_width),
            height=str(frame_height),
            fill="#ffffff",
            stroke="#e0e0e0",
        )
        for element in elements:
            box = resolve_box(element)
            style = resolve_style(element)
            x = frame_x + 20 + box.x % (frame_width - 40)
            y = current_y + 60 + box.y % (frame_height - 80)
            text = etree.SubElement(
                group,
                f"{{{SVG_NS}}}text",
                {
                    "x": format_number(x),
                    "y": format_number(y),
                    "font-family": str(style["fontFamily"]),
                    "font-size": format_number(style["fontSize"]),
                    "font-weight": str(style["fontWeight"]),
                    "data-id": _xml_text(element.id),
                },
            )
            text.text = _xml_text(element.original_text)
        current_y += frame_height + frame_gap

    height = current_y + 50
    svg.set("width", "1200")
    svg.set("height", str(height))
    svg.set("viewBox", f"0 0 1200 {height}")
    return etree.tostring(
        svg, xml_declaration=True, encoding="UTF-8", pretty_print=True
    ).decode("utf-8")


def render_text_brief(prototype: Prototype) -> str:
    """Plain-text brief listing each element with its placement."""
    blocks: list[str] = []
    for element in prototype.text_elements:
        box = resolve_box(element)
        style = resolve_style(element)
        blocks.append(
            "\n".join(
                [
                    f"Frame: {element.frame_name}",
                    f"Component: {element.component_path}",
                    f"Text: {element.original_text}",
                    f"Position: {format_number(box.x)}, {format_number(box.y)}",
                    f"Size: {format_number(box.width)} x {format_number(box.height)}",
                    f"Font: {style['fontFamily']} {format_number(style['fontSize'])}px",
                    "---",
                ]
            )
        )
    return "\n\n".join(blocks)
