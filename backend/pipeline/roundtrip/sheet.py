"""Mapping between text elements and spreadsheet rows.

The column set is fixed so that writers always receive the same layout:
identity and text first, then the context that helps them edit, then the
preview reference.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Sequence

from app.schemas.prototype import Prototype, TextElement
from pipeline.roundtrip import tabular
from pipeline.roundtrip.tabular import Row

logger = logging.getLogger(__name__)

EXPORT_COLUMNS: tuple[str, ...] = (
    "id",
    "original_text",
    "edited_text",
    "frame_name",
    "component_path",
    "component_type",
    "screen_section",
    "hierarchy",
    "priority",
    "is_interactive",
    "font_size",
    "font_weight",
    "nearby_elements",
    "element_role",
    "extraction_confidence",
    "extraction_source",
    "context_notes",
    "image",
)

NEARBY_SEPARATOR = "; "


def format_number(value: float | None) -> str:
    """Render a number as a decimal string; integral values drop the ".0"."""
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def element_to_row(element: TextElement, include_edits: bool = False) -> Row:
    """Serialize one element into an export row.

    Args:
        element: Element to serialize.
        include_edits: Fill ``edited_text`` with the element's current
            proposal. The initial export leaves it blank for writers.
    """
    metadata = element.extraction_metadata
    return {
        "id": element.id,
        "original_text": element.original_text,
        "edited_text": (element.edited_text or "") if include_edits else "",
        "frame_name": element.frame_name,
        "component_path": element.component_path,
        "component_type": element.component_type.value,
        "screen_section": element.screen_section.value,
        "hierarchy": element.hierarchy,
        "priority": element.priority.value,
        "is_interactive": "Yes" if element.is_interactive else "No",
        "font_size": format_number(element.font_size),
        "font_weight": element.font_weight or "",
        "nearby_elements": NEARBY_SEPARATOR.join(element.nearby_elements),
        "element_role": element.element_role or "",
        "extraction_confidence": format_number(
            metadata.confidence if metadata else None
        ),
        "extraction_source": metadata.source.value if metadata else "",
        "context_notes": element.context_notes or "",
        "image": element.image or "",
    }


def export_csv(
    prototype: Prototype,
    selected_ids: Collection[str] | None = None,
    include_edits: bool = False,
) -> str:
    """Export a prototype's elements as CSV text.

    Args:
        prototype: Source prototype.
        selected_ids: Restrict the export to these ids (document order is
            kept). None exports every element.
        include_edits: See ``element_to_row``.

    Returns:
        CSV text, or "" when no element is selected.
    """
    elements = [
        element
        for element in prototype.text_elements
        if selected_ids is None or element.id in selected_ids
    ]
    if not elements:
        logger.warning(f"No elements selected for export from {prototype.name!r}")
        return ""

    rows = [element_to_row(element, include_edits) for element in elements]
    logger.info(f"Exported {len(rows)} of {len(prototype.text_elements)} elements")
    return tabular.stringify(rows)


def rows_to_edits(
    elements: Sequence[TextElement], rows: Iterable[Row]
) -> list[TextElement]:
    """Carry ``edited_text`` proposals from imported rows onto elements.

    The first row whose ``id`` matches an element decides: a non-empty
    ``edited_text`` produces a copy of the element carrying the proposal,
    anything else leaves the element as it was. Rows for unknown ids are
    ignored.
    """
    first_row_by_id: dict[str, Row] = {}
    for row in rows:
        first_row_by_id.setdefault(row.get("id", ""), row)

    known_ids = {element.id for element in elements}
    unknown = [row_id for row_id in first_row_by_id if row_id not in known_ids]
    if unknown:
        logger.debug(f"Ignoring {len(unknown)} rows with unknown ids")

    edited: list[TextElement] = []
    for element in elements:
        row = first_row_by_id.get(element.id)
        proposal = row.get("edited_text", "") if row else ""
        if proposal:
            edited.append(element.model_copy(update={"edited_text": proposal}))
        else:
            edited.append(element)
    return edited


def import_csv(prototype: Prototype, text: str) -> list[TextElement]:
    """Parse an edited spreadsheet and apply its proposals to the elements."""
    rows = tabular.parse(text)
    edited = rows_to_edits(prototype.text_elements, rows)
    proposals = sum(
        1
        for before, after in zip(prototype.text_elements, edited)
        if before is not after
    )
    logger.info(f"Imported {len(rows)} rows, {proposals} with proposals")
    return edited
