"""Element-level diff between an original and an edited element set.

The diff is anchored to the original set: one item per original element, in
original order. Elements are matched by exact id only. Edited elements whose
id is not in the original set are not reported.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Sequence

from app.models.enums import ChangeType
from app.schemas.diff import DiffItem, DiffSummary
from app.schemas.prototype import TextElement

logger = logging.getLogger(__name__)


def classify_change(original_text: str, edited_text: str) -> ChangeType:
    """MODIFIED iff there is a proposal and it differs from the original."""
    if edited_text and edited_text != original_text:
        return ChangeType.MODIFIED
    return ChangeType.UNCHANGED


def diff(
    original: Sequence[TextElement], edited: Sequence[TextElement]
) -> list[DiffItem]:
    """Compare original elements to their edited counterparts.

    Args:
        original: Elements as they were exported.
        edited: Elements carrying ``edited_text`` proposals.

    Returns:
        One DiffItem per original element, in original order.
    """
    # First occurrence wins, matching a linear find over ``edited``.
    edited_by_id: dict[str, TextElement] = {}
    for element in edited:
        edited_by_id.setdefault(element.id, element)

    items: list[DiffItem] = []
    for element in original:
        counterpart = edited_by_id.get(element.id)
        edited_text = (counterpart.edited_text or "") if counterpart else ""
        items.append(
            DiffItem(
                id=element.id,
                original_text=element.original_text,
                edited_text=edited_text,
                frame_name=element.frame_name,
                component_path=element.component_path,
                change_type=classify_change(element.original_text, edited_text),
            )
        )

    original_ids = {element.id for element in original}
    orphaned = sum(1 for element_id in edited_by_id if element_id not in original_ids)
    if orphaned:
        logger.debug(f"Ignored {orphaned} edited elements with no original")

    summary = summarize(items)
    logger.info(
        f"Diff: {summary.total} elements, {summary.modified} modified, "
        f"{summary.unchanged} unchanged"
    )
    return items


def summarize(items: Sequence[DiffItem]) -> DiffSummary:
    """Count modified and unchanged items."""
    modified = sum(1 for item in items if item.is_modified)
    return DiffSummary(
        total=len(items),
        modified=modified,
        unchanged=len(items) - modified,
    )


def select_changes(
    items: Sequence[DiffItem], selected_ids: Collection[str] | None = None
) -> list[DiffItem]:
    """Return the modified items a reviewer approved, in diff order.

    Args:
        items: Full diff.
        selected_ids: Approved ids. None approves every modified item.
            Selected ids of unchanged items are ignored.
    """
    return [
        item
        for item in items
        if item.is_modified and (selected_ids is None or item.id in selected_ids)
    ]
