"""Pure application of approved diff items to a prototype.

No I/O and no mutation: the input prototype is returned untouched and a new
prototype is built from copies. Elements without an approved change are
reused as-is.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

from app.schemas.diff import DiffItem
from app.schemas.prototype import Prototype, TextElement, utc_now

logger = logging.getLogger(__name__)


def _approved_by_id(approved: Sequence[DiffItem]) -> dict[str, DiffItem]:
    """Index approved items, keeping only modified items with a proposal."""
    lookup: dict[str, DiffItem] = {}
    for item in approved:
        if item.is_modified and item.edited_text:
            lookup.setdefault(item.id, item)
    return lookup


def apply_with_report(
    original: Prototype,
    approved: Sequence[DiffItem],
    now: datetime | None = None,
) -> tuple[Prototype, list[str]]:
    """Apply approved changes and report which element ids changed.

    Args:
        original: Prototype the diff was computed against.
        approved: Items the reviewer selected. Unchanged items and items
            with an empty proposal are ignored.
        now: Timestamp for ``last_modified``/``last_updated``. Defaults to
            the current UTC time.

    Returns:
        (updated prototype, ids of elements whose text was replaced)
    """
    timestamp = now or utc_now()
    lookup = _approved_by_id(approved)

    elements: list[TextElement] = []
    changed: list[str] = []
    for element in original.text_elements:
        item = lookup.get(element.id)
        if item is None or item.edited_text == element.original_text:
            elements.append(element)
            continue
        elements.append(
            element.model_copy(
                update={
                    "original_text": item.edited_text,
                    "edited_text": item.edited_text,
                    "last_modified": timestamp,
                }
            )
        )
        changed.append(element.id)

    element_ids = {element.id for element in original.text_elements}
    missing = sum(1 for element_id in lookup if element_id not in element_ids)
    if missing:
        logger.warning(f"{missing} approved changes had no matching element")

    updated = original.model_copy(
        update={"text_elements": tuple(elements), "last_updated": timestamp}
    )
    logger.info(
        f"Applied {len(changed)} changes to {original.name!r} "
        f"({len(elements)} elements)"
    )
    return updated, changed


def apply(
    original: Prototype,
    approved: Sequence[DiffItem],
    now: datetime | None = None,
) -> Prototype:
    """Return a new prototype with the approved text changes applied."""
    updated, _ = apply_with_report(original, approved, now=now)
    return updated
