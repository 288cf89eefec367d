"""Pydantic schemas for diff results."""

from typing import Any

from pydantic import Field, model_validator

from app.models.enums import ChangeType
from app.schemas.prototype import CamelModel


class DiffItem(CamelModel):
    """Comparison result for one original element.

    ``change_type`` is MODIFIED exactly when ``edited_text`` is non-empty and
    differs from ``original_text``. It is always derived from the two texts;
    a supplied value is replaced.
    """

    id: str
    original_text: str
    edited_text: str = ""
    frame_name: str = ""
    component_path: str = ""
    change_type: ChangeType = ChangeType.UNCHANGED

    @model_validator(mode="before")
    @classmethod
    def _derive_change_type(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        original = data.get("original_text", data.get("originalText"))
        edited = data.get("edited_text", data.get("editedText")) or ""
        if not isinstance(original, str) or not isinstance(edited, str):
            return data
        derived = (
            ChangeType.MODIFIED
            if edited and edited != original
            else ChangeType.UNCHANGED
        )
        data = {
            key: value
            for key, value in data.items()
            if key not in ("change_type", "changeType")
        }
        data["change_type"] = derived
        return data

    @property
    def is_modified(self) -> bool:
        return self.change_type == ChangeType.MODIFIED


class DiffSummary(CamelModel):
    """Counts shown above a diff review."""

    total: int = Field(..., ge=0)
    modified: int = Field(..., ge=0)
    unchanged: int = Field(..., ge=0)
