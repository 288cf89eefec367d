"""Enumerations for the text element data model."""

from app.models.enums import (
    ChangeType,
    ComponentType,
    ExtractionSource,
    Priority,
    PrototypeSource,
    ScreenSection,
)

__all__ = [
    "ChangeType",
    "ComponentType",
    "ExtractionSource",
    "Priority",
    "PrototypeSource",
    "ScreenSection",
]
