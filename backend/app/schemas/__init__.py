"""Pydantic schemas module.

This module contains Pydantic models used for:
- The text element data model shared by every pipeline stage
- API request/response validation

Naming convention:
- Plain nouns for the data model (Prototype, TextElement, DiffItem)
- *Request / *Response suffixes for API bodies
"""

from app.schemas.diff import DiffItem, DiffSummary
from app.schemas.prototype import (
    BoundingBox,
    ExtractionMetadata,
    Prototype,
    TextElement,
)
from app.schemas.roundtrip import (
    AcquireRequest,
    ApplyRequest,
    ApplyResponse,
    ArtifactSchema,
    DiffRequest,
    DiffResponse,
    ExportSheetRequest,
    ImportSheetRequest,
    PublishRequest,
    PublishResponse,
    RegenerateRequest,
    RegenerateResponse,
)

__all__ = [
    # Data model
    "BoundingBox",
    "ExtractionMetadata",
    "Prototype",
    "TextElement",
    "DiffItem",
    "DiffSummary",
    # API bodies
    "AcquireRequest",
    "ApplyRequest",
    "ApplyResponse",
    "ArtifactSchema",
    "DiffRequest",
    "DiffResponse",
    "ExportSheetRequest",
    "ImportSheetRequest",
    "PublishRequest",
    "PublishResponse",
    "RegenerateRequest",
    "RegenerateResponse",
]
