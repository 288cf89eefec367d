"""Pydantic schemas for prototypes and their text elements.

These models are the data model shared by every pipeline stage. They are
frozen: each pipeline stage returns new instances instead of mutating its
input. Python attributes are snake_case; the JSON interchange shape uses
camelCase (``originalText``, ``frameName``), and both spellings are accepted
on input.
"""

from collections import Counter
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from app.models.enums import (
    ComponentType,
    ExtractionSource,
    Priority,
    PrototypeSource,
    ScreenSection,
)
from pipeline.errors import DuplicateElementIdError


def utc_now() -> datetime:
    """Timezone-aware current time used for all generated timestamps."""
    return datetime.now(UTC)


class CamelModel(BaseModel):
    """Frozen base model serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class BoundingBox(CamelModel):
    """Element geometry. Any coordinate may be missing."""

    x: float | None = None
    y: float | None = None
    width: float | None = None
    height: float | None = None


class ExtractionMetadata(CamelModel):
    """Provenance of an extracted element. Read-only to the pipeline."""

    source: ExtractionSource
    confidence: float = Field(..., ge=0.0, le=1.0)
    extracted_at: datetime
    extraction_method: str


class TextElement(CamelModel):
    """One editable unit of text with layout and provenance metadata.

    Attributes:
        id: Stable identifier, unique within a prototype.
        original_text: Current canonical text. Only Apply changes it.
        edited_text: Proposed replacement. None or "" means no proposal.
        frame_name: Screen or frame the element belongs to.
        component_path: Path of the component inside the design.
        hierarchy: Human-readable ancestry, e.g. "Page > Header > Menu".
        bounding_box: Geometry, carried through unchanged.
        image: Opaque preview reference (URL or data URI).
        last_modified: Set when Apply changes the text.
    """

    id: str
    original_text: str
    edited_text: str | None = None
    frame_name: str = ""
    component_path: str = ""
    hierarchy: str = ""
    bounding_box: BoundingBox | None = None
    component_type: ComponentType = ComponentType.UNKNOWN
    screen_section: ScreenSection = ScreenSection.UNKNOWN
    priority: Priority = Priority.MEDIUM
    is_interactive: bool = False
    font_size: float | None = None
    font_family: str | None = None
    font_weight: str | None = None
    color: str | None = None
    background_color: str | None = None
    parent_component: str | None = None
    nearby_elements: tuple[str, ...] = ()
    element_role: str | None = None
    context_notes: str | None = None
    image: str | None = None
    extraction_metadata: ExtractionMetadata | None = None
    last_modified: datetime | None = None

    @property
    def has_proposal(self) -> bool:
        """True when the element carries a non-empty edited_text."""
        return bool(self.edited_text)


class Prototype(CamelModel):
    """An ordered, id-unique collection of text elements plus identity."""

    id: str
    name: str
    source: PrototypeSource
    url: str | None = None
    text_elements: tuple[TextElement, ...] = ()
    created_at: datetime = Field(default_factory=utc_now)
    last_updated: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "Prototype":
        counts = Counter(element.id for element in self.text_elements)
        duplicates = [element_id for element_id, n in counts.items() if n > 1]
        if duplicates:
            raise DuplicateElementIdError(duplicates)
        return self

    def element_ids(self) -> list[str]:
        """Element ids in document order."""
        return [element.id for element in self.text_elements]
