"""Request and response bodies for the round-trip endpoints."""

from typing import Any

from pydantic import model_validator

from app.models.enums import PrototypeSource
from app.schemas.diff import DiffItem, DiffSummary
from app.schemas.prototype import CamelModel, Prototype, TextElement


class ExportSheetRequest(CamelModel):
    """Export a prototype (or a selection of its elements) to CSV."""

    prototype: Prototype
    selected_ids: list[str] | None = None
    include_edits: bool = False


class ImportSheetRequest(CamelModel):
    """Re-import an edited CSV against the prototype it was exported from."""

    prototype: Prototype
    csv: str


class DiffRequest(CamelModel):
    """Diff an original prototype against an edited CSV or element list."""

    original: Prototype
    csv: str | None = None
    edited: list[TextElement] | None = None

    @model_validator(mode="after")
    def _require_edits(self) -> "DiffRequest":
        if self.csv is None and self.edited is None:
            raise ValueError("Provide either csv or edited elements")
        return self


class DiffResponse(CamelModel):
    items: list[DiffItem]
    summary: DiffSummary


class ApplyRequest(CamelModel):
    """Apply reviewer-approved diff items."""

    prototype: Prototype
    approved: list[DiffItem]


class ApplyResponse(CamelModel):
    prototype: Prototype
    changed_ids: list[str]


class ArtifactSchema(CamelModel):
    """A generated document. Markup views carry a string, structured views an object."""

    name: str
    media_type: str
    content: str | dict[str, Any]


class RegenerateRequest(CamelModel):
    prototype: Prototype
    previous: Prototype | None = None


class RegenerateResponse(CamelModel):
    document_view: ArtifactSchema
    structured_view: ArtifactSchema


class AcquireRequest(CamelModel):
    """Build a prototype from a JSON design export."""

    name: str
    source: PrototypeSource = PrototypeSource.FIGMA
    url: str | None = None
    payload: Any = None
    use_fallback: bool = False


class PublishRequest(CamelModel):
    prototype: Prototype
    previous: Prototype | None = None


class PublishResponse(CamelModel):
    status_code: int
    published_at: str
    changed_elements: int
