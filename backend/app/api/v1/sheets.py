"""Spreadsheet export and re-import endpoints."""

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from app.schemas.prototype import TextElement
from app.schemas.roundtrip import ExportSheetRequest, ImportSheetRequest
from pipeline.roundtrip.regenerator import safe_file_stem
from pipeline.roundtrip.sheet import export_csv, import_csv

router = APIRouter()


@router.post("/export")
async def export_sheet(body: ExportSheetRequest) -> Response:
    """Return the prototype's text elements as a CSV attachment."""
    content = export_csv(
        body.prototype,
        selected_ids=set(body.selected_ids) if body.selected_ids is not None else None,
        include_edits=body.include_edits,
    )
    if not content:
        raise HTTPException(status_code=422, detail="No elements selected for export")

    filename = f"{safe_file_stem(body.prototype.name)}_text_elements.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import")
async def import_sheet(body: ImportSheetRequest) -> list[TextElement]:
    """Carry edited_text proposals from a CSV onto the prototype's elements."""
    return import_csv(body.prototype, body.csv)
