"""Diff endpoint comparing an original prototype to its edited counterpart."""

from fastapi import APIRouter

from app.schemas.roundtrip import DiffRequest, DiffResponse
from pipeline.roundtrip.diff_engine import diff, summarize
from pipeline.roundtrip.sheet import import_csv

router = APIRouter()


@router.post("")
async def diff_prototype(body: DiffRequest) -> DiffResponse:
    """Diff the original elements against a CSV or an edited element list.

    When both are given, the CSV wins.
    """
    if body.csv is not None:
        edited = import_csv(body.original, body.csv)
    else:
        edited = body.edited or []

    items = diff(body.original.text_elements, edited)
    return DiffResponse(items=items, summary=summarize(items))
