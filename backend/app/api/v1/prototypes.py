"""Prototype endpoints: acquire, apply, regenerate and publish."""

from fastapi import APIRouter, Depends, HTTPException, Request

from app.schemas.prototype import Prototype, utc_now
from app.schemas.roundtrip import (
    AcquireRequest,
    ApplyRequest,
    ApplyResponse,
    ArtifactSchema,
    PublishRequest,
    PublishResponse,
    RegenerateRequest,
    RegenerateResponse,
)
from pipeline.acquisition import (
    AcquisitionRequest,
    CachedAcquisition,
    CannedFallbackAcquisition,
    JsonDocumentExtraction,
    acquire_with_fallback,
)
from pipeline.cache import AcquisitionCache
from pipeline.errors import AcquisitionError, PublishError
from pipeline.publish import PublishClient
from pipeline.roundtrip.mutator import apply_with_report
from pipeline.roundtrip.regenerator import count_changed, regenerate, render_structured_view

router = APIRouter()


def get_acquisition_cache(request: Request) -> AcquisitionCache:
    """The application-lifetime cache created in app.main."""
    return request.app.state.acquisition_cache


def get_publish_client() -> PublishClient:
    try:
        return PublishClient()
    except ValueError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e


@router.post("/acquire")
async def acquire_prototype(
    body: AcquireRequest,
    cache: AcquisitionCache = Depends(get_acquisition_cache),
) -> Prototype:
    """Extract a prototype from a JSON design export."""
    request = AcquisitionRequest(
        name=body.name, source=body.source, url=body.url, payload=body.payload
    )
    strategy = CachedAcquisition(JsonDocumentExtraction(), cache)
    if body.use_fallback:
        return acquire_with_fallback(strategy, CannedFallbackAcquisition(), request)
    try:
        return strategy.acquire(request)
    except AcquisitionError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.post("/apply")
async def apply_changes(body: ApplyRequest) -> ApplyResponse:
    """Apply approved diff items and return the new prototype."""
    updated, changed_ids = apply_with_report(body.prototype, body.approved)
    return ApplyResponse(prototype=updated, changed_ids=changed_ids)


@router.post("/regenerate")
async def regenerate_artifacts(body: RegenerateRequest) -> RegenerateResponse:
    """Generate the document view and structured view."""
    artifacts = regenerate(body.prototype, previous=body.previous)
    return RegenerateResponse(
        document_view=ArtifactSchema(
            name=artifacts.document_view.name,
            media_type=artifacts.document_view.media_type,
            content=artifacts.document_view.content,
        ),
        structured_view=ArtifactSchema(
            name=artifacts.structured_view.name,
            media_type=artifacts.structured_view.media_type,
            content=artifacts.structured_view.content,
        ),
    )


@router.post("/publish")
async def publish_prototype(
    body: PublishRequest,
    client: PublishClient = Depends(get_publish_client),
) -> PublishResponse:
    """Regenerate the structured view and POST it to the publish endpoint."""
    structured = render_structured_view(body.prototype, utc_now(), body.previous)
    try:
        receipt = await client.publish(structured)
    except PublishError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return PublishResponse(
        status_code=receipt.status_code,
        published_at=receipt.published_at.isoformat(),
        changed_elements=count_changed(body.prototype, body.previous),
    )
