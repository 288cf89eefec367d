"""API v1 router combining all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import diffs, prototypes, sheets

api_router = APIRouter()

api_router.include_router(sheets.router, prefix="/sheets", tags=["sheets"])
api_router.include_router(diffs.router, prefix="/diffs", tags=["diffs"])
api_router.include_router(prototypes.router, prefix="/prototypes", tags=["prototypes"])
