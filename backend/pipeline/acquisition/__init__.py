"""Acquisition: producing prototypes from design exports."""

from pipeline.acquisition.strategy import (
    AcquisitionRequest,
    AcquisitionStrategy,
    CachedAcquisition,
    CannedFallbackAcquisition,
    EmptyAcquisition,
    JsonDocumentExtraction,
    acquire_with_fallback,
)

__all__ = [
    "AcquisitionRequest",
    "AcquisitionStrategy",
    "CachedAcquisition",
    "CannedFallbackAcquisition",
    "EmptyAcquisition",
    "JsonDocumentExtraction",
    "acquire_with_fallback",
]
