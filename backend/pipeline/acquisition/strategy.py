"""Acquisition strategies that turn a source into a Prototype.

The round-trip pipeline only depends on the Prototype shape, never on which
strategy produced it. Three variants exist:

- JsonDocumentExtraction: real extraction from a JSON design/content export.
- CannedFallbackAcquisition: a fixed pair of sample elements for demos.
- EmptyAcquisition: a prototype with no elements.

URL-only requests are never filled with placeholder text. A host that wants
sample content on failure must ask for it through ``acquire_with_fallback``.
"""

from __future__ import annotations

import hashlib
import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePosixPath
from typing import Any, Protocol

from app.models.enums import (
    ComponentType,
    ExtractionSource,
    Priority,
    PrototypeSource,
    ScreenSection,
)
from app.schemas.prototype import (
    BoundingBox,
    ExtractionMetadata,
    Prototype,
    TextElement,
    utc_now,
)
from pipeline.acquisition.classifier import (
    classify_component_type,
    classify_priority,
    classify_screen_section,
    is_interactive_name,
    is_user_facing_text,
)
from pipeline.cache import AcquisitionCache
from pipeline.errors import AcquisitionError

logger = logging.getLogger(__name__)

FRAME_HINTS = ("page", "screen", "frame", "view", "component")
JSON_ROW_HEIGHT = 35
JSON_CONFIDENCE = 0.9


@dataclass(frozen=True)
class AcquisitionRequest:
    """What to acquire.

    Attributes:
        name: Display name, usually the uploaded file name.
        source: Design tool the content came from.
        url: Source URL, when the content was fetched rather than uploaded.
        payload: Parsed JSON (dict/list) or JSON text (str/bytes).
    """

    name: str
    source: PrototypeSource = PrototypeSource.FIGMA
    url: str | None = None
    payload: Any = None

    @property
    def cache_key(self) -> str:
        """Source URL, or the name plus a digest of the uploaded payload."""
        if self.url:
            return self.url
        return f"{self.name}:{_payload_digest(self.payload)}"


def _payload_digest(payload: Any) -> str:
    if payload is None:
        data = b""
    elif isinstance(payload, str):
        data = payload.encode("utf-8")
    elif isinstance(payload, (bytes, bytearray)):
        data = bytes(payload)
    else:
        data = json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
    return hashlib.sha256(data).hexdigest()[:16]


class AcquisitionStrategy(Protocol):
    """Produces a Prototype for a request."""

    def acquire(self, request: AcquisitionRequest) -> Prototype: ...


def _build_prototype(
    request: AcquisitionRequest, elements: list[TextElement]
) -> Prototype:
    now = utc_now()
    return Prototype(
        id=f"proto_{uuid.uuid4().hex[:12]}",
        name=request.name,
        source=request.source,
        url=request.url,
        text_elements=tuple(elements),
        created_at=now,
        last_updated=now,
    )


class EmptyAcquisition:
    """Returns a prototype with no text elements."""

    def acquire(self, request: AcquisitionRequest) -> Prototype:
        return _build_prototype(request, [])


class CannedFallbackAcquisition:
    """Returns two fixed sample elements, flagged with zero confidence."""

    def acquire(self, request: AcquisitionRequest) -> Prototype:
        metadata = ExtractionMetadata(
            source=ExtractionSource.CODE,
            confidence=0.0,
            extracted_at=utc_now(),
            extraction_method="canned fallback",
        )
        elements = [
            TextElement(
                id="fallback_1",
                original_text=(
                    "Users will gain the selected roles in apps they already have "
                    "access to. This won't affect apps they don't currently have. "
                    "4 users don't currently have access"
                ),
                frame_name="Role Management",
                component_path="Dialog/Content/Description",
                hierarchy="Role Management > Dialog > Content > Description",
                bounding_box=BoundingBox(x=0, y=0, width=400, height=60),
                component_type=ComponentType.CONTENT,
                screen_section=ScreenSection.MODAL,
                priority=Priority.MEDIUM,
                context_notes="Fallback text element - role assignment description",
                extraction_metadata=metadata,
            ),
            TextElement(
                id="fallback_2",
                original_text="Sample Text Element",
                frame_name="Unknown Frame",
                component_path="Unknown/Component",
                hierarchy="Unknown Frame > Unknown > Component",
                bounding_box=BoundingBox(x=0, y=70, width=150, height=24),
                component_type=ComponentType.TEXT,
                screen_section=ScreenSection.UNKNOWN,
                priority=Priority.LOW,
                context_notes="Fallback text element",
                extraction_metadata=metadata,
            ),
        ]
        logger.warning(f"Using canned fallback content for {request.name!r}")
        return _build_prototype(request, elements)


class JsonDocumentExtraction:
    """Extracts every user-facing string from a JSON document.

    Each string becomes one element whose component path is its JSON path
    (``pages[0].hero.title``). The frame is the first path segment that names
    a page, screen, frame, view or component; otherwise the document name.
    """

    def acquire(self, request: AcquisitionRequest) -> Prototype:
        data = self._load(request)
        found: list[tuple[str, str, str]] = []
        self._walk(data, "", "", found)

        fallback_frame = PurePosixPath(request.name).stem or request.name
        extracted_at = utc_now()
        elements = [
            self._to_element(index, text, path, key, fallback_frame, extracted_at)
            for index, (text, path, key) in enumerate(found)
        ]
        logger.info(f"Extracted {len(elements)} text elements from {request.name!r}")
        return _build_prototype(request, elements)

    @staticmethod
    def _load(request: AcquisitionRequest) -> Any:
        payload = request.payload
        if payload is None:
            raise AcquisitionError(f"No JSON payload supplied for {request.name!r}")
        if isinstance(payload, (str, bytes, bytearray)):
            try:
                return json.loads(payload)
            except json.JSONDecodeError as e:
                raise AcquisitionError(f"{request.name!r} is not valid JSON: {e}") from e
        if isinstance(payload, (dict, list)):
            return payload
        raise AcquisitionError(
            f"Unsupported payload type for {request.name!r}: {type(payload).__name__}"
        )

    def _walk(
        self, node: Any, path: str, key: str, found: list[tuple[str, str, str]]
    ) -> None:
        if isinstance(node, str):
            text = node.strip()
            if len(text) > 1 and is_user_facing_text(text):
                found.append((text, path, key))
        elif isinstance(node, list):
            for index, item in enumerate(node):
                child_path = f"{path}[{index}]" if path else f"[{index}]"
                self._walk(item, child_path, f"{key}[{index}]", found)
        elif isinstance(node, dict):
            for child_key, value in node.items():
                child_path = f"{path}.{child_key}" if path else str(child_key)
                self._walk(value, child_path, str(child_key), found)

    @staticmethod
    def _infer_frame(path: str, fallback: str) -> str:
        for part in path.split("."):
            lowered = part.lower()
            if any(hint in lowered for hint in FRAME_HINTS):
                return part
        return fallback

    def _to_element(
        self,
        index: int,
        text: str,
        path: str,
        key: str,
        fallback_frame: str,
        extracted_at: datetime,
    ) -> TextElement:
        y = float((index + 1) * JSON_ROW_HEIGHT)
        interactive = is_interactive_name(key)
        return TextElement(
            id=f"json_{index}",
            original_text=text,
            frame_name=self._infer_frame(path, fallback_frame),
            component_path=path or "root",
            hierarchy=" > ".join(path.split(".")) if path else "root",
            bounding_box=BoundingBox(
                x=0,
                y=y,
                width=min(500, len(text) * 8 + 40),
                height=60 if len(text) > 50 else 30,
            ),
            component_type=classify_component_type(key, text),
            screen_section=classify_screen_section(path, text, y),
            priority=classify_priority(key, text, is_interactive=interactive),
            is_interactive=interactive,
            context_notes=f"JSON property: {key or 'root'}",
            extraction_metadata=ExtractionMetadata(
                source=ExtractionSource.JSON,
                confidence=JSON_CONFIDENCE,
                extracted_at=extracted_at,
                extraction_method="JSON document walk",
            ),
        )


class CachedAcquisition:
    """Memoizes another strategy by request URL (or name and payload digest)."""

    def __init__(self, strategy: AcquisitionStrategy, cache: AcquisitionCache) -> None:
        self.strategy = strategy
        self.cache = cache

    def acquire(self, request: AcquisitionRequest) -> Prototype:
        cached = self.cache.get(request.cache_key)
        if cached is not None:
            logger.debug(f"Acquisition cache hit: {request.cache_key}")
            return cached
        prototype = self.strategy.acquire(request)
        self.cache.put(request.cache_key, prototype)
        return prototype


def acquire_with_fallback(
    primary: AcquisitionStrategy,
    fallback: AcquisitionStrategy,
    request: AcquisitionRequest,
) -> Prototype:
    """Acquire with ``primary``; on AcquisitionError use ``fallback``."""
    try:
        return primary.acquire(request)
    except AcquisitionError as e:
        logger.warning(f"Acquisition failed ({e}), using fallback")
        return fallback.acquire(request)
