"""Acquisition cache: in-memory map backed by an optional local directory.

Keys are source URLs (or prototype names for uploads without a URL). The
cache is an explicit object owned by the host application and handed to the
acquisition layer; there is no module-level instance. A lock guards the
in-memory map so one cache can serve concurrent requests.

On-disk layout (when ``local_root`` is set):
    <local_root>/<sha256(key)>.json   -- Prototype JSON (camelCase)
"""

from __future__ import annotations

import hashlib
import logging
import threading
from pathlib import Path

from pydantic import ValidationError

from app.schemas.prototype import Prototype

logger = logging.getLogger(__name__)


class AcquisitionCache:
    """Two-layer cache: memory -> local filesystem.

    When local_root is None, only the in-memory layer is used.
    """

    def __init__(self, local_root: Path | str | None = None) -> None:
        self.local_root = Path(local_root) if local_root is not None else None
        self._entries: dict[str, Prototype] = {}
        self._lock = threading.Lock()

    # =========================================================================
    # Public API
    # =========================================================================

    def get(self, key: str) -> Prototype | None:
        """Return the cached prototype for key.

        Checks memory first, then the local directory. A disk hit is promoted
        into memory. Unreadable files are treated as misses.
        """
        with self._lock:
            cached = self._entries.get(key)
        if cached is not None:
            return cached

        path = self._local_path(key)
        if path is None or not path.exists():
            return None

        try:
            prototype = Prototype.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable cache entry for {key}: {e}")
            return None

        with self._lock:
            self._entries[key] = prototype
        logger.debug(f"Cache hit from disk: {key}")
        return prototype

    def put(self, key: str, prototype: Prototype) -> None:
        """Store a prototype in memory and, when configured, on disk."""
        with self._lock:
            self._entries[key] = prototype

        path = self._local_path(key)
        if path is None:
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(prototype.model_dump_json(by_alias=True), encoding="utf-8")
        logger.debug(f"Cache written: {key} -> {path.name}")

    def invalidate(self, key: str) -> None:
        """Drop a key from both layers."""
        with self._lock:
            self._entries.pop(key, None)
        path = self._local_path(key)
        if path is not None and path.exists():
            path.unlink()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            if key in self._entries:
                return True
        path = self._local_path(key)
        return path is not None and path.exists()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # =========================================================================
    # Internal
    # =========================================================================

    def _local_path(self, key: str) -> Path | None:
        if self.local_root is None:
            return None
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.local_root / f"{digest}.json"


def get_acquisition_cache() -> AcquisitionCache:
    """Factory that reads settings and returns a configured cache."""
    from app.config import settings

    return AcquisitionCache(local_root=settings.acquisition_cache_dir)
