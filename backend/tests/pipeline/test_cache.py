"""Tests for AcquisitionCache (memory + optional local directory)."""

from pathlib import Path

import pytest

from app.models.enums import PrototypeSource
from app.schemas.prototype import Prototype, TextElement
from pipeline.cache import AcquisitionCache, get_acquisition_cache


def _make_prototype(name: str = "Landing") -> Prototype:
    return Prototype(
        id="proto_abc",
        name=name,
        source=PrototypeSource.CURSOR,
        text_elements=(TextElement(id="a", original_text="Hello", frame_name="Home"),),
    )


@pytest.fixture
def disk_cache(tmp_path: Path) -> AcquisitionCache:
    """Create a cache backed by a temp dir."""
    return AcquisitionCache(local_root=tmp_path)


class TestMemoryOnly:
    """Tests for the in-memory layer."""

    def test_put_and_get(self) -> None:
        cache = AcquisitionCache()
        prototype = _make_prototype()
        cache.put("https://example.com/a", prototype)
        assert cache.get("https://example.com/a") is prototype

    def test_miss(self) -> None:
        assert AcquisitionCache().get("missing") is None

    def test_contains_and_len(self) -> None:
        cache = AcquisitionCache()
        assert "a" not in cache
        cache.put("a", _make_prototype())
        assert "a" in cache
        assert len(cache) == 1

    def test_invalidate(self) -> None:
        cache = AcquisitionCache()
        cache.put("a", _make_prototype())
        cache.invalidate("a")
        assert cache.get("a") is None

    def test_invalidate_missing_key(self) -> None:
        AcquisitionCache().invalidate("never-stored")


class TestLocalDirectory:
    """Tests for the on-disk layer."""

    def test_put_writes_file(self, disk_cache: AcquisitionCache, tmp_path: Path) -> None:
        disk_cache.put("a", _make_prototype())
        files = list(tmp_path.glob("*.json"))
        assert len(files) == 1
        assert '"textElements"' in files[0].read_text(encoding="utf-8")

    def test_survives_new_instance(self, tmp_path: Path) -> None:
        AcquisitionCache(local_root=tmp_path).put("a", _make_prototype())

        reloaded = AcquisitionCache(local_root=tmp_path)
        assert "a" in reloaded
        loaded = reloaded.get("a")
        assert loaded is not None
        assert loaded.name == "Landing"
        assert loaded.source == PrototypeSource.CURSOR
        assert loaded.text_elements[0].original_text == "Hello"
        assert len(reloaded) == 1  # promoted into memory

    def test_unreadable_file_is_a_miss(
        self, disk_cache: AcquisitionCache, tmp_path: Path
    ) -> None:
        disk_cache.put("a", _make_prototype())
        for path in tmp_path.glob("*.json"):
            path.write_text("{broken", encoding="utf-8")

        assert AcquisitionCache(local_root=tmp_path).get("a") is None

    def test_invalidate_removes_file(
        self, disk_cache: AcquisitionCache, tmp_path: Path
    ) -> None:
        disk_cache.put("a", _make_prototype())
        disk_cache.invalidate("a")
        assert list(tmp_path.glob("*.json")) == []

    def test_keys_map_to_distinct_files(
        self, disk_cache: AcquisitionCache, tmp_path: Path
    ) -> None:
        disk_cache.put("https://example.com/a", _make_prototype("A"))
        disk_cache.put("https://example.com/b", _make_prototype("B"))
        assert len(list(tmp_path.glob("*.json"))) == 2


class TestFactory:
    """Tests for get_acquisition_cache."""

    def test_reads_settings(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        from app.config import settings

        monkeypatch.setattr(settings, "acquisition_cache_dir", str(tmp_path))
        cache = get_acquisition_cache()
        assert cache.local_root == tmp_path

    def test_memory_only_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from app.config import settings

        monkeypatch.setattr(settings, "acquisition_cache_dir", None)
        assert get_acquisition_cache().local_root is None
