"""Tests for the diff API endpoint."""

from typing import Any

from fastapi.testclient import TestClient

from app.models.enums import PrototypeSource
from app.schemas.prototype import Prototype, TextElement

CSV_HEADER = "id,original_text,edited_text"


def _prototype_json() -> dict[str, Any]:
    prototype = Prototype(
        id="proto_1",
        name="Settings",
        source=PrototypeSource.CURSOR,
        text_elements=(
            TextElement(id="a", original_text="Save", frame_name="Profile"),
            TextElement(id="b", original_text="Cancel", frame_name="Profile"),
        ),
    )
    return prototype.model_dump(mode="json", by_alias=True)


def test_diff_from_csv(client: TestClient) -> None:
    """Diffing against a CSV reports one item per original element."""
    csv = f"{CSV_HEADER}\na,Save,Save changes\nb,Cancel,"

    response = client.post(
        "/api/v1/diffs", json={"original": _prototype_json(), "csv": csv}
    )

    assert response.status_code == 200
    data = response.json()
    assert [item["id"] for item in data["items"]] == ["a", "b"]
    assert data["items"][0]["changeType"] == "modified"
    assert data["items"][0]["editedText"] == "Save changes"
    assert data["items"][1]["changeType"] == "unchanged"
    assert data["summary"] == {"total": 2, "modified": 1, "unchanged": 1}


def test_diff_from_edited_elements(client: TestClient) -> None:
    original = _prototype_json()
    edited = [dict(element) for element in original["textElements"]]
    edited[1]["editedText"] = "Discard"

    response = client.post("/api/v1/diffs", json={"original": original, "edited": edited})

    assert response.status_code == 200
    summary = response.json()["summary"]
    assert summary["modified"] == 1


def test_diff_requires_edits(client: TestClient) -> None:
    response = client.post("/api/v1/diffs", json={"original": _prototype_json()})
    assert response.status_code == 422


def test_diff_ignores_unknown_rows(client: TestClient) -> None:
    csv = f"{CSV_HEADER}\nzzz,Ghost,Boo"
    response = client.post(
        "/api/v1/diffs", json={"original": _prototype_json(), "csv": csv}
    )
    assert response.json()["summary"] == {"total": 2, "modified": 0, "unchanged": 2}
