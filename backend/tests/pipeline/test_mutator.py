"""Tests for applying approved diff items to a prototype."""

from datetime import UTC, datetime

from app.models.enums import ChangeType, PrototypeSource
from app.schemas.diff import DiffItem
from app.schemas.prototype import BoundingBox, Prototype, TextElement
from pipeline.roundtrip.diff_engine import diff, select_changes
from pipeline.roundtrip.mutator import apply, apply_with_report

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
CREATED = datetime(2026, 1, 1, tzinfo=UTC)


def _make_prototype() -> Prototype:
    return Prototype(
        id="proto_1",
        name="Onboarding",
        source=PrototypeSource.BOLT,
        text_elements=(
            TextElement(
                id="title",
                original_text="Welcome",
                frame_name="Intro",
                bounding_box=BoundingBox(x=10, y=20, width=200, height=40),
                font_size=32,
            ),
            TextElement(id="body", original_text="Let's get started", frame_name="Intro"),
            TextElement(id="cta", original_text="Next", frame_name="Intro"),
        ),
        created_at=CREATED,
        last_updated=CREATED,
    )


def _modified(element_id: str, original: str, edited: str) -> DiffItem:
    return DiffItem(
        id=element_id,
        original_text=original,
        edited_text=edited,
        change_type=ChangeType.MODIFIED,
    )


class TestApply:
    """Tests for apply."""

    def test_replaces_text_of_approved_elements(self) -> None:
        prototype = _make_prototype()
        updated = apply(prototype, [_modified("title", "Welcome", "Hello")], now=NOW)

        title = updated.text_elements[0]
        assert title.original_text == "Hello"
        assert title.edited_text == "Hello"
        assert title.last_modified == NOW

    def test_other_fields_preserved(self) -> None:
        prototype = _make_prototype()
        updated = apply(prototype, [_modified("title", "Welcome", "Hello")], now=NOW)

        before, after = prototype.text_elements[0], updated.text_elements[0]
        assert after.bounding_box == before.bounding_box
        assert after.font_size == before.font_size
        assert after.frame_name == before.frame_name

    def test_unapproved_elements_reused(self) -> None:
        prototype = _make_prototype()
        updated = apply(prototype, [_modified("title", "Welcome", "Hello")], now=NOW)
        assert updated.text_elements[1] is prototype.text_elements[1]
        assert updated.text_elements[2] is prototype.text_elements[2]

    def test_input_not_mutated(self) -> None:
        prototype = _make_prototype()
        apply(prototype, [_modified("title", "Welcome", "Hello")], now=NOW)
        assert prototype.text_elements[0].original_text == "Welcome"
        assert prototype.last_updated == CREATED

    def test_identity_and_order_preserved(self) -> None:
        prototype = _make_prototype()
        updated = apply(prototype, [_modified("cta", "Next", "Continue")], now=NOW)
        assert updated.id == prototype.id
        assert updated.name == prototype.name
        assert updated.created_at == CREATED
        assert updated.element_ids() == prototype.element_ids()

    def test_last_updated_set(self) -> None:
        updated = apply(_make_prototype(), [], now=NOW)
        assert updated.last_updated == NOW

    def test_empty_approval_changes_no_text(self) -> None:
        prototype = _make_prototype()
        updated = apply(prototype, [], now=NOW)
        assert updated.text_elements == prototype.text_elements

    def test_unchanged_items_ignored(self) -> None:
        item = DiffItem(id="title", original_text="Welcome", edited_text="Welcome")
        updated = apply(_make_prototype(), [item], now=NOW)
        assert updated.text_elements[0].original_text == "Welcome"
        assert updated.text_elements[0].last_modified is None

    def test_claimed_modified_with_identical_text_is_not_applied(self) -> None:
        item = DiffItem(
            id="title",
            original_text="Welcome",
            edited_text="Welcome",
            change_type=ChangeType.MODIFIED,
        )
        updated, changed = apply_with_report(_make_prototype(), [item], now=NOW)
        assert changed == []
        assert updated.text_elements[0].last_modified is None

    def test_proposal_equal_to_current_text_is_not_applied(self) -> None:
        # Stale original_text on the item; proposal matches the element already
        item = _modified("title", "Old welcome", "Welcome")
        _, changed = apply_with_report(_make_prototype(), [item], now=NOW)
        assert changed == []

    def test_empty_proposal_ignored(self) -> None:
        updated = apply(_make_prototype(), [_modified("title", "Welcome", "")], now=NOW)
        assert updated.text_elements[0].original_text == "Welcome"

    def test_unknown_ids_ignored(self) -> None:
        prototype = _make_prototype()
        updated = apply(prototype, [_modified("ghost", "Boo", "Hi")], now=NOW)
        assert updated.text_elements == prototype.text_elements


class TestApplyWithReport:
    """Tests for apply_with_report."""

    def test_reports_changed_ids_in_document_order(self) -> None:
        approved = [_modified("cta", "Next", "Continue"), _modified("title", "Welcome", "Hi")]
        _, changed = apply_with_report(_make_prototype(), approved, now=NOW)
        assert changed == ["title", "cta"]

    def test_full_pipeline(self) -> None:
        """Diff, select and apply leave exactly the selected elements changed."""
        prototype = _make_prototype()
        edited = [
            prototype.text_elements[0].model_copy(update={"edited_text": "Hi there"}),
            prototype.text_elements[1].model_copy(update={"edited_text": "Let's go"}),
            prototype.text_elements[2],
        ]
        approved = select_changes(diff(prototype.text_elements, edited), {"body"})

        updated, changed = apply_with_report(prototype, approved, now=NOW)

        assert changed == ["body"]
        assert [e.original_text for e in updated.text_elements] == [
            "Welcome",
            "Let's go",
            "Next",
        ]
