"""Tests for spreadsheet export and import of text elements."""

from datetime import UTC, datetime

from app.models.enums import (
    ComponentType,
    ExtractionSource,
    Priority,
    PrototypeSource,
    ScreenSection,
)
from app.schemas.prototype import ExtractionMetadata, Prototype, TextElement
from pipeline.roundtrip import tabular
from pipeline.roundtrip.sheet import (
    EXPORT_COLUMNS,
    element_to_row,
    export_csv,
    format_number,
    import_csv,
    rows_to_edits,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_element(element_id: str, text: str, **kwargs) -> TextElement:
    kwargs.setdefault("frame_name", "Home")
    kwargs.setdefault("component_path", f"Home/{element_id}")
    return TextElement(id=element_id, original_text=text, **kwargs)


def _make_prototype(*elements: TextElement) -> Prototype:
    return Prototype(
        id="proto_1",
        name="Checkout Flow",
        source=PrototypeSource.FIGMA,
        text_elements=elements,
    )


def _edit_csv(csv_text: str, proposals: dict[str, str]) -> str:
    """Fill edited_text cells the way a writer would in a spreadsheet."""
    rows = tabular.parse(csv_text)
    for row in rows:
        if row["id"] in proposals:
            row["edited_text"] = proposals[row["id"]]
    return tabular.stringify(rows)


# ---------------------------------------------------------------------------
# format_number
# ---------------------------------------------------------------------------


class TestFormatNumber:
    """Tests for format_number."""

    def test_none_is_empty(self) -> None:
        assert format_number(None) == ""

    def test_integral_float_drops_fraction(self) -> None:
        assert format_number(16.0) == "16"

    def test_fraction_kept(self) -> None:
        assert format_number(0.85) == "0.85"

    def test_zero(self) -> None:
        assert format_number(0) == "0"


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


class TestElementToRow:
    """Tests for element_to_row."""

    def test_columns_are_fixed(self) -> None:
        row = element_to_row(_make_element("a", "Pay now"))
        assert tuple(row.keys()) == EXPORT_COLUMNS

    def test_full_element(self) -> None:
        element = _make_element(
            "a",
            "Pay now",
            hierarchy="Home > Footer > Pay",
            component_type=ComponentType.BUTTON,
            screen_section=ScreenSection.FOOTER,
            priority=Priority.HIGH,
            is_interactive=True,
            font_size=14.0,
            font_weight="600",
            nearby_elements=("Total", "Back"),
            element_role="primary action",
            context_notes="Final step",
            image="https://example.com/a.png",
            extraction_metadata=ExtractionMetadata(
                source=ExtractionSource.JSON,
                confidence=0.9,
                extracted_at=datetime(2026, 1, 1, tzinfo=UTC),
                extraction_method="JSON document walk",
            ),
        )

        row = element_to_row(element)

        assert row["component_type"] == "button"
        assert row["screen_section"] == "footer"
        assert row["priority"] == "high"
        assert row["is_interactive"] == "Yes"
        assert row["font_size"] == "14"
        assert row["font_weight"] == "600"
        assert row["nearby_elements"] == "Total; Back"
        assert row["extraction_confidence"] == "0.9"
        assert row["extraction_source"] == "json"
        assert row["image"] == "https://example.com/a.png"

    def test_missing_optionals_are_empty(self) -> None:
        row = element_to_row(_make_element("a", "Pay now"))
        assert row["is_interactive"] == "No"
        assert row["font_size"] == ""
        assert row["font_weight"] == ""
        assert row["nearby_elements"] == ""
        assert row["extraction_confidence"] == ""
        assert row["extraction_source"] == ""
        assert row["image"] == ""

    def test_edited_text_blank_by_default(self) -> None:
        element = _make_element("a", "Pay now", edited_text="Pay today")
        assert element_to_row(element)["edited_text"] == ""

    def test_include_edits(self) -> None:
        element = _make_element("a", "Pay now", edited_text="Pay today")
        assert element_to_row(element, include_edits=True)["edited_text"] == "Pay today"


class TestExportCsv:
    """Tests for export_csv."""

    def test_header_line(self) -> None:
        content = export_csv(_make_prototype(_make_element("a", "Pay now")))
        assert content.split("\n")[0] == ",".join(EXPORT_COLUMNS)

    def test_one_row_per_element(self) -> None:
        prototype = _make_prototype(
            _make_element("a", "Pay now"), _make_element("b", "Cancel")
        )
        rows = tabular.parse(export_csv(prototype))
        assert [row["id"] for row in rows] == ["a", "b"]
        assert [row["original_text"] for row in rows] == ["Pay now", "Cancel"]

    def test_selection_keeps_document_order(self) -> None:
        prototype = _make_prototype(
            _make_element("a", "One"),
            _make_element("b", "Two"),
            _make_element("c", "Three"),
        )
        rows = tabular.parse(export_csv(prototype, selected_ids={"c", "a"}))
        assert [row["id"] for row in rows] == ["a", "c"]

    def test_empty_selection_returns_empty_string(self) -> None:
        prototype = _make_prototype(_make_element("a", "One"))
        assert export_csv(prototype, selected_ids=set()) == ""

    def test_empty_prototype_returns_empty_string(self) -> None:
        assert export_csv(_make_prototype()) == ""

    def test_awkward_text_survives_export(self) -> None:
        text = 'Total: "$5,000"\nincl. tax'
        rows = tabular.parse(export_csv(_make_prototype(_make_element("a", text))))
        assert rows[0]["original_text"] == text


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


class TestRowsToEdits:
    """Tests for rows_to_edits."""

    def test_proposal_is_attached(self) -> None:
        elements = [_make_element("a", "Pay now")]
        edited = rows_to_edits(elements, [{"id": "a", "edited_text": "Pay today"}])
        assert edited[0].edited_text == "Pay today"
        assert edited[0].original_text == "Pay now"

    def test_blank_proposal_leaves_element(self) -> None:
        elements = [_make_element("a", "Pay now")]
        edited = rows_to_edits(elements, [{"id": "a", "edited_text": ""}])
        assert edited[0] is elements[0]

    def test_unknown_ids_ignored(self) -> None:
        elements = [_make_element("a", "Pay now")]
        edited = rows_to_edits(elements, [{"id": "zzz", "edited_text": "Nope"}])
        assert edited == elements

    def test_first_matching_row_decides(self) -> None:
        elements = [_make_element("a", "Pay now")]
        rows = [
            {"id": "a", "edited_text": "First"},
            {"id": "a", "edited_text": "Second"},
        ]
        assert rows_to_edits(elements, rows)[0].edited_text == "First"

    def test_rows_without_edited_column(self) -> None:
        elements = [_make_element("a", "Pay now")]
        assert rows_to_edits(elements, [{"id": "a"}])[0] is elements[0]

    def test_input_not_mutated(self) -> None:
        elements = [_make_element("a", "Pay now")]
        rows_to_edits(elements, [{"id": "a", "edited_text": "Pay today"}])
        assert elements[0].edited_text is None


class TestImportCsv:
    """Tests for import_csv against an exported sheet."""

    def test_round_trip_with_edits(self) -> None:
        prototype = _make_prototype(
            _make_element("a", "Pay now"),
            _make_element("b", "Cancel"),
            _make_element("c", "Back"),
        )
        csv_text = _edit_csv(export_csv(prototype), {"a": "Pay today", "c": "Go back"})

        edited = import_csv(prototype, csv_text)

        assert [element.id for element in edited] == ["a", "b", "c"]
        assert [element.edited_text for element in edited] == [
            "Pay today",
            None,
            "Go back",
        ]

    def test_untouched_export_has_no_proposals(self) -> None:
        prototype = _make_prototype(_make_element("a", "Pay now"))
        edited = import_csv(prototype, export_csv(prototype))
        assert edited[0] is prototype.text_elements[0]

    def test_reordered_rows_still_match_by_id(self) -> None:
        prototype = _make_prototype(_make_element("a", "One"), _make_element("b", "Two"))
        rows = tabular.parse(export_csv(prototype))
        rows.reverse()
        rows[0]["edited_text"] = "Deux"
        edited = import_csv(prototype, tabular.stringify(rows))
        assert edited[1].edited_text == "Deux"
        assert edited[0].edited_text is None

    def test_multiline_proposal(self) -> None:
        prototype = _make_prototype(_make_element("a", "Terms"))
        csv_text = _edit_csv(export_csv(prototype), {"a": 'Line one,\n"line" two'})
        assert import_csv(prototype, csv_text)[0].edited_text == 'Line one,\n"line" two'

    def test_garbage_input(self) -> None:
        prototype = _make_prototype(_make_element("a", "Terms"))
        edited = import_csv(prototype, "not,a\nreal sheet")
        assert edited[0] is prototype.text_elements[0]
