"""CLI for running the round-trip editing pipeline on local files."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from app.config import settings
from app.models.enums import PrototypeSource
from app.schemas.prototype import Prototype, utc_now
from pipeline.acquisition import (
    AcquisitionRequest,
    CachedAcquisition,
    CannedFallbackAcquisition,
    JsonDocumentExtraction,
    acquire_with_fallback,
)
from pipeline.cache import get_acquisition_cache
from pipeline.errors import AcquisitionError, PublishError
from pipeline.roundtrip.diff_engine import diff, select_changes, summarize
from pipeline.roundtrip.mutator import apply_with_report
from pipeline.roundtrip.regenerator import (
    regenerate,
    render_layout_svg,
    render_structured_view,
    render_text_brief,
    safe_file_stem,
)
from pipeline.roundtrip.sheet import export_csv, import_csv

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)-5.5s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# File helpers
# =============================================================================


def load_prototype(path: Path) -> Prototype:
    """Read a prototype from a camelCase JSON file."""
    return Prototype.model_validate_json(path.read_text(encoding="utf-8"))


def write_prototype(prototype: Prototype, path: Path | None) -> None:
    """Write a prototype as JSON to path, or stdout when path is None."""
    content = prototype.model_dump_json(by_alias=True, indent=2)
    if path is None:
        print(content)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info(f"Wrote {path}")


def write_text(content: str, path: Path | None) -> None:
    if path is None:
        print(content)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info(f"Wrote {path}")


# =============================================================================
# Commands
# =============================================================================


def export_command(
    prototype_path: Path,
    output: Path | None = None,
    ids: list[str] | None = None,
    include_edits: bool = False,
) -> int:
    """Export a prototype's text elements to CSV.

    Returns:
        0 on success, 1 when nothing was selected.
    """
    prototype = load_prototype(prototype_path)
    content = export_csv(
        prototype,
        selected_ids=set(ids) if ids else None,
        include_edits=include_edits,
    )
    if not content:
        logger.error("No elements selected for export")
        return 1
    write_text(content, output)
    return 0


def diff_command(prototype_path: Path, csv_path: Path, modified_only: bool = False) -> int:
    """Print the diff between a prototype and an edited CSV."""
    prototype = load_prototype(prototype_path)
    edited = import_csv(prototype, csv_path.read_text(encoding="utf-8"))
    items = diff(prototype.text_elements, edited)
    summary = summarize(items)

    print(f"\n{prototype.name}")
    print(
        f"  Elements: {summary.total}  Modified: {summary.modified}  "
        f"Unchanged: {summary.unchanged}"
    )
    for item in items:
        if modified_only and not item.is_modified:
            continue
        marker = "~" if item.is_modified else "="
        print(f"\n  {marker} {item.id} [{item.frame_name}]")
        print(f"    - {item.original_text}")
        if item.is_modified:
            print(f"    + {item.edited_text}")
    return 0


def apply_command(
    prototype_path: Path,
    csv_path: Path,
    ids: list[str] | None = None,
    output: Path | None = None,
) -> int:
    """Apply the edits in a CSV to a prototype.

    Args:
        prototype_path: Prototype the CSV was exported from.
        csv_path: Edited spreadsheet.
        ids: Approve only these element ids. None approves every change.
        output: Where to write the updated prototype (stdout when None).
    """
    prototype = load_prototype(prototype_path)
    edited = import_csv(prototype, csv_path.read_text(encoding="utf-8"))
    approved = select_changes(diff(prototype.text_elements, edited), ids)

    if not approved:
        logger.info("No approved changes to apply")

    updated, changed = apply_with_report(prototype, approved)
    for element_id in changed:
        logger.info(f"  Updated {element_id}")
    write_prototype(updated, output)
    return 0


def regenerate_command(
    prototype_path: Path,
    out_dir: Path,
    previous_path: Path | None = None,
) -> int:
    """Write the document view, structured view, layout SVG and text brief."""
    prototype = load_prototype(prototype_path)
    previous = load_prototype(previous_path) if previous_path else None

    artifacts = regenerate(prototype, previous=previous)
    stem = safe_file_stem(prototype.name)
    out_dir.mkdir(parents=True, exist_ok=True)

    outputs = {
        artifacts.document_view.name: artifacts.document_view.content,
        artifacts.structured_view.name: json.dumps(
            artifacts.structured_view.content, indent=2, ensure_ascii=False
        ),
        f"{stem}_layout.svg": render_layout_svg(prototype),
        f"{stem}_brief.txt": render_text_brief(prototype),
    }
    for name, content in outputs.items():
        path = out_dir / name
        path.write_text(content, encoding="utf-8")
        logger.info(f"Wrote {path}")
    return 0


def acquire_command(
    json_path: Path,
    name: str | None = None,
    source: PrototypeSource = PrototypeSource.FIGMA,
    use_fallback: bool = False,
    output: Path | None = None,
) -> int:
    """Extract a prototype from a JSON export on disk."""
    request = AcquisitionRequest(
        name=name or json_path.name,
        source=source,
        payload=json_path.read_text(encoding="utf-8"),
    )
    strategy = CachedAcquisition(JsonDocumentExtraction(), get_acquisition_cache())
    try:
        if use_fallback:
            prototype = acquire_with_fallback(
                strategy, CannedFallbackAcquisition(), request
            )
        else:
            prototype = strategy.acquire(request)
    except AcquisitionError as e:
        logger.error(f"Acquisition failed: {e}")
        return 1

    write_prototype(prototype, output)
    return 0


async def publish_command(
    prototype_path: Path,
    previous_path: Path | None = None,
    endpoint: str | None = None,
    token: str | None = None,
) -> int:
    """Regenerate the structured view and POST it to the publish endpoint.

    Args:
        prototype_path: Prototype to publish.
        previous_path: Prototype before apply, for the changed-element count.
        endpoint: Overrides PUBLISH_ENDPOINT.
        token: Overrides PUBLISH_TOKEN.
    """
    from pipeline.publish import PublishClient

    prototype = load_prototype(prototype_path)
    previous = load_prototype(previous_path) if previous_path else None

    try:
        client = PublishClient(endpoint=endpoint, token=token)
    except ValueError as e:
        logger.error(str(e))
        return 1

    structured = render_structured_view(prototype, utc_now(), previous)
    try:
        receipt = await client.publish(structured)
    except PublishError as e:
        logger.error(f"Publish failed: {e}")
        return 1

    print(f"Published {prototype.name!r}: HTTP {receipt.status_code}")
    return 0


# =============================================================================
# Entry point
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Round-trip text editing pipeline CLI"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Export command
    export_parser = subparsers.add_parser(
        "export", help="Export a prototype's text elements to CSV"
    )
    export_parser.add_argument("prototype", type=Path, help="Prototype JSON file")
    export_parser.add_argument(
        "-o", "--output", type=Path, help="CSV file to write (default: stdout)"
    )
    export_parser.add_argument(
        "--ids", nargs="+", help="Export only these element ids"
    )
    export_parser.add_argument(
        "--include-edits",
        action="store_true",
        help="Fill edited_text with existing proposals",
    )

    # Diff command
    diff_parser = subparsers.add_parser(
        "diff", help="Show changes between a prototype and an edited CSV"
    )
    diff_parser.add_argument("prototype", type=Path, help="Prototype JSON file")
    diff_parser.add_argument("csv", type=Path, help="Edited CSV file")
    diff_parser.add_argument(
        "--modified-only", action="store_true", help="Only list modified elements"
    )

    # Apply command
    apply_parser = subparsers.add_parser(
        "apply", help="Apply approved CSV edits to a prototype"
    )
    apply_parser.add_argument("prototype", type=Path, help="Prototype JSON file")
    apply_parser.add_argument("csv", type=Path, help="Edited CSV file")
    apply_parser.add_argument(
        "--ids",
        nargs="+",
        help="Approve only these element ids (default: every modified element)",
    )
    apply_parser.add_argument(
        "-o", "--output", type=Path, help="Updated prototype JSON (default: stdout)"
    )

    # Regenerate command
    regenerate_parser = subparsers.add_parser(
        "regenerate", help="Write document, structure, SVG and text artifacts"
    )
    regenerate_parser.add_argument("prototype", type=Path, help="Prototype JSON file")
    regenerate_parser.add_argument(
        "--out-dir",
        type=Path,
        default=Path(settings.artifact_dir),
        help=f"Output directory (default: {settings.artifact_dir}, ARTIFACT_DIR)",
    )
    regenerate_parser.add_argument(
        "--previous",
        type=Path,
        help="Prototype before apply, for an exact changed-element count",
    )

    # Acquire command
    acquire_parser = subparsers.add_parser(
        "acquire", help="Extract a prototype from a JSON export"
    )
    acquire_parser.add_argument("json_file", type=Path, help="JSON document")
    acquire_parser.add_argument("--name", help="Prototype name (default: file name)")
    acquire_parser.add_argument(
        "--source",
        choices=[source.value for source in PrototypeSource],
        default=PrototypeSource.FIGMA.value,
        help="Design tool the export came from (default: figma)",
    )
    acquire_parser.add_argument(
        "--fallback",
        action="store_true",
        help="Use canned sample content if extraction fails",
    )
    acquire_parser.add_argument(
        "-o", "--output", type=Path, help="Prototype JSON to write (default: stdout)"
    )

    # Publish command
    publish_parser = subparsers.add_parser(
        "publish", help="POST the structured view to PUBLISH_ENDPOINT"
    )
    publish_parser.add_argument("prototype", type=Path, help="Prototype JSON file")
    publish_parser.add_argument(
        "--previous", type=Path, help="Prototype before apply"
    )
    publish_parser.add_argument("--endpoint", help="Publish URL (default: PUBLISH_ENDPOINT)")
    publish_parser.add_argument("--token", help="Bearer token (default: PUBLISH_TOKEN)")

    args = parser.parse_args(argv)

    try:
        if args.command == "export":
            return export_command(args.prototype, args.output, args.ids, args.include_edits)

        elif args.command == "diff":
            return diff_command(args.prototype, args.csv, args.modified_only)

        elif args.command == "apply":
            return apply_command(args.prototype, args.csv, args.ids, args.output)

        elif args.command == "regenerate":
            return regenerate_command(args.prototype, args.out_dir, args.previous)

        elif args.command == "acquire":
            return acquire_command(
                args.json_file,
                name=args.name,
                source=PrototypeSource(args.source),
                use_fallback=args.fallback,
                output=args.output,
            )

        elif args.command == "publish":
            return asyncio.run(
                publish_command(
                    args.prototype,
                    args.previous,
                    endpoint=args.endpoint,
                    token=args.token,
                )
            )

        else:
            parser.print_help()
            return 1

    except FileNotFoundError as e:
        logger.error(f"File not found: {e.filename}")
        return 1
    except ValidationError as e:
        logger.error(f"Invalid prototype file: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
