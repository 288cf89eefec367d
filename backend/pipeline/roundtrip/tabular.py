"""Delimited text codec for spreadsheet round-trips.

Rows are flat ``dict[str, str]`` records. Numeric, boolean and list fields
are serialized by the caller (see ``pipeline.roundtrip.sheet``) before they
reach this module.

Parsing is lenient by contract: a record whose field count does not match the
header is dropped without raising, so a partially damaged spreadsheet still
yields every well-formed row.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence

logger = logging.getLogger(__name__)

Row = dict[str, str]

QUOTE = '"'
DELIMITER = ","
NEWLINE = "\n"

_NEEDS_QUOTING = (DELIMITER, QUOTE, NEWLINE)


def escape_field(value: str) -> str:
    """Quote a field if it contains a delimiter, quote or newline."""
    if any(token in value for token in _NEEDS_QUOTING):
        return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE
    return value


def stringify(rows: Sequence[Mapping[str, str]]) -> str:
    """Serialize rows using the first row's keys as the column order.

    Args:
        rows: Records to serialize. Keys missing from later rows serialize as
            empty fields; keys not present in the first row are ignored.

    Returns:
        Header line plus one line per row, joined with ``\\n``. Empty string
        when ``rows`` is empty.
    """
    if not rows:
        return ""

    headers = list(rows[0].keys())
    lines = [DELIMITER.join(escape_field(header) for header in headers)]
    for row in rows:
        lines.append(
            DELIMITER.join(escape_field(row.get(header) or "") for header in headers)
        )
    return NEWLINE.join(lines)


def parse(text: str) -> list[Row]:
    """Parse delimited text into rows keyed by the header line.

    Blank records are skipped. The first remaining record is the header.
    Records with a different field count than the header are dropped.

    Args:
        text: Full file content.

    Returns:
        Parsed rows in file order.
    """
    records = [record for record in _split_records(text) if record.strip()]
    if not records:
        return []

    headers = _parse_record(records[0])
    rows: list[Row] = []
    dropped = 0

    for index, record in enumerate(records[1:], start=1):
        values = _parse_record(record)
        if len(values) != len(headers):
            dropped += 1
            logger.debug(
                f"Dropping record {index}: {len(values)} fields, "
                f"header has {len(headers)}"
            )
            continue
        rows.append(dict(zip(headers, values)))

    if dropped:
        logger.debug(f"Parsed {len(rows)} rows, dropped {dropped} malformed")
    return rows


def _split_records(text: str) -> Iterator[str]:
    """Split on newlines that are outside quoted fields.

    A ``\\r`` immediately before a record break is removed so CRLF files
    parse the same as LF files.
    """
    current: list[str] = []
    in_quotes = False

    for char in text:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == NEWLINE and not in_quotes:
            yield _strip_cr("".join(current))
            current = []
            continue
        current.append(char)

    yield _strip_cr("".join(current))


def _strip_cr(record: str) -> str:
    return record[:-1] if record.endswith("\r") else record


def _parse_record(record: str) -> list[str]:
    """Scan one record character by character, honouring quote state."""
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0

    while i < len(record):
        char = record[i]
        if char == QUOTE:
            if in_quotes and record[i + 1 : i + 2] == QUOTE:
                # Escaped quote
                current.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current))
    return fields
