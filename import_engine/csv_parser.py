"""
import_engine.csv_parser - Low-level CSV reading and cleaning.

Responsibilities:
  • BOM removal (UTF-8 / UTF-8-SIG)
  • Strict UTF-8 decoding (undecodable uploads are rejected, not mangled)
  • Header row skipping and per-field whitespace trimming
  • Yields (row_number, record) pairs; row 1 is the header
"""

from __future__ import annotations

import csv
import io
from typing import Iterator

from import_engine.field_map import COLUMNS


class CsvReadError(Exception):
    """Raised when the upload cannot be read as CSV at all."""
    pass


def iter_records(raw: str | bytes) -> Iterator[tuple[int, dict[str, str]]]:
    """
    Accept raw file content (bytes or str) and yield one
    (row_number, {column: trimmed value}) per data record.

    Fields are mapped by position onto COLUMNS, whatever the header says.
    Blank lines are skipped and do not consume a row number; missing
    trailing fields read as empty strings.
    """
    text = _decode(raw)
    if not text.strip():
        return

    reader = csv.reader(io.StringIO(text))
    try:
        header = next(reader, None)
        if header is None:
            return

        row_number = 1
        for fields in reader:
            if not any(f.strip() for f in fields):
                continue
            row_number += 1
            yield row_number, _to_record(fields)
    except csv.Error as exc:
        raise CsvReadError(f"Malformed CSV near line {reader.line_num}: {exc}") from exc


def _to_record(fields: list[str]) -> dict[str, str]:
    cleaned = [f.strip() for f in fields]
    cleaned += [""] * (len(COLUMNS) - len(cleaned))
    return dict(zip(COLUMNS, cleaned))


def _decode(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        # Strip UTF-8 BOM
        if raw.startswith(b"\xef\xbb\xbf"):
            raw = raw[3:]
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CsvReadError(f"File is not valid UTF-8: {exc}") from exc
    if raw.startswith("\ufeff"):
        return raw[1:]
    return raw
