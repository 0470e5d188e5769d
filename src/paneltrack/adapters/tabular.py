"""Decode uploaded CSV/XLSX payloads into raw rows keyed by header label."""

from __future__ import annotations

import csv
import io
import logging
from typing import TYPE_CHECKING, Any, Final
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from paneltrack.domain.ports import RawRow, TabularParseError, TabularReader

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

log = logging.getLogger(__name__)

XLSX_SUFFIXES: Final[frozenset[str]] = frozenset({".xlsx", ".xlsm"})
CSV_SUFFIXES: Final[frozenset[str]] = frozenset({".csv", ".txt"})
ZIP_MAGIC: Final[bytes] = b"PK\x03\x04"


def read_tabular(payload: bytes, *, filename: str | None = None) -> list[RawRow]:
    """Pick a decoder from the file suffix, falling back to sniffing the payload."""

    suffix = _suffix(filename)
    if suffix == ".xls":
        raise TabularParseError("Legacy .xls workbooks are not supported; save as .xlsx")
    if suffix in XLSX_SUFFIXES or (suffix not in CSV_SUFFIXES and payload.startswith(ZIP_MAGIC)):
        return read_xlsx(payload)
    return read_csv(payload)


def read_csv(payload: bytes, *, filename: str | None = None) -> list[RawRow]:
    _ = filename
    try:
        text = payload.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise TabularParseError(f"CSV is not valid UTF-8: {exc}") from exc

    try:
        reader = csv.DictReader(io.StringIO(text, newline=""))
        rows = [
            {label: value for label, value in record.items() if label is not None}
            for record in reader
        ]
    except csv.Error as exc:
        raise TabularParseError(f"Malformed CSV: {exc}") from exc
    return [row for row in rows if not _is_blank_row(row.values())]


def read_xlsx(payload: bytes, *, filename: str | None = None) -> list[RawRow]:
    """Read the first worksheet; its first non-empty row is the header."""

    _ = filename
    try:
        workbook = load_workbook(io.BytesIO(payload), data_only=True, read_only=True)
    except (InvalidFileException, BadZipFile, KeyError, ValueError) as exc:
        raise TabularParseError(f"Unreadable workbook: {exc}") from exc

    try:
        if not workbook.worksheets:
            return []
        worksheet = workbook.worksheets[0]
        log.debug("Reading worksheet %r", worksheet.title)
        return _rows_from_cells(worksheet.iter_rows(values_only=True))
    finally:
        workbook.close()


def _rows_from_cells(cell_rows: Iterable[Sequence[Any]]) -> list[RawRow]:
    header: list[str | None] | None = None
    rows: list[RawRow] = []
    for values in cell_rows:
        if _is_blank_row(values):
            continue
        if header is None:
            header = [_label(value) for value in values]
            continue
        rows.append(
            {
                label: value
                for label, value in zip(header, values, strict=False)
                if label is not None
            }
        )
    return rows


def _label(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _is_blank_row(values: Iterable[object]) -> bool:
    return all(value is None or (isinstance(value, str) and not value.strip()) for value in values)


def _suffix(filename: str | None) -> str:
    if not filename or "." not in filename:
        return ""
    return "." + filename.rsplit(".", 1)[1].lower()


if TYPE_CHECKING:
    _reader_check: TabularReader = read_tabular
