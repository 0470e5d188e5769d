from __future__ import annotations

from datetime import datetime
from io import BytesIO

import pytest
from openpyxl import Workbook

from paneltrack.adapters.tabular import read_csv, read_tabular, read_xlsx
from paneltrack.domain.ports import TabularParseError


def _workbook_bytes(*rows: tuple[object, ...]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    assert sheet is not None
    for row in rows:
        sheet.append(list(row))
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def test_csv_with_bom_and_blank_lines() -> None:
    payload = "\ufeffSerial Number,Width\r\nPNL-1,1200\r\n,\r\nPNL-2,\r\n".encode()

    rows = read_tabular(payload, filename="register.CSV")

    assert rows == [
        {"Serial Number": "PNL-1", "Width": "1200"},
        {"Serial Number": "PNL-2", "Width": ""},
    ]


def test_csv_extra_cells_are_dropped() -> None:
    rows = read_csv(b"Serial\nPNL-1,unexpected\n")

    assert rows == [{"Serial": "PNL-1"}]


def test_csv_must_be_utf8() -> None:
    with pytest.raises(TabularParseError, match="UTF-8"):
        read_csv("Serial\nPNL-é\n".encode("utf-16"))


def test_xlsx_rows_keep_cell_types() -> None:
    payload = _workbook_bytes(
        (None, None),
        ("Serial Number", "Delivered Date", None, "Weight"),
        ("PNL-1", datetime(2024, 3, 1), "ignored", 512.5),
        (None, None, None, None),
        ("PNL-2", None, None, 10),
    )

    rows = read_tabular(payload, filename="register.xlsx")

    assert rows == [
        {"Serial Number": "PNL-1", "Delivered Date": datetime(2024, 3, 1), "Weight": 512.5},
        {"Serial Number": "PNL-2", "Delivered Date": None, "Weight": 10},
    ]


def test_workbook_is_sniffed_without_suffix() -> None:
    payload = _workbook_bytes(("Serial",), ("PNL-1",))

    assert read_tabular(payload) == [{"Serial": "PNL-1"}]


def test_broken_workbook_raises_parse_error() -> None:
    with pytest.raises(TabularParseError, match="Unreadable workbook"):
        read_xlsx(b"PK\x03\x04not really a zip")


def test_legacy_xls_is_refused() -> None:
    with pytest.raises(TabularParseError, match=".xls"):
        read_tabular(b"\xd0\xcf\x11\xe0", filename="old.xls")
