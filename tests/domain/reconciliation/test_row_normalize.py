from __future__ import annotations

from datetime import date, datetime
from uuid import uuid4

import pytest

from paneltrack.domain.model import ItemStatus, PanelStatus, UnitQtyType
from paneltrack.domain.reconciliation import (
    ABSENT,
    RowValidationError,
    fold_key,
    normalize_item_row,
    normalize_panel_row,
)
from paneltrack.domain.reconciliation.normalize import (
    as_date,
    as_measurement,
    as_text,
    excel_serial_to_date,
    index_row,
)


def test_unknown_status_and_partial_dimensions() -> None:
    row = normalize_panel_row({"SerialNumber": "PNL-002", "Width": "150", "Status": "bogus_status"})

    assert row.serial_number == "PNL-002"
    assert row.width == 150.0
    assert row.height is ABSENT
    assert row.thickness is ABSENT
    assert row.status is ABSENT


@pytest.mark.parametrize("label", ["Serial Number", "serial_number", "SERIALNUMBER", "serial-no"])
def test_serial_column_aliases(label: str) -> None:
    assert normalize_panel_row({label: " PNL-9 "}).serial_number == "PNL-9"


def test_serial_number_column_wins_over_name() -> None:
    row = normalize_panel_row({"Name": "North facade 1", "Serial Number": "PNL-10"})

    assert row.serial_number == "PNL-10"
    assert row.name == "North facade 1"


def test_name_is_used_as_serial_when_no_serial_column() -> None:
    row = normalize_panel_row({"Name": "PNL-11"})

    assert row.serial_number == "PNL-11"


def test_blank_cells_are_absent() -> None:
    row = normalize_panel_row({"SerialNumber": "PNL-1", "Weight": "", "Location": "   "})

    assert row.weight is ABSENT
    assert row.location is ABSENT
    assert row.present() == {"serial_number": "PNL-1"}


def test_clear_marker_clears_optional_text_but_never_identity() -> None:
    row = normalize_panel_row({"SerialNumber": "-", "Location": "n/a", "Notes": "NULL"})

    assert row.serial_number is ABSENT
    assert row.location is None
    assert row.notes is None


def test_status_matches_labels_and_values() -> None:
    assert normalize_panel_row({"Status": "Proceed for Delivery"}).status is (
        PanelStatus.PROCEED_DELIVERY
    )
    assert normalize_panel_row({"status": "INSTALLED"}).status is PanelStatus.INSTALLED


def test_negative_measurement_rejects_row() -> None:
    with pytest.raises(RowValidationError, match="weight"):
        normalize_panel_row({"SerialNumber": "PNL-1", "Weight": -3})


def test_numeric_cells_and_identifiers() -> None:
    project_id = uuid4()
    row = normalize_panel_row(
        {
            "Serial": 1042.0,
            "Height": "1,250.5",
            "Thickness": 200,
            "Project": str(project_id),
            "Unit Qty Type": "LM",
            "IFP Qty Nos": "4",
        }
    )

    assert row.serial_number == "1042"
    assert row.height == 1250.5
    assert row.thickness == 200.0
    assert row.project_id == project_id
    assert row.unit_qty_type is UnitQtyType.LM
    assert row.ifp_qty_nos == 4


def test_unparsable_values_degrade_to_absent() -> None:
    row = normalize_panel_row(
        {"SerialNumber": "PNL-1", "Width": "wide", "Project": "not-a-uuid", "Date": "someday"}
    )

    assert row.width is ABSENT
    assert row.project_id is ABSENT
    assert row.document_date is ABSENT


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (45292, date(2024, 1, 1)),
        (45292.75, date(2024, 1, 1)),
        ("45292", date(2024, 1, 1)),
        ("2024-03-05", date(2024, 3, 5)),
        ("05/03/2024", date(2024, 3, 5)),
        (datetime(2024, 3, 5, 14, 0), date(2024, 3, 5)),
        (date(2024, 3, 5), date(2024, 3, 5)),
        ("yesterday", ABSENT),
        (-1, ABSENT),
        (True, ABSENT),
    ],
)
def test_as_date(value: object, expected: object) -> None:
    assert as_date(value) == expected


def test_excel_epoch() -> None:
    assert excel_serial_to_date(1) == date(1899, 12, 31)
    assert excel_serial_to_date(0) is ABSENT


def test_as_measurement_rejects_non_finite() -> None:
    assert as_measurement("nan") is ABSENT
    assert as_measurement(float("inf")) is ABSENT
    assert as_measurement(" 12 ") == 12.0


def test_as_text_strips_integral_floats() -> None:
    assert as_text(12.0) == "12"
    assert as_text(12.5) == "12.5"
    assert as_text(None) is ABSENT


def test_first_non_blank_cell_wins_on_label_collision() -> None:
    index = index_row({"Serial Number": "", "serial_number": "PNL-3", "SerialNumber": "PNL-4"})

    assert index == {"serialnumber": "PNL-3"}
    assert fold_key("Issue/Transmittal No.") == "issuetransmittalno"


def test_item_row_defaults() -> None:
    row = normalize_item_row({"Name": "Stair flight", "Status": "completed", "Unit Qty": "3"})

    assert row.name == "Stair flight"
    assert row.status is ItemStatus.IN_PROGRESS
    assert row.unit_qty == 3.0
    assert row.dwg_no is None


def test_item_status_exact_match() -> None:
    assert normalize_item_row({"Status": "On Hold"}).status is ItemStatus.ON_HOLD
