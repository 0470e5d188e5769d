"""Row normalization: arbitrary spreadsheet columns -> canonical field sets.

Responsibilities of this stage:
- resolve column aliases case- and punctuation-insensitively with a fixed priority
- coerce numbers, Excel serial dates and date strings into typed values
- degrade unparsable cells to ``ABSENT`` instead of raising

Out of scope for this stage:
- identity checks (a row without a serial is rejected by the reconciler)
- defaults for new records (applied when a panel is built)
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta
from types import MappingProxyType
from typing import TYPE_CHECKING, Final
from uuid import UUID

from paneltrack.domain.lifecycle import lookup_status
from paneltrack.domain.model import ItemStatus, PanelStatus, UnitQtyType

from .contracts import ABSENT, CanonicalItemRow, CanonicalPanelRow, RowValidationError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from paneltrack.domain.ports import RawRow

    from .contracts import Field

log = logging.getLogger(__name__)

EXCEL_EPOCH: Final[date] = date(1899, 12, 30)
_MAX_EXCEL_SERIAL: Final[int] = 2_958_465  # 9999-12-31
CLEAR_MARKERS: Final[frozenset[str]] = frozenset({"-", "n/a", "null"})

type ColumnIndex = dict[str, object]

PANEL_ALIASES: Final[Mapping[str, tuple[str, ...]]] = MappingProxyType(
    {
        "serial_number": ("serialnumber", "serialno", "serial", "name", "panelname"),
        "name": ("name", "panelname"),
        "panel_type": ("type", "paneltype"),
        "project_id": ("projectid", "project"),
        "building_id": ("buildingid", "building"),
        "width": ("width",),
        "height": ("height",),
        "thickness": ("thickness",),
        "weight": ("weight",),
        "status": ("status", "panelstatus"),
        "manufactured_date": ("manufactureddate",),
        "delivered_date": ("delivereddate",),
        "installed_date": ("installeddate",),
        "inspected_date": ("inspecteddate",),
        "location": ("location",),
        "document_date": ("date", "documentdate"),
        "issue_transmittal_no": ("issuetransmittalno", "transmittalno"),
        "dwg_no": ("dwgno", "drawingno"),
        "description": ("description",),
        "panel_tag": ("paneltag", "tag"),
        "unit_qty": ("unitqty",),
        "unit_qty_type": ("unitqtytype",),
        "ifp_qty_nos": ("ifpqtynos",),
        "ifp_qty_measurement": ("ifpqtymeasurement", "ifpqty"),
        "draftman": ("draftman", "draftsman"),
        "checked_by": ("checkedby",),
        "notes": ("notes", "remarks"),
        "status_update": ("statusupdate",),
    }
)

ITEM_ALIASES: Final[Mapping[str, tuple[str, ...]]] = MappingProxyType(
    {
        "name": ("name", "itemname"),
        "project_id": ("projectid", "project"),
        "item_type": ("type", "itemtype"),
        "status": ("status",),
        "document_date": ("date",),
        "issue_transmittal_no": ("issuetransmittalno",),
        "dwg_no": ("dwgno",),
        "description": ("description",),
        "panel_tag": ("paneltag",),
        "unit_qty": ("unitqty",),
        "ifp_qty_nos": ("ifpqtynos",),
        "ifp_qty": ("ifpqty",),
        "draftman": ("draftman",),
    }
)

_MEASUREMENT_FIELDS: Final[tuple[str, ...]] = ("width", "height", "thickness", "weight")


def fold_key(label: object) -> str:
    """Collapse a column label so ``Serial Number``, ``serial_number`` and ``SerialNumber`` agree."""

    return "".join(char for char in str(label).casefold() if char.isalnum())


def index_row(raw_row: RawRow) -> ColumnIndex:
    """Fold column labels; the first non-blank cell wins when labels collide."""

    index: ColumnIndex = {}
    for label, value in raw_row.items():
        if _is_blank(value):
            continue
        index.setdefault(fold_key(label), value)
    return index


def pick(index: ColumnIndex, aliases: tuple[str, ...]) -> object:
    for alias in aliases:
        if alias in index:
            return index[alias]
    return ABSENT


def normalize_panel_row(raw_row: RawRow) -> CanonicalPanelRow:
    index = index_row(raw_row)

    def cell(target: str) -> object:
        return pick(index, PANEL_ALIASES[target])

    measurements = {name: as_measurement(cell(name)) for name in _MEASUREMENT_FIELDS}
    for name, value in measurements.items():
        if value is not ABSENT and value < 0:
            raise RowValidationError(f"{name} must be non-negative, got {value:g}")

    return CanonicalPanelRow(
        serial_number=as_text(cell("serial_number")),
        name=as_text(cell("name")),
        panel_type=as_text(cell("panel_type")),
        project_id=as_uuid(cell("project_id")),
        building_id=as_uuid(cell("building_id")),
        width=measurements["width"],
        height=measurements["height"],
        thickness=measurements["thickness"],
        weight=measurements["weight"],
        status=as_panel_status(cell("status")),
        manufactured_date=as_date(cell("manufactured_date")),
        delivered_date=as_date(cell("delivered_date")),
        installed_date=as_date(cell("installed_date")),
        inspected_date=as_date(cell("inspected_date")),
        location=as_clearable_text(cell("location")),
        document_date=_clearable(cell("document_date"), as_date),
        issue_transmittal_no=as_clearable_text(cell("issue_transmittal_no")),
        dwg_no=as_clearable_text(cell("dwg_no")),
        description=as_clearable_text(cell("description")),
        panel_tag=as_clearable_text(cell("panel_tag")),
        unit_qty=_clearable(cell("unit_qty"), as_measurement),
        unit_qty_type=as_unit_qty_type(cell("unit_qty_type")),
        ifp_qty_nos=_clearable(cell("ifp_qty_nos"), as_int),
        ifp_qty_measurement=_clearable(cell("ifp_qty_measurement"), as_measurement),
        draftman=as_clearable_text(cell("draftman")),
        checked_by=as_clearable_text(cell("checked_by")),
        notes=as_clearable_text(cell("notes")),
        status_update=as_clearable_text(cell("status_update")),
    )


def normalize_item_row(raw_row: RawRow) -> CanonicalItemRow:
    index = index_row(raw_row)

    def cell(target: str) -> object:
        return pick(index, ITEM_ALIASES[target])

    return CanonicalItemRow(
        name=as_text(cell("name")),
        project_id=as_uuid(cell("project_id")),
        item_type=as_text(cell("item_type")),
        status=as_item_status(cell("status")),
        document_date=_or_none(as_date(cell("document_date"))),
        issue_transmittal_no=_or_none(as_text(cell("issue_transmittal_no"))),
        dwg_no=_or_none(as_text(cell("dwg_no"))),
        description=_or_none(as_text(cell("description"))),
        panel_tag=_or_none(as_text(cell("panel_tag"))),
        unit_qty=_or_none(as_measurement(cell("unit_qty"))),
        ifp_qty_nos=_or_none(as_int(cell("ifp_qty_nos"))),
        ifp_qty=_or_none(as_measurement(cell("ifp_qty"))),
        draftman=_or_none(as_text(cell("draftman"))),
    )


# Coercers --------------------------------------------------------------------


def as_text(value: object) -> Field[str]:
    if value is ABSENT or _is_blank(value):
        return ABSENT
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    if text.casefold() in CLEAR_MARKERS:
        return ABSENT
    return text


def as_clearable_text(value: object) -> Field[str | None]:
    return _clearable(value, as_text)


def as_measurement(value: object) -> Field[float]:
    if value is ABSENT or isinstance(value, bool):
        return ABSENT
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "").replace(" ", "")
        try:
            number = float(cleaned)
        except ValueError:
            return ABSENT
    else:
        return ABSENT
    if not math.isfinite(number):
        return ABSENT
    return number


def as_int(value: object) -> Field[int]:
    number = as_measurement(value)
    if number is ABSENT or not number.is_integer():
        return ABSENT
    return int(number)


def as_date(value: object) -> Field[date]:
    if value is ABSENT or isinstance(value, bool):
        return ABSENT
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, int | float):
        return excel_serial_to_date(value)
    if not isinstance(value, str):
        return ABSENT
    text = value.strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return datetime.strptime(text, "%d/%m/%Y").date()
    except ValueError:
        pass
    serial = as_measurement(text)
    if serial is ABSENT:
        return ABSENT
    return excel_serial_to_date(serial)


def excel_serial_to_date(serial: float) -> Field[date]:
    """Spreadsheet day numbers count from 1899-12-30 (the 1900 leap-year quirk included)."""

    if not 0 < serial <= _MAX_EXCEL_SERIAL:
        return ABSENT
    return EXCEL_EPOCH + timedelta(days=int(serial))


def as_uuid(value: object) -> Field[UUID]:
    if value is ABSENT:
        return ABSENT
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        return ABSENT
    try:
        return UUID(value.strip())
    except ValueError:
        return ABSENT


def as_panel_status(value: object) -> Field[PanelStatus]:
    if isinstance(value, PanelStatus):
        return value
    text = as_text(value)
    if text is ABSENT:
        return ABSENT
    status = lookup_status(text)
    if status is None:
        log.debug("Ignoring unknown panel status %r", text)
        return ABSENT
    return status


def as_unit_qty_type(value: object) -> Field[UnitQtyType]:
    text = as_text(value)
    if text is ABSENT:
        return ABSENT
    try:
        return UnitQtyType(fold_key(text))
    except ValueError:
        return ABSENT


def as_item_status(value: object) -> ItemStatus:
    """Item statuses must match exactly; anything else means "In Progress"."""

    text = as_text(value)
    if text is ABSENT:
        return ItemStatus.IN_PROGRESS
    try:
        return ItemStatus(text)
    except ValueError:
        return ItemStatus.IN_PROGRESS


def _clearable[T](value: object, coerce: Callable[[object], Field[T]]) -> Field[T | None]:
    if isinstance(value, str) and value.strip().casefold() in CLEAR_MARKERS:
        return None
    return coerce(value)


def _or_none[T](value: Field[T]) -> T | None:
    return None if value is ABSENT else value


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
