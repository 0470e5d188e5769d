"""Merge canonical rows into panels without clobbering untouched data."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any, Final

from paneltrack.domain.lifecycle import Stage, stage_of
from paneltrack.domain.model import DEFAULT_PANEL_TYPE, Dimensions, Panel, PanelStatus

from .contracts import ABSENT

if TYPE_CHECKING:
    from datetime import date
    from uuid import UUID

    from .contracts import CanonicalPanelRow

log = logging.getLogger(__name__)

# Attributes a row may overwrite on an existing panel. Identity, project and
# milestone dates are not among them.
MERGEABLE_FIELDS: Final[tuple[str, ...]] = (
    "name",
    "panel_type",
    "building_id",
    "weight",
    "status",
    "location",
    "document_date",
    "issue_transmittal_no",
    "dwg_no",
    "description",
    "panel_tag",
    "unit_qty",
    "unit_qty_type",
    "ifp_qty_nos",
    "ifp_qty_measurement",
    "draftman",
    "checked_by",
    "notes",
    "status_update",
)

PASS_THROUGH_FIELDS: Final[tuple[str, ...]] = tuple(
    name
    for name in MERGEABLE_FIELDS
    if name not in {"name", "panel_type", "building_id", "weight", "status", "panel_tag"}
)

_MILESTONES: Final[tuple[tuple[str, Stage], ...]] = (
    ("delivered_date", Stage.DELIVERED),
    ("installed_date", Stage.INSTALLED),
    ("inspected_date", Stage.INSPECTED),
)


def merge_dimensions(existing: Dimensions, row: CanonicalPanelRow) -> Dimensions:
    """Sub-field merge: each of width/height/thickness falls back to the existing value."""

    return Dimensions(
        width=existing.width if row.width is ABSENT else row.width,
        height=existing.height if row.height is ABSENT else row.height,
        thickness=existing.thickness if row.thickness is ABSENT else row.thickness,
    )


def merge_panel(existing: Panel, row: CanonicalPanelRow) -> Panel:
    """Return a new panel with the row's present fields laid over ``existing``."""

    present = row.present()
    changes: dict[str, Any] = {name: present[name] for name in MERGEABLE_FIELDS if name in present}
    changes["dimensions"] = merge_dimensions(existing.dimensions, row)
    return dataclasses.replace(existing, **changes)


def build_panel(
    row: CanonicalPanelRow,
    *,
    serial_number: str,
    project_id: UUID,
    building_id: UUID | None,
    today: date,
) -> Panel:
    """Create a structurally complete panel from a row that matched nothing.

    Missing values default to status ``manufactured``, zero dimensions and weight,
    type ``Standard`` and a manufactured date of ``today``, or of the earliest kept
    milestone when that comes first. Milestone dates from the row are kept only for
    stages the panel's status has reached, in order.
    """

    status = PanelStatus.MANUFACTURED if row.status is ABSENT else row.status
    if row.manufactured_date is ABSENT:
        milestones = reached_milestones(row, status, None)
        manufactured_date = min([today, *milestones.values()])
    else:
        manufactured_date = row.manufactured_date
        milestones = reached_milestones(row, status, manufactured_date)
    present = row.present()
    pass_through = {name: present[name] for name in PASS_THROUGH_FIELDS if name in present}
    return Panel(
        serial_number=serial_number,
        name=serial_number if row.name is ABSENT else row.name,
        project_id=project_id,
        building_id=building_id,
        panel_type=DEFAULT_PANEL_TYPE if row.panel_type is ABSENT else row.panel_type,
        panel_tag=serial_number if row.panel_tag is ABSENT else row.panel_tag,
        dimensions=merge_dimensions(Dimensions(), row),
        weight=0.0 if row.weight is ABSENT else row.weight,
        status=status,
        manufactured_date=manufactured_date,
        **milestones,
        **pass_through,
    )


def reached_milestones(
    row: CanonicalPanelRow,
    status: PanelStatus,
    manufactured_date: date | None,
) -> dict[str, date]:
    """Milestone dates the panel keeps; ``manufactured_date`` is the lower bound when set."""

    reached = stage_of(status)
    previous = manufactured_date
    accepted: dict[str, date] = {}
    for name, stage in _MILESTONES:
        value = getattr(row, name)
        if value is ABSENT:
            continue
        if reached < stage or (previous is not None and value < previous):
            log.warning("Dropping %s=%s for panel in status %s", name, value, status)
            continue
        accepted[name] = previous = value
    return accepted
