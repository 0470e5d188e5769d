"""Administrative item register entries (document-control records, no lifecycle)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from paneltrack.domain.model.entity import Entity
from paneltrack.domain.model.enums import ItemStatus
from paneltrack.domain.model.panel import DEFAULT_PANEL_TYPE

if TYPE_CHECKING:
    from datetime import date
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Item(Entity):
    project_id: UUID
    name: str
    item_type: str = DEFAULT_PANEL_TYPE
    status: ItemStatus = ItemStatus.IN_PROGRESS
    document_date: date | None = None
    issue_transmittal_no: str | None = None
    dwg_no: str | None = None
    description: str | None = None
    panel_tag: str | None = None
    unit_qty: float | None = None
    ifp_qty_nos: int | None = None
    ifp_qty: float | None = None
    draftman: str | None = None
