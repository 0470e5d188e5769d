"""Panel record and its append-only status log entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from paneltrack.domain.model.entity import Entity
from paneltrack.domain.model.enums import PanelStatus, UnitQtyType
from paneltrack.domain.model.primitives import Dimensions

if TYPE_CHECKING:
    from datetime import date, datetime
    from uuid import UUID

    from paneltrack.domain.model.primitives import SerialNumber

DEFAULT_PANEL_TYPE: Final[str] = "Standard"


@dataclass(eq=False, kw_only=True)
class Panel(Entity):
    """A precast element tracked from the factory floor to final approval.

    Status and the milestone dates are owned by the lifecycle engine; every other
    attribute is pass-through data that imports may overwrite. Status history lives
    in a separate append-only log keyed by ``id``.
    """

    serial_number: SerialNumber
    project_id: UUID
    name: str = ""
    panel_type: str = DEFAULT_PANEL_TYPE
    building_id: UUID | None = None

    dimensions: Dimensions = field(default_factory=Dimensions)
    weight: float = 0.0

    status: PanelStatus = PanelStatus.MANUFACTURED
    manufactured_date: date
    delivered_date: date | None = None
    installed_date: date | None = None
    inspected_date: date | None = None

    location: str | None = None
    document_date: date | None = None
    issue_transmittal_no: str | None = None
    dwg_no: str | None = None
    description: str | None = None
    panel_tag: str | None = None
    unit_qty: float | None = None
    unit_qty_type: UnitQtyType = UnitQtyType.SQM
    ifp_qty_nos: int | None = None
    ifp_qty_measurement: float | None = None
    draftman: str | None = None
    checked_by: str | None = None
    notes: str | None = None
    status_update: str | None = None

    def __post_init__(self) -> None:
        self.serial_number = self.serial_number.strip()
        if not self.serial_number:
            raise ValueError("Panel serial number must not be blank")
        if self.weight < 0:
            raise ValueError(f"Panel weight must be non-negative, got {self.weight}")
        if not self.name:
            self.name = self.serial_number


@dataclass(eq=False, kw_only=True)
class StatusHistoryEntry(Entity):
    """One accepted transition. Entries are appended, never edited or removed."""

    panel_id: UUID
    status: PanelStatus
    changed_at: datetime
    updated_by: str
    notes: str | None = None
    sequence: int = 0
