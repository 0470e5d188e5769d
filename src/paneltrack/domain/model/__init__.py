"""Public domain model surface."""

from __future__ import annotations

from paneltrack.domain.model.entity import Entity, new_id
from paneltrack.domain.model.enums import (
    ItemStatus,
    PanelStatus,
    ProjectStatus,
    UnitQtyType,
    UserRole,
)
from paneltrack.domain.model.item import Item
from paneltrack.domain.model.panel import DEFAULT_PANEL_TYPE, Panel, StatusHistoryEntry
from paneltrack.domain.model.primitives import Dimensions, Measurement, SerialNumber
from paneltrack.domain.model.project import Building, Project

__all__ = [
    "DEFAULT_PANEL_TYPE",
    "Building",
    "Dimensions",
    "Entity",
    "Item",
    "ItemStatus",
    "Measurement",
    "Panel",
    "PanelStatus",
    "Project",
    "ProjectStatus",
    "SerialNumber",
    "StatusHistoryEntry",
    "UnitQtyType",
    "UserRole",
    "new_id",
]
