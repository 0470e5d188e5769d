"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class PanelStatus(StrEnum):
    MANUFACTURED = "manufactured"
    DELIVERED = "delivered"
    INSTALLED = "installed"
    INSPECTED = "inspected"
    REJECTED = "rejected"
    ISSUED = "issued"
    HELD = "held"
    PRODUCED = "produced"
    PREPARED = "prepared"
    RETURNED = "returned"
    REJECTED_MATERIAL = "rejected_material"
    APPROVED_MATERIAL = "approved_material"
    CHECKED = "checked"
    APPROVED_FINAL = "approved_final"
    CANCELLED = "cancelled"
    PROCEED_DELIVERY = "proceed_delivery"
    BROKEN_SITE = "broken_site"


class UserRole(StrEnum):
    """Closed set of acting roles. Authorization is role-only."""

    ADMIN = "admin"
    PROJECT_MANAGER = "project_manager"
    DATA_ENTRY = "data_entry"
    PRODUCTION_ENGINEER = "production_engineer"
    QC_FACTORY = "qc_factory"
    STORE_SITE = "store_site"
    QC_SITE = "qc_site"
    FOREMAN_SITE = "foreman_site"
    SITE_ENGINEER = "site_engineer"

    @property
    def display_name(self) -> str:
        return _ROLE_DISPLAY_NAMES.get(self, self.value.replace("_", " ").title())


_ROLE_DISPLAY_NAMES: dict[UserRole, str] = {
    UserRole.ADMIN: "Administrator",
    UserRole.DATA_ENTRY: "Data Entry",
    UserRole.PRODUCTION_ENGINEER: "Production Engineer",
    UserRole.QC_FACTORY: "QC Factory",
    UserRole.STORE_SITE: "Store Site",
    UserRole.QC_SITE: "QC Site",
    UserRole.FOREMAN_SITE: "Foreman Site",
    UserRole.SITE_ENGINEER: "Site Engineer",
}


class ItemStatus(StrEnum):
    PROCEED_FOR_DELIVERY = "Proceed for Delivery"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"


class UnitQtyType(StrEnum):
    SQM = "sqm"
    LM = "lm"


class ProjectStatus(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"
