"""Lifecycle engine: validate a requested status change and derive its effects.

``transition`` is a pure function. It never mutates the panel it receives; on
success it returns a new panel value together with the history entry to append.
Persisting both, and serialising concurrent requests for the same panel, is the
job of the application service.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from paneltrack.domain.lifecycle.catalog import (
    DELIVERED_FAMILY,
    INSPECTED_FAMILY,
    INSTALLED_FAMILY,
    Stage,
    is_terminal,
    stage_of,
)
from paneltrack.domain.lifecycle.policy import allowed_next_states
from paneltrack.domain.model import Panel, PanelStatus, StatusHistoryEntry, UserRole

if TYPE_CHECKING:
    from datetime import date, datetime
    from uuid import UUID


class LifecycleError(Exception):
    """Base class for rejected transitions. The panel is left untouched."""

    def __init__(
        self,
        message: str,
        *,
        panel_id: UUID,
        current_status: PanelStatus,
        requested_status: PanelStatus,
        role: UserRole,
    ) -> None:
        super().__init__(message)
        self.panel_id = panel_id
        self.current_status = current_status
        self.requested_status = requested_status
        self.role = role


class TerminalState(LifecycleError):
    """Raised when the panel already sits in a terminal status."""


class InvalidTransition(LifecycleError):
    """Raised when the requested status is not reachable for the acting role."""

    def __init__(
        self,
        message: str,
        *,
        panel_id: UUID,
        current_status: PanelStatus,
        requested_status: PanelStatus,
        role: UserRole,
        allowed: frozenset[PanelStatus],
    ) -> None:
        super().__init__(
            message,
            panel_id=panel_id,
            current_status=current_status,
            requested_status=requested_status,
            role=role,
        )
        self.allowed = allowed


@dataclass(frozen=True, slots=True, kw_only=True)
class TransitionRequest:
    panel_id: UUID
    requested_status: PanelStatus
    acting_role: UserRole


@dataclass(frozen=True, slots=True)
class TransitionOutcome:
    panel: Panel
    entry: StatusHistoryEntry


def transition(
    panel: Panel,
    requested_status: PanelStatus,
    role: UserRole,
    acting_user_label: str,
    now: datetime,
    *,
    notes: str | None = None,
) -> TransitionOutcome:
    """Apply ``requested_status`` to ``panel`` on behalf of ``role``.

    Raises ``TerminalState`` before consulting the policy so callers get the more
    specific reason, then ``InvalidTransition`` if the policy rejects the move.
    """

    if is_terminal(panel.status):
        raise TerminalState(
            f"Panel {panel.serial_number} is in terminal status {panel.status}",
            panel_id=panel.id,
            current_status=panel.status,
            requested_status=requested_status,
            role=role,
        )

    allowed = allowed_next_states(panel.status, role)
    if requested_status not in allowed:
        allowed_list = ", ".join(sorted(allowed)) or "none"
        raise InvalidTransition(
            f"Role {role} cannot move panel {panel.serial_number} from {panel.status} "
            f"to {requested_status} (allowed: {allowed_list})",
            panel_id=panel.id,
            current_status=panel.status,
            requested_status=requested_status,
            role=role,
            allowed=allowed,
        )

    changes = milestone_changes(panel, requested_status, now.date())
    updated = dataclasses.replace(panel, status=requested_status, **changes)
    entry = StatusHistoryEntry(
        panel_id=panel.id,
        status=requested_status,
        changed_at=now,
        updated_by=acting_user_label,
        notes=notes,
    )
    return TransitionOutcome(panel=updated, entry=entry)


def milestone_changes(panel: Panel, status: PanelStatus, today: date) -> dict[str, Any]:
    """Milestone dates that accepting ``status`` would stamp. Set dates are never overwritten."""

    changes: dict[str, Any] = {}
    if status in DELIVERED_FAMILY and panel.delivered_date is None:
        changes["delivered_date"] = today
    installed_date = panel.installed_date
    if status in INSTALLED_FAMILY and installed_date is None:
        installed_date = changes["installed_date"] = today
    # checked/approved_material also occur before installation; only stamp once installed
    reached_inspection = installed_date is not None or stage_of(status) >= Stage.INSPECTED
    if status in INSPECTED_FAMILY and panel.inspected_date is None and reached_inspection:
        changes["inspected_date"] = today
    return changes
