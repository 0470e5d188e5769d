"""Panel lifecycle: status catalog, role policy and the transition engine."""

from __future__ import annotations

from paneltrack.domain.lifecycle.catalog import (
    STATUS_CATALOG,
    TERMINAL_STATUSES,
    BadgeTone,
    Stage,
    StatusInfo,
    is_terminal,
    lookup_status,
    stage_of,
    status_info,
)
from paneltrack.domain.lifecycle.engine import (
    InvalidTransition,
    LifecycleError,
    TerminalState,
    TransitionOutcome,
    TransitionRequest,
    milestone_changes,
    transition,
)
from paneltrack.domain.lifecycle.policy import (
    ADMIN_SUCCESSORS,
    ROLE_ALLOWED_STATUSES,
    allowed_next_states,
    role_permissions,
)
from paneltrack.domain.lifecycle.service import (
    PanelLocks,
    PanelNotFoundError,
    change_panel_status,
    panel_history,
)

__all__ = [
    "ADMIN_SUCCESSORS",
    "ROLE_ALLOWED_STATUSES",
    "STATUS_CATALOG",
    "TERMINAL_STATUSES",
    "BadgeTone",
    "InvalidTransition",
    "LifecycleError",
    "PanelLocks",
    "PanelNotFoundError",
    "Stage",
    "StatusInfo",
    "TerminalState",
    "TransitionOutcome",
    "TransitionRequest",
    "allowed_next_states",
    "change_panel_status",
    "is_terminal",
    "lookup_status",
    "milestone_changes",
    "panel_history",
    "role_permissions",
    "stage_of",
    "status_info",
    "transition",
]
