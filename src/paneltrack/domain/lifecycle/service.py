"""Serialised read-modify-write of single-panel status changes.

Two requests for the same panel never interleave: each takes the panel's lock,
reads the panel, runs the pure transition, writes the panel and appends exactly one
history entry inside one unit of work. Requests for different panels do not wait on
each other.
"""

from __future__ import annotations

import threading
import weakref
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from paneltrack.domain.lifecycle.engine import TransitionOutcome, transition

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from paneltrack.domain.lifecycle.engine import TransitionRequest
    from paneltrack.domain.model import StatusHistoryEntry
    from paneltrack.domain.ports import PanelUnitOfWork

log = getLogger(__name__)


class PanelNotFoundError(LookupError):
    """Raised when a status change or history lookup names an unknown panel."""


class PanelLocks:
    """Registry of one lock per panel id (process-local).

    Entries are weak: a panel's lock lives only while some caller holds it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary[UUID, threading.Lock] = (
            weakref.WeakValueDictionary()
        )

    def __len__(self) -> int:
        return len(self._locks)

    def lock_for(self, panel_id: UUID) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(panel_id)
            if lock is None:
                lock = self._locks[panel_id] = threading.Lock()
            return lock


_PANEL_LOCKS = PanelLocks()


def change_panel_status(
    request: TransitionRequest,
    *,
    unit_of_work_factory: Callable[[], PanelUnitOfWork],
    acting_user_label: str,
    notes: str | None = None,
    clock: Callable[[], datetime] | None = None,
    locks: PanelLocks | None = None,
) -> TransitionOutcome:
    """Apply one transition and persist the panel together with its history entry.

    Lifecycle errors propagate before anything is written.
    """

    now = clock or (lambda: datetime.now(UTC))
    with (locks or _PANEL_LOCKS).lock_for(request.panel_id):
        with unit_of_work_factory() as uow:
            repositories = uow.repositories
            panel = repositories.panels.get(request.panel_id)
            if panel is None:
                raise PanelNotFoundError(f"Panel {request.panel_id} not found")
            previous_status = panel.status
            outcome = transition(
                panel,
                request.requested_status,
                request.acting_role,
                acting_user_label,
                now(),
                notes=notes,
            )
            repositories.panels.upsert_batch([outcome.panel])
            entry = repositories.history.append(outcome.entry)
            uow.commit()

    log.info(
        "Panel %s: %s -> %s by %s (%s)",
        outcome.panel.serial_number,
        previous_status,
        outcome.panel.status,
        acting_user_label,
        request.acting_role,
    )
    return TransitionOutcome(panel=outcome.panel, entry=entry)


def panel_history(
    panel_id: UUID,
    *,
    unit_of_work_factory: Callable[[], PanelUnitOfWork],
) -> list[StatusHistoryEntry]:
    with unit_of_work_factory() as uow:
        if uow.repositories.panels.get(panel_id) is None:
            raise PanelNotFoundError(f"Panel {panel_id} not found")
        return uow.repositories.history.entries_for(panel_id)
