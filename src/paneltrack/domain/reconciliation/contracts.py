"""Shared reconciliation value objects.

This module holds only data: the canonical row shapes produced by normalization,
resolution outcomes, per-row outcomes and the batch report.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import TYPE_CHECKING, Any, Final, Literal

from paneltrack.domain.model import ItemStatus

if TYPE_CHECKING:
    from datetime import date
    from uuid import UUID

    from paneltrack.domain.model import Item, Panel, PanelStatus, UnitQtyType
    from paneltrack.domain.ports import PersistenceError


class Absent(Enum):
    """Marker for "the row has no opinion on this field".

    Distinct from ``None``, which a row uses to clear an optional field.
    """

    ABSENT = "absent"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Final = Absent.ABSENT

type Field[T] = T | Literal[Absent.ABSENT]


class RowValidationError(ValueError):
    """A single row cannot be reconciled. Captured into the report, never raised past it."""


class MatchScope(StrEnum):
    """How far the serial-number lookup reaches when resolving an imported row."""

    GLOBAL = "global"
    PROJECT = "project"


@dataclass(frozen=True, slots=True, kw_only=True)
class CanonicalPanelRow:
    serial_number: Field[str] = ABSENT
    name: Field[str] = ABSENT
    panel_type: Field[str] = ABSENT
    project_id: Field[UUID] = ABSENT
    building_id: Field[UUID] = ABSENT

    width: Field[float] = ABSENT
    height: Field[float] = ABSENT
    thickness: Field[float] = ABSENT
    weight: Field[float] = ABSENT

    status: Field[PanelStatus] = ABSENT
    manufactured_date: Field[date] = ABSENT
    delivered_date: Field[date] = ABSENT
    installed_date: Field[date] = ABSENT
    inspected_date: Field[date] = ABSENT

    location: Field[str | None] = ABSENT
    document_date: Field[date | None] = ABSENT
    issue_transmittal_no: Field[str | None] = ABSENT
    dwg_no: Field[str | None] = ABSENT
    description: Field[str | None] = ABSENT
    panel_tag: Field[str | None] = ABSENT
    unit_qty: Field[float | None] = ABSENT
    unit_qty_type: Field[UnitQtyType] = ABSENT
    ifp_qty_nos: Field[int | None] = ABSENT
    ifp_qty_measurement: Field[float | None] = ABSENT
    draftman: Field[str | None] = ABSENT
    checked_by: Field[str | None] = ABSENT
    notes: Field[str | None] = ABSENT
    status_update: Field[str | None] = ABSENT

    def present(self) -> dict[str, Any]:
        """Fields the row carries a value (or an explicit clear) for."""

        return {
            spec.name: value
            for spec in dataclasses.fields(self)
            if (value := getattr(self, spec.name)) is not ABSENT
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class CanonicalItemRow:
    name: Field[str] = ABSENT
    project_id: Field[UUID] = ABSENT
    item_type: Field[str] = ABSENT
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


class ResolutionStatus(StrEnum):
    NEW = "new"
    MATCHED = "matched"
    AMBIGUOUS = "ambiguous"


@dataclass(slots=True, kw_only=True)
class NewPanelResolution:
    """No panel carries the row's serial number; one will be created."""

    serial_number: str
    reason: str | None = None
    status: Literal[ResolutionStatus.NEW] = ResolutionStatus.NEW


@dataclass(slots=True, kw_only=True)
class MatchedPanelResolution:
    """Exactly one existing panel carries the row's serial number."""

    target: Panel
    reason: str | None = None
    status: Literal[ResolutionStatus.MATCHED] = ResolutionStatus.MATCHED


@dataclass(slots=True, kw_only=True)
class AmbiguousPanelResolution:
    """Several panels share the serial number (possible across projects)."""

    candidates: tuple[Panel, ...]
    reason: str | None = None
    status: Literal[ResolutionStatus.AMBIGUOUS] = ResolutionStatus.AMBIGUOUS

    def __post_init__(self) -> None:
        if len(self.candidates) < 2:
            raise ValueError("Ambiguous resolution needs at least two candidates")


type PanelResolution = NewPanelResolution | MatchedPanelResolution | AmbiguousPanelResolution


class RowOutcomeKind(StrEnum):
    ADDED = "added"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass(frozen=True, slots=True, kw_only=True)
class RowOutcome[TRecord]:
    """Classification of one input row, in input order."""

    row_number: int
    kind: RowOutcomeKind
    record: TRecord | None = None
    key: str | None = None
    error: str | None = None

    @property
    def message(self) -> str | None:
        if self.error is None:
            return None
        return f"Row {self.row_number}: {self.error}"


type PanelRowOutcome = RowOutcome[Panel]
type ItemRowOutcome = RowOutcome[Item]


class BatchState(StrEnum):
    IDLE = "idle"
    PARSING = "parsing"
    ROW_PROCESSING = "row_processing"
    PERSISTING = "persisting"
    REPORTED = "reported"
    FAILED = "failed"


@dataclass(slots=True, kw_only=True)
class ReconciliationReport:
    """Outcome of one import batch.

    ``added``/``updated``/``failed`` describe classification. ``persisted`` says
    whether the single batch write went through; a failed write keeps the counts.
    """

    added: int = 0
    updated: int = 0
    failed: int = 0
    total: int = 0
    errors: list[str] = field(default_factory=list)
    state: BatchState = BatchState.IDLE
    persisted: bool = False
    persistence_error: PersistenceError | None = None

    @property
    def ok(self) -> bool:
        return self.state is BatchState.REPORTED

    def record(self, outcome: RowOutcome[Any]) -> None:
        self.total += 1
        match outcome.kind:
            case RowOutcomeKind.ADDED:
                self.added += 1
            case RowOutcomeKind.UPDATED:
                self.updated += 1
            case RowOutcomeKind.FAILED:
                self.failed += 1
                if outcome.message is not None:
                    self.errors.append(outcome.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "added": self.added,
            "updated": self.updated,
            "failed": self.failed,
            "total": self.total,
            "errors": list(self.errors),
            "state": self.state.value,
            "persisted": self.persisted,
        }
