"""Batch reconciliation of spreadsheet rows into the panel and item registers.

A batch moves ``idle -> parsing -> row_processing -> persisting -> reported`` and
may drop to ``failed`` from any state. Rows are classified independently against a
snapshot read once at batch start; one row's failure never aborts the batch. All
creates and updates are written with a single ``upsert_batch`` call.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from functools import partial
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Final

from paneltrack.domain.model import DEFAULT_PANEL_TYPE, Item
from paneltrack.domain.ports import PersistenceError, TabularParseError

from .contracts import (
    ABSENT,
    AmbiguousPanelResolution,
    BatchState,
    MatchedPanelResolution,
    MatchScope,
    NewPanelResolution,
    ReconciliationReport,
    RowOutcome,
    RowOutcomeKind,
    RowValidationError,
)
from .merge import build_panel, merge_panel
from .normalize import normalize_item_row, normalize_panel_row
from .resolve import PanelSnapshot, identity_key, resolve_row

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from uuid import UUID

    from paneltrack.domain.model import Panel
    from paneltrack.domain.ports import (
        PanelRepositories,
        PanelUnitOfWork,
        RawRow,
        TabularReader,
    )

    from .contracts import CanonicalPanelRow, Field, ItemRowOutcome, PanelRowOutcome

log = logging.getLogger(__name__)

# Spreadsheet line of the first data row (line 1 holds the header).
FIRST_DATA_ROW: Final[int] = 2

_BATCH_TRANSITIONS: Final[Mapping[BatchState, frozenset[BatchState]]] = MappingProxyType(
    {
        BatchState.IDLE: frozenset({BatchState.PARSING, BatchState.FAILED}),
        BatchState.PARSING: frozenset({BatchState.ROW_PROCESSING, BatchState.FAILED}),
        BatchState.ROW_PROCESSING: frozenset({BatchState.PERSISTING, BatchState.FAILED}),
        BatchState.PERSISTING: frozenset({BatchState.REPORTED, BatchState.FAILED}),
        BatchState.REPORTED: frozenset(),
        BatchState.FAILED: frozenset(),
    }
)


class ImportScopeError(ValueError):
    """The project/building an import targets is unknown or inconsistent."""


@dataclass(slots=True)
class BatchRun:
    """Drive one report through the batch state machine."""

    report: ReconciliationReport = field(default_factory=ReconciliationReport)

    def advance(self, state: BatchState) -> None:
        current = self.report.state
        if state not in _BATCH_TRANSITIONS[current]:
            raise RuntimeError(f"Illegal batch state change {current} -> {state}")
        log.debug("Batch state %s -> %s", current, state)
        self.report.state = state

    def fail(self, message: str) -> ReconciliationReport:
        self.report.errors.append(message)
        self.advance(BatchState.FAILED)
        return self.report

    def parse(
        self,
        read_rows: TabularReader,
        payload: bytes,
        *,
        filename: str | None,
    ) -> list[RawRow] | None:
        self.advance(BatchState.PARSING)
        try:
            rows = read_rows(payload, filename=filename)
        except TabularParseError as exc:
            log.error("Could not read %s: %s", filename or "upload", exc)
            self.fail(f"Unreadable file: {exc}")
            return None
        log.info("Read %d rows from %s", len(rows), filename or "upload")
        return rows


@dataclass(frozen=True, slots=True)
class ImportScope:
    """Project/building context resolved once per batch."""

    project_id: UUID | None
    building_id: UUID | None
    project_ids: frozenset[UUID]
    building_projects: Mapping[UUID, UUID]

    @classmethod
    def load(
        cls,
        repositories: PanelRepositories,
        *,
        project_id: UUID | None,
        building_id: UUID | None = None,
    ) -> ImportScope:
        project_ids = frozenset(project.id for project in repositories.projects.list_all())
        building_projects = MappingProxyType(
            {building.id: building.project_id for building in repositories.buildings.list_all()}
        )
        if project_id is not None and project_id not in project_ids:
            raise ImportScopeError(f"Unknown project {project_id}")
        if building_id is not None:
            owner = building_projects.get(building_id)
            if owner is None:
                raise ImportScopeError(f"Unknown building {building_id}")
            if project_id is not None and owner != project_id:
                raise ImportScopeError(
                    f"Building {building_id} does not belong to project {project_id}"
                )
            project_id = owner
        return cls(
            project_id=project_id,
            building_id=building_id,
            project_ids=project_ids,
            building_projects=building_projects,
        )

    def row_project(self, row_project_id: Field[UUID]) -> UUID | None:
        if row_project_id is ABSENT:
            return self.project_id
        if self.project_id is not None and row_project_id != self.project_id:
            raise RowValidationError(
                f"row project {row_project_id} differs from import project {self.project_id}"
            )
        if row_project_id not in self.project_ids:
            raise RowValidationError(f"unknown project {row_project_id}")
        return row_project_id

    def check_building(self, building_id: UUID, project_id: UUID) -> UUID:
        owner = self.building_projects.get(building_id)
        if owner is None:
            raise RowValidationError(f"unknown building {building_id}")
        if owner != project_id:
            raise RowValidationError(
                f"building {building_id} does not belong to project {project_id}"
            )
        return building_id


@dataclass(slots=True)
class PanelReconciler:
    """Reconcile a spreadsheet of panel rows against the stored panel set."""

    unit_of_work: Callable[[], PanelUnitOfWork]
    read_rows: TabularReader
    workers: int = 1
    match_scope: MatchScope = MatchScope.GLOBAL
    today: Callable[[], date] = date.today

    def reconcile(
        self,
        payload: bytes,
        *,
        filename: str | None = None,
        project_id: UUID | None = None,
        building_id: UUID | None = None,
    ) -> ReconciliationReport:
        run = BatchRun()
        rows = run.parse(self.read_rows, payload, filename=filename)
        if rows is None:
            return run.report
        return self._reconcile(rows, run, project_id=project_id, building_id=building_id)

    def reconcile_rows(
        self,
        rows: Sequence[RawRow],
        *,
        project_id: UUID | None = None,
        building_id: UUID | None = None,
    ) -> ReconciliationReport:
        """Reconcile rows that were already decoded by the caller."""

        run = BatchRun()
        run.advance(BatchState.PARSING)
        return self._reconcile(list(rows), run, project_id=project_id, building_id=building_id)

    def _reconcile(
        self,
        rows: list[RawRow],
        run: BatchRun,
        *,
        project_id: UUID | None,
        building_id: UUID | None,
    ) -> ReconciliationReport:
        report = run.report
        with self.unit_of_work() as uow:
            repositories = uow.repositories
            try:
                scope = ImportScope.load(
                    repositories, project_id=project_id, building_id=building_id
                )
                snapshot = PanelSnapshot.build(repositories.panels.list_all())
            except ImportScopeError as exc:
                log.error("Rejecting panel import: %s", exc)
                return run.fail(str(exc))
            except PersistenceError as exc:
                log.error("Loading stored panels failed: %s", exc)
                report.persistence_error = exc
                return run.fail(f"Loading stored panels failed: {exc}")

            log.info("Reconciling %d rows against %d panels", len(rows), len(snapshot))

            run.advance(BatchState.ROW_PROCESSING)
            outcomes = self.classify(rows, snapshot, scope)
            for outcome in outcomes:
                report.record(outcome)

            run.advance(BatchState.PERSISTING)
            write_set = [outcome.record for outcome in outcomes if outcome.record is not None]
            try:
                if write_set:
                    repositories.panels.upsert_batch(write_set)
                uow.commit()
            except PersistenceError as exc:
                uow.rollback()
                log.error("Persisting %d panels failed: %s", len(write_set), exc)
                report.persistence_error = exc
                return run.fail(f"Persisting batch failed: {exc}")

        report.persisted = True
        run.advance(BatchState.REPORTED)
        log.info(
            "Panel import done: added=%d updated=%d failed=%d total=%d",
            report.added,
            report.updated,
            report.failed,
            report.total,
        )
        return report

    def classify(
        self,
        rows: Sequence[RawRow],
        snapshot: PanelSnapshot,
        scope: ImportScope,
    ) -> list[PanelRowOutcome]:
        """Classify every row; the result is in row order regardless of ``workers``."""

        process = partial(self._process_row, snapshot=snapshot, scope=scope, today=self.today())
        if self.workers > 1 and len(rows) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                outcomes = list(pool.map(process, range(len(rows)), rows))
        else:
            outcomes = [process(index, row) for index, row in enumerate(rows)]
        return self._reject_batch_duplicates(outcomes)

    def _process_row(
        self,
        index: int,
        raw_row: RawRow,
        *,
        snapshot: PanelSnapshot,
        scope: ImportScope,
        today: date,
    ) -> PanelRowOutcome:
        row_number = index + FIRST_DATA_ROW
        try:
            row = normalize_panel_row(raw_row)
            serial = identity_key(row)
            project_id = scope.row_project(row.project_id)
            resolution = resolve_row(
                row, snapshot, match_scope=self.match_scope, project_id=project_id
            )
            match resolution:
                case MatchedPanelResolution(target=target):
                    if row.building_id is not ABSENT:
                        scope.check_building(row.building_id, target.project_id)
                    return RowOutcome(
                        row_number=row_number,
                        kind=RowOutcomeKind.UPDATED,
                        record=merge_panel(target, row),
                        key=serial,
                    )
                case AmbiguousPanelResolution(candidates=candidates):
                    raise RowValidationError(
                        f"serial number {serial!r} matches {len(candidates)} panels; "
                        "import into a single project instead"
                    )
                case NewPanelResolution():
                    return RowOutcome(
                        row_number=row_number,
                        kind=RowOutcomeKind.ADDED,
                        record=self._new_panel(row, serial, project_id, scope, today),
                        key=serial,
                    )
        except ValueError as exc:
            log.warning("Row %d rejected: %s", row_number, exc)
            return RowOutcome(row_number=row_number, kind=RowOutcomeKind.FAILED, error=str(exc))

    @staticmethod
    def _new_panel(
        row: CanonicalPanelRow,
        serial: str,
        project_id: UUID | None,
        scope: ImportScope,
        today: date,
    ) -> Panel:
        if project_id is None:
            raise RowValidationError(f"no project given for new panel {serial!r}")
        building_id = scope.building_id if row.building_id is ABSENT else row.building_id
        if building_id is not None:
            scope.check_building(building_id, project_id)
        return build_panel(
            row,
            serial_number=serial,
            project_id=project_id,
            building_id=building_id,
            today=today,
        )

    def _reject_batch_duplicates(self, outcomes: list[PanelRowOutcome]) -> list[PanelRowOutcome]:
        """Later rows repeating a serial already handled in this batch fail."""

        first_seen: dict[Any, int] = {}
        checked: list[PanelRowOutcome] = []
        for outcome in outcomes:
            if outcome.record is None or outcome.key is None:
                checked.append(outcome)
                continue
            dedupe_key: Any = outcome.key
            if self.match_scope is MatchScope.PROJECT:
                dedupe_key = (outcome.key, outcome.record.project_id)
            first = first_seen.setdefault(dedupe_key, outcome.row_number)
            if first == outcome.row_number:
                checked.append(outcome)
                continue
            message = f"duplicate serial number {outcome.key!r} (already in row {first})"
            log.warning("Row %d rejected: %s", outcome.row_number, message)
            checked.append(
                RowOutcome(
                    row_number=outcome.row_number,
                    kind=RowOutcomeKind.FAILED,
                    error=message,
                )
            )
        return checked


@dataclass(slots=True)
class ItemImporter:
    """Create item-register records from a spreadsheet. Items are never matched."""

    unit_of_work: Callable[[], PanelUnitOfWork]
    read_rows: TabularReader

    def import_items(
        self,
        payload: bytes,
        *,
        filename: str | None = None,
        project_id: UUID | None = None,
    ) -> ReconciliationReport:
        run = BatchRun()
        rows = run.parse(self.read_rows, payload, filename=filename)
        if rows is None:
            return run.report

        report = run.report
        with self.unit_of_work() as uow:
            repositories = uow.repositories
            try:
                scope = ImportScope.load(repositories, project_id=project_id)
            except ImportScopeError as exc:
                log.error("Rejecting item import: %s", exc)
                return run.fail(str(exc))
            except PersistenceError as exc:
                log.error("Loading import scope failed: %s", exc)
                report.persistence_error = exc
                return run.fail(f"Loading import scope failed: {exc}")

            run.advance(BatchState.ROW_PROCESSING)
            outcomes = [self._process_row(index, row, scope) for index, row in enumerate(rows)]
            for outcome in outcomes:
                report.record(outcome)

            run.advance(BatchState.PERSISTING)
            items = [outcome.record for outcome in outcomes if outcome.record is not None]
            try:
                if items:
                    repositories.items.add_batch(items)
                uow.commit()
            except PersistenceError as exc:
                uow.rollback()
                log.error("Persisting %d items failed: %s", len(items), exc)
                report.persistence_error = exc
                return run.fail(f"Persisting batch failed: {exc}")

        report.persisted = True
        run.advance(BatchState.REPORTED)
        log.info("Item import done: added=%d failed=%d", report.added, report.failed)
        return report

    @staticmethod
    def _process_row(index: int, raw_row: RawRow, scope: ImportScope) -> ItemRowOutcome:
        row_number = index + FIRST_DATA_ROW
        try:
            row = normalize_item_row(raw_row)
            if row.name is ABSENT:
                raise RowValidationError("missing item name")
            project_id = scope.row_project(row.project_id)
            if project_id is None:
                raise RowValidationError(f"no project given for item {row.name!r}")
            item = Item(
                project_id=project_id,
                name=row.name,
                item_type=DEFAULT_PANEL_TYPE if row.item_type is ABSENT else row.item_type,
                status=row.status,
                document_date=row.document_date,
                issue_transmittal_no=row.issue_transmittal_no,
                dwg_no=row.dwg_no,
                description=row.description,
                panel_tag=row.panel_tag,
                unit_qty=row.unit_qty,
                ifp_qty_nos=row.ifp_qty_nos,
                ifp_qty=row.ifp_qty,
                draftman=row.draftman,
            )
        except ValueError as exc:
            log.warning("Item row %d rejected: %s", row_number, exc)
            return RowOutcome(row_number=row_number, kind=RowOutcomeKind.FAILED, error=str(exc))
        return RowOutcome(row_number=row_number, kind=RowOutcomeKind.ADDED, record=item)
