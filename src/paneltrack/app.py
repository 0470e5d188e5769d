"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING
from uuid import UUID

from paneltrack.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from paneltrack.adapters.tabular import read_tabular
from paneltrack.config import get_import_config
from paneltrack.domain.lifecycle import (
    PanelNotFoundError,
    TransitionRequest,
    allowed_next_states,
)
from paneltrack.domain.lifecycle import change_panel_status as apply_status_change
from paneltrack.domain.lifecycle import panel_history as load_panel_history
from paneltrack.domain.model import Building, Project
from paneltrack.domain.ports.unit_of_work import PanelUnitOfWork
from paneltrack.domain.reconciliation import ItemImporter, PanelReconciler

if TYPE_CHECKING:
    from pathlib import Path

    from paneltrack.config import ImportConfig
    from paneltrack.domain.lifecycle import TransitionOutcome
    from paneltrack.domain.model import Panel, PanelStatus, StatusHistoryEntry, UserRole
    from paneltrack.domain.ports import PanelRepositories
    from paneltrack.domain.reconciliation import ReconciliationReport

UnitOfWorkFactory = Callable[[], PanelUnitOfWork]


log = getLogger(__name__)


def _unit_of_work(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def create_project(
    name: str,
    *,
    location: str | None = None,
    client_name: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Project:
    project = Project(name=name.strip(), location=location, client_name=client_name)
    with _unit_of_work(unit_of_work_factory)() as uow:
        uow.repositories.projects.add(project)
        uow.commit()
    log.info("Created project %s (%s)", project.name, project.id)
    return project


def create_building(
    project_id: UUID,
    name: str,
    *,
    floors: int = 1,
    description: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Building:
    with _unit_of_work(unit_of_work_factory)() as uow:
        if uow.repositories.projects.get(project_id) is None:
            raise LookupError(f"Project {project_id} not found")
        building = Building(
            project_id=project_id,
            name=name.strip(),
            floors=floors,
            description=description,
        )
        uow.repositories.buildings.add(building)
        uow.commit()
    log.info("Created building %s in project %s", building.name, project_id)
    return building


def import_panels(
    path: Path,
    *,
    project_id: UUID | None = None,
    building_id: UUID | None = None,
    config: ImportConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ReconciliationReport:
    """Reconcile a CSV/XLSX panel register against stored panels."""

    settings = config or get_import_config()
    reconciler = PanelReconciler(
        unit_of_work=_unit_of_work(unit_of_work_factory),
        read_rows=read_tabular,
        workers=settings.workers,
        match_scope=settings.match_scope,
    )
    log.info(
        "Starting panel import: file=%s, project=%s, building=%s, workers=%s, scope=%s",
        path.name,
        project_id,
        building_id,
        settings.workers,
        settings.match_scope,
    )
    return reconciler.reconcile(
        path.read_bytes(),
        filename=path.name,
        project_id=project_id,
        building_id=building_id,
    )


def import_items(
    path: Path,
    *,
    project_id: UUID | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ReconciliationReport:
    importer = ItemImporter(
        unit_of_work=_unit_of_work(unit_of_work_factory),
        read_rows=read_tabular,
    )
    log.info("Starting item import: file=%s, project=%s", path.name, project_id)
    return importer.import_items(path.read_bytes(), filename=path.name, project_id=project_id)


def find_panel(
    repositories: PanelRepositories,
    reference: str,
    *,
    project_id: UUID | None = None,
) -> Panel:
    """Look a panel up by id, falling back to its serial number."""

    try:
        panel = repositories.panels.get(UUID(reference))
    except ValueError:
        panel = repositories.panels.find_by_serial(reference, project_id=project_id)
    if panel is None:
        raise PanelNotFoundError(f"No panel matches {reference!r}")
    return panel


def change_panel_status(
    reference: str,
    requested_status: PanelStatus,
    role: UserRole,
    *,
    acting_user: str,
    notes: str | None = None,
    project_id: UUID | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> TransitionOutcome:
    factory = _unit_of_work(unit_of_work_factory)
    with factory() as uow:
        panel_id = find_panel(uow.repositories, reference, project_id=project_id).id
    request = TransitionRequest(
        panel_id=panel_id,
        requested_status=requested_status,
        acting_role=role,
    )
    return apply_status_change(
        request,
        unit_of_work_factory=factory,
        acting_user_label=acting_user,
        notes=notes,
    )


def panel_history(
    reference: str,
    *,
    project_id: UUID | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> tuple[Panel, list[StatusHistoryEntry]]:
    factory = _unit_of_work(unit_of_work_factory)
    with factory() as uow:
        panel = find_panel(uow.repositories, reference, project_id=project_id)
    return panel, load_panel_history(panel.id, unit_of_work_factory=factory)


def allowed_statuses(
    reference: str,
    role: UserRole,
    *,
    project_id: UUID | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> tuple[Panel, frozenset[PanelStatus]]:
    with _unit_of_work(unit_of_work_factory)() as uow:
        panel = find_panel(uow.repositories, reference, project_id=project_id)
    return panel, allowed_next_states(panel.status, role)
