from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from paneltrack import app
from paneltrack.config import ImportConfig
from paneltrack.domain.lifecycle import InvalidTransition, PanelNotFoundError
from paneltrack.domain.model import PanelStatus, UserRole
from paneltrack.domain.reconciliation import MatchScope

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from paneltrack.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

type Factory = Callable[[], SqlAlchemyUnitOfWork]


def test_create_building_requires_known_project(sqlite_unit_of_work: Factory) -> None:
    project = app.create_project(" Harbour Tower ", unit_of_work_factory=sqlite_unit_of_work)
    building = app.create_building(
        project.id, "Block A", floors=14, unit_of_work_factory=sqlite_unit_of_work
    )

    assert project.name == "Harbour Tower"
    assert building.project_id == project.id
    with pytest.raises(LookupError):
        app.create_building(
            building.id, "Block B", unit_of_work_factory=sqlite_unit_of_work
        )


def test_import_then_move_panel_by_serial(sqlite_unit_of_work: Factory, tmp_path: Path) -> None:
    project = app.create_project("Harbour Tower", unit_of_work_factory=sqlite_unit_of_work)
    register = tmp_path / "register.csv"
    register.write_text("Serial Number,Width,Height\nPNL-001,1200,3000\nPNL-002,900,3000\n")

    report = app.import_panels(
        register,
        project_id=project.id,
        config=ImportConfig(workers=1, match_scope=MatchScope.PROJECT),
        unit_of_work_factory=sqlite_unit_of_work,
    )
    outcome = app.change_panel_status(
        "PNL-001",
        PanelStatus.DELIVERED,
        UserRole.STORE_SITE,
        acting_user="store-1",
        unit_of_work_factory=sqlite_unit_of_work,
    )
    panel, entries = app.panel_history("PNL-001", unit_of_work_factory=sqlite_unit_of_work)
    _, allowed = app.allowed_statuses(
        str(panel.id), UserRole.ADMIN, unit_of_work_factory=sqlite_unit_of_work
    )

    assert report.to_dict()["added"] == 2
    assert outcome.panel.status is PanelStatus.DELIVERED
    assert panel.delivered_date is not None
    assert [entry.updated_by for entry in entries] == ["store-1"]
    assert allowed == {PanelStatus.APPROVED_MATERIAL, PanelStatus.REJECTED_MATERIAL}


def test_rejected_change_keeps_panel(sqlite_unit_of_work: Factory, tmp_path: Path) -> None:
    project = app.create_project("Harbour Tower", unit_of_work_factory=sqlite_unit_of_work)
    register = tmp_path / "register.csv"
    register.write_text("Serial Number\nPNL-001\n")
    app.import_panels(
        register,
        project_id=project.id,
        config=ImportConfig(),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    with pytest.raises(InvalidTransition):
        app.change_panel_status(
            "PNL-001",
            PanelStatus.INSTALLED,
            UserRole.DATA_ENTRY,
            acting_user="clerk",
            unit_of_work_factory=sqlite_unit_of_work,
        )
    panel, entries = app.panel_history("PNL-001", unit_of_work_factory=sqlite_unit_of_work)

    assert panel.status is PanelStatus.MANUFACTURED
    assert entries == []


def test_unknown_panel_reference(sqlite_unit_of_work: Factory) -> None:
    with pytest.raises(PanelNotFoundError):
        app.panel_history("PNL-404", unit_of_work_factory=sqlite_unit_of_work)


def test_import_items(sqlite_unit_of_work: Factory, tmp_path: Path) -> None:
    project = app.create_project("Harbour Tower", unit_of_work_factory=sqlite_unit_of_work)
    register = tmp_path / "items.csv"
    register.write_text("Name,Status\nStair flight,Completed\nLanding,\n")

    report = app.import_items(register, project_id=project.id, unit_of_work_factory=sqlite_unit_of_work)

    assert (report.added, report.failed, report.persisted) == (2, 0, True)
    with sqlite_unit_of_work() as uow:
        names = [item.name for item in uow.repositories.items.list_for_project(project.id)]
    assert names == ["Landing", "Stair flight"]
