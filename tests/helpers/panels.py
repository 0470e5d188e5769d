"""In-memory record store and builders for panel tests."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, Literal

from paneltrack.domain.model import Building, Item, Panel, PanelStatus, Project
from paneltrack.domain.ports import DuplicateSerialError, PanelRepositories, PersistenceError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from paneltrack.domain.model import StatusHistoryEntry

MANUFACTURED_ON = date(2024, 1, 15)


def make_project(name: str = "Harbour Tower") -> Project:
    return Project(name=name, location="Dubai", client_name="Acme Developments")


def make_panel(
    serial_number: str = "PNL-001",
    *,
    project_id: UUID,
    status: PanelStatus = PanelStatus.MANUFACTURED,
    **overrides: Any,
) -> Panel:
    overrides.setdefault("manufactured_date", MANUFACTURED_ON)
    return Panel(serial_number=serial_number, project_id=project_id, status=status, **overrides)


def panel_state(panel: Panel) -> dict[str, Any]:
    """Every field of a panel, for before/after comparisons."""

    return dataclasses.asdict(panel)


@dataclass
class InMemoryStore:
    """Shared state behind every fake unit of work created from it."""

    panels: dict[UUID, Panel] = field(default_factory=dict)
    history: dict[UUID, list[StatusHistoryEntry]] = field(default_factory=dict)
    projects: dict[UUID, Project] = field(default_factory=dict)
    buildings: dict[UUID, Building] = field(default_factory=dict)
    items: list[Item] = field(default_factory=list)
    upsert_calls: list[int] = field(default_factory=list)
    list_all_calls: int = 0
    fail_reads: bool = False
    fail_writes: bool = False
    commits: int = 0
    rollbacks: int = 0

    def add_project(self, project: Project | None = None) -> Project:
        project = project or make_project()
        self.projects[project.id] = project
        return project

    def add_building(self, project: Project, name: str = "Block A") -> Building:
        building = Building(project_id=project.id, name=name, floors=12)
        self.buildings[building.id] = building
        return building

    def add_panels(self, *panels: Panel) -> None:
        for panel in panels:
            self.panels[panel.id] = panel

    def unit_of_work(self) -> FakeUnitOfWork:
        return FakeUnitOfWork(self)


class FakePanelRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def get(self, panel_id: UUID) -> Panel | None:
        return self.store.panels.get(panel_id)

    def find_by_serial(self, serial_number: str, *, project_id: UUID | None = None) -> Panel | None:
        found = [
            panel
            for panel in self.store.panels.values()
            if panel.serial_number == serial_number.strip()
            and (project_id is None or panel.project_id == project_id)
        ]
        if len(found) > 1:
            raise DuplicateSerialError(serial_number, len(found))
        return found[0] if found else None

    def list_all(self, *, project_id: UUID | None = None) -> list[Panel]:
        self.store.list_all_calls += 1
        if self.store.fail_reads:
            raise PersistenceError("database is locked")
        panels = [
            panel
            for panel in self.store.panels.values()
            if project_id is None or panel.project_id == project_id
        ]
        return sorted(panels, key=lambda panel: panel.serial_number)

    def upsert_batch(self, panels: Sequence[Panel]) -> None:
        self.store.upsert_calls.append(len(panels))
        if self.store.fail_writes:
            raise PersistenceError("disk full")
        for panel in panels:
            self.store.panels[panel.id] = panel


class FakeStatusHistoryRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def append(self, entry: StatusHistoryEntry) -> StatusHistoryEntry:
        log = self.store.history.setdefault(entry.panel_id, [])
        entry.sequence = len(log) + 1
        log.append(entry)
        return entry

    def entries_for(self, panel_id: UUID) -> list[StatusHistoryEntry]:
        return list(self.store.history.get(panel_id, []))


class FakeProjectRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def add(self, entity: Project) -> None:
        self.store.projects[entity.id] = entity

    def get(self, entity_id: UUID) -> Project | None:
        return self.store.projects.get(entity_id)

    def list_all(self) -> list[Project]:
        if self.store.fail_reads:
            raise PersistenceError("database is locked")
        return list(self.store.projects.values())


class FakeBuildingRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def add(self, entity: Building) -> None:
        self.store.buildings[entity.id] = entity

    def get(self, entity_id: UUID) -> Building | None:
        return self.store.buildings.get(entity_id)

    def list_all(self) -> list[Building]:
        return list(self.store.buildings.values())

    def list_for_project(self, project_id: UUID) -> list[Building]:
        return [b for b in self.store.buildings.values() if b.project_id == project_id]


class FakeItemRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def add_batch(self, items: Sequence[Item]) -> None:
        if self.store.fail_writes:
            raise PersistenceError("disk full")
        self.store.items.extend(items)

    def list_for_project(self, project_id: UUID) -> list[Item]:
        return [item for item in self.store.items if item.project_id == project_id]


class FakeUnitOfWork:
    """Writes go straight to the store; commit/rollback are only counted."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.repositories = PanelRepositories(
            panels=FakePanelRepository(store),
            history=FakeStatusHistoryRepository(store),
            projects=FakeProjectRepository(store),
            buildings=FakeBuildingRepository(store),
            items=FakeItemRepository(store),
        )

    def __enter__(self) -> FakeUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: object | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        self.store.commits += 1

    def rollback(self) -> None:
        self.store.rollbacks += 1


if TYPE_CHECKING:
    from paneltrack.domain.ports import PanelUnitOfWork

    _uow_check: PanelUnitOfWork = FakeUnitOfWork(InMemoryStore())
