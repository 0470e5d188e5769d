"""Ports for the record store that owns panels and their surrounding records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from paneltrack.domain.model import Building, Item, Panel, Project, StatusHistoryEntry

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class PersistenceError(RuntimeError):
    """Raised when the backing store rejects a write."""


class DuplicateSerialError(LookupError):
    """Raised when a serial-number lookup finds more than one panel."""

    def __init__(self, serial_number: str, count: int) -> None:
        super().__init__(f"Serial number {serial_number!r} matches {count} panels")
        self.serial_number = serial_number
        self.count = count


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent record store."""

    def add(self, entity: TEntity) -> None: ...

    def get(self, entity_id: UUID) -> TEntity | None: ...


@runtime_checkable
class PanelRepository(Protocol):
    """Panels are only ever written in batches; there is no single-row write."""

    def get(self, panel_id: UUID) -> Panel | None: ...

    def find_by_serial(
        self, serial_number: str, *, project_id: UUID | None = None
    ) -> Panel | None: ...

    def list_all(self, *, project_id: UUID | None = None) -> list[Panel]: ...

    def upsert_batch(self, panels: Sequence[Panel]) -> None: ...


@runtime_checkable
class StatusHistoryRepository(Protocol):
    """Append-only log of accepted transitions keyed by panel id."""

    def append(self, entry: StatusHistoryEntry) -> StatusHistoryEntry: ...

    def entries_for(self, panel_id: UUID) -> list[StatusHistoryEntry]: ...


@runtime_checkable
class ProjectRepository(Repository[Project], Protocol):
    def list_all(self) -> list[Project]: ...


@runtime_checkable
class BuildingRepository(Repository[Building], Protocol):
    def list_all(self) -> list[Building]: ...

    def list_for_project(self, project_id: UUID) -> list[Building]: ...


@runtime_checkable
class ItemRepository(Protocol):
    def add_batch(self, items: Sequence[Item]) -> None: ...

    def list_for_project(self, project_id: UUID) -> list[Item]: ...
