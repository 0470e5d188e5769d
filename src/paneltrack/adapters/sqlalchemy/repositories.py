"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from paneltrack.adapters.sqlalchemy.mappings import (
    building_table,
    item_table,
    panel_status_history_table,
    panel_table,
    project_table,
)
from paneltrack.domain.model import Building, Item, Panel, Project, StatusHistoryEntry
from paneltrack.domain.ports import DuplicateSerialError, PersistenceError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from uuid import UUID

    from sqlalchemy.orm import Session

log = logging.getLogger(__name__)


def _flush(session: Session, what: str) -> None:
    try:
        session.flush()
    except SQLAlchemyError as exc:
        session.rollback()
        raise PersistenceError(f"Could not write {what}: {exc}") from exc


@contextmanager
def _reading(what: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise PersistenceError(f"Could not read {what}: {exc}") from exc


class SqlAlchemyPanelRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, panel_id: UUID) -> Panel | None:
        with _reading(f"panel {panel_id}"):
            return self.session.get(Panel, panel_id)

    def find_by_serial(self, serial_number: str, *, project_id: UUID | None = None) -> Panel | None:
        stmt = select(Panel).where(panel_table.c.serial_number == serial_number.strip())
        if project_id is not None:
            stmt = stmt.where(panel_table.c.project_id == project_id)
        with _reading(f"panel {serial_number!r}"):
            found = self.session.execute(stmt).scalars().all()
        if len(found) > 1:
            raise DuplicateSerialError(serial_number, len(found))
        return found[0] if found else None

    def list_all(self, *, project_id: UUID | None = None) -> list[Panel]:
        stmt = select(Panel).order_by(panel_table.c.serial_number, panel_table.c.id)
        if project_id is not None:
            stmt = stmt.where(panel_table.c.project_id == project_id)
        with _reading("panels"):
            return list(self.session.execute(stmt).scalars())

    def upsert_batch(self, panels: Sequence[Panel]) -> None:
        """Insert new panels and overwrite stored ones by primary key in one flush."""

        try:
            for panel in panels:
                self.session.merge(panel)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Could not stage {len(panels)} panels: {exc}") from exc
        _flush(self.session, f"{len(panels)} panels")
        log.debug("Upserted %d panels", len(panels))


class SqlAlchemyStatusHistoryRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def append(self, entry: StatusHistoryEntry) -> StatusHistoryEntry:
        stmt = select(func.coalesce(func.max(panel_status_history_table.c.sequence), 0)).where(
            panel_status_history_table.c.panel_id == entry.panel_id
        )
        with _reading(f"history sequence for panel {entry.panel_id}"):
            entry.sequence = int(self.session.execute(stmt).scalar_one()) + 1
        self.session.add(entry)
        _flush(self.session, f"history entry for panel {entry.panel_id}")
        return entry

    def entries_for(self, panel_id: UUID) -> list[StatusHistoryEntry]:
        stmt = (
            select(StatusHistoryEntry)
            .where(panel_status_history_table.c.panel_id == panel_id)
            .order_by(panel_status_history_table.c.sequence)
        )
        with _reading(f"history for panel {panel_id}"):
            return list(self.session.execute(stmt).scalars())


class SqlAlchemyProjectRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Project) -> None:
        self.session.add(entity)
        _flush(self.session, f"project {entity.name!r}")

    def get(self, entity_id: UUID) -> Project | None:
        with _reading(f"project {entity_id}"):
            return self.session.get(Project, entity_id)

    def list_all(self) -> list[Project]:
        stmt = select(Project).order_by(project_table.c.name)
        with _reading("projects"):
            return list(self.session.execute(stmt).scalars())


class SqlAlchemyBuildingRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Building) -> None:
        self.session.add(entity)
        _flush(self.session, f"building {entity.name!r}")

    def get(self, entity_id: UUID) -> Building | None:
        with _reading(f"building {entity_id}"):
            return self.session.get(Building, entity_id)

    def list_all(self) -> list[Building]:
        stmt = select(Building).order_by(building_table.c.name)
        with _reading("buildings"):
            return list(self.session.execute(stmt).scalars())

    def list_for_project(self, project_id: UUID) -> list[Building]:
        stmt = (
            select(Building)
            .where(building_table.c.project_id == project_id)
            .order_by(building_table.c.name)
        )
        with _reading(f"buildings of project {project_id}"):
            return list(self.session.execute(stmt).scalars())


class SqlAlchemyItemRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add_batch(self, items: Sequence[Item]) -> None:
        self.session.add_all(items)
        _flush(self.session, f"{len(items)} items")

    def list_for_project(self, project_id: UUID) -> list[Item]:
        stmt = (
            select(Item)
            .where(item_table.c.project_id == project_id)
            .order_by(item_table.c.name)
        )
        with _reading(f"items of project {project_id}"):
            return list(self.session.execute(stmt).scalars())
