"""Ports (interfaces) the domain depends on."""

from __future__ import annotations

from paneltrack.domain.ports.ingestion import RawRow, TabularParseError, TabularReader
from paneltrack.domain.ports.persistence import (
    BuildingRepository,
    DuplicateSerialError,
    ItemRepository,
    PanelRepository,
    PersistenceError,
    ProjectRepository,
    Repository,
    StatusHistoryRepository,
)
from paneltrack.domain.ports.unit_of_work import (
    PanelRepositories,
    PanelUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "BuildingRepository",
    "DuplicateSerialError",
    "ItemRepository",
    "PanelRepositories",
    "PanelRepository",
    "PanelUnitOfWork",
    "PersistenceError",
    "ProjectRepository",
    "RawRow",
    "Repository",
    "RepositoryCollection",
    "StatusHistoryRepository",
    "TabularParseError",
    "TabularReader",
    "UnitOfWork",
]
