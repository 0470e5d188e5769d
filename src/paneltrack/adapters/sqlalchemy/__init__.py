"""SQLAlchemy adapter package for paneltrack."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyBuildingRepository,
    SqlAlchemyItemRepository,
    SqlAlchemyPanelRepository,
    SqlAlchemyProjectRepository,
    SqlAlchemyStatusHistoryRepository,
)

__all__ = [
    "SqlAlchemyBuildingRepository",
    "SqlAlchemyItemRepository",
    "SqlAlchemyPanelRepository",
    "SqlAlchemyProjectRepository",
    "SqlAlchemyStatusHistoryRepository",
    "mapper_registry",
    "start_mappers",
]
