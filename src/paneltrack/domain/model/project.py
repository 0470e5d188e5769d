"""Projects and buildings that panels and items belong to."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from paneltrack.domain.model.entity import Entity
from paneltrack.domain.model.enums import ProjectStatus

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Project(Entity):
    name: str
    location: str | None = None
    client_name: str | None = None
    status: ProjectStatus = ProjectStatus.ACTIVE


@dataclass(eq=False, kw_only=True)
class Building(Entity):
    project_id: UUID
    name: str
    floors: int = 1
    description: str | None = None

    def __post_init__(self) -> None:
        if self.floors < 0:
            raise ValueError(f"Building floors must be non-negative, got {self.floors}")
