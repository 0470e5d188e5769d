"""SQLAlchemy mapping metadata for the paneltrack domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from enum import StrEnum
from functools import cache

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import composite, configure_mappers

from paneltrack.domain.model import (
    Building,
    Dimensions,
    Item,
    ItemStatus,
    Panel,
    PanelStatus,
    Project,
    ProjectStatus,
    StatusHistoryEntry,
    UnitQtyType,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _str_enum(enum_cls: type[StrEnum]) -> Enum:
    """Store enum values (not member names) so the table reads like the spreadsheets."""

    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
    )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

project_table = Table(
    "project",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("location", String, nullable=True),
    Column("client_name", String, nullable=True),
    Column("status", _str_enum(ProjectStatus), nullable=False),
)

building_table = Table(
    "building",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("project_id", UUIDColumnType, ForeignKey("project.id"), nullable=False, index=True),
    Column("name", String, nullable=False),
    Column("floors", Integer, nullable=False),
    Column("description", Text, nullable=True),
)

panel_table = Table(
    "panel",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("serial_number", String, nullable=False, index=True),
    Column("name", String, nullable=False),
    Column("type", String, key="panel_type", nullable=False),
    Column("project_id", UUIDColumnType, ForeignKey("project.id"), nullable=False, index=True),
    Column("building_id", UUIDColumnType, ForeignKey("building.id"), nullable=True),
    Column("width", Float, nullable=False),
    Column("height", Float, nullable=False),
    Column("thickness", Float, nullable=False),
    Column("weight", Float, nullable=False),
    Column("status", _str_enum(PanelStatus), nullable=False),
    Column("manufactured_date", Date, nullable=False),
    Column("delivered_date", Date, nullable=True),
    Column("installed_date", Date, nullable=True),
    Column("inspected_date", Date, nullable=True),
    Column("location", String, nullable=True),
    Column("date", Date, key="document_date", nullable=True),
    Column("issue_transmittal_no", String, nullable=True),
    Column("dwg_no", String, nullable=True),
    Column("description", Text, nullable=True),
    Column("panel_tag", String, nullable=True),
    Column("unit_qty", Float, nullable=True),
    Column("unit_qty_type", _str_enum(UnitQtyType), nullable=False),
    Column("ifp_qty_nos", Integer, nullable=True),
    Column("ifp_qty_measurement", Float, nullable=True),
    Column("draftman", String, nullable=True),
    Column("checked_by", String, nullable=True),
    Column("notes", Text, nullable=True),
    Column("status_update", Text, nullable=True),
)

# Insert-only; no code path issues UPDATE or DELETE against this table.
panel_status_history_table = Table(
    "panel_status_history",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("panel_id", UUIDColumnType, ForeignKey("panel.id"), nullable=False, index=True),
    Column("sequence", Integer, nullable=False),
    Column("status", _str_enum(PanelStatus), nullable=False),
    Column("date", UTCDateTime(), key="changed_at", nullable=False),
    Column("updated_by", String, nullable=False),
    Column("notes", Text, nullable=True),
    UniqueConstraint("panel_id", "sequence"),
)

item_table = Table(
    "item",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("project_id", UUIDColumnType, ForeignKey("project.id"), nullable=False, index=True),
    Column("name", String, nullable=False),
    Column("type", String, key="item_type", nullable=False),
    Column("status", _str_enum(ItemStatus), nullable=False),
    Column("date", Date, key="document_date", nullable=True),
    Column("issue_transmittal_no", String, nullable=True),
    Column("dwg_no", String, nullable=True),
    Column("description", Text, nullable=True),
    Column("panel_tag", String, nullable=True),
    Column("unit_qty", Float, nullable=True),
    Column("ifp_qty_nos", Integer, nullable=True),
    Column("ifp_qty", Float, nullable=True),
    Column("draftman", String, nullable=True),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Project, project_table)
    mapper_registry.map_imperatively(Building, building_table)
    mapper_registry.map_imperatively(
        Panel,
        panel_table,
        properties={
            "dimensions": composite(
                Dimensions,
                panel_table.c.width,
                panel_table.c.height,
                panel_table.c.thickness,
            ),
        },
    )
    mapper_registry.map_imperatively(StatusHistoryEntry, panel_status_history_table)
    mapper_registry.map_imperatively(Item, item_table)

    configure_mappers()
    return mapper_registry

