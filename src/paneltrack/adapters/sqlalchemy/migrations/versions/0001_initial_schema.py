"""Initial panel tracking schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "project",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("client_name", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=9), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_project"),
    )
    op.create_table(
        "building",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("project_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("floors", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["project_id"], ["project.id"], name="fk_building_building_project_id_project"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_building"),
    )
    op.create_index("ix_building_project_id", "building", ["project_id"])
    op.create_table(
        "panel",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("serial_number", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("project_id", sa.Uuid(), nullable=False),
        sa.Column("building_id", sa.Uuid(), nullable=True),
        sa.Column("width", sa.Float(), nullable=False),
        sa.Column("height", sa.Float(), nullable=False),
        sa.Column("thickness", sa.Float(), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("status", sa.String(length=17), nullable=False),
        sa.Column("manufactured_date", sa.Date(), nullable=False),
        sa.Column("delivered_date", sa.Date(), nullable=True),
        sa.Column("installed_date", sa.Date(), nullable=True),
        sa.Column("inspected_date", sa.Date(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("issue_transmittal_no", sa.String(), nullable=True),
        sa.Column("dwg_no", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("panel_tag", sa.String(), nullable=True),
        sa.Column("unit_qty", sa.Float(), nullable=True),
        sa.Column("unit_qty_type", sa.String(length=3), nullable=False),
        sa.Column("ifp_qty_nos", sa.Integer(), nullable=True),
        sa.Column("ifp_qty_measurement", sa.Float(), nullable=True),
        sa.Column("draftman", sa.String(), nullable=True),
        sa.Column("checked_by", sa.String(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status_update", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["project_id"], ["project.id"], name="fk_panel_panel_project_id_project"
        ),
        sa.ForeignKeyConstraint(
            ["building_id"], ["building.id"], name="fk_panel_panel_building_id_building"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_panel"),
    )
    op.create_index("ix_panel_serial_number", "panel", ["serial_number"])
    op.create_index("ix_panel_project_id", "panel", ["project_id"])
    op.create_table(
        "panel_status_history",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("panel_id", sa.Uuid(), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=17), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_by", sa.String(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["panel_id"],
            ["panel.id"],
            name="fk_panel_status_history_panel_status_history_panel_id_panel",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_panel_status_history"),
        sa.UniqueConstraint(
            "panel_id",
            "sequence",
            name="uq_panel_status_history_panel_status_history_panel_id",
        ),
    )
    op.create_index(
        "ix_panel_status_history_panel_id", "panel_status_history", ["panel_id"]
    )
    op.create_table(
        "item",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("project_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("issue_transmittal_no", sa.String(), nullable=True),
        sa.Column("dwg_no", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("panel_tag", sa.String(), nullable=True),
        sa.Column("unit_qty", sa.Float(), nullable=True),
        sa.Column("ifp_qty_nos", sa.Integer(), nullable=True),
        sa.Column("ifp_qty", sa.Float(), nullable=True),
        sa.Column("draftman", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(
            ["project_id"], ["project.id"], name="fk_item_item_project_id_project"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_item"),
    )
    op.create_index("ix_item_project_id", "item", ["project_id"])


def downgrade() -> None:
    op.drop_index("ix_item_project_id", table_name="item")
    op.drop_table("item")
    op.drop_index("ix_panel_status_history_panel_id", table_name="panel_status_history")
    op.drop_table("panel_status_history")
    op.drop_index("ix_panel_project_id", table_name="panel")
    op.drop_index("ix_panel_serial_number", table_name="panel")
    op.drop_table("panel")
    op.drop_index("ix_building_project_id", table_name="building")
    op.drop_table("building")
    op.drop_table("project")
