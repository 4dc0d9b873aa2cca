"""Entity graph: external sources, entities and relationships.

Revision ID: 0001_entity_graph
Revises:
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from schemasync.adapters.sqlalchemy.mappings import UTCDateTime

revision = "0001_entity_graph"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "external_source",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", UTCDateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_external_source")),
        sa.UniqueConstraint("name", name=op.f("uq_external_source_name")),
    )
    op.create_table(
        "entity",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("type_name", sa.String(), nullable=False),
        sa.Column("qualified_name", sa.String(), nullable=False),
        sa.Column("properties", sa.JSON(), nullable=False),
        sa.Column("classifications", sa.JSON(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("external_source_id", sa.Uuid(), nullable=True),
        sa.Column("external_source_name", sa.String(), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("updated_by", sa.String(), nullable=True),
        sa.Column("created_at", UTCDateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=True),
        sa.Column("deleted_at", UTCDateTime(), nullable=True),
        sa.ForeignKeyConstraint(
            ["external_source_id"],
            ["external_source.id"],
            name=op.f("fk_entity_external_source_id_external_source"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_entity")),
    )
    op.create_index("ix_entity_type_name", "entity", ["type_name"])
    op.create_index(
        "uq_entity_active_qualified_name",
        "entity",
        ["qualified_name"],
        unique=True,
        sqlite_where=sa.text("deleted_at IS NULL"),
        postgresql_where=sa.text("deleted_at IS NULL"),
    )
    op.create_table(
        "entity_relationship",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("type_name", sa.String(), nullable=False),
        sa.Column("source_id", sa.Uuid(), nullable=False),
        sa.Column("target_id", sa.Uuid(), nullable=False),
        sa.Column("external_source_id", sa.Uuid(), nullable=True),
        sa.Column("external_source_name", sa.String(), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("created_at", UTCDateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("deleted_at", UTCDateTime(), nullable=True),
        sa.ForeignKeyConstraint(
            ["source_id"],
            ["entity.id"],
            name=op.f("fk_entity_relationship_source_id_entity"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["target_id"],
            ["entity.id"],
            name=op.f("fk_entity_relationship_target_id_entity"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["external_source_id"],
            ["external_source.id"],
            name=op.f("fk_entity_relationship_external_source_id_external_source"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_entity_relationship")),
    )
    op.create_index(
        "ix_entity_relationship_source", "entity_relationship", ["type_name", "source_id"]
    )
    op.create_index(
        "ix_entity_relationship_target", "entity_relationship", ["type_name", "target_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_entity_relationship_target", table_name="entity_relationship")
    op.drop_index("ix_entity_relationship_source", table_name="entity_relationship")
    op.drop_table("entity_relationship")
    op.drop_index("uq_entity_active_qualified_name", table_name="entity")
    op.drop_index("ix_entity_type_name", table_name="entity")
    op.drop_table("entity")
    op.drop_table("external_source")
