"""Initial owner, pet and address schema.

Revision ID: 0001
Revises:
Create Date: 2025-03-02 10:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "address",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("city", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("address_name", sa.String(), nullable=False),
        sa.Column("number", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_address"),
        sa.UniqueConstraint(
            "city", "type", "address_name", "number", name="uq_address_address_city"
        ),
    )
    op.create_table(
        "owner",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column(
            "gender",
            sa.Enum("MALE", "FEMALE", "OTHER", name="gender", native_enum=False),
            nullable=False,
        ),
        sa.Column("address_id", sa.Uuid(), nullable=False),
        sa.Column("deceased", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.ForeignKeyConstraint(
            ["address_id"], ["address.id"], name="fk_owner_owner_address_id_address"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_owner"),
    )
    op.create_index("ix_owner_identity", "owner", ["name", "first_name"])
    op.create_table(
        "pet",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("deceased", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("version", sa.Integer(), server_default="0", nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_pet"),
    )
    op.create_table(
        "owner_pet",
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("pet_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(
            ["owner_id"],
            ["owner.id"],
            name="fk_owner_pet_owner_pet_owner_id_owner",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["pet_id"],
            ["pet.id"],
            name="fk_owner_pet_owner_pet_pet_id_pet",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("owner_id", "pet_id", name="pk_owner_pet"),
    )


def downgrade() -> None:
    op.drop_table("owner_pet")
    op.drop_table("pet")
    op.drop_index("ix_owner_identity", table_name="owner")
    op.drop_table("owner")
    op.drop_table("address")
