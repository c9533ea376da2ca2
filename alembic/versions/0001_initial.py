"""consumers and extracts

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.sql import func


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "consumers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("document_number", sa.String(length=20), nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("mobile_phone_number", sa.String(length=20), nullable=True),
        sa.Column("residence_phone_number", sa.String(length=20), nullable=True),
        sa.Column("phone_number", sa.String(length=20), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("street", sa.String(length=255), nullable=True),
        sa.Column("number", sa.Integer(), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("postal_code", sa.String(length=20), nullable=True),
        sa.Column("food_card_number", sa.BigInteger(), nullable=False),
        sa.Column("food_card_balance", sa.Numeric(12, 2), nullable=False),
        sa.Column("fuel_card_number", sa.BigInteger(), nullable=False),
        sa.Column("fuel_card_balance", sa.Numeric(12, 2), nullable=False),
        sa.Column("drugstore_card_number", sa.BigInteger(), nullable=False),
        sa.Column("drugstore_card_balance", sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_consumers")),
        sa.UniqueConstraint("food_card_number", name=op.f("uq_consumers_food_card_number")),
        sa.UniqueConstraint("fuel_card_number", name=op.f("uq_consumers_fuel_card_number")),
        sa.UniqueConstraint("drugstore_card_number", name=op.f("uq_consumers_drugstore_card_number")),
    )
    op.create_index(op.f("ix_consumers_id"), "consumers", ["id"], unique=False)
    op.create_index(op.f("ix_consumers_document_number"), "consumers", ["document_number"], unique=False)

    op.create_table(
        "extracts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("establishment_name", sa.String(length=255), nullable=False),
        sa.Column("product_description", sa.Text(), nullable=False),
        sa.Column("date_buy", sa.DateTime(timezone=True), nullable=False),
        sa.Column("card_number", sa.BigInteger(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_extracts")),
    )
    op.create_index(op.f("ix_extracts_id"), "extracts", ["id"], unique=False)
    op.create_index(op.f("ix_extracts_card_number"), "extracts", ["card_number"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_extracts_card_number"), table_name="extracts")
    op.drop_index(op.f("ix_extracts_id"), table_name="extracts")
    op.drop_table("extracts")
    op.drop_index(op.f("ix_consumers_document_number"), table_name="consumers")
    op.drop_index(op.f("ix_consumers_id"), table_name="consumers")
    op.drop_table("consumers")
