"""add card_numbers registry

Revision ID: 0002_add_card_numbers
Revises: 0001_initial
Create Date: 2026-10-20
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.sql import func


revision = "0002_add_card_numbers"
down_revision = "0001_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "card_numbers",
        sa.Column("number", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("purse", sa.String(length=20), nullable=False),
        sa.Column("consumer_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["consumer_id"], ["consumers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("number", name=op.f("pk_card_numbers")),
    )
    op.create_index(op.f("ix_card_numbers_consumer_id"), "card_numbers", ["consumer_id"], unique=False)

    for purse in ("food", "fuel", "drugstore"):
        op.execute(
            f"INSERT INTO card_numbers (number, purse, consumer_id) "
            f"SELECT {purse}_card_number, '{purse}', id FROM consumers"
        )


def downgrade() -> None:
    op.drop_index(op.f("ix_card_numbers_consumer_id"), table_name="card_numbers")
    op.drop_table("card_numbers")
