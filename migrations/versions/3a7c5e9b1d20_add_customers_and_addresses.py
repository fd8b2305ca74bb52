"""add customers and addresses

Revision ID: 3a7c5e9b1d20
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = "3a7c5e9b1d20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)
    existing_tables = set(insp.get_table_names())

    if "addresses" not in existing_tables:
        op.create_table(
            "addresses",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("number", sa.Text(), nullable=True),
            sa.Column("street", sa.Text(), nullable=True),
            sa.Column("city", sa.Text(), nullable=True),
            sa.Column("province", sa.Text(), nullable=True),
            sa.Column("zip", sa.Text(), nullable=True),
            sa.Column("country", sa.Text(), nullable=True),
        )

    if "customers" not in existing_tables:
        op.create_table(
            "customers",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("firstname", sa.Text(), nullable=True),
            sa.Column("lastname", sa.Text(), nullable=True),
            sa.Column("email", sa.Text(), nullable=True),
            sa.Column("phone", sa.Text(), nullable=True),
            sa.Column("address_id", sa.Integer(), nullable=True),
            sa.ForeignKeyConstraint(["address_id"], ["addresses.id"], ondelete="CASCADE"),
            sa.UniqueConstraint("address_id", name="uq_customers_address_id"),
        )


def downgrade() -> None:
    op.drop_table("customers")
    op.drop_table("addresses")
