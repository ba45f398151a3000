"""Payments table — versioned items with soft delete.

Table and schema names follow REPO_TABLE / REPO_SCHEMA, as in env.py.

Revision ID: 001_payments
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from payments_api.config import get_settings

revision: str = "001_payments"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _target() -> tuple[str, str | None]:
    settings = get_settings()
    return settings.repo_table, settings.repo_schema


def upgrade() -> None:
    table, schema = _target()
    op.create_table(
        table,
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("version", sa.Integer, nullable=False, server_default="0"),
        sa.Column("organisation", sa.Text, nullable=False),
        sa.Column("attributes", sa.Text, nullable=False),
        sa.Column("deleted", sa.Boolean, nullable=False, server_default=sa.false()),
        schema=schema,
    )


def downgrade() -> None:
    table, schema = _target()
    op.drop_table(table, schema=schema)
