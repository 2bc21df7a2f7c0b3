"""initial levelquote schema

Revision ID: 5b2e8c41d7a9
Revises:
Create Date: 2026-10-19 09:00:00.000000

Creates customers, document_counters, documents and service_lines. Tables that
Base.metadata.create_all() already made on startup are left alone.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '5b2e8c41d7a9'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DOCUMENT_TYPES = ("INVOICE", "ESTIMATE")
BUSINESS_TYPES = ("CONCRETE", "MASONRY")
SERVICE_TYPES = ("FOAM_LEVELING", "CONCRETE_RATE", "MASONRY", "CUSTOM")


def _table_exists(table_name):
    bind = op.get_bind()
    return table_name in inspect(bind).get_table_names()


def upgrade() -> None:
    if not _table_exists("customers"):
        op.create_table(
            "customers",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("email", sa.String(), nullable=True),
            sa.Column("phone", sa.String(), nullable=True),
            sa.Column("address", sa.Text(), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
        )

    if not _table_exists("document_counters"):
        op.create_table(
            "document_counters",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("doc_type", sa.Enum(*DOCUMENT_TYPES, name="documenttype"), nullable=False, unique=True),
            sa.Column("next_number", sa.Integer(), nullable=False),
        )

    if not _table_exists("documents"):
        op.create_table(
            "documents",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("doc_type", sa.Enum(*DOCUMENT_TYPES, name="documenttype"), nullable=False, index=True),
            sa.Column("number", sa.Integer(), nullable=False),
            sa.Column("document_number", sa.String(), nullable=False, unique=True),
            sa.Column("status", sa.String(), nullable=True),
            sa.Column("business_type", sa.Enum(*BUSINESS_TYPES, name="businesstype"), nullable=True),
            sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=True),
            sa.Column("customer_name", sa.String(), nullable=False),
            sa.Column("customer_email", sa.String(), nullable=True),
            sa.Column("customer_phone", sa.String(), nullable=True),
            sa.Column("customer_address", sa.Text(), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("issue_date", sa.DateTime(), nullable=True),
            sa.Column("due_date", sa.DateTime(), nullable=True),
            sa.Column("valid_until", sa.DateTime(), nullable=True),
            sa.Column("tax_rate", sa.Float(), nullable=True),
            sa.Column("subtotal", sa.Float(), nullable=True),
            sa.Column("tax", sa.Float(), nullable=True),
            sa.Column("total", sa.Float(), nullable=True),
            sa.Column("converted_from_id", sa.Integer(), sa.ForeignKey("documents.id"), nullable=True),
            sa.Column("converted_to_id", sa.Integer(), sa.ForeignKey("documents.id"), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
            sa.UniqueConstraint("doc_type", "number", name="uq_documents_type_number"),
        )

    if not _table_exists("service_lines"):
        op.create_table(
            "service_lines",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("document_id", sa.Integer(), sa.ForeignKey("documents.id"), nullable=False),
            sa.Column("position", sa.Integer(), nullable=True),
            sa.Column("service_type", sa.Enum(*SERVICE_TYPES, name="servicetype"), nullable=True),
            sa.Column("description", sa.String(), nullable=False),
            sa.Column("quantity", sa.Float(), nullable=True),
            sa.Column("unit", sa.String(), nullable=True),
            sa.Column("rate", sa.Float(), nullable=True),
            sa.Column("amount", sa.Float(), nullable=True),
            sa.Column("details", sa.JSON(), nullable=True),
        )


def downgrade() -> None:
    op.drop_table("service_lines")
    op.drop_table("documents")
    op.drop_table("document_counters")
    op.drop_table("customers")
