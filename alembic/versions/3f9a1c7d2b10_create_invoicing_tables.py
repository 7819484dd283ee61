"""create counterparty, invoice and invoice sequence tables

Revision ID: 3f9a1c7d2b10
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "3f9a1c7d2b10"
down_revision = None
branch_labels = None
depends_on = None


def _counterparty_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.Column("company_name", sa.String(length=200), nullable=True),
        sa.Column("email", sa.String(length=200), nullable=True),
        sa.Column("phone", sa.String(length=30), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("state", sa.String(length=100), nullable=True),
        sa.Column("pincode", sa.String(length=10), nullable=True),
        sa.Column("gst_number", sa.String(length=15), nullable=True),
        sa.Column("pan_number", sa.String(length=10), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=True,
        ),
    ]


def _bank_columns() -> list[sa.Column]:
    return [
        sa.Column("bank_name", sa.String(length=100), nullable=True),
        sa.Column("bank_account_number", sa.String(length=30), nullable=True),
        sa.Column("bank_ifsc_code", sa.String(length=11), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "contacts",
        *_counterparty_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "freelancers",
        *_counterparty_columns(),
        *_bank_columns(),
        sa.Column("tds_rate", sa.Numeric(5, 2), server_default="10", nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "contractors",
        *_counterparty_columns(),
        sa.Column("is_company", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_bank_columns(),
        sa.Column("tds_rate", sa.Numeric(5, 2), server_default="1", nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "vendors",
        *_counterparty_columns(),
        sa.Column("vendor_type", sa.String(length=30), nullable=True),
        sa.Column("is_company", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("tds_section", sa.String(length=10), server_default="194C", nullable=True),
        sa.Column("tds_rate", sa.Numeric(5, 2), server_default="2", nullable=True),
        *_bank_columns(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "invoice_sequences",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("prefix", sa.String(length=10), nullable=False),
        sa.Column("financial_year", sa.String(length=7), nullable=False),
        sa.Column("last_number", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("prefix", "financial_year", name="uq_invoice_sequences_prefix_fy"),
    )

    money = sa.Numeric(14, 2)
    rate = sa.Numeric(5, 2)
    op.create_table(
        "invoices",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("invoice_number", sa.String(length=20), nullable=False),
        sa.Column("invoice_type", sa.String(length=20), nullable=False),
        sa.Column("contact_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("freelancer_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("contractor_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("vendor_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("invoice_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("subtotal", money, server_default="0", nullable=False),
        sa.Column("discount_amount", money, server_default="0", nullable=False),
        sa.Column("taxable_amount", money, server_default="0", nullable=False),
        sa.Column("is_gst_applicable", sa.Boolean(), nullable=False),
        sa.Column("gst_type", sa.String(length=10), nullable=True),
        sa.Column("cgst_rate", rate, server_default="0", nullable=False),
        sa.Column("sgst_rate", rate, server_default="0", nullable=False),
        sa.Column("igst_rate", rate, server_default="0", nullable=False),
        sa.Column("cgst_amount", money, server_default="0", nullable=False),
        sa.Column("sgst_amount", money, server_default="0", nullable=False),
        sa.Column("igst_amount", money, server_default="0", nullable=False),
        sa.Column("gstin", sa.String(length=15), nullable=True),
        sa.Column("place_of_supply", sa.String(length=2), nullable=True),
        sa.Column("tds_applicable", sa.Boolean(), nullable=False),
        sa.Column("tds_section", sa.String(length=10), nullable=True),
        sa.Column("tds_rate", rate, server_default="0", nullable=False),
        sa.Column("tds_amount", money, server_default="0", nullable=False),
        sa.Column("total_amount", money, server_default="0", nullable=False),
        sa.Column("amount_due", money, server_default="0", nullable=False),
        sa.Column("amount_paid", money, server_default="0", nullable=False),
        sa.Column("status", sa.String(length=20), server_default="draft", nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("terms", sa.Text(), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(length=100), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=True,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(["contact_id"], ["contacts.id"]),
        sa.ForeignKeyConstraint(["freelancer_id"], ["freelancers.id"]),
        sa.ForeignKeyConstraint(["contractor_id"], ["contractors.id"]),
        sa.ForeignKeyConstraint(["vendor_id"], ["vendors.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_invoices_invoice_number"), "invoices", ["invoice_number"], unique=True)
    op.create_index(op.f("ix_invoices_invoice_type"), "invoices", ["invoice_type"], unique=False)
    op.create_index(op.f("ix_invoices_status"), "invoices", ["status"], unique=False)

    op.create_table(
        "invoice_line_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("invoice_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("item_description", sa.Text(), nullable=False),
        sa.Column("hsn_sac_code", sa.String(length=10), nullable=True),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False),
        sa.Column("unit", sa.String(length=20), server_default="Nos", nullable=True),
        sa.Column("unit_price", money, nullable=False),
        sa.Column("discount_percent", rate, server_default="0", nullable=False),
        sa.Column("discount_amount", money, server_default="0", nullable=False),
        sa.Column("taxable_value", money, nullable=False),
        sa.Column("gst_rate", rate, nullable=False),
        sa.Column("gst_amount", money, nullable=False),
        sa.Column("total_amount", money, nullable=False),
        sa.Column("sort_order", sa.Integer(), server_default="0", nullable=False),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_invoice_line_items_invoice_id"),
        "invoice_line_items",
        ["invoice_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_invoice_line_items_invoice_id"), table_name="invoice_line_items")
    op.drop_table("invoice_line_items")
    op.drop_index(op.f("ix_invoices_status"), table_name="invoices")
    op.drop_index(op.f("ix_invoices_invoice_type"), table_name="invoices")
    op.drop_index(op.f("ix_invoices_invoice_number"), table_name="invoices")
    op.drop_table("invoices")
    op.drop_table("invoice_sequences")
    op.drop_table("vendors")
    op.drop_table("contractors")
    op.drop_table("freelancers")
    op.drop_table("contacts")
