import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from invoicing.infrastructure.db.base import Base


class CounterpartyMixin:
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    first_name = Column(String(100))
    last_name = Column(String(100))
    company_name = Column(String(200))
    email = Column(String(200))
    phone = Column(String(30))
    address = Column(Text)
    city = Column(String(100))
    state = Column(String(100))
    pincode = Column(String(10))
    gst_number = Column(String(15))
    pan_number = Column(String(10))
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))


class Contact(CounterpartyMixin, Base):
    __tablename__ = "contacts"


class Freelancer(CounterpartyMixin, Base):
    __tablename__ = "freelancers"
    bank_name = Column(String(100))
    bank_account_number = Column(String(30))
    bank_ifsc_code = Column(String(11))
    tds_rate = Column(Numeric(5, 2), server_default="10")


class Contractor(CounterpartyMixin, Base):
    __tablename__ = "contractors"
    is_company = Column(Boolean, default=False, nullable=False)
    bank_name = Column(String(100))
    bank_account_number = Column(String(30))
    bank_ifsc_code = Column(String(11))
    tds_rate = Column(Numeric(5, 2), server_default="1")


class Vendor(CounterpartyMixin, Base):
    __tablename__ = "vendors"
    vendor_type = Column(String(30))  # supplier | service_provider
    is_company = Column(Boolean, default=True, nullable=False)
    tds_section = Column(String(10), server_default="194C")
    tds_rate = Column(Numeric(5, 2), server_default="2")
    bank_name = Column(String(100))
    bank_account_number = Column(String(30))
    bank_ifsc_code = Column(String(11))


class InvoiceSequence(Base):
    """Atomic per-(prefix, FY) invoice counter."""

    __tablename__ = "invoice_sequences"
    __table_args__ = (UniqueConstraint("prefix", "financial_year", name="uq_invoice_sequences_prefix_fy"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    prefix = Column(String(10), nullable=False)
    financial_year = Column(String(7), nullable=False)
    last_number = Column(Integer, nullable=False, server_default="0")
    updated_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    invoice_number = Column(String(20), nullable=False, unique=True, index=True)
    invoice_type = Column(String(20), nullable=False, index=True)

    contact_id = Column(UUID(as_uuid=True), ForeignKey("contacts.id"))
    freelancer_id = Column(UUID(as_uuid=True), ForeignKey("freelancers.id"))
    contractor_id = Column(UUID(as_uuid=True), ForeignKey("contractors.id"))
    vendor_id = Column(UUID(as_uuid=True), ForeignKey("vendors.id"))

    invoice_date = Column(Date, nullable=False)
    due_date = Column(Date)

    subtotal = Column(Numeric(14, 2), nullable=False, server_default="0")
    discount_amount = Column(Numeric(14, 2), nullable=False, server_default="0")
    taxable_amount = Column(Numeric(14, 2), nullable=False, server_default="0")

    is_gst_applicable = Column(Boolean, nullable=False, default=True)
    gst_type = Column(String(10))  # cgst_sgst | igst
    cgst_rate = Column(Numeric(5, 2), nullable=False, server_default="0")
    sgst_rate = Column(Numeric(5, 2), nullable=False, server_default="0")
    igst_rate = Column(Numeric(5, 2), nullable=False, server_default="0")
    cgst_amount = Column(Numeric(14, 2), nullable=False, server_default="0")
    sgst_amount = Column(Numeric(14, 2), nullable=False, server_default="0")
    igst_amount = Column(Numeric(14, 2), nullable=False, server_default="0")
    gstin = Column(String(15))
    place_of_supply = Column(String(2))

    tds_applicable = Column(Boolean, nullable=False, default=False)
    tds_section = Column(String(10))
    tds_rate = Column(Numeric(5, 2), nullable=False, server_default="0")
    tds_amount = Column(Numeric(14, 2), nullable=False, server_default="0")

    total_amount = Column(Numeric(14, 2), nullable=False, server_default="0")
    amount_due = Column(Numeric(14, 2), nullable=False, server_default="0")
    amount_paid = Column(Numeric(14, 2), nullable=False, server_default="0")

    status = Column(String(20), nullable=False, server_default="draft", index=True)
    notes = Column(Text)
    terms = Column(Text)

    sent_at = Column(DateTime(timezone=True))
    paid_at = Column(DateTime(timezone=True))
    created_by = Column(String(100))
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))

    line_items = relationship(
        "InvoiceLineItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceLineItem.sort_order",
    )


class InvoiceLineItem(Base):
    __tablename__ = "invoice_line_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    invoice_id = Column(UUID(as_uuid=True), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    item_description = Column(Text, nullable=False)
    hsn_sac_code = Column(String(10))
    quantity = Column(Numeric(12, 3), nullable=False)
    unit = Column(String(20), server_default="Nos")
    unit_price = Column(Numeric(14, 2), nullable=False)
    discount_percent = Column(Numeric(5, 2), nullable=False, server_default="0")
    discount_amount = Column(Numeric(14, 2), nullable=False, server_default="0")
    taxable_value = Column(Numeric(14, 2), nullable=False)
    gst_rate = Column(Numeric(5, 2), nullable=False)
    gst_amount = Column(Numeric(14, 2), nullable=False)
    total_amount = Column(Numeric(14, 2), nullable=False)
    sort_order = Column(Integer, nullable=False, server_default="0")

    invoice = relationship("Invoice", back_populates="line_items")
