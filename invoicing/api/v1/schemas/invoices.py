"""Request and response schemas for invoice endpoints."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from invoicing.domain.models.invoice import InvoiceType, LineItemInput


class LineItemCreate(BaseModel):
    description: str = Field(min_length=1, max_length=500)
    quantity: Decimal = Field(gt=0)
    unit_price: Decimal = Field(ge=0)
    gst_rate: Decimal = Field(default=Decimal("18"), ge=0, le=100)
    unit: str = Field(default="Nos", max_length=20)
    hsn_sac_code: str | None = Field(default=None, max_length=10)
    discount_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0)

    def to_input(self) -> LineItemInput:
        return LineItemInput(**self.model_dump())


class InvoiceCreate(BaseModel):
    """
    Everything the caller chooses; amounts, tax and the invoice number are
    computed server-side.
    """

    invoice_type: InvoiceType
    counterparty_id: str = Field(description="contact / freelancer / contractor / vendor id")
    invoice_date: date | None = Field(default=None, description="Defaults to today")
    due_date: date | None = None
    notes: str | None = None
    terms: str | None = None
    is_gst_applicable: bool = True
    line_items: list[LineItemCreate] = Field(min_length=1)


class PaymentCreate(BaseModel):
    amount: Decimal = Field(gt=0)


class LineItemDetail(BaseModel):
    item_description: str
    hsn_sac_code: str | None
    quantity: Decimal
    unit: str | None
    unit_price: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    taxable_value: Decimal
    gst_rate: Decimal
    gst_amount: Decimal
    total_amount: Decimal
    sort_order: int

    class Config:
        from_attributes = True


class InvoiceSummary(BaseModel):
    id: str
    invoice_number: str
    invoice_type: str
    invoice_date: date
    due_date: date | None
    status: str
    total_amount: Decimal
    tds_amount: Decimal
    amount_due: Decimal
    amount_paid: Decimal

    class Config:
        from_attributes = True


class InvoiceDetail(InvoiceSummary):
    contact_id: str | None
    freelancer_id: str | None
    contractor_id: str | None
    vendor_id: str | None

    subtotal: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal

    is_gst_applicable: bool
    gst_type: str | None
    cgst_rate: Decimal
    sgst_rate: Decimal
    igst_rate: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    igst_amount: Decimal
    gstin: str | None
    place_of_supply: str | None

    tds_applicable: bool
    tds_section: str | None
    tds_rate: Decimal

    notes: str | None
    terms: str | None
    created_by: str | None
    sent_at: datetime | None
    paid_at: datetime | None
    created_at: datetime | None

    line_items: list[LineItemDetail] = []
