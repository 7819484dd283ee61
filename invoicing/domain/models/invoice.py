# invoicing/domain/models/invoice.py
"""
Invoice records as the domain sees them.

``InvoiceDraft`` / ``LineItemDraft`` are what invoice assembly produces and
the repository persists. ``Counterparty`` is the read-only view of a
contact, freelancer, contractor or vendor.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any


class InvoiceType(str, Enum):
    CLIENT = "client"
    FREELANCER = "freelancer"
    CONTRACTOR = "contractor"
    VENDOR = "vendor"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    PAID = "paid"
    PARTIAL = "partial"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


# Invoice type -> counterparty kind whose id the invoice references
COUNTERPARTY_KIND = {
    InvoiceType.CLIENT: "contact",
    InvoiceType.FREELANCER: "freelancer",
    InvoiceType.CONTRACTOR: "contractor",
    InvoiceType.VENDOR: "vendor",
}


@dataclass(frozen=True)
class Counterparty:
    id: Any
    kind: str  # contact | freelancer | contractor | vendor
    name: str
    company_name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    gstin: str | None = None
    pan: str | None = None
    email: str | None = None
    phone: str | None = None
    is_company: bool = False
    vendor_type: str | None = None
    tds_section: str | None = None
    bank_name: str | None = None
    bank_account_number: str | None = None
    bank_ifsc_code: str | None = None

    @property
    def display_name(self) -> str:
        return self.company_name or self.name

    @property
    def has_pan(self) -> bool:
        return bool(self.pan)


@dataclass(frozen=True)
class LineItemInput:
    description: str
    quantity: Decimal
    unit_price: Decimal
    gst_rate: Decimal = Decimal("18")
    unit: str = "Nos"
    hsn_sac_code: str | None = None
    discount_percent: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")


@dataclass
class LineItemDraft:
    item_description: str
    quantity: Decimal
    unit: str
    unit_price: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    taxable_value: Decimal
    gst_rate: Decimal
    gst_amount: Decimal
    total_amount: Decimal
    sort_order: int
    hsn_sac_code: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class InvoiceDraft:
    invoice_number: str
    invoice_type: InvoiceType
    invoice_date: date
    due_date: date | None
    subtotal: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    is_gst_applicable: bool
    gst_type: str
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
    tds_amount: Decimal
    total_amount: Decimal
    amount_due: Decimal
    amount_paid: Decimal = Decimal("0")
    status: InvoiceStatus = InvoiceStatus.DRAFT
    contact_id: Any = None
    freelancer_id: Any = None
    contractor_id: Any = None
    vendor_id: Any = None
    notes: str | None = None
    terms: str | None = None
    created_by: str | None = None
    line_items: list[LineItemDraft] = field(default_factory=list)

    def header_fields(self) -> dict:
        """Column values for the invoice row (line items excluded)."""
        data = asdict(self)
        data.pop("line_items")
        data["invoice_type"] = self.invoice_type.value
        data["status"] = self.status.value
        return data
