# invoicing/domain/models/tax.py
"""
Value objects produced by the GST / TDS calculators and the invoice
number generator. None of these are persisted on their own; invoice
assembly copies their fields onto the stored invoice row.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

GSTType = Literal["cgst_sgst", "igst"]


class GSTResult(BaseModel):
    """Tax split for a single taxable value."""

    model_config = ConfigDict(frozen=True)

    taxable_value: Decimal
    cgst_rate: Decimal = Field(default=Decimal("0"))
    sgst_rate: Decimal = Field(default=Decimal("0"))
    igst_rate: Decimal = Field(default=Decimal("0"))
    cgst_amount: Decimal = Field(default=Decimal("0"))
    sgst_amount: Decimal = Field(default=Decimal("0"))
    igst_amount: Decimal = Field(default=Decimal("0"))
    total_gst: Decimal = Field(default=Decimal("0"))
    total_amount: Decimal = Field(default=Decimal("0"))
    gst_type: GSTType


class InvoiceGSTResult(BaseModel):
    """Invoice-level totals, summed from independently computed lines."""

    model_config = ConfigDict(frozen=True)

    taxable_value: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    igst_amount: Decimal
    total_gst: Decimal
    total_amount: Decimal
    gst_type: GSTType
    lines: tuple[GSTResult, ...] = ()


class TDSResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: Decimal
    tds_rate: Decimal
    tds_amount: Decimal
    net_amount: Decimal
    section: str
    section_description: str
    is_threshold_met: bool
    pan_required: bool
    higher_rate_applied: bool


class InvoiceTDS(BaseModel):
    """TDS decision attached to a freelancer / contractor / vendor invoice."""

    model_config = ConfigDict(frozen=True)

    tds_applicable: bool = False
    tds_section: str | None = None
    tds_rate: Decimal = Field(default=Decimal("0"))
    tds_amount: Decimal = Field(default=Decimal("0"))
    amount_after_tds: Decimal = Field(default=Decimal("0"))


class InvoiceNumber(BaseModel):
    """Parsed form of ``PREFIX/YYYY-YY/NNNNN``."""

    model_config = ConfigDict(frozen=True)

    prefix: str
    financial_year: str
    sequence: int

    def __str__(self) -> str:
        return f"{self.prefix}/{self.financial_year}/{self.sequence:05d}"
