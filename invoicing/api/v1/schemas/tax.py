"""Request schemas for the stateless GST / TDS / numbering endpoints."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# GST
# ---------------------------------------------------------------------------

class GSTRequest(BaseModel):
    """
    Tax split for one taxable value.

    Pass ``is_intra_state`` directly, or a buyer state code / GSTIN to
    compare against the company's own state.
    """

    taxable_value: Decimal = Field(ge=0)
    gst_rate: Decimal = Field(default=Decimal("18"), ge=0, le=100)
    is_intra_state: bool | None = None
    buyer_state_code: str | None = Field(default=None, min_length=2, max_length=2)
    buyer_gstin: str | None = Field(default=None, max_length=15)


class TaxableLineSchema(BaseModel):
    taxable_value: Decimal = Field(ge=0)
    gst_rate: Decimal = Field(default=Decimal("18"), ge=0, le=100)


class InvoiceGSTRequest(BaseModel):
    line_items: list[TaxableLineSchema] = Field(min_length=1)
    buyer_state_code: str = Field(min_length=2, max_length=2)
    seller_state_code: str | None = Field(default=None, min_length=2, max_length=2)


# ---------------------------------------------------------------------------
# TDS
# ---------------------------------------------------------------------------

class TDSRequest(BaseModel):
    amount: Decimal = Field(ge=0)
    section: str = Field(description="194C, 194J, 194H, 194I or 194A")
    party_type: str = Field(default="individual", description="individual | huf | company | firm")
    is_professional: bool = False
    is_technical: bool = False
    is_plant_machinery: bool = Field(default=False, description="194I only: plant/machinery rent")
    cumulative_amount: Decimal = Field(default=Decimal("0"), ge=0)
    has_pan: bool = True
