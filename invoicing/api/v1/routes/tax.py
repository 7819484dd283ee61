# invoicing/api/v1/routes/tax.py
"""
Stateless tax endpoints: GST split, invoice-level GST, TDS, GSTIN lookup
and invoice number parsing. Nothing here touches the database.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from invoicing.config.settings import settings
from invoicing.api.v1.deps import Actor, get_current_actor
from invoicing.api.v1.envelope import ok
from invoicing.api.v1.schemas.tax import GSTRequest, InvoiceGSTRequest, TDSRequest
from invoicing.domain.services.gst_calculator import (
    STATE_CODES,
    calculate_gst,
    calculate_invoice_gst,
    get_state_code_from_gstin,
    is_intra_state_transaction,
    is_valid_gst_rate,
)
from invoicing.domain.services.gstin_pan_validation import (
    is_valid_gstin,
    pan_from_gstin,
    sanitize_gst_number,
)
from invoicing.domain.services.invoice_numbering import get_invoice_metadata, is_valid_invoice_number
from invoicing.domain.services.tds_calculator import calculate_tds


router = APIRouter(prefix="/tax", tags=["Tax"])


@router.post("/gst", response_model=dict)
async def gst_split(body: GSTRequest, actor: Actor = Depends(get_current_actor)):
    """CGST+SGST or IGST for one taxable value."""
    if body.is_intra_state is not None:
        is_intra = body.is_intra_state
    else:
        buyer = body.buyer_state_code
        if buyer is None and body.buyer_gstin and is_valid_gstin(body.buyer_gstin):
            buyer = get_state_code_from_gstin(sanitize_gst_number(body.buyer_gstin))
        is_intra = is_intra_state_transaction(buyer, settings.COMPANY_STATE_CODE)

    result = calculate_gst(body.taxable_value, body.gst_rate, is_intra)
    message = None if is_valid_gst_rate(body.gst_rate) else f"{body.gst_rate}% is not a standard GST slab"
    return ok(data=result.model_dump(), message=message)


@router.post("/gst/invoice", response_model=dict)
async def invoice_gst(body: InvoiceGSTRequest, actor: Actor = Depends(get_current_actor)):
    """Per-line GST summed into invoice totals."""
    result = calculate_invoice_gst(
        [line.model_dump() for line in body.line_items],
        body.buyer_state_code,
        body.seller_state_code or settings.COMPANY_STATE_CODE,
    )
    return ok(data=result.model_dump())


@router.post("/tds", response_model=dict)
async def tds(body: TDSRequest, actor: Actor = Depends(get_current_actor)):
    result = calculate_tds(
        body.amount,
        body.section,
        party_type=body.party_type,
        is_professional=body.is_professional,
        is_technical=body.is_technical,
        cumulative_amount=body.cumulative_amount,
        has_pan=body.has_pan,
        is_plant_machinery=body.is_plant_machinery,
    )
    return ok(data=result.model_dump())


@router.get("/gstin/{gstin}", response_model=dict)
async def gstin_lookup(gstin: str, actor: Actor = Depends(get_current_actor)):
    """Shape check plus the state and PAN embedded in a GSTIN."""
    cleaned = sanitize_gst_number(gstin)
    if not is_valid_gstin(cleaned):
        return ok(data={"gstin": cleaned, "valid": False}, message="Invalid GSTIN format")

    state_code = get_state_code_from_gstin(cleaned)
    return ok(data={
        "gstin": cleaned,
        "valid": True,
        "state_code": state_code,
        "state": STATE_CODES.get(state_code),
        "pan": pan_from_gstin(cleaned),
    })


@router.get("/invoice-numbers/{number:path}", response_model=dict)
async def invoice_number_info(number: str, actor: Actor = Depends(get_current_actor)):
    """Validate and decode ``PREFIX/YYYY-YY/NNNNN``."""
    return ok(data={
        "invoice_number": number,
        "valid": is_valid_invoice_number(number),
        **get_invoice_metadata(number),
    })
