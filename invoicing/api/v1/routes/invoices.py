# invoicing/api/v1/routes/invoices.py
"""
Invoice creation, listing, PDF download and status transitions.
"""

from __future__ import annotations

import io
import logging
from datetime import date

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.core.db import get_db
from invoicing.domain.models.invoice import COUNTERPARTY_KIND, InvoiceStatus, InvoiceType
from invoicing.infrastructure.db.models import Invoice
from invoicing.infrastructure.db.repositories import CounterpartyRepository, InvoiceRepository

from invoicing.api.v1.deps import Actor, get_current_actor
from invoicing.api.v1.envelope import PaginationParams, ok, paginated
from invoicing.api.v1.schemas.invoices import (
    InvoiceCreate,
    InvoiceDetail,
    InvoiceSummary,
    LineItemDetail,
    PaymentCreate,
)

logger = logging.getLogger("api.v1.invoices")

router = APIRouter(prefix="/invoices", tags=["Invoices"])

_ID_FIELDS = ("id", "contact_id", "freelancer_id", "contractor_id", "vendor_id")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _columns(inv: Invoice) -> dict:
    data = {column.name: getattr(inv, column.name) for column in Invoice.__table__.columns}
    for key in _ID_FIELDS:
        if data[key] is not None:
            data[key] = str(data[key])
    return data


def _invoice_to_summary(inv: Invoice) -> dict:
    return InvoiceSummary.model_validate(_columns(inv)).model_dump()


def _invoice_to_detail(inv: Invoice) -> dict:
    data = _columns(inv)
    data["line_items"] = [LineItemDetail.model_validate(item) for item in inv.line_items]
    return InvoiceDetail.model_validate(data).model_dump()


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    body: InvoiceCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """
    Compute GST / TDS, allocate the next number and store the invoice with
    its line items in one transaction.
    """
    from invoicing.domain.services.invoice_assembly import create_invoice as assemble

    created = await assemble(
        db,
        body.invoice_type,
        body.counterparty_id,
        [item.to_input() for item in body.line_items],
        body.invoice_date or date.today(),
        body.due_date,
        is_gst_applicable=body.is_gst_applicable,
        notes=body.notes,
        terms=body.terms,
        created_by=actor.id,
    )
    inv = await InvoiceRepository(db).get(created.id)
    return ok(data=_invoice_to_detail(inv), message=f"Invoice {inv.invoice_number} created")


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------

@router.get("", response_model=dict)
async def list_invoices(
    invoice_type: InvoiceType | None = Query(default=None),
    invoice_status: InvoiceStatus | None = Query(default=None, alias="status"),
    page: PaginationParams = Depends(),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    invoices, total = await InvoiceRepository(db).list_by_type(
        invoice_type.value if invoice_type else None,
        invoice_status.value if invoice_status else None,
        limit=page.limit,
        offset=page.offset,
    )
    return paginated(
        items=[_invoice_to_summary(inv) for inv in invoices],
        total=total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/{invoice_id}", response_model=dict)
async def get_invoice(
    invoice_id: str,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    inv = await InvoiceRepository(db).get(invoice_id)
    return ok(data=_invoice_to_detail(inv))


@router.get("/{invoice_id}/pdf")
async def download_invoice_pdf(
    invoice_id: str,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Tax invoice for clients, payment voucher for everyone else."""
    from invoicing.domain.services.invoice_document import build_invoice_document
    from invoicing.domain.services.invoice_pdf import render_invoice_pdf

    inv = await InvoiceRepository(db).get(invoice_id)
    kind = COUNTERPARTY_KIND[InvoiceType(inv.invoice_type)]
    counterparty = await CounterpartyRepository(db).get(kind, getattr(inv, f"{kind}_id"))

    document = build_invoice_document(inv, counterparty)
    pdf_bytes = render_invoice_pdf(document)
    logger.info("%s %s rendered for %s", document.title, inv.invoice_number, actor.id)
    filename = inv.invoice_number.replace("/", "-")
    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}.pdf"'},
    )


# ---------------------------------------------------------------------------
# Status transitions
# ---------------------------------------------------------------------------

@router.post("/{invoice_id}/send", response_model=dict)
async def send_invoice(
    invoice_id: str,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    from invoicing.domain.services.invoice_lifecycle import send_invoice as send

    inv = await send(db, invoice_id)
    return ok(data=_invoice_to_summary(inv), message="Invoice sent")


@router.post("/{invoice_id}/view", response_model=dict)
async def mark_invoice_viewed(
    invoice_id: str,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    from invoicing.domain.services.invoice_lifecycle import mark_invoice_viewed as mark_viewed

    inv = await mark_viewed(db, invoice_id)
    return ok(data=_invoice_to_summary(inv))


@router.post("/{invoice_id}/payments", response_model=dict)
async def record_payment(
    invoice_id: str,
    body: PaymentCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    from invoicing.domain.services.invoice_lifecycle import record_invoice_payment

    inv = await record_invoice_payment(db, invoice_id, body.amount)
    return ok(data=_invoice_to_summary(inv), message=f"Payment recorded, status {inv.status}")


@router.post("/{invoice_id}/cancel", response_model=dict)
async def cancel_invoice(
    invoice_id: str,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    from invoicing.domain.services.invoice_lifecycle import cancel_invoice as cancel

    inv = await cancel(db, invoice_id)
    return ok(data=_invoice_to_summary(inv), message="Invoice cancelled")


@router.delete("/{invoice_id}", response_model=dict)
async def delete_draft(
    invoice_id: str,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Drafts only; anything already sent has to be cancelled instead."""
    await InvoiceRepository(db).delete_draft(invoice_id)
    logger.info("Draft invoice %s deleted by %s", invoice_id, actor.id)
    return ok(message="Draft deleted")
