# invoicing/domain/services/invoice_lifecycle.py
"""
Invoice status transitions.

    draft -> sent -> viewed -> partial -> paid
                 \\-> overdue (past due date, unpaid)
    anything unpaid -> cancelled

The transition functions act on any object carrying the invoice columns
(ORM row or test double) and never touch the database. The ``*_invoice``
coroutines load, transition and commit.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.domain.errors import InvalidStatusTransition
from invoicing.domain.models.invoice import InvoiceStatus
from invoicing.domain.services.gst_calculator import round_to_paise, to_decimal

logger = logging.getLogger("invoice_lifecycle")

_ZERO = Decimal("0")

PAYABLE_STATUSES = frozenset({
    InvoiceStatus.SENT,
    InvoiceStatus.VIEWED,
    InvoiceStatus.PARTIAL,
    InvoiceStatus.OVERDUE,
})

OVERDUE_CANDIDATES = frozenset({
    InvoiceStatus.SENT,
    InvoiceStatus.VIEWED,
    InvoiceStatus.PARTIAL,
})


def _status(invoice: Any) -> InvoiceStatus:
    return InvoiceStatus(invoice.status)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def send(invoice: Any, now: datetime | None = None) -> Any:
    current = _status(invoice)
    if current is not InvoiceStatus.DRAFT:
        raise InvalidStatusTransition(current.value, "send")
    invoice.status = InvoiceStatus.SENT.value
    invoice.sent_at = now or _now()
    return invoice


def mark_viewed(invoice: Any) -> Any:
    current = _status(invoice)
    if current is not InvoiceStatus.SENT:
        raise InvalidStatusTransition(current.value, "mark viewed")
    invoice.status = InvoiceStatus.VIEWED.value
    return invoice


def record_payment(invoice: Any, amount: Any, now: datetime | None = None) -> Any:
    """
    Apply a payment against ``amount_due``.

    Partial payments move the invoice to ``partial``; the payment that
    clears the balance moves it to ``paid`` and stamps ``paid_at``.
    """
    current = _status(invoice)
    if current not in PAYABLE_STATUSES:
        raise InvalidStatusTransition(current.value, "record a payment on")

    amount = round_to_paise(amount)
    due = to_decimal(invoice.amount_due)
    if amount <= _ZERO:
        raise ValueError(f"Payment amount must be positive, got {amount}")
    if amount > due:
        raise ValueError(f"Payment {amount} exceeds amount due {due}")

    invoice.amount_paid = to_decimal(invoice.amount_paid) + amount
    invoice.amount_due = due - amount

    if invoice.amount_due == _ZERO:
        invoice.status = InvoiceStatus.PAID.value
        invoice.paid_at = now or _now()
    else:
        invoice.status = InvoiceStatus.PARTIAL.value
    return invoice


def is_overdue(invoice: Any, today: date | None = None) -> bool:
    today = today or date.today()
    return (
        _status(invoice) in OVERDUE_CANDIDATES
        and invoice.due_date is not None
        and invoice.due_date < today
    )


def mark_overdue(invoice: Any, today: date | None = None) -> bool:
    """Flag an unpaid invoice past its due date. Returns True when changed."""
    if not is_overdue(invoice, today):
        return False
    invoice.status = InvoiceStatus.OVERDUE.value
    return True


def cancel(invoice: Any) -> Any:
    current = _status(invoice)
    if current in (InvoiceStatus.PAID, InvoiceStatus.CANCELLED):
        raise InvalidStatusTransition(current.value, "cancel")
    if to_decimal(invoice.amount_paid) > _ZERO:
        raise InvalidStatusTransition(current.value, "cancel", "payments have been recorded")
    invoice.status = InvoiceStatus.CANCELLED.value
    return invoice


# ---------------------------------------------------------------------------
# Persistence wrappers
# ---------------------------------------------------------------------------

async def _apply(db: AsyncSession, invoice_id: Any, action: str, transition, *args: Any):
    from invoicing.infrastructure.db.repositories import InvoiceRepository

    invoice = await InvoiceRepository(db).get(invoice_id)
    previous = invoice.status
    try:
        transition(invoice, *args)
    except InvalidStatusTransition as exc:
        logger.warning("Rejected %s on %s: %s", action, invoice.invoice_number, exc)
        raise

    invoice.updated_at = _now()
    await db.commit()
    logger.info("Invoice %s: %s (%s -> %s)", invoice.invoice_number, action, previous, invoice.status)
    return invoice


async def send_invoice(db: AsyncSession, invoice_id: Any):
    return await _apply(db, invoice_id, "send", send)


async def mark_invoice_viewed(db: AsyncSession, invoice_id: Any):
    return await _apply(db, invoice_id, "view", mark_viewed)


async def record_invoice_payment(db: AsyncSession, invoice_id: Any, amount: Any):
    return await _apply(db, invoice_id, "payment", record_payment, amount)


async def cancel_invoice(db: AsyncSession, invoice_id: Any):
    return await _apply(db, invoice_id, "cancel", cancel)


async def mark_overdue_invoices(db: AsyncSession, today: date | None = None) -> list[str]:
    """Flag every unpaid invoice past its due date. Returns the numbers flagged."""
    from invoicing.infrastructure.db.repositories import InvoiceRepository

    today = today or date.today()
    flagged = [
        invoice.invoice_number
        for invoice in await InvoiceRepository(db).list_overdue_candidates(today)
        if mark_overdue(invoice, today)
    ]
    if flagged:
        await db.commit()
        logger.info("Marked %d invoice(s) overdue as of %s", len(flagged), today)
    return flagged
