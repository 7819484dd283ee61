import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from invoicing.domain.errors import InvalidStatusTransition, InvoiceNotFound
from invoicing.domain.models.invoice import InvoiceDraft, InvoiceStatus
from invoicing.domain.services.invoice_lifecycle import OVERDUE_CANDIDATES
from invoicing.infrastructure.db.models import Invoice, InvoiceLineItem


class InvoiceRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @staticmethod
    def _key(invoice_id) -> uuid.UUID:
        if isinstance(invoice_id, uuid.UUID):
            return invoice_id
        try:
            return uuid.UUID(str(invoice_id))
        except ValueError:
            raise InvoiceNotFound(invoice_id)

    # ---------- writes (caller commits) ----------

    async def add_with_line_items(self, draft: InvoiceDraft) -> Invoice:
        """
        Stage the invoice header and its line items in the current
        transaction. Both rows go out in one flush; nothing is committed here.
        """
        invoice = Invoice(id=uuid.uuid4(), **draft.header_fields())
        invoice.line_items = [InvoiceLineItem(**item.to_dict()) for item in draft.line_items]
        self.db.add(invoice)
        await self.db.flush()
        return invoice

    async def delete_draft(self, invoice_id) -> None:
        """Hard delete, allowed only before the invoice has been sent."""
        invoice = await self.get(invoice_id)
        if invoice.status != InvoiceStatus.DRAFT.value:
            raise InvalidStatusTransition(invoice.status, "delete", "only drafts can be deleted")
        await self.db.delete(invoice)
        await self.db.commit()

    # ---------- reads ----------

    async def get(self, invoice_id) -> Invoice:
        stmt = (
            select(Invoice)
            .options(selectinload(Invoice.line_items))
            .where(Invoice.id == self._key(invoice_id))
        )
        result = await self.db.execute(stmt)
        invoice = result.scalar_one_or_none()
        if invoice is None:
            raise InvoiceNotFound(invoice_id)
        return invoice

    async def list_by_type(
        self,
        invoice_type: str | None = None,
        status: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Invoice], int]:
        """Page of invoices, newest first, with the total count."""
        q = select(Invoice)
        if invoice_type:
            q = q.where(Invoice.invoice_type == invoice_type)
        if status:
            q = q.where(Invoice.status == status)

        total = (await self.db.execute(select(func.count()).select_from(q.subquery()))).scalar() or 0

        q = q.order_by(Invoice.created_at.desc()).offset(offset).limit(limit)
        result = await self.db.execute(q)
        return list(result.scalars().all()), total

    async def cumulative_taxable(self, kind: str, counterparty_id, financial_year: str) -> Decimal:
        """
        Taxable amount already invoiced to one counterparty in ``financial_year``.

        Cancelled invoices do not count. The year is read from the invoice
        number (``PREFIX/YYYY-YY/NNNNN``).
        """
        stmt = select(func.coalesce(func.sum(Invoice.taxable_amount), 0)).where(
            getattr(Invoice, f"{kind}_id") == counterparty_id,
            Invoice.invoice_number.like(f"%/{financial_year}/%"),
            Invoice.status != InvoiceStatus.CANCELLED.value,
        )
        total = (await self.db.execute(stmt)).scalar()
        return Decimal(str(total or 0))

    async def list_overdue_candidates(self, today: date) -> list[Invoice]:
        """Unpaid, issued invoices whose due date has passed."""
        stmt = select(Invoice).where(
            Invoice.status.in_([s.value for s in OVERDUE_CANDIDATES]),
            Invoice.due_date.is_not(None),
            Invoice.due_date < today,
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
