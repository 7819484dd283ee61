# invoicing/infrastructure/db/repositories/sequence_repository.py
"""Atomic invoice counters backed by the ``invoice_sequences`` table."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.infrastructure.db.models import InvoiceSequence


class InvoiceSequenceRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def next_sequence(self, prefix: str, financial_year: str) -> int:
        """
        Increment and return the counter for (prefix, financial_year).

        Runs inside the caller's transaction: the upserted row stays locked
        until commit, so concurrent creators queue behind each other and a
        rollback gives the number back.
        """
        stmt = (
            insert(InvoiceSequence)
            .values(prefix=prefix, financial_year=financial_year, last_number=1)
            .on_conflict_do_update(
                index_elements=[InvoiceSequence.prefix, InvoiceSequence.financial_year],
                set_={
                    "last_number": InvoiceSequence.last_number + 1,
                    "updated_at": func.now(),
                },
            )
            .returning(InvoiceSequence.last_number)
        )
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    async def current(self, prefix: str, financial_year: str) -> int:
        """Last issued sequence, 0 when nothing was issued yet."""
        stmt = select(InvoiceSequence.last_number).where(
            InvoiceSequence.prefix == prefix,
            InvoiceSequence.financial_year == financial_year,
        )
        result = await self.db.execute(stmt)
        value = result.scalar_one_or_none()
        return int(value) if value is not None else 0
