# invoicing/infrastructure/db/repositories/counterparty_repository.py
"""Read-only access to contacts, freelancers, contractors and vendors."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.domain.errors import CounterpartyNotFound
from invoicing.domain.models.invoice import Counterparty
from invoicing.infrastructure.db.models import Contact, Contractor, Freelancer, Vendor

_MODELS = {
    "contact": Contact,
    "freelancer": Freelancer,
    "contractor": Contractor,
    "vendor": Vendor,
}


def to_counterparty(kind: str, row) -> Counterparty:
    name = " ".join(part for part in (row.first_name, row.last_name) if part)
    return Counterparty(
        id=row.id,
        kind=kind,
        name=name or (row.company_name or ""),
        company_name=row.company_name,
        address=row.address,
        city=row.city,
        state=row.state,
        pincode=row.pincode,
        gstin=row.gst_number,
        pan=row.pan_number,
        email=row.email,
        phone=row.phone,
        is_company=bool(getattr(row, "is_company", False)),
        vendor_type=getattr(row, "vendor_type", None),
        tds_section=getattr(row, "tds_section", None),
        bank_name=getattr(row, "bank_name", None),
        bank_account_number=getattr(row, "bank_account_number", None),
        bank_ifsc_code=getattr(row, "bank_ifsc_code", None),
    )


class CounterpartyRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, kind: str, counterparty_id) -> Counterparty:
        model = _MODELS.get(kind)
        if model is None:
            raise ValueError(f"Unknown counterparty kind: {kind}")

        try:
            key = counterparty_id if isinstance(counterparty_id, uuid.UUID) else uuid.UUID(str(counterparty_id))
        except ValueError:
            raise CounterpartyNotFound(kind, counterparty_id)

        result = await self.db.execute(select(model).where(model.id == key))
        row = result.scalar_one_or_none()
        if row is None:
            raise CounterpartyNotFound(kind, counterparty_id)
        return to_counterparty(kind, row)
