# invoicing/domain/services/invoice_assembly.py
"""
Invoice creation: line items + counterparty -> persisted invoice.

Flow:
  1. buyer state vs seller state decides CGST+SGST or IGST
  2. every line is taxed on its own, totals are summed
  3. freelancer / contractor / vendor invoices get TDS
  4. next number is allocated for (prefix, financial year)
  5. header and line items are written in one transaction
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.config.settings import settings
from invoicing.domain.errors import InvoiceNumberConflict
from invoicing.domain.models.invoice import (
    COUNTERPARTY_KIND,
    Counterparty,
    InvoiceDraft,
    InvoiceType,
    LineItemDraft,
    LineItemInput,
)
from invoicing.domain.models.tax import InvoiceTDS
from invoicing.domain.services.financial_year import get_financial_year
from invoicing.domain.services.gst_calculator import (
    calculate_invoice_gst,
    get_state_code,
    get_state_code_from_gstin,
    round_to_paise,
    to_decimal,
)
from invoicing.domain.services.gstin_pan_validation import is_valid_gstin
from invoicing.domain.services.invoice_numbering import (
    SequenceAllocator,
    allocate_invoice_number,
    prefix_for,
)
from invoicing.domain.services.tds_calculator import (
    calculate_invoice_tds,
    calculate_section_invoice_tds,
)

logger = logging.getLogger("invoice_assembly")

DEFAULT_TERMS = "Payment due within 30 days."

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def resolve_buyer_state_code(counterparty: Counterparty, seller_state_code: str) -> str:
    """GSTIN prefix first, then the state name, else the seller's own state."""
    if is_valid_gstin(counterparty.gstin):
        return get_state_code_from_gstin(counterparty.gstin.strip().upper())
    return get_state_code(counterparty.state) or seller_state_code


def line_amounts(item: LineItemInput) -> tuple[Decimal, Decimal, Decimal]:
    """(gross, discount, taxable) for one line."""
    gross = round_to_paise(to_decimal(item.quantity) * to_decimal(item.unit_price))
    discount = to_decimal(item.discount_amount)
    if discount <= _ZERO and to_decimal(item.discount_percent) > _ZERO:
        discount = round_to_paise(gross * to_decimal(item.discount_percent) / _HUNDRED)
    discount = min(discount, gross)
    return gross, discount, gross - discount


def _header_rate(rates: set[Decimal], taxable: Decimal, total_gst: Decimal) -> Decimal:
    if len(rates) == 1:
        return next(iter(rates))
    if taxable == _ZERO:
        return _ZERO
    return round_to_paise(total_gst / taxable * _HUNDRED)


def compute_tds(
    invoice_type: InvoiceType,
    counterparty: Counterparty,
    taxable_amount: Decimal,
    tds_policy: str | None = None,
    cumulative_amount: Any = 0,
) -> InvoiceTDS:
    policy = tds_policy or settings.TDS_POLICY
    if policy == "section":
        return calculate_section_invoice_tds(
            invoice_type,
            taxable_amount,
            is_company=counterparty.is_company,
            has_pan=counterparty.has_pan,
            vendor_type=counterparty.vendor_type,
            cumulative_amount=cumulative_amount,
        )
    if policy != "invoice":
        raise ValueError(f"Unknown TDS policy: {policy}")
    return calculate_invoice_tds(
        invoice_type,
        taxable_amount,
        is_company=counterparty.is_company,
        has_pan=counterparty.has_pan,
        tds_section=counterparty.tds_section,
    )


def build_invoice(
    invoice_type: InvoiceType | str,
    counterparty: Counterparty,
    line_items: Sequence[LineItemInput],
    invoice_number: str,
    invoice_date: date,
    due_date: date | None = None,
    *,
    seller_state_code: str | None = None,
    is_gst_applicable: bool = True,
    tds_policy: str | None = None,
    cumulative_amount: Any = 0,
    notes: str | None = None,
    terms: str | None = DEFAULT_TERMS,
    created_by: str | None = None,
) -> InvoiceDraft:
    """Compose the invoice header and line rows. Pure; nothing is stored."""
    invoice_type = InvoiceType(invoice_type)
    if not line_items:
        raise ValueError("An invoice needs at least one line item")

    seller = seller_state_code or settings.COMPANY_STATE_CODE
    buyer = resolve_buyer_state_code(counterparty, seller)

    amounts = [line_amounts(item) for item in line_items]
    rates = [to_decimal(item.gst_rate) if is_gst_applicable else _ZERO for item in line_items]

    gst = calculate_invoice_gst(
        [{"taxable_value": taxable, "gst_rate": rate} for (_, _, taxable), rate in zip(amounts, rates)],
        buyer,
        seller,
    )

    lines = [
        LineItemDraft(
            item_description=item.description,
            quantity=to_decimal(item.quantity),
            unit=item.unit or "Nos",
            unit_price=to_decimal(item.unit_price),
            discount_percent=to_decimal(item.discount_percent),
            discount_amount=discount,
            taxable_value=line.taxable_value,
            gst_rate=rate,
            gst_amount=line.total_gst,
            total_amount=line.total_amount,
            sort_order=index,
            hsn_sac_code=item.hsn_sac_code,
        )
        for index, (item, (_, discount, _), rate, line) in enumerate(
            zip(line_items, amounts, rates, gst.lines)
        )
    ]

    rate = _header_rate(set(rates), gst.taxable_value, gst.total_gst)
    intra = gst.gst_type == "cgst_sgst"

    tds = compute_tds(invoice_type, counterparty, gst.taxable_value, tds_policy, cumulative_amount)

    draft = InvoiceDraft(
        invoice_number=invoice_number,
        invoice_type=invoice_type,
        invoice_date=invoice_date,
        due_date=due_date,
        subtotal=sum((gross for gross, _, _ in amounts), _ZERO),
        discount_amount=sum((discount for _, discount, _ in amounts), _ZERO),
        taxable_amount=gst.taxable_value,
        is_gst_applicable=is_gst_applicable,
        gst_type=gst.gst_type,
        cgst_rate=rate / 2 if intra else _ZERO,
        sgst_rate=rate / 2 if intra else _ZERO,
        igst_rate=_ZERO if intra else rate,
        cgst_amount=gst.cgst_amount,
        sgst_amount=gst.sgst_amount,
        igst_amount=gst.igst_amount,
        gstin=counterparty.gstin,
        place_of_supply=buyer,
        tds_applicable=tds.tds_applicable,
        tds_section=tds.tds_section,
        tds_rate=tds.tds_rate,
        tds_amount=tds.tds_amount,
        total_amount=gst.total_amount,
        amount_due=gst.total_amount - tds.tds_amount,
        notes=notes,
        terms=terms,
        created_by=created_by,
        line_items=lines,
    )
    setattr(draft, f"{COUNTERPARTY_KIND[invoice_type]}_id", counterparty.id)
    return draft


async def create_invoice(
    db: AsyncSession,
    invoice_type: InvoiceType | str,
    counterparty_id: Any,
    line_items: Sequence[LineItemInput],
    invoice_date: date,
    due_date: date | None = None,
    *,
    allocator: SequenceAllocator | None = None,
    on: date | None = None,
    **options: Any,
):
    """
    Build and persist an invoice as one unit of work.

    The number is allocated inside the same transaction that writes the
    header and line items, so either all of it commits or none of it does.
    Under the section TDS policy the counterparty's taxable total for the
    financial year is read first and applied as the running total.
    """
    from invoicing.infrastructure.db.repositories import (
        CounterpartyRepository,
        InvoiceRepository,
        InvoiceSequenceRepository,
    )

    invoice_type = InvoiceType(invoice_type)
    kind = COUNTERPARTY_KIND[invoice_type]
    counterparty = await CounterpartyRepository(db).get(kind, counterparty_id)
    allocator = allocator or InvoiceSequenceRepository(db)

    policy = options.get("tds_policy") or settings.TDS_POLICY
    if policy == "section" and invoice_type is not InvoiceType.CLIENT and "cumulative_amount" not in options:
        options["cumulative_amount"] = await InvoiceRepository(db).cumulative_taxable(
            kind, counterparty.id, get_financial_year(on),
        )

    invoice_number = None
    try:
        invoice_number = await allocate_invoice_number(prefix_for(invoice_type), allocator, on=on)
        draft = build_invoice(
            invoice_type, counterparty, line_items, invoice_number, invoice_date, due_date, **options,
        )
        invoice = await InvoiceRepository(db).add_with_line_items(draft)
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Invoice number conflict on %s, creation rolled back", invoice_number)
        raise InvoiceNumberConflict(invoice_number or "") from exc
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Invoice %s created (%s, total=%s, tds=%s)",
        invoice_number, invoice_type.value, draft.total_amount, draft.tds_amount,
    )
    return invoice
