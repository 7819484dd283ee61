# invoicing/domain/services/invoice_numbering.py
"""
GST-compliant invoice numbers: ``PREFIX/YYYY-YY/NNNNN``.

  - one sequence per (prefix, financial year), restarting at 1 every April
  - sequence zero-padded to 5 digits
  - prefixes: INV client, FCO freelancer, CON contractor, FVE vendor

Production numbering goes through a ``SequenceAllocator`` (the database
counter in ``InvoiceSequenceRepository``). ``generate_next_invoice_number``
derives the next number by scanning existing invoices; it is not safe under
concurrent issuance and only backs the in-memory allocator and tests.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Iterable
from datetime import date
from types import MappingProxyType
from typing import Any, Mapping, Protocol

from invoicing.domain.models.invoice import InvoiceType
from invoicing.domain.models.tax import InvoiceNumber
from invoicing.domain.services.financial_year import get_financial_year

logger = logging.getLogger("invoice_numbering")

INVOICE_PREFIXES: Mapping[InvoiceType, str] = MappingProxyType({
    InvoiceType.CLIENT: "INV",
    InvoiceType.FREELANCER: "FCO",
    InvoiceType.CONTRACTOR: "CON",
    InvoiceType.VENDOR: "FVE",
})

_PREFIX_TO_TYPE: Mapping[str, InvoiceType] = MappingProxyType(
    {prefix: invoice_type for invoice_type, prefix in INVOICE_PREFIXES.items()}
)

MAX_SEQUENCE = 99999

INVOICE_NUMBER_REGEX = re.compile(r"^([A-Z]+)/(\d{4}-\d{2})/(\d{5})$")


def prefix_for(invoice_type: InvoiceType | str) -> str:
    return INVOICE_PREFIXES[InvoiceType(invoice_type)]


def format_invoice_number(prefix: str, financial_year: str, sequence: int) -> str:
    if not 1 <= sequence <= MAX_SEQUENCE:
        raise ValueError(f"Invoice sequence out of range (1-{MAX_SEQUENCE}): {sequence}")
    return f"{prefix}/{financial_year}/{sequence:05d}"


def parse_invoice_number(invoice_number: str | None) -> InvoiceNumber | None:
    if not invoice_number:
        return None
    match = INVOICE_NUMBER_REGEX.match(invoice_number)
    if not match:
        return None
    return InvoiceNumber(
        prefix=match.group(1),
        financial_year=match.group(2),
        sequence=int(match.group(3)),
    )


def is_valid_invoice_number(invoice_number: str | None) -> bool:
    parsed = parse_invoice_number(invoice_number)
    if parsed is None:
        return False
    return parsed.prefix in _PREFIX_TO_TYPE and parsed.sequence > 0


def get_invoice_metadata(invoice_number: str | None) -> dict:
    parsed = parse_invoice_number(invoice_number)
    if parsed is None:
        return {"type": "unknown", "financial_year": "", "sequence": 0}

    invoice_type = _PREFIX_TO_TYPE.get(parsed.prefix)
    return {
        "type": invoice_type.value if invoice_type else "unknown",
        "financial_year": parsed.financial_year,
        "sequence": parsed.sequence,
    }


# ---------------------------------------------------------------------------
# Scan-based derivation
# ---------------------------------------------------------------------------

def _number_of(invoice: Any) -> str | None:
    if isinstance(invoice, str):
        return invoice
    if isinstance(invoice, Mapping):
        return invoice.get("invoice_number")
    return getattr(invoice, "invoice_number", None)


def max_sequence(prefix: str, financial_year: str, existing_invoices: Iterable[Any]) -> int:
    """Highest sequence already issued for (prefix, financial_year), or 0."""
    highest = 0
    for invoice in existing_invoices:
        parsed = parse_invoice_number(_number_of(invoice))
        if parsed and parsed.prefix == prefix and parsed.financial_year == financial_year:
            highest = max(highest, parsed.sequence)
    return highest


def generate_next_invoice_number(
    prefix: str,
    existing_invoices: Iterable[Any],
    on: date | None = None,
) -> str:
    """
    Next number for ``prefix`` in the current financial year.

    ``existing_invoices`` may hold number strings, dicts or objects with an
    ``invoice_number`` attribute and must be the complete set for the prefix.
    """
    financial_year = get_financial_year(on)
    return format_invoice_number(
        prefix, financial_year, max_sequence(prefix, financial_year, existing_invoices) + 1,
    )


def generate_client_invoice_number(existing_invoices: Iterable[Any], on: date | None = None) -> str:
    return generate_next_invoice_number(INVOICE_PREFIXES[InvoiceType.CLIENT], existing_invoices, on)


def generate_freelancer_invoice_number(existing_invoices: Iterable[Any], on: date | None = None) -> str:
    return generate_next_invoice_number(INVOICE_PREFIXES[InvoiceType.FREELANCER], existing_invoices, on)


def generate_contractor_invoice_number(existing_invoices: Iterable[Any], on: date | None = None) -> str:
    return generate_next_invoice_number(INVOICE_PREFIXES[InvoiceType.CONTRACTOR], existing_invoices, on)


def generate_vendor_invoice_number(existing_invoices: Iterable[Any], on: date | None = None) -> str:
    return generate_next_invoice_number(INVOICE_PREFIXES[InvoiceType.VENDOR], existing_invoices, on)


# ---------------------------------------------------------------------------
# Sequence allocation
# ---------------------------------------------------------------------------

class SequenceAllocator(Protocol):
    async def next_sequence(self, prefix: str, financial_year: str) -> int:
        ...


class InMemorySequenceAllocator:
    """
    Per-process counters keyed by (prefix, financial_year).

    Only correct when this process is the single writer of invoice numbers.
    """

    def __init__(self) -> None:
        self._counters: dict[tuple[str, str], int] = {}
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}

    def _lock(self, key: tuple[str, str]) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def seed(self, existing_invoices: Iterable[Any]) -> None:
        """Raise counters to the highest numbers already issued."""
        for invoice in existing_invoices:
            parsed = parse_invoice_number(_number_of(invoice))
            if parsed is None:
                continue
            key = (parsed.prefix, parsed.financial_year)
            self._counters[key] = max(self._counters.get(key, 0), parsed.sequence)

    async def next_sequence(self, prefix: str, financial_year: str) -> int:
        key = (prefix, financial_year)
        async with self._lock(key):
            value = self._counters.get(key, 0) + 1
            self._counters[key] = value
            return value


async def allocate_invoice_number(
    prefix: str,
    allocator: SequenceAllocator,
    on: date | None = None,
) -> str:
    financial_year = get_financial_year(on)
    sequence = await allocator.next_sequence(prefix, financial_year)
    number = format_invoice_number(prefix, financial_year, sequence)
    logger.debug("Allocated invoice number %s", number)
    return number
