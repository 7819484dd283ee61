# invoicing/domain/services/invoice_document.py
"""
Data handed to the PDF renderer.

Client invoices become a TAX INVOICE with letterhead, bill-to block, line
table, tax summary, amount in words, terms and bank details. Freelancer,
contractor and vendor invoices become a PAYMENT VOUCHER with the payee's
bank details and a gross / TDS / net breakdown.

Everything here is already formatted text; the renderer only lays it out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from invoicing.domain.models.company import COMPANY, CompanyProfile
from invoicing.domain.models.invoice import Counterparty, InvoiceType
from invoicing.domain.services.gst_calculator import STATE_CODES, round_to_paise, to_decimal

logger = logging.getLogger("invoice_document")

TAX_INVOICE = "TAX INVOICE"
PAYMENT_VOUCHER = "PAYMENT VOUCHER"

DEFAULT_TERMS = (
    "1. Payment due within 30 days of invoice date.",
    "2. Late payments subject to 18% p.a. interest.",
    "3. All disputes subject to Mumbai jurisdiction.",
    "4. GST reverse charge applicable where applicable.",
)

LINE_HEADERS = ("S.No", "Description", "HSN/SAC", "Qty", "Unit", "Rate", "Disc", "Taxable", "GST%", "Amount")

DESCRIPTION_WIDTH = 50

_ONES = ("", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine")
_TEENS = (
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen",
    "Fifteen", "Sixteen", "Seventeen", "Eighteen", "Nineteen",
)
_TENS = ("", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety")

_PAYMENT_TYPES = {
    InvoiceType.FREELANCER: "Freelancer Payment",
    InvoiceType.CONTRACTOR: "Contractor Payment",
    InvoiceType.VENDOR: "Vendor Payment",
}

_ZERO = Decimal("0")


@dataclass
class InvoiceDocument:
    title: str
    company_name: str
    letterhead: list[str]
    details: list[tuple[str, str]]
    party_heading: str
    party_lines: list[str]
    summary: list[tuple[str, str]]
    amount_in_words: str
    line_headers: tuple[str, ...] = ()
    line_rows: list[list[str]] = field(default_factory=list)
    terms: list[str] = field(default_factory=list)
    bank_details: list[str] = field(default_factory=list)
    signatory: str = ""
    footer: str = ""

    @property
    def is_voucher(self) -> bool:
        return self.title == PAYMENT_VOUCHER


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_inr(amount: Any) -> str:
    """Indian digit grouping: 1234567.5 -> '12,34,567.50'."""
    value = round_to_paise(amount)
    sign = "-" if value < _ZERO else ""
    rupees, paise = f"{abs(value):.2f}".split(".")

    if len(rupees) > 3:
        head, tail = rupees[:-3], rupees[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        rupees = ",".join(groups + [tail])

    return f"{sign}{rupees}.{paise}"


def format_date(value: date | None) -> str:
    return value.strftime("%d/%m/%Y") if value else "-"


def _plain(value: Any) -> str:
    """Decimal without trailing zeros: 9.00 -> '9', 2.50 -> '2.5'."""
    number = to_decimal(value)
    if number == number.to_integral_value():
        return str(int(number))
    return f"{number.normalize():f}"


def _words(n: int) -> list[str]:
    if n == 0:
        return []
    if n < 10:
        return [_ONES[n]]
    if n < 20:
        return [_TEENS[n - 10]]
    if n < 100:
        return [_TENS[n // 10]] + _words(n % 10)
    if n < 1000:
        return [_ONES[n // 100], "Hundred"] + _words(n % 100)
    if n < 100000:
        return _words(n // 1000) + ["Thousand"] + _words(n % 1000)
    if n < 10000000:
        return _words(n // 100000) + ["Lakh"] + _words(n % 100000)
    return _words(n // 10000000) + ["Crore"] + _words(n % 10000000)


def amount_in_words(amount: Any) -> str:
    """
    Rupee amount in Indian-system words.

    >>> amount_in_words(150000.5)
    'One Lakh Fifty Thousand Rupees and Fifty Paise Only'
    """
    value = abs(round_to_paise(amount))
    rupees = int(value)
    paise = int((value - rupees) * 100)

    text = " ".join(_words(rupees) or ["Zero"]) + " Rupees"
    if paise > 0:
        text += " and " + " ".join(_words(paise)) + " Paise"
    return text + " Only"


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def _place_of_supply(invoice: Any, counterparty: Counterparty, company: CompanyProfile) -> str:
    code = getattr(invoice, "place_of_supply", None)
    if code and code in STATE_CODES:
        return f"{STATE_CODES[code]} ({code})"
    return counterparty.state or company.state


def _bill_to_lines(counterparty: Counterparty) -> list[str]:
    city_line = ""
    if counterparty.city:
        city_line = f"{counterparty.city}, {counterparty.state or ''} - {counterparty.pincode or ''}"
    lines = [
        counterparty.display_name,
        counterparty.address or "",
        city_line,
        f"GSTIN: {counterparty.gstin}" if counterparty.gstin else "",
        f"PAN: {counterparty.pan}" if counterparty.pan else "",
        counterparty.email or "",
        counterparty.phone or "",
    ]
    return [line for line in lines if line]


def _line_rows(line_items: list[Any]) -> list[list[str]]:
    rows = []
    for index, item in enumerate(sorted(line_items, key=lambda li: li.sort_order or 0), start=1):
        discount = to_decimal(item.discount_percent)
        rows.append([
            str(index),
            (item.item_description or "")[:DESCRIPTION_WIDTH],
            item.hsn_sac_code or "",
            _plain(item.quantity),
            item.unit or "Nos",
            format_inr(item.unit_price),
            f"{_plain(discount)}%" if discount > _ZERO else "-",
            format_inr(item.taxable_value),
            f"{_plain(item.gst_rate)}%",
            format_inr(item.total_amount),
        ])
    return rows


def _tds_row(invoice: Any) -> tuple[str, str] | None:
    if invoice.tds_applicable and to_decimal(invoice.tds_amount) > _ZERO:
        return (
            f"TDS ({invoice.tds_section} @{_plain(invoice.tds_rate)}%)",
            f"- {format_inr(invoice.tds_amount)}",
        )
    return None


def _tax_summary(invoice: Any) -> list[tuple[str, str]]:
    rows = [("Subtotal", format_inr(invoice.subtotal))]
    if to_decimal(invoice.discount_amount) > _ZERO:
        rows.append(("Discount", f"- {format_inr(invoice.discount_amount)}"))
    rows.append(("Taxable Amount", format_inr(invoice.taxable_amount)))

    if invoice.gst_type == "cgst_sgst":
        rows.append((f"CGST ({_plain(invoice.cgst_rate)}%)", format_inr(invoice.cgst_amount)))
        rows.append((f"SGST ({_plain(invoice.sgst_rate)}%)", format_inr(invoice.sgst_amount)))
    else:
        rows.append((f"IGST ({_plain(invoice.igst_rate)}%)", format_inr(invoice.igst_amount)))

    tds = _tds_row(invoice)
    if tds:
        rows.append(tds)
    rows.append(("Total Amount", format_inr(invoice.total_amount)))
    return rows


def build_tax_invoice(
    invoice: Any,
    counterparty: Counterparty,
    company: CompanyProfile = COMPANY,
) -> InvoiceDocument:
    terms = invoice.terms.splitlines() if invoice.terms else list(DEFAULT_TERMS)
    bank = company.bank
    return InvoiceDocument(
        title=TAX_INVOICE,
        company_name=company.name,
        letterhead=company.address_lines,
        details=[
            ("Invoice No:", invoice.invoice_number),
            ("Invoice Date:", format_date(invoice.invoice_date)),
            ("Due Date:", format_date(invoice.due_date)),
            ("Place of Supply:", _place_of_supply(invoice, counterparty, company)),
        ],
        party_heading="Bill To:",
        party_lines=_bill_to_lines(counterparty),
        line_headers=LINE_HEADERS,
        line_rows=_line_rows(list(invoice.line_items or [])),
        summary=_tax_summary(invoice),
        amount_in_words=amount_in_words(invoice.total_amount),
        terms=terms,
        bank_details=[
            f"Bank Name: {bank.bank_name}",
            f"Account Number: {bank.account_number}",
            f"IFSC Code: {bank.ifsc_code}",
            f"Branch: {bank.branch}",
        ],
        signatory=f"For {company.name}",
        footer="This is a computer generated invoice and does not require signature.",
    )


def build_payment_voucher(
    invoice: Any,
    counterparty: Counterparty,
    company: CompanyProfile = COMPANY,
) -> InvoiceDocument:
    invoice_type = InvoiceType(invoice.invoice_type)
    tds = _tds_row(invoice) or ("TDS", format_inr(_ZERO))
    return InvoiceDocument(
        title=PAYMENT_VOUCHER,
        company_name=company.name,
        letterhead=company.address_lines,
        details=[
            ("Voucher No:", invoice.invoice_number),
            ("Date:", format_date(invoice.invoice_date)),
            ("Payment Type:", _PAYMENT_TYPES[invoice_type]),
        ],
        party_heading="Payment To:",
        party_lines=[
            f"Name: {counterparty.display_name}",
            f"PAN: {counterparty.pan or 'N/A'}",
            f"Bank: {counterparty.bank_name or 'N/A'}",
            f"Account: {counterparty.bank_account_number or 'N/A'}",
            f"IFSC: {counterparty.bank_ifsc_code or 'N/A'}",
        ],
        summary=[
            ("Gross Amount", format_inr(invoice.total_amount)),
            tds,
            ("Net Payable", format_inr(to_decimal(invoice.total_amount) - to_decimal(invoice.tds_amount))),
        ],
        amount_in_words=amount_in_words(to_decimal(invoice.total_amount) - to_decimal(invoice.tds_amount)),
    )


def build_invoice_document(
    invoice: Any,
    counterparty: Counterparty,
    company: CompanyProfile = COMPANY,
) -> InvoiceDocument:
    """Pick the document layout for the invoice type."""
    if InvoiceType(invoice.invoice_type) is InvoiceType.CLIENT:
        document = build_tax_invoice(invoice, counterparty, company)
    else:
        document = build_payment_voucher(invoice, counterparty, company)
    logger.debug("Built %s for %s", document.title, invoice.invoice_number)
    return document
