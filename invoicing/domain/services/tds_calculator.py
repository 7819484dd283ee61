# invoicing/domain/services/tds_calculator.py
"""
TDS (tax deducted at source) on payments to contractors, freelancers,
vendors, landlords and commission agents.

Two paths live here:

* ``calculate_tds``: the section table with per-section rates, one
  threshold per section (checked against the payment and against the
  running total), 20% without PAN.
* ``calculate_invoice_tds`` and the ``get_*_tds_rate`` helpers: the flat
  rules applied when a payee invoice is created (nothing below Rs 30,000,
  then 10% (194J) or 1%/2% (194C), 20% without PAN).

The two disagree for some inputs (e.g. running totals, 194J
technical rate). Invoice assembly picks one via ``settings.TDS_POLICY``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping

from invoicing.domain.models.company import COMPANY
from invoicing.domain.models.invoice import InvoiceType
from invoicing.domain.models.tax import InvoiceTDS, TDSResult
from invoicing.domain.services.gst_calculator import round_to_paise, to_decimal

logger = logging.getLogger("tds_calculator")

NO_PAN_RATE = Decimal("20")
INVOICE_TDS_THRESHOLD = Decimal("30000")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class TDSSection:
    section: str
    description: str
    threshold: Decimal
    rate: Decimal | None = None
    individual_rate: Decimal | None = None  # 194C individual / HUF
    company_rate: Decimal | None = None  # 194C everyone else
    professional_rate: Decimal | None = None
    technical_rate: Decimal | None = None
    plant_machinery_rate: Decimal | None = None
    land_building_rate: Decimal | None = None
    aggregate_threshold: Decimal | None = None  # recorded, not applied
    senior_citizen_threshold: Decimal | None = None  # recorded, not applied


TDS_SECTIONS: Mapping[str, TDSSection] = MappingProxyType({
    "194C": TDSSection(
        section="194C",
        description="Payment to Contractors",
        threshold=Decimal("30000"),
        aggregate_threshold=Decimal("100000"),
        individual_rate=Decimal("1"),
        company_rate=Decimal("2"),
    ),
    "194J": TDSSection(
        section="194J",
        description="Professional/Technical Services",
        threshold=Decimal("30000"),
        professional_rate=Decimal("10"),
        technical_rate=Decimal("2"),
    ),
    "194H": TDSSection(
        section="194H",
        description="Commission or Brokerage",
        threshold=Decimal("15000"),
        rate=Decimal("5"),
    ),
    "194I": TDSSection(
        section="194I",
        description="Rent",
        threshold=Decimal("240000"),
        plant_machinery_rate=Decimal("2"),
        land_building_rate=Decimal("10"),
    ),
    "194A": TDSSection(
        section="194A",
        description="Interest other than from Banks",
        threshold=Decimal("5000"),
        senior_citizen_threshold=Decimal("50000"),
        rate=Decimal("10"),
    ),
})

_INDIVIDUAL_PARTY_TYPES = frozenset({"individual", "huf"})


def _section_rate(
    data: TDSSection,
    party_type: str,
    is_professional: bool,
    is_technical: bool,
    is_plant_machinery: bool,
) -> Decimal:
    if data.section == "194C":
        if party_type.strip().lower() in _INDIVIDUAL_PARTY_TYPES:
            return data.individual_rate
        return data.company_rate
    if data.section == "194J":
        if is_professional:
            return data.professional_rate
        if is_technical:
            return data.technical_rate
        return data.professional_rate
    if data.section == "194I":
        return data.plant_machinery_rate if is_plant_machinery else data.land_building_rate
    return data.rate


def calculate_tds(
    amount: Any,
    section: str,
    party_type: str = "individual",
    is_professional: bool = False,
    is_technical: bool = False,
    cumulative_amount: Any = 0,
    has_pan: bool = True,
    *,
    is_plant_machinery: bool = False,
) -> TDSResult:
    """
    TDS on one payment under ``section``.

    The rate is reported even when the threshold is not met; only the
    deducted amount drops to zero.
    """
    data = TDS_SECTIONS.get(section)
    if data is None:
        raise ValueError(f"Unknown TDS section: {section}")

    amount = to_decimal(amount)
    cumulative = to_decimal(cumulative_amount)

    tds_rate = _section_rate(data, party_type, is_professional, is_technical, is_plant_machinery)

    higher_rate_applied = False
    if not has_pan:
        tds_rate = NO_PAN_RATE
        higher_rate_applied = True

    # the running total is checked against the same per-section threshold
    is_threshold_met = amount >= data.threshold or (cumulative + amount) >= data.threshold

    tds_amount = round_to_paise(amount * tds_rate / _HUNDRED) if is_threshold_met else _ZERO
    logger.debug(
        "TDS %s on %s: rate=%s%%, deducted=%s, threshold met=%s",
        section, amount, tds_rate, tds_amount, is_threshold_met,
    )

    return TDSResult(
        amount=amount,
        tds_rate=tds_rate,
        tds_amount=tds_amount,
        net_amount=amount - tds_amount,
        section=section,
        section_description=data.description,
        is_threshold_met=is_threshold_met,
        pan_required=not has_pan,
        higher_rate_applied=higher_rate_applied,
    )


def determine_tds_section(payment_type: str, vendor_type: str | None = None) -> str:
    """Map a payment type to its TDS section."""
    if payment_type == "contractor":
        return "194C"
    if payment_type in ("freelancer", "consultant"):
        return "194J"
    if payment_type == "vendor":
        # goods suppliers fall under 194C, service vendors under 194J
        return "194C" if vendor_type == "supplier" else "194J"
    if payment_type == "rent":
        return "194I"
    if payment_type == "commission":
        return "194H"
    return "194C"


# ---------------------------------------------------------------------------
# Creation-time helpers (flat Rs 30,000 threshold)
# ---------------------------------------------------------------------------

def _flat_result(amount: Decimal, rate: Decimal) -> dict:
    tds_amount = round_to_paise(amount * rate / _HUNDRED)
    return {"rate": rate, "tds_amount": tds_amount, "net_amount": amount - tds_amount}


def get_freelancer_tds_rate(amount: Any, has_pan: bool = True) -> dict:
    amount = to_decimal(amount)
    if amount < INVOICE_TDS_THRESHOLD:
        return {"rate": _ZERO, "tds_amount": _ZERO, "net_amount": amount}
    return _flat_result(amount, Decimal("10") if has_pan else NO_PAN_RATE)


def get_vendor_tds_rate(
    amount: Any,
    section: str,
    is_company: bool = False,
    has_pan: bool = True,
) -> dict:
    amount = to_decimal(amount)
    if amount < INVOICE_TDS_THRESHOLD:
        return {"rate": _ZERO, "tds_amount": _ZERO, "net_amount": amount}

    if not has_pan:
        rate = NO_PAN_RATE
    elif section == "194C":
        rate = Decimal("2") if is_company else Decimal("1")
    else:
        rate = Decimal("10")
    return _flat_result(amount, rate)


def calculate_invoice_tds(
    invoice_type: InvoiceType | str,
    subtotal: Any,
    is_company: bool = False,
    has_pan: bool = True,
    tds_section: str | None = None,
) -> InvoiceTDS:
    """TDS for a payee invoice using the creation-time rules."""
    invoice_type = InvoiceType(invoice_type)
    amount = to_decimal(subtotal)

    if invoice_type is InvoiceType.CLIENT:
        return InvoiceTDS(amount_after_tds=amount)

    if invoice_type is InvoiceType.FREELANCER:
        section = "194J"
        result = get_freelancer_tds_rate(amount, has_pan=has_pan)
    elif invoice_type is InvoiceType.CONTRACTOR:
        section = "194C"
        result = get_vendor_tds_rate(amount, "194C", is_company=is_company, has_pan=has_pan)
    else:
        section = tds_section if tds_section in ("194C", "194J") else "194C"
        result = get_vendor_tds_rate(amount, section, is_company=is_company, has_pan=has_pan)

    if result["tds_amount"] <= _ZERO:
        return InvoiceTDS(amount_after_tds=amount)

    return InvoiceTDS(
        tds_applicable=True,
        tds_section=section,
        tds_rate=result["rate"],
        tds_amount=result["tds_amount"],
        amount_after_tds=result["net_amount"],
    )


def calculate_section_invoice_tds(
    invoice_type: InvoiceType | str,
    subtotal: Any,
    is_company: bool = False,
    has_pan: bool = True,
    vendor_type: str | None = None,
    cumulative_amount: Any = 0,
) -> InvoiceTDS:
    """TDS for a payee invoice through the section table."""
    invoice_type = InvoiceType(invoice_type)
    amount = to_decimal(subtotal)

    if invoice_type is InvoiceType.CLIENT:
        return InvoiceTDS(amount_after_tds=amount)

    section = determine_tds_section(invoice_type.value, vendor_type)
    result = calculate_tds(
        amount,
        section,
        party_type="company" if is_company else "individual",
        is_professional=section == "194J",
        cumulative_amount=cumulative_amount,
        has_pan=has_pan,
    )
    if result.tds_amount <= _ZERO:
        return InvoiceTDS(amount_after_tds=amount)

    return InvoiceTDS(
        tds_applicable=True,
        tds_section=section,
        tds_rate=result.tds_rate,
        tds_amount=result.tds_amount,
        amount_after_tds=result.net_amount,
    )


# ---------------------------------------------------------------------------
# Form 16A
# ---------------------------------------------------------------------------

def generate_form16a(
    party_id: str,
    party_name: str,
    pan_number: str,
    financial_year: str,
    quarterly_data: list[dict],
) -> dict:
    """
    Form 16A certificate data for one deductee and financial year.

    ``quarterly_data`` rows carry quarter, payment_amount, tds_deducted,
    tds_deposited.
    """
    def _total(key: str) -> Decimal:
        return sum((to_decimal(q.get(key)) for q in quarterly_data), _ZERO)

    return {
        "deductor_name": COMPANY.name,
        "deductor_tan": COMPANY.tan,
        "deductor_address": f"{COMPANY.city}, {COMPANY.state}",
        "party_id": party_id,
        "party_name": party_name,
        "pan_number": pan_number,
        "financial_year": financial_year,
        "quarterly_summary": quarterly_data,
        "total_payment": _total("payment_amount"),
        "total_tds_deducted": _total("tds_deducted"),
        "total_tds_deposited": _total("tds_deposited"),
    }
