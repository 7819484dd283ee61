# invoicing/domain/services/gst_calculator.py
"""
GST tax split for Indian invoices.

Rules:
  - Intra-state supply (buyer state == seller state): CGST + SGST, each at
    half the GST rate.
  - Inter-state supply: IGST at the full rate.
  - Each component is rounded to the paisa on its own; CGST and SGST are then
    forced equal by taking the larger of the two.
  - Total amount is rounded to the whole rupee.
  - Invoice totals are the sum of per-line results, never tax on the
    pre-summed taxable value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any

from invoicing.domain.models.tax import GSTResult, InvoiceGSTResult

logger = logging.getLogger("gst_calculator")

GST_RATES: tuple[int, ...] = (0, 5, 12, 18, 28)

DEFAULT_COMPANY_STATE_CODE = "27"  # Maharashtra

_PAISA = Decimal("0.01")
_RUPEE = Decimal("1")
_ZERO = Decimal("0")
_HUNDRED = Decimal("100")

COMMON_HSN_CODES: Mapping[str, str] = MappingProxyType({
    "e_learning": "9992",
    "software_development": "998314",
    "consulting": "998311",
    "training": "999293",
    "content_development": "998313",
    "graphic_design": "998391",
    "video_production": "998362",
    "technical_writing": "998393",
    "project_management": "998311",
    "data_entry": "998314",
})

# First two digits of a GSTIN
STATE_CODES: Mapping[str, str] = MappingProxyType({
    "01": "Jammu and Kashmir",
    "02": "Himachal Pradesh",
    "03": "Punjab",
    "04": "Chandigarh",
    "05": "Uttarakhand",
    "06": "Haryana",
    "07": "Delhi",
    "08": "Rajasthan",
    "09": "Uttar Pradesh",
    "10": "Bihar",
    "11": "Sikkim",
    "12": "Arunachal Pradesh",
    "13": "Nagaland",
    "14": "Manipur",
    "15": "Mizoram",
    "16": "Tripura",
    "17": "Meghalaya",
    "18": "Assam",
    "19": "West Bengal",
    "20": "Jharkhand",
    "21": "Odisha",
    "22": "Chhattisgarh",
    "23": "Madhya Pradesh",
    "24": "Gujarat",
    "26": "Dadra and Nagar Haveli and Daman and Diu",
    "27": "Maharashtra",
    "28": "Andhra Pradesh",
    "29": "Karnataka",
    "30": "Goa",
    "31": "Lakshadweep",
    "32": "Kerala",
    "33": "Tamil Nadu",
    "34": "Puducherry",
    "35": "Andaman and Nicobar Islands",
    "36": "Telangana",
    "37": "Andhra Pradesh",
    "97": "Other Territory",
})

# Later codes win, so Andhra Pradesh resolves to the post-2014 code 37.
_STATE_NAME_TO_CODE: Mapping[str, str] = MappingProxyType(
    {name.lower(): code for code, name in STATE_CODES.items()}
)


# ---------------------------------------------------------------------------
# Rounding / conversion helpers
# ---------------------------------------------------------------------------

def to_decimal(value: Any, default: str = "0") -> Decimal:
    """Safely convert float/str/int/Decimal/None to Decimal."""
    if value is None:
        return Decimal(default)
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal(default)


def round_to_paise(amount: Any) -> Decimal:
    return to_decimal(amount).quantize(_PAISA, rounding=ROUND_HALF_UP)


def round_to_rupees(amount: Any) -> Decimal:
    return to_decimal(amount).quantize(_RUPEE, rounding=ROUND_HALF_UP)


def is_valid_gst_rate(rate: Any) -> bool:
    return to_decimal(rate, default="-1") in {Decimal(r) for r in GST_RATES}


# ---------------------------------------------------------------------------
# State helpers
# ---------------------------------------------------------------------------

def is_intra_state_transaction(
    buyer_state_code: str | None,
    seller_state_code: str = DEFAULT_COMPANY_STATE_CODE,
) -> bool:
    return buyer_state_code == seller_state_code


def get_state_code(state_name: str | None) -> str | None:
    """Reverse lookup: 'Maharashtra' -> '27'."""
    if not state_name:
        return None
    return _STATE_NAME_TO_CODE.get(state_name.strip().lower())


def get_state_code_from_gstin(gstin: str | None) -> str | None:
    if not gstin or len(gstin) != 15:
        return None
    return gstin[:2]


# ---------------------------------------------------------------------------
# Calculation
# ---------------------------------------------------------------------------

def calculate_gst(taxable_value: Any, gst_rate: Any, is_intra_state: bool) -> GSTResult:
    """Compute the GST split for one taxable value."""
    taxable = to_decimal(taxable_value)
    if taxable < _ZERO:
        raise ValueError(f"taxable_value must be >= 0, got {taxable}")
    rate = to_decimal(gst_rate)

    if is_intra_state:
        cgst_rate = sgst_rate = rate / 2
        igst_rate = _ZERO
    else:
        cgst_rate = sgst_rate = _ZERO
        igst_rate = rate

    cgst_amount = round_to_paise(taxable * cgst_rate / _HUNDRED)
    sgst_amount = round_to_paise(taxable * sgst_rate / _HUNDRED)
    igst_amount = round_to_paise(taxable * igst_rate / _HUNDRED)

    # CGST must equal SGST; never under-collect
    if is_intra_state and cgst_amount != sgst_amount:
        cgst_amount = sgst_amount = max(cgst_amount, sgst_amount)

    total_gst = round_to_paise(cgst_amount + sgst_amount + igst_amount)

    return GSTResult(
        taxable_value=taxable,
        cgst_rate=cgst_rate,
        sgst_rate=sgst_rate,
        igst_rate=igst_rate,
        cgst_amount=cgst_amount,
        sgst_amount=sgst_amount,
        igst_amount=igst_amount,
        total_gst=total_gst,
        total_amount=round_to_rupees(taxable + total_gst),
        gst_type="cgst_sgst" if is_intra_state else "igst",
    )


def calculate_invoice_gst(
    line_items: Iterable[Mapping[str, Any]],
    buyer_state_code: str | None,
    seller_state_code: str = DEFAULT_COMPANY_STATE_CODE,
) -> InvoiceGSTResult:
    """
    Sum GST across invoice lines.

    Each item needs ``taxable_value`` and ``gst_rate``. Every line is taxed
    on its own and the components are added up.
    """
    is_intra = is_intra_state_transaction(buyer_state_code, seller_state_code)

    lines = tuple(
        calculate_gst(item.get("taxable_value"), item.get("gst_rate"), is_intra)
        for item in line_items
    )

    taxable = sum((line.taxable_value for line in lines), _ZERO)
    cgst = sum((line.cgst_amount for line in lines), _ZERO)
    sgst = sum((line.sgst_amount for line in lines), _ZERO)
    igst = sum((line.igst_amount for line in lines), _ZERO)
    total_gst = cgst + sgst + igst

    logger.debug(
        "Invoice GST: %d lines, taxable=%s, gst=%s (%s)",
        len(lines), taxable, total_gst, "intra" if is_intra else "inter",
    )

    return InvoiceGSTResult(
        taxable_value=taxable,
        cgst_amount=cgst,
        sgst_amount=sgst,
        igst_amount=igst,
        total_gst=total_gst,
        total_amount=round_to_rupees(taxable + total_gst),
        gst_type="cgst_sgst" if is_intra else "igst",
        lines=lines,
    )


# ---------------------------------------------------------------------------
# GSTR-1 summary
# ---------------------------------------------------------------------------

def _effective_rate(taxable: Decimal, cgst: Decimal, igst: Decimal) -> Decimal:
    if taxable == _ZERO:
        return _ZERO
    if igst > _ZERO:
        return round_to_paise(igst / taxable * _HUNDRED)
    return round_to_paise(cgst / taxable * 200)


def generate_gstr1_summary(invoices: Iterable[Mapping[str, Any]]) -> dict:
    """
    Split outward invoices into GSTR-1 B2B / B2CS sections.

    Each invoice dict carries invoice_number, invoice_date, gstin (optional),
    taxable_value, cgst, sgst, igst, state_code and optionally hsn_sac_code.
    Buyers with a 15-character GSTIN are B2B; everyone else is B2CS.
    """
    b2b: list[dict] = []
    b2cs: list[dict] = []
    hsn_summary: dict[str, dict] = {}

    total_taxable = _ZERO
    total_cgst = _ZERO
    total_sgst = _ZERO
    total_igst = _ZERO

    for inv in invoices:
        taxable = to_decimal(inv.get("taxable_value"))
        cgst = to_decimal(inv.get("cgst"))
        sgst = to_decimal(inv.get("sgst"))
        igst = to_decimal(inv.get("igst"))
        rate = _effective_rate(taxable, cgst, igst)
        gstin = inv.get("gstin")

        if gstin and len(gstin) == 15:
            b2b.append({
                "ctin": gstin,
                "inv": [{
                    "inum": inv.get("invoice_number"),
                    "idt": inv.get("invoice_date"),
                    "val": taxable + cgst + sgst + igst,
                    "itms": [{
                        "num": 1,
                        "itm_det": {
                            "txval": taxable,
                            "rt": rate,
                            "iamt": igst,
                            "camt": cgst,
                            "samt": sgst,
                        },
                    }],
                }],
            })
        else:
            b2cs.append({
                "sply_ty": "INTER" if igst > _ZERO else "INTRA",
                "pos": inv.get("state_code") or DEFAULT_COMPANY_STATE_CODE,
                "typ": "OE",
                "hsn_sc": inv.get("hsn_sac_code") or "9983",
                "txval": taxable,
                "rt": rate,
                "iamt": igst,
                "camt": cgst,
                "samt": sgst,
            })

        hsn = inv.get("hsn_sac_code")
        if hsn:
            bucket = hsn_summary.setdefault(
                hsn, {"hsn": hsn, "taxable": _ZERO, "igst": _ZERO, "cgst": _ZERO, "sgst": _ZERO},
            )
            bucket["taxable"] += taxable
            bucket["igst"] += igst
            bucket["cgst"] += cgst
            bucket["sgst"] += sgst

        total_taxable += taxable
        total_cgst += cgst
        total_sgst += sgst
        total_igst += igst

    return {
        "b2b": b2b,
        "b2cs": b2cs,
        "hsn": list(hsn_summary.values()),
        "total_taxable": total_taxable,
        "total_cgst": total_cgst,
        "total_sgst": total_sgst,
        "total_igst": total_igst,
    }
