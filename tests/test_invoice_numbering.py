"""Tests for FY-scoped invoice numbering."""

from datetime import date
from types import SimpleNamespace

import pytest

from invoicing.domain.models.invoice import InvoiceType
from invoicing.domain.models.tax import InvoiceNumber
from invoicing.domain.services.invoice_numbering import (
    INVOICE_PREFIXES,
    format_invoice_number,
    generate_client_invoice_number,
    generate_contractor_invoice_number,
    generate_freelancer_invoice_number,
    generate_next_invoice_number,
    generate_vendor_invoice_number,
    get_invoice_metadata,
    is_valid_invoice_number,
    max_sequence,
    parse_invoice_number,
    prefix_for,
)

FEB_2025 = date(2025, 2, 10)  # FY 2024-25


class TestPrefixes:
    def test_prefix_per_type(self):
        assert INVOICE_PREFIXES[InvoiceType.CLIENT] == "INV"
        assert prefix_for("freelancer") == "FCO"
        assert prefix_for(InvoiceType.CONTRACTOR) == "CON"
        assert prefix_for("vendor") == "FVE"

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            prefix_for("employee")


class TestFormatAndParse:
    def test_format_pads_to_five_digits(self):
        assert format_invoice_number("INV", "2024-25", 7) == "INV/2024-25/00007"
        assert format_invoice_number("FVE", "2025-26", 99999) == "FVE/2025-26/99999"

    @pytest.mark.parametrize("sequence", [0, -1, 100000])
    def test_format_rejects_out_of_range(self, sequence):
        with pytest.raises(ValueError):
            format_invoice_number("INV", "2024-25", sequence)

    @pytest.mark.parametrize("prefix", ["INV", "FCO", "CON", "FVE"])
    @pytest.mark.parametrize("sequence", [1, 42, 99999])
    def test_round_trip(self, prefix, sequence):
        parsed = parse_invoice_number(format_invoice_number(prefix, "2024-25", sequence))
        assert parsed == InvoiceNumber(prefix=prefix, financial_year="2024-25", sequence=sequence)
        assert str(parsed) == format_invoice_number(prefix, "2024-25", sequence)

    @pytest.mark.parametrize(
        "number",
        ["INV/2024-25/1", "INV-2024-25-00001", "inv/2024-25/00001", "INV/2024-2025/00001", "", None],
    )
    def test_parse_rejects_malformed(self, number):
        assert parse_invoice_number(number) is None

    def test_validity(self):
        assert is_valid_invoice_number("INV/2024-25/00001") is True
        assert is_valid_invoice_number("ABC/2024-25/00001") is False  # unknown prefix
        assert is_valid_invoice_number("INV/2024-25/00000") is False  # sequence 0
        assert is_valid_invoice_number("garbage") is False

    def test_metadata(self):
        assert get_invoice_metadata("FCO/2024-25/00012") == {
            "type": "freelancer",
            "financial_year": "2024-25",
            "sequence": 12,
        }
        assert get_invoice_metadata("XYZ/2024-25/00001")["type"] == "unknown"
        assert get_invoice_metadata("garbage") == {"type": "unknown", "financial_year": "", "sequence": 0}


class TestScanBasedNumbering:
    def test_next_in_same_year(self):
        existing = ["INV/2024-25/00001", "INV/2024-25/00002"]
        assert generate_client_invoice_number(existing, on=FEB_2025) == "INV/2024-25/00003"

    def test_resets_each_financial_year(self):
        existing = ["INV/2023-24/00050"]
        assert generate_client_invoice_number(existing, on=FEB_2025) == "INV/2024-25/00001"

    def test_starts_at_one(self):
        assert generate_next_invoice_number("CON", [], on=FEB_2025) == "CON/2024-25/00001"

    def test_other_prefixes_ignored(self):
        existing = ["FCO/2024-25/00009", "INV/2024-25/00003"]
        assert generate_freelancer_invoice_number(existing, on=FEB_2025) == "FCO/2024-25/00010"
        assert generate_vendor_invoice_number(existing, on=FEB_2025) == "FVE/2024-25/00001"

    def test_uses_highest_not_count(self):
        existing = ["CON/2024-25/00002", "CON/2024-25/00010", "CON/2024-25/00004"]
        assert generate_contractor_invoice_number(existing, on=FEB_2025) == "CON/2024-25/00011"

    def test_accepts_dicts_and_objects(self):
        existing = [
            {"invoice_number": "INV/2024-25/00004"},
            SimpleNamespace(invoice_number="INV/2024-25/00006"),
            {"invoice_number": None},
            "not-a-number",
        ]
        assert max_sequence("INV", "2024-25", existing) == 6
        assert generate_client_invoice_number(existing, on=FEB_2025) == "INV/2024-25/00007"

    def test_new_financial_year_on_april_first(self):
        existing = ["INV/2024-25/00120"]
        assert generate_client_invoice_number(existing, on=date(2025, 4, 1)) == "INV/2025-26/00001"
