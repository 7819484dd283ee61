"""Tests for the GST calculator."""

from decimal import Decimal

import pytest

from invoicing.domain.services.gst_calculator import (
    COMMON_HSN_CODES,
    GST_RATES,
    STATE_CODES,
    calculate_gst,
    calculate_invoice_gst,
    generate_gstr1_summary,
    get_state_code,
    get_state_code_from_gstin,
    is_intra_state_transaction,
    is_valid_gst_rate,
    round_to_paise,
    round_to_rupees,
)

TAXABLE_VALUES = ["0", "1", "99.99", "999.99", "1000", "12345.67", "250000"]


class TestCalculateGST:
    def test_intra_state_split(self):
        result = calculate_gst(Decimal("1000"), 18, is_intra_state=True)
        assert result.gst_type == "cgst_sgst"
        assert result.cgst_rate == Decimal("9")
        assert result.sgst_rate == Decimal("9")
        assert result.igst_rate == Decimal("0")
        assert result.cgst_amount == Decimal("90.00")
        assert result.sgst_amount == Decimal("90.00")
        assert result.igst_amount == Decimal("0")
        assert result.total_gst == Decimal("180.00")
        assert result.total_amount == Decimal("1180")

    def test_inter_state_split(self):
        result = calculate_gst(Decimal("1000"), 18, is_intra_state=False)
        assert result.gst_type == "igst"
        assert result.igst_rate == Decimal("18")
        assert result.cgst_amount == result.sgst_amount == Decimal("0")
        assert result.igst_amount == Decimal("180.00")
        assert result.total_amount == Decimal("1180")

    def test_components_rounded_to_paise(self):
        # 999.99 x 2.5% = 24.99975 per half
        result = calculate_gst("999.99", 5, is_intra_state=True)
        assert result.cgst_amount == Decimal("25.00")
        assert result.sgst_amount == Decimal("25.00")
        assert result.total_gst == Decimal("50.00")
        assert result.total_amount == Decimal("1050")

    def test_total_rounded_to_whole_rupee(self):
        result = calculate_gst("100.40", 5, is_intra_state=False)
        # 100.40 + 5.02 = 105.42
        assert result.igst_amount == Decimal("5.02")
        assert result.total_amount == Decimal("105")

    def test_zero_rate(self):
        result = calculate_gst(5000, 0, is_intra_state=True)
        assert result.total_gst == Decimal("0")
        assert result.total_amount == Decimal("5000")

    def test_non_standard_rate_is_accepted(self):
        result = calculate_gst(1000, 3, is_intra_state=False)
        assert result.igst_amount == Decimal("30.00")

    def test_negative_taxable_value_rejected(self):
        with pytest.raises(ValueError):
            calculate_gst(-1, 18, is_intra_state=True)

    @pytest.mark.parametrize("rate", GST_RATES)
    @pytest.mark.parametrize("taxable", TAXABLE_VALUES)
    def test_intra_state_halves_are_equal(self, taxable, rate):
        result = calculate_gst(taxable, rate, is_intra_state=True)
        assert result.cgst_amount == result.sgst_amount
        assert result.igst_amount == Decimal("0")

    @pytest.mark.parametrize("rate", GST_RATES)
    @pytest.mark.parametrize("taxable", TAXABLE_VALUES)
    def test_inter_state_is_igst_only(self, taxable, rate):
        result = calculate_gst(taxable, rate, is_intra_state=False)
        assert result.cgst_amount == result.sgst_amount == Decimal("0")
        assert result.igst_amount == round_to_paise(Decimal(taxable) * rate / 100)

    @pytest.mark.parametrize("intra", [True, False])
    @pytest.mark.parametrize("taxable", TAXABLE_VALUES)
    def test_total_is_rounded_sum(self, taxable, intra):
        result = calculate_gst(taxable, 18, is_intra_state=intra)
        expected = round_to_rupees(
            Decimal(taxable) + result.cgst_amount + result.sgst_amount + result.igst_amount
        )
        assert result.total_amount == expected


class TestCalculateInvoiceGST:
    def test_sums_per_line_results(self):
        lines = [
            {"taxable_value": Decimal("100"), "gst_rate": 18},
            {"taxable_value": Decimal("150"), "gst_rate": 18},
        ]
        result = calculate_invoice_gst(lines, buyer_state_code="27")
        assert result.gst_type == "cgst_sgst"
        assert len(result.lines) == 2
        assert result.taxable_value == Decimal("250")
        assert result.cgst_amount == sum(line.cgst_amount for line in result.lines)
        assert result.sgst_amount == sum(line.sgst_amount for line in result.lines)
        assert result.cgst_amount == Decimal("22.50")
        assert result.total_amount == Decimal("295")

    def test_does_not_tax_the_pre_summed_total(self):
        # each line: 0.30 x 5% = 0.015 -> 0.02; the summed 0.60 would give 0.03
        lines = [
            {"taxable_value": "0.30", "gst_rate": 5},
            {"taxable_value": "0.30", "gst_rate": 5},
        ]
        result = calculate_invoice_gst(lines, buyer_state_code="29")
        assert result.igst_amount == Decimal("0.04")
        assert calculate_gst("0.60", 5, is_intra_state=False).igst_amount == Decimal("0.03")

    def test_mixed_rates(self):
        lines = [
            {"taxable_value": 1000, "gst_rate": 18},
            {"taxable_value": 500, "gst_rate": 5},
        ]
        result = calculate_invoice_gst(lines, buyer_state_code="07")
        assert result.igst_amount == Decimal("205.00")
        assert result.total_gst == Decimal("205.00")
        assert result.total_amount == Decimal("1705")

    def test_seller_state_can_be_overridden(self):
        lines = [{"taxable_value": 1000, "gst_rate": 18}]
        result = calculate_invoice_gst(lines, buyer_state_code="29", seller_state_code="29")
        assert result.gst_type == "cgst_sgst"


class TestStateHelpers:
    def test_same_state_is_intra(self):
        assert is_intra_state_transaction("27") is True
        assert is_intra_state_transaction("27", "27") is True

    def test_different_state_is_inter(self):
        assert is_intra_state_transaction("29") is False
        assert is_intra_state_transaction(None) is False

    def test_state_name_lookup(self):
        assert get_state_code("Maharashtra") == "27"
        assert get_state_code("  karnataka ") == "29"
        assert get_state_code("Andhra Pradesh") == "37"
        assert get_state_code("Atlantis") is None
        assert get_state_code(None) is None

    def test_state_code_from_gstin(self):
        assert get_state_code_from_gstin("27AABCT1234C1Z5") == "27"
        assert get_state_code_from_gstin("27AABCT1234C1Z") is None
        assert get_state_code_from_gstin(None) is None

    def test_state_table(self):
        assert STATE_CODES["27"] == "Maharashtra"
        assert STATE_CODES["36"] == "Telangana"

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            STATE_CODES["99"] = "Nowhere"
        with pytest.raises(TypeError):
            COMMON_HSN_CODES["x"] = "0000"


class TestGSTRates:
    @pytest.mark.parametrize("rate", [0, 5, 12, 18, 28, "18", Decimal("28")])
    def test_standard_rates(self, rate):
        assert is_valid_gst_rate(rate) is True

    @pytest.mark.parametrize("rate", [3, 40, -5, "abc", None])
    def test_other_rates(self, rate):
        assert is_valid_gst_rate(rate) is False


class TestGSTR1Summary:
    def test_b2b_and_b2cs_split(self):
        invoices = [
            {
                "invoice_number": "INV/2024-25/00001",
                "invoice_date": "2025-02-10",
                "gstin": "27AABCT1234C1Z5",
                "taxable_value": 10000,
                "cgst": 900,
                "sgst": 900,
                "igst": 0,
                "state_code": "27",
                "hsn_sac_code": "9992",
            },
            {
                "invoice_number": "INV/2024-25/00002",
                "invoice_date": "2025-02-11",
                "gstin": None,
                "taxable_value": 5000,
                "cgst": 0,
                "sgst": 0,
                "igst": 900,
                "state_code": "29",
            },
        ]
        summary = generate_gstr1_summary(invoices)

        assert len(summary["b2b"]) == 1
        b2b = summary["b2b"][0]
        assert b2b["ctin"] == "27AABCT1234C1Z5"
        assert b2b["inv"][0]["val"] == Decimal("11800")
        assert b2b["inv"][0]["itms"][0]["itm_det"]["rt"] == Decimal("18.00")

        assert len(summary["b2cs"]) == 1
        b2cs = summary["b2cs"][0]
        assert b2cs["sply_ty"] == "INTER"
        assert b2cs["pos"] == "29"
        assert b2cs["hsn_sc"] == "9983"
        assert b2cs["rt"] == Decimal("18.00")

        assert summary["hsn"] == [
            {"hsn": "9992", "taxable": Decimal("10000"), "igst": Decimal("0"),
             "cgst": Decimal("900"), "sgst": Decimal("900")},
        ]
        assert summary["total_taxable"] == Decimal("15000")
        assert summary["total_igst"] == Decimal("900")
        assert summary["total_cgst"] == Decimal("900")

    def test_empty(self):
        summary = generate_gstr1_summary([])
        assert summary["b2b"] == [] and summary["b2cs"] == []
        assert summary["total_taxable"] == Decimal("0")
