"""Tests for invoice document data and PDF rendering."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from invoicing.domain.models.invoice import Counterparty, InvoiceType, LineItemInput
from invoicing.domain.services.invoice_assembly import build_invoice
from invoicing.domain.services.invoice_document import (
    DEFAULT_TERMS,
    LINE_HEADERS,
    PAYMENT_VOUCHER,
    TAX_INVOICE,
    amount_in_words,
    build_invoice_document,
    format_date,
    format_inr,
)
from invoicing.domain.services.invoice_pdf import render_invoice_pdf


def _as_row(draft):
    """Shape a draft like a loaded invoice row."""
    row = SimpleNamespace(**draft.header_fields())
    row.line_items = [SimpleNamespace(**item.to_dict()) for item in draft.line_items]
    return row


@pytest.fixture
def client_invoice(mumbai_client):
    lines = [
        LineItemInput("Data Science Course", Decimal("2"), Decimal("500")),
        LineItemInput(
            "Workbook", Decimal("1"), Decimal("1000"),
            discount_percent=Decimal("10"), hsn_sac_code="4901",
        ),
    ]
    draft = build_invoice(
        InvoiceType.CLIENT, mumbai_client, lines, "INV/2024-25/00001",
        date(2025, 2, 10), date(2025, 3, 12), seller_state_code="27",
    )
    return _as_row(draft)


@pytest.fixture
def freelancer_invoice(freelancer):
    lines = [LineItemInput("Curriculum design", Decimal("1"), Decimal("60000"))]
    draft = build_invoice(
        InvoiceType.FREELANCER, freelancer, lines, "FCO/2024-25/00001",
        date(2025, 2, 10), seller_state_code="27", tds_policy="invoice",
    )
    return _as_row(draft)


class TestFormatting:
    @pytest.mark.parametrize(
        "amount,expected",
        [
            (0, "0.00"),
            (999, "999.00"),
            (Decimal("1500"), "1,500.00"),
            (100000, "1,00,000.00"),
            (1234567.5, "12,34,567.50"),
            (Decimal("-1500"), "-1,500.00"),
        ],
    )
    def test_format_inr(self, amount, expected):
        assert format_inr(amount) == expected

    def test_format_date(self):
        assert format_date(date(2025, 2, 10)) == "10/02/2025"
        assert format_date(None) == "-"

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (0, "Zero Rupees Only"),
            (2242, "Two Thousand Two Hundred Forty Two Rupees Only"),
            (150000.5, "One Lakh Fifty Thousand Rupees and Fifty Paise Only"),
            (
                12345678,
                "One Crore Twenty Three Lakh Forty Five Thousand Six Hundred Seventy Eight Rupees Only",
            ),
            (Decimal("11.05"), "Eleven Rupees and Five Paise Only"),
        ],
    )
    def test_amount_in_words(self, amount, expected):
        assert amount_in_words(amount) == expected


class TestTaxInvoice:
    def test_header_and_party(self, client_invoice, mumbai_client):
        doc = build_invoice_document(client_invoice, mumbai_client)
        assert doc.title == TAX_INVOICE
        assert not doc.is_voucher
        assert doc.company_name == "Endeavor Academy Pvt Ltd"
        assert dict(doc.details) == {
            "Invoice No:": "INV/2024-25/00001",
            "Invoice Date:": "10/02/2025",
            "Due Date:": "12/03/2025",
            "Place of Supply:": "Maharashtra (27)",
        }
        assert doc.party_heading == "Bill To:"
        assert doc.party_lines[0] == "Patil Learning LLP"
        assert "Mumbai, Maharashtra - 400050" in doc.party_lines
        assert "GSTIN: 27AABCT1234C1Z5" in doc.party_lines

    def test_line_rows(self, client_invoice, mumbai_client):
        doc = build_invoice_document(client_invoice, mumbai_client)
        assert doc.line_headers == LINE_HEADERS
        assert doc.line_rows == [
            ["1", "Data Science Course", "", "2", "Nos", "500.00", "-", "1,000.00", "18%", "1,180.00"],
            ["2", "Workbook", "4901", "1", "Nos", "1,000.00", "10%", "900.00", "18%", "1,062.00"],
        ]

    def test_summary_intra_state(self, client_invoice, mumbai_client):
        doc = build_invoice_document(client_invoice, mumbai_client)
        assert doc.summary == [
            ("Subtotal", "2,000.00"),
            ("Discount", "- 100.00"),
            ("Taxable Amount", "1,900.00"),
            ("CGST (9%)", "171.00"),
            ("SGST (9%)", "171.00"),
            ("Total Amount", "2,242.00"),
        ]
        assert doc.amount_in_words == "Two Thousand Two Hundred Forty Two Rupees Only"

    def test_summary_inter_state(self, bengaluru_client):
        draft = build_invoice(
            InvoiceType.CLIENT, bengaluru_client,
            [LineItemInput("Training", Decimal("1"), Decimal("1000"))],
            "INV/2024-25/00002", date(2025, 2, 10), seller_state_code="27",
        )
        doc = build_invoice_document(_as_row(draft), bengaluru_client)
        assert ("IGST (18%)", "180.00") in doc.summary
        assert not any(label.startswith("CGST") for label, _ in doc.summary)
        assert dict(doc.details)["Place of Supply:"] == "Karnataka (29)"

    def test_terms_and_bank(self, client_invoice, mumbai_client):
        doc = build_invoice_document(client_invoice, mumbai_client)
        assert doc.terms == ["Payment due within 30 days."]
        assert "IFSC Code: HDFC0000123" in doc.bank_details
        assert doc.signatory == "For Endeavor Academy Pvt Ltd"

        client_invoice.terms = None
        assert build_invoice_document(client_invoice, mumbai_client).terms == list(DEFAULT_TERMS)

    def test_long_description_truncated(self, mumbai_client):
        draft = build_invoice(
            InvoiceType.CLIENT, mumbai_client,
            [LineItemInput("A" * 80, Decimal("1"), Decimal("100"))],
            "INV/2024-25/00003", date(2025, 2, 10),
        )
        doc = build_invoice_document(_as_row(draft), mumbai_client)
        assert doc.line_rows[0][1] == "A" * 50


class TestPaymentVoucher:
    def test_voucher_with_tds(self, freelancer_invoice, freelancer):
        doc = build_invoice_document(freelancer_invoice, freelancer)
        assert doc.title == PAYMENT_VOUCHER
        assert doc.is_voucher
        assert dict(doc.details)["Voucher No:"] == "FCO/2024-25/00001"
        assert dict(doc.details)["Payment Type:"] == "Freelancer Payment"
        assert doc.party_heading == "Payment To:"
        assert doc.party_lines == [
            "Name: Meera Iyer",
            "PAN: ABCPI1234K",
            "Bank: ICICI Bank",
            "Account: 000401000123",
            "IFSC: ICIC0000004",
        ]
        assert doc.summary == [
            ("Gross Amount", "70,800.00"),
            ("TDS (194J @10%)", "- 6,000.00"),
            ("Net Payable", "64,800.00"),
        ]
        assert doc.amount_in_words == "Sixty Four Thousand Eight Hundred Rupees Only"

    def test_voucher_without_tds(self):
        vendor = Counterparty(id="v-1", kind="vendor", name="Chair Mart")
        draft = build_invoice(
            InvoiceType.VENDOR, vendor,
            [LineItemInput("Chairs", Decimal("4"), Decimal("2500"))],
            "FVE/2024-25/00001", date(2025, 2, 10), tds_policy="invoice",
        )
        doc = build_invoice_document(_as_row(draft), vendor)
        assert doc.summary[1] == ("TDS", "0.00")
        assert doc.summary[0][1] == doc.summary[2][1]
        assert "PAN: N/A" in doc.party_lines


class TestRenderPdf:
    def test_tax_invoice_pdf(self, client_invoice, mumbai_client):
        pdf = render_invoice_pdf(build_invoice_document(client_invoice, mumbai_client))
        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000

    def test_voucher_pdf(self, freelancer_invoice, freelancer):
        pdf = render_invoice_pdf(build_invoice_document(freelancer_invoice, freelancer))
        assert pdf.startswith(b"%PDF")

    def test_markup_characters_are_escaped(self, client_invoice):
        party = Counterparty(
            id="c-9", kind="contact", name="Smith & Sons <Training>", state="Maharashtra",
        )
        pdf = render_invoice_pdf(build_invoice_document(client_invoice, party))
        assert pdf.startswith(b"%PDF")
