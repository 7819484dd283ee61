# invoicing/domain/services/invoice_pdf.py
"""
Render an ``InvoiceDocument`` (tax invoice or payment voucher) to PDF.
Uses ReportLab for PDF generation.
"""

from __future__ import annotations

import io
import logging
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from invoicing.domain.services.invoice_document import InvoiceDocument

logger = logging.getLogger("invoice_pdf")

BRAND = colors.Color(30 / 255, 58 / 255, 95 / 255)  # #1e3a5f
SHADE = colors.Color(0.94, 0.94, 0.94)
RULE = colors.Color(0.8, 0.8, 0.8)

# Line table column widths in mm, matching LINE_HEADERS
_LINE_COL_WIDTHS = [10, 48, 18, 12, 12, 20, 12, 20, 12, 20]


def _para(text: str, style: ParagraphStyle) -> Paragraph:
    return Paragraph(escape(text), style)


def _lines(lines: list[str], style: ParagraphStyle) -> Paragraph:
    return Paragraph("<br/>".join(escape(line) for line in lines), style)


def render_invoice_pdf(document: InvoiceDocument) -> bytes:
    """
    Lay out a tax invoice or payment voucher on A4.

    Returns:
        PDF file as bytes.
    """
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=12 * mm,
        bottomMargin=15 * mm,
        title=f"{document.title} {document.details[0][1]}",
    )

    styles = getSampleStyleSheet()
    brand_style = ParagraphStyle(
        "Brand",
        parent=styles["Heading1"],
        fontSize=18,
        textColor=colors.white,
        spaceAfter=4,
    )
    letterhead_style = ParagraphStyle(
        "Letterhead",
        parent=styles["Normal"],
        fontSize=8,
        leading=11,
        textColor=colors.white,
    )
    title_style = ParagraphStyle(
        "DocTitle",
        parent=styles["Heading2"],
        fontSize=16,
        textColor=BRAND,
        spaceBefore=8,
        spaceAfter=6,
    )
    heading_style = ParagraphStyle(
        "Section",
        parent=styles["Normal"],
        fontName="Helvetica-Bold",
        fontSize=10,
        backColor=SHADE,
        borderPadding=3,
        spaceBefore=8,
        spaceAfter=6,
    )
    body_style = ParagraphStyle(
        "Body",
        parent=styles["Normal"],
        fontSize=9,
        leading=13,
    )
    footer_style = ParagraphStyle(
        "Footer",
        parent=styles["Normal"],
        fontSize=8,
        textColor=colors.grey,
        alignment=1,  # center
    )

    elements = []

    # Letterhead band
    band = Table(
        [[[_para(document.company_name, brand_style), _lines(document.letterhead, letterhead_style)]]],
        colWidths=[182 * mm],
    )
    band.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), BRAND),
                ("LEFTPADDING", (0, 0), (-1, -1), 8),
                ("TOPPADDING", (0, 0), (-1, -1), 6),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
            ]
        )
    )
    elements.append(band)
    elements.append(_para(document.title, title_style))

    # Details
    details_table = Table([list(row) for row in document.details], colWidths=[40 * mm, 70 * mm], hAlign="LEFT")
    details_table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("TOPPADDING", (0, 0), (-1, -1), 2),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
                ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ]
        )
    )
    elements.append(details_table)

    # Bill-to / payee
    elements.append(_para(document.party_heading, heading_style))
    elements.append(_lines(document.party_lines, body_style))
    elements.append(Spacer(1, 10))

    # Line items
    if document.line_rows:
        rows = [list(document.line_headers)] + document.line_rows
        line_table = Table(rows, colWidths=[w * mm for w in _LINE_COL_WIDTHS], repeatRows=1)
        line_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), BRAND),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 7),
                    ("GRID", (0, 0), (-1, -1), 0.5, RULE),
                    ("ALIGN", (5, 1), (5, -1), "RIGHT"),
                    ("ALIGN", (7, 1), (7, -1), "RIGHT"),
                    ("ALIGN", (9, 1), (9, -1), "RIGHT"),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                    ("TOPPADDING", (0, 0), (-1, -1), 3),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
                ]
            )
        )
        elements.append(line_table)
        elements.append(Spacer(1, 10))

    # Summary
    if document.is_voucher:
        summary_rows = [["Description", "Amount (Rs)"]] + [list(row) for row in document.summary]
        summary_table = Table(summary_rows, colWidths=[120 * mm, 62 * mm])
        summary_style = [
            ("BACKGROUND", (0, 0), (-1, 0), BRAND),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("GRID", (0, 0), (-1, -1), 0.5, RULE),
        ]
    else:
        summary_rows = [list(row) for row in document.summary]
        summary_table = Table(summary_rows, colWidths=[50 * mm, 40 * mm], hAlign="RIGHT")
        summary_style = [
            ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
            ("ALIGN", (0, 0), (0, -1), "RIGHT"),
            ("LINEABOVE", (0, -1), (-1, -1), 0.75, BRAND),
        ]
    summary_table.setStyle(
        TableStyle(
            summary_style
            + [
                # Total / net row (last row)
                ("BACKGROUND", (0, -1), (-1, -1), colors.Color(0.9, 0.95, 1.0)),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                ("TOPPADDING", (0, 0), (-1, -1), 4),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ]
        )
    )
    elements.append(summary_table)
    elements.append(Spacer(1, 8))

    elements.append(Paragraph(f"<b>Amount in Words:</b> {escape(document.amount_in_words)}", body_style))

    if document.terms:
        elements.append(_para("Terms & Conditions:", heading_style))
        elements.append(_lines(document.terms, body_style))

    if document.bank_details:
        elements.append(_para("Bank Details:", heading_style))
        elements.append(_lines(document.bank_details, body_style))

    elements.append(Spacer(1, 30))
    if document.is_voucher:
        sign_table = Table([["Prepared By", "Verified By", "Approved By"]], colWidths=[60 * mm] * 3)
        sign_table.setStyle(
            TableStyle(
                [
                    ("LINEABOVE", (0, 0), (-1, 0), 0.75, colors.black),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                ]
            )
        )
        elements.append(sign_table)
    else:
        elements.append(
            Paragraph(
                f"<b>Authorised Signatory</b><br/>{escape(document.signatory)}",
                ParagraphStyle("Signatory", parent=body_style, alignment=2),  # right
            )
        )

    if document.footer:
        elements.append(Spacer(1, 20))
        elements.append(_para(document.footer, footer_style))

    doc.build(elements)
    logger.debug("Rendered %s (%d bytes)", document.title, buf.tell())
    return buf.getvalue()
