"""ReportLab PDF Generation Service Implementation

Implements invoice rendering using ReportLab platypus.
"""

from functools import partial
from io import BytesIO
from typing import List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
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

from src.app.services.pdf_service import PdfService
from src.domain.exceptions import RenderError
from src.domain.invoice import Invoice
from src.domain.invoice_line import InvoiceLine
from src.domain.pricing import compute_line, format_money, format_quantity

# Description, Qty, Unit Price, Tax, Discount, Line Total (170mm usable on A4)
COLUMN_WIDTHS = [58 * mm, 18 * mm, 26 * mm, 20 * mm, 22 * mm, 26 * mm]


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    Features:
    - Built in invariant mode: no creation date or random document ID is
      embedded, so identical input gives byte-identical output
    - Items table splits across pages with its header row repeated
    - One currency symbol for every amount in the document
    """

    def __init__(
        self,
        company_name: str = "Invoice Service",
        company_address: str = "",
        currency_symbol: str = "$",
    ):
        self.company_name = company_name
        self.company_address = company_address
        self.currency_symbol = currency_symbol

    def render_invoice(self, invoice: Invoice, invoice_lines: List[InvoiceLine]) -> bytes:
        """
        Render an invoice PDF

        Args:
            invoice: Invoice entity with its computed total_amount
            invoice_lines: Line items in display order

        Returns:
            PDF document as bytes

        Raises:
            RenderError: total_amount is unset or there are no line items
        """
        if invoice.total_amount is None:
            raise RenderError(
                f"Invoice {invoice.invoice_number} has no computed total",
                reason="Total must be computed before rendering",
            )
        if not invoice_lines:
            raise RenderError(
                f"Invoice {invoice.invoice_number} has no line items",
                reason="An invoice without items cannot be rendered",
            )

        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20 * mm,
            leftMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            title=f"Invoice {invoice.invoice_number}",
            author=self.company_name,
            invariant=1,
        )

        styles = getSampleStyleSheet()
        elements = []

        # Custom styles
        title_style = ParagraphStyle(
            "TitleStyle",
            parent=styles["Heading1"],
            fontSize=24,
            spaceAfter=10,
            textColor=colors.HexColor("#2C3E50"),
        )
        invoice_label_style = ParagraphStyle(
            "InvoiceLabelStyle",
            parent=styles["Heading2"],
            fontSize=14,
            textColor=colors.HexColor("#2C3E50"),
            spaceAfter=20,
        )
        header_style = ParagraphStyle(
            "HeaderStyle",
            parent=styles["Normal"],
            fontSize=10,
            textColor=colors.HexColor("#7F8C8D"),
        )
        normal_style = ParagraphStyle(
            "NormalStyle",
            parent=styles["Normal"],
            fontSize=10,
        )
        bold_style = ParagraphStyle(
            "BoldStyle",
            parent=styles["Normal"],
            fontSize=10,
            fontName="Helvetica-Bold",
        )
        cell_style = ParagraphStyle(
            "CellStyle",
            parent=styles["Normal"],
            fontSize=9,
            leading=11,
        )
        total_style = ParagraphStyle(
            "TotalStyle",
            parent=styles["Normal"],
            fontSize=11,
            fontName="Helvetica-Bold",
            alignment=TA_RIGHT,
        )

        # Header - Company Info and INVOICE label
        elements.append(Paragraph(escape(self.company_name), title_style))
        if self.company_address:
            elements.append(Paragraph(escape(self.company_address), header_style))
        elements.append(Spacer(1, 10 * mm))
        elements.append(Paragraph("INVOICE", invoice_label_style))

        # Invoice Details Table
        invoice_info = [
            ["Invoice Number:", invoice.invoice_number],
            ["Issue Date:", invoice.issue_date.strftime("%Y-%m-%d")],
        ]
        if invoice.due_date:
            invoice_info.append(["Due Date:", invoice.due_date.strftime("%Y-%m-%d")])
        invoice_info.append(["Status:", invoice.status.value.upper()])

        invoice_table = Table(invoice_info, colWidths=[40 * mm, 100 * mm])
        invoice_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("TEXTCOLOR", (0, 0), (0, -1), colors.HexColor("#7F8C8D")),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )

        elements.append(invoice_table)
        elements.append(Spacer(1, 10 * mm))

        # Client Info, optional fields omitted entirely when absent
        elements.append(Paragraph("Bill To:", bold_style))
        elements.append(Paragraph(escape(invoice.client_name), normal_style))
        if invoice.client_email:
            elements.append(Paragraph(escape(invoice.client_email), normal_style))
        if invoice.client_address:
            address = "<br/>".join(
                escape(part.strip()) for part in invoice.client_address.splitlines() if part.strip()
            )
            elements.append(Paragraph(address, normal_style))
        elements.append(Spacer(1, 10 * mm))

        # Line Items Table
        line_data = [["Description", "Qty", "Unit Price", "Tax", "Discount", "Line Total"]]
        for line in invoice_lines:
            amounts = compute_line(line)
            line_data.append(
                [
                    Paragraph(escape(line.description), cell_style),
                    format_quantity(line.quantity),
                    self._money(line.unit_price),
                    f"{format_quantity(line.tax_rate)}%",
                    f"{format_quantity(line.discount_rate)}%",
                    self._money(amounts.line_total),
                ]
            )

        line_table = Table(line_data, colWidths=COLUMN_WIDTHS, repeatRows=1, splitInRow=1)
        line_table.setStyle(
            TableStyle(
                [
                    # Header row
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2C3E50")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), 10),
                    ("ALIGN", (0, 0), (-1, 0), "CENTER"),
                    # Data rows
                    ("FONTSIZE", (0, 1), (-1, -1), 9),
                    ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    # Grid
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#BDC3C7")),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    # Alternate row colors
                    (
                        "ROWBACKGROUNDS",
                        (0, 1),
                        (-1, -1),
                        [colors.white, colors.HexColor("#F8F9F9")],
                    ),
                ]
            )
        )

        elements.append(line_table)
        elements.append(Spacer(1, 5 * mm))

        # Total
        total_data = [
            [
                "",
                Paragraph("Total:", total_style),
                Paragraph(escape(self._money(invoice.total_amount)), total_style),
            ]
        ]
        total_table = Table(
            total_data,
            colWidths=[sum(COLUMN_WIDTHS[:3]), sum(COLUMN_WIDTHS[3:5]), COLUMN_WIDTHS[5]],
        )
        total_table.setStyle(
            TableStyle(
                [
                    ("LINEABOVE", (1, 0), (-1, 0), 1.5, colors.HexColor("#2C3E50")),
                    ("TOPPADDING", (0, 0), (-1, -1), 8),
                ]
            )
        )

        elements.append(total_table)

        # Build PDF
        footer = partial(self._draw_footer, invoice_number=invoice.invoice_number)
        doc.build(elements, onFirstPage=footer, onLaterPages=footer)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes

    def _money(self, amount) -> str:
        return format_money(amount, self.currency_symbol)

    @staticmethod
    def _draw_footer(canvas, doc, invoice_number: str) -> None:
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(colors.HexColor("#95A5A6"))
        canvas.drawRightString(
            doc.pagesize[0] - doc.rightMargin,
            10 * mm,
            f"{invoice_number} - Page {doc.page}",
        )
        canvas.restoreState()
