# infrastructure/export_service.py
import base64
import os
from dataclasses import dataclass, field
from io import BytesIO
from typing import List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from domain.calculator import Calculator
from domain.currency import format_money, get_currency_symbol
from domain.document import Document
from domain.errors import ExportError
from infrastructure.logging_service import get_module_logger

logger = get_module_logger("ExportService", "export_document.log")

ITEM_HEADERS = ["Description", "Quantity", "Excl. Price", "Disc %", "VAT %", "Excl. Total", "Incl. Total"]


@dataclass
class PdfLayout:
    """Everything that varies between document layouts."""
    page_size: tuple = A4
    margin: float = 15 * mm
    font_size: float = 8
    accent_color: colors.Color = field(default_factory=lambda: colors.black)
    show_logo: bool = True
    show_banking_details: bool = True
    footer_lines: List[str] = field(default_factory=lambda: [
        "Quantities may change depending on the actual scope of work done.",
        "Once signed, please Fax, mail or e-mail it to the provided address.",
    ])


class ExportService:
    """
    Document export behind one interface.

    - PDF: header, FROM/TO parties, line items table, notes, banking details,
      payment terms and the totals block. Long tables flow onto new pages.
    - Excel: same content as a flat worksheet, for accounting imports.

    Figures come from the totals engine; nothing here computes money beyond
    the per-row inclusive total.
    """

    def __init__(self, layout: PdfLayout = None):
        self.layout = layout or PdfLayout()
        styles = getSampleStyleSheet()
        self.normal = styles["Normal"].clone("SQNormal", fontSize=self.layout.font_size,
                                             leading=self.layout.font_size + 2)
        self.bold = styles["Normal"].clone("SQBold", fontName="Helvetica-Bold",
                                           fontSize=self.layout.font_size + 1,
                                           leading=self.layout.font_size + 3)
        self.title = styles["Title"].clone("SQTitle", fontSize=24, alignment=0,
                                           textColor=self.layout.accent_color)

    def get_default_filename(self, document: Document, extension: str = "pdf") -> str:
        clean_number = "".join(c for c in document.document_number if c.isalnum() or c in ('-', '_'))
        return f"{document.title.lower()}-{clean_number}.{extension}"

    # =========================
    # PUBLIC
    # =========================
    def export(self, document: Document, output_path: str) -> str:
        """Dispatch on the file extension (.pdf or .xlsx)."""
        extension = os.path.splitext(output_path)[1].lower()
        if extension == ".pdf":
            return self.export_pdf(document, output_path)
        if extension == ".xlsx":
            return self.export_excel(document, output_path)
        raise ExportError(f"Unsupported export format: {extension or output_path}")

    def export_pdf(self, document: Document, output_path: str) -> str:
        try:
            self._ensure_parent(output_path)
            with open(output_path, "wb") as f:
                f.write(self.render_pdf(document))
        except PermissionError:
            msg = f"Cannot write '{os.path.basename(output_path)}'. Check that it is not open in another program."
            logger.error(msg)
            raise ExportError(msg)
        except OSError as e:
            logger.error("PDF export failed", exc_info=True)
            raise ExportError(f"PDF export failed: {e}") from e
        logger.info(f"PDF export → {output_path}")
        return output_path

    def render_pdf(self, document: Document) -> bytes:
        """Build the PDF in memory."""
        buffer = BytesIO()
        layout = self.layout
        pdf = SimpleDocTemplate(
            buffer, pagesize=layout.page_size,
            leftMargin=layout.margin, rightMargin=layout.margin,
            topMargin=layout.margin, bottomMargin=layout.margin,
            title=f"{document.title} {document.document_number}",
        )
        width = layout.page_size[0] - 2 * layout.margin

        story = []
        story += self._header(document, width)
        story += self._parties(document, width)
        story += self._items_table(document, width)
        story += self._notes(document)
        story += self._totals(document, width)
        story += self._banking(document, width)
        story += self._terms(document)

        pdf.build(story, onFirstPage=self._page_footer, onLaterPages=self._page_footer)
        logger.detail(f"Rendered {document.title} {document.document_number}: "
                      f"{len(document.line_items)} items, {len(buffer.getvalue())} bytes")
        return buffer.getvalue()

    def export_excel(self, document: Document, output_path: str) -> str:
        try:
            wb = Workbook()
            ws = wb.active
            ws.title = document.title.title()
            money_format = f'"{get_currency_symbol(document.currency)}" #,##0.00'
            totals = document.totals()

            ws.append([document.title, document.document_number])
            ws["A1"].font = Font(bold=True, size=16)
            ws.append(["Date", document.issue_date])
            if document.due_date:
                ws.append(["Due date", document.due_date])
            if document.reference:
                ws.append(["Reference", document.reference])
            ws.append(["From", document.business_profile.company_name])
            ws.append(["To", document.client.display_name])
            ws.append([])

            ws.append(ITEM_HEADERS)
            for cell in ws[ws.max_row]:
                cell.font = Font(bold=True)

            discount_pct = Calculator.discount_percentage(document.discount)
            for item in document.line_items:
                ws.append([
                    item.description, item.quantity, item.unit_price,
                    0.0, document.tax_rate / 100, item.total, item.inclusive_total(document.tax_rate),
                ])
                row = ws.max_row
                for col in (3, 6, 7):
                    ws.cell(row=row, column=col).number_format = money_format
                ws.cell(row=row, column=5).number_format = '0.00%'
            ws.append([])

            for label, value in [
                ("Overall discount %", discount_pct / 100),
                ("Total Discount", totals.discount_amount),
                ("Total Exclusive", totals.subtotal),
                ("Total VAT", totals.tax_amount),
                ("Grand Total", totals.total),
            ]:
                ws.append([None, None, None, None, None, label, value])
                row = ws.max_row
                ws.cell(row=row, column=6).alignment = Alignment(horizontal="right")
                ws.cell(row=row, column=7).number_format = '0.00%' if label.endswith("%") else money_format
            ws.cell(row=ws.max_row, column=6).font = Font(bold=True)
            ws.cell(row=ws.max_row, column=7).font = Font(bold=True)

            ws.column_dimensions["A"].width = 45
            for letter in "BCDEFG":
                ws.column_dimensions[letter].width = 16

            self._ensure_parent(output_path)
            wb.save(output_path)
        except PermissionError:
            msg = f"Cannot write '{os.path.basename(output_path)}'. Check that it is not open in Excel."
            logger.error(msg)
            raise ExportError(msg)
        except OSError as e:
            logger.error("Excel export failed", exc_info=True)
            raise ExportError(f"Excel export failed: {e}") from e

        logger.info(f"Excel export → {output_path}")
        return output_path

    # =========================
    # PRIVATE
    # =========================
    @staticmethod
    def _ensure_parent(output_path: str):
        parent = os.path.dirname(output_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

    def _p(self, text: Optional[str], bold: bool = False) -> Paragraph:
        escaped = (text or "").replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        return Paragraph(escaped.replace("\n", "<br/>"), self.bold if bold else self.normal)

    def _logo(self, document: Document):
        logo = document.business_profile.logo
        if not (self.layout.show_logo and logo):
            return None
        try:
            data = logo.split(",", 1)[1] if logo.startswith("data:") else logo
            return Image(BytesIO(base64.b64decode(data)), width=40 * mm, height=20 * mm, kind="proportional")
        except (ValueError, OSError) as e:
            logger.warning(f"Failed to add logo: {e}")
            return None

    def _header(self, document: Document, width: float) -> list:
        profile = document.business_profile
        left = [["NUMBER:", document.document_number]]
        if document.reference:
            left.append(["REFERENCE:", self._p(document.reference)])

        right = [["DATE:", _display_date(document.issue_date)]]
        if document.due_date:
            right.append(["DUE DATE:", _display_date(document.due_date)])
        sales_rep = document.sales_rep or profile.sales_rep
        if sales_rep:
            right.append(["SALES REP:", sales_rep.upper()])
        right.append(["OVERALL DISCOUNT %:", f"{Calculator.discount_percentage(document.discount):.2f}%"])

        label_style = [
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), self.layout.font_size + 1),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 1),
        ]
        left_table = Table(left, colWidths=[22 * mm, width / 2 - 22 * mm])
        left_table.setStyle(TableStyle(label_style))
        right_table = Table(right, colWidths=[35 * mm, width / 2 - 35 * mm])
        right_table.setStyle(TableStyle(label_style))

        block = []
        logo = self._logo(document)
        if logo is not None:
            logo.hAlign = "LEFT"
            block += [logo, Spacer(1, 3 * mm)]
        block.append(Paragraph(document.title, self.title))
        columns = Table([[left_table, right_table]], colWidths=[width / 2, width / 2])
        columns.setStyle(TableStyle([('VALIGN', (0, 0), (-1, -1), 'TOP'),
                                     ('LEFTPADDING', (0, 0), (-1, -1), 0)]))
        block += [columns, Spacer(1, 5 * mm)]
        return block

    def _parties(self, document: Document, width: float) -> list:
        profile, client = document.business_profile, document.client
        from_vat = f"VAT NO: {profile.vat_number}" if profile.vat_number else ""
        to_vat = f"CUSTOMER VAT NO: {client.vat_number}" if client.vat_number else ""
        quarter = width / 4
        rows = [
            [self._p("FROM", True), "", self._p("TO", True), ""],
            [self._p(profile.company_name.upper(), True), "", self._p(client.display_name.upper(), True), ""],
            [self._p(from_vat), "", self._p(to_vat), ""],
            [self._p("PHYSICAL ADDRESS:", True), self._p("POSTAL ADDRESS:", True),
             self._p("POSTAL ADDRESS:", True), self._p("PHYSICAL ADDRESS:", True)],
            [self._p(profile.physical_address or profile.address),
             self._p(profile.postal_address or profile.address),
             self._p(client.postal_address or client.address),
             self._p(client.physical_address or client.address)],
        ]
        table = Table(rows, colWidths=[quarter] * 4)
        table.setStyle(TableStyle([
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('LEFTPADDING', (0, 0), (-1, -1), 0),
            ('SPAN', (0, 0), (1, 0)), ('SPAN', (2, 0), (3, 0)),
            ('SPAN', (0, 1), (1, 1)), ('SPAN', (2, 1), (3, 1)),
            ('SPAN', (0, 2), (1, 2)), ('SPAN', (2, 2), (3, 2)),
        ]))
        return [table, Spacer(1, 5 * mm)]

    def _items_table(self, document: Document, width: float) -> list:
        currency = document.currency
        rows = [ITEM_HEADERS]
        for item in document.line_items:
            rows.append([
                self._p(item.description),
                f"{item.quantity:.3f}",
                format_money(item.unit_price, currency),
                "0.00%",
                f"{document.tax_rate:.2f}%",
                format_money(item.total, currency),
                format_money(item.inclusive_total(document.tax_rate), currency),
            ])

        fractions = [0.32, 0.11, 0.13, 0.08, 0.08, 0.14, 0.14]
        table = Table(rows, colWidths=[width * f for f in fractions], repeatRows=1)
        table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), self.layout.font_size),
            ('LINEBELOW', (0, 0), (-1, 0), 0.75, self.layout.accent_color),
            ('LINEBELOW', (0, -1), (-1, -1), 0.5, colors.lightgrey),
            ('ALIGN', (1, 0), (1, -1), 'CENTER'),
            ('ALIGN', (2, 1), (2, -1), 'RIGHT'),
            ('ALIGN', (3, 0), (4, -1), 'CENTER'),
            ('ALIGN', (5, 1), (6, -1), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ]))
        return [table, Spacer(1, 5 * mm)]

    def _notes(self, document: Document) -> list:
        block = []
        if document.notes:
            block.append(self._p(f"Note: {document.notes}"))
        if document.reference:
            block += [self._p("Quote/Project Description:", True), self._p(document.reference)]
        profile = document.business_profile
        if profile.phone:
            contact = profile.phone + (f" ({profile.sales_rep})" if profile.sales_rep else "")
            block += [Spacer(1, 2 * mm), self._p("VENDOR NO.", True),
                      self._p("PLEASE CONTACT BELOW", True), self._p(contact)]
        if block:
            block.append(Spacer(1, 4 * mm))
        return block

    def _totals(self, document: Document, width: float) -> list:
        totals = document.totals()
        currency = document.currency
        rows = [
            ["Total Discount:", format_money(totals.discount_amount, currency)],
            ["Total Exclusive:", format_money(totals.subtotal, currency)],
            ["Total VAT:", format_money(totals.tax_amount, currency)],
            ["Sub Total:", format_money(totals.total, currency)],
            ["Grand Total:", format_money(totals.total, currency)],
            ["BALANCE DUE", format_money(totals.total, currency)],
        ]
        table = Table(rows, colWidths=[35 * mm, 30 * mm], hAlign="RIGHT")
        table.setStyle(TableStyle([
            ('FONTSIZE', (0, 0), (-1, -2), self.layout.font_size + 1),
            ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
            ('FONTNAME', (0, 4), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, -1), (-1, -1), 11),
            ('TOPPADDING', (0, -1), (-1, -1), 6),
            ('LINEABOVE', (0, 4), (-1, 4), 0.5, self.layout.accent_color),
        ]))
        return [table, Spacer(1, 5 * mm)]

    def _banking(self, document: Document, width: float) -> list:
        if not self.layout.show_banking_details:
            return []
        profile = document.business_profile
        rows = [[f"Name: {profile.company_name}",
                 f"Bank Name: {profile.bank_name}" if profile.bank_name else ""]]
        if profile.account_number or profile.account_type:
            rows.append([f"Account Number: {profile.account_number}" if profile.account_number else "",
                         f"Account Type: {profile.account_type}" if profile.account_type else ""])
        if profile.company_registration:
            rows.append([f"Company Registration Number: {profile.company_registration}", ""])
        table = Table(rows, colWidths=[width / 2, width / 2])
        table.setStyle(TableStyle([
            ('FONTSIZE', (0, 0), (-1, -1), self.layout.font_size),
            ('LEFTPADDING', (0, 0), (-1, -1), 0),
        ]))
        return [self._p("Banking Details", True), table, Spacer(1, 3 * mm)]

    def _terms(self, document: Document) -> list:
        block = [self._p(line) for line in self.layout.footer_lines]
        if document.payment_terms:
            block += [Spacer(1, 2 * mm), self._p(f"PAYMENT TERMS: {document.payment_terms}", True)]
        if document.terms:
            block.append(self._p(document.terms))
        return block

    def _page_footer(self, canvas, pdf):
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.drawCentredString(self.layout.page_size[0] / 2, self.layout.margin / 2,
                                 f"-- Page {pdf.page} --")
        canvas.restoreState()


def _display_date(value: str) -> str:
    """ISO date -> dd/mm/yyyy; anything else is shown as is."""
    parts = (value or "")[:10].split("-")
    if len(parts) == 3 and all(p.isdigit() for p in parts):
        return f"{parts[2]}/{parts[1]}/{parts[0]}"
    return value or ""
