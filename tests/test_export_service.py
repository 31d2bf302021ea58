# tests/test_export_service.py
"""
Export tests: files are produced and read back (openpyxl / PDF structure).
"""

import re

import pytest
from openpyxl import load_workbook

from domain.calculator import Calculator, DocumentTotals
from domain.currency import format_money
from domain.document import DocumentType
from domain.errors import ExportError
from domain.line_item import LineItem
from infrastructure.export_service import ITEM_HEADERS, ExportService, PdfLayout


def page_count(pdf_bytes: bytes) -> int:
    return len(re.findall(rb"/Type /Page\b", pdf_bytes))


class TestExportService:

    @pytest.fixture
    def exporter(self):
        return ExportService()

    def test_default_filename(self, exporter, sample_document):
        assert exporter.get_default_filename(sample_document) == "quote-QUO261019_001.pdf"
        sample_document.type = DocumentType.INVOICE
        sample_document.document_number = "INV-1001"
        assert exporter.get_default_filename(sample_document) == "invoice-INV-1001.pdf"

    def test_pdf_written(self, exporter, sample_document, tmp_path):
        path = exporter.export_pdf(sample_document, str(tmp_path / "out" / "quote.pdf"))

        with open(path, "rb") as f:
            data = f.read()
        assert data.startswith(b"%PDF")
        assert page_count(data) == 1

    def test_long_document_is_paginated(self, exporter, sample_document):
        sample_document.line_items = [LineItem(description=f"Task {i}", quantity=1, unit_price=10 + i)
                                      for i in range(120)]
        assert page_count(exporter.render_pdf(sample_document)) > 1

    def test_layout_options(self, sample_document):
        layout = PdfLayout(show_banking_details=False, footer_lines=[], font_size=7)
        assert ExportService(layout).render_pdf(sample_document).startswith(b"%PDF")

    def test_excel_export(self, exporter, sample_document, tmp_path):
        path = exporter.export(sample_document, str(tmp_path / "quote.xlsx"))

        ws = load_workbook(path).active
        rows = [list(r) for r in ws.iter_rows(values_only=True)]
        assert rows[0][:2] == ["QUOTE", "QUO261019_001"]

        header_index = next(i for i, r in enumerate(rows) if r[0] == "Description")
        assert rows[header_index] == ITEM_HEADERS
        first_item = rows[header_index + 1]
        assert first_item[0] == "Website build"
        assert first_item[5] == pytest.approx(200)
        assert first_item[6] == pytest.approx(230)

        totals = {r[5]: r[6] for r in rows if r[5] in ("Total Discount", "Total VAT", "Grand Total")}
        expected = Calculator.compute_totals(sample_document.line_items, sample_document.discount,
                                             sample_document.tax_rate)
        assert totals["Total Discount"] == pytest.approx(expected.discount_amount)
        assert totals["Total VAT"] == pytest.approx(expected.tax_amount)
        assert totals["Grand Total"] == pytest.approx(258.75)

    def test_totals_block_prints_calculated_values(self, exporter, sample_document, monkeypatch):
        totals = DocumentTotals(subtotal=250, discount_amount=25, tax_amount=33.75, total=999)
        monkeypatch.setattr(sample_document, "totals", lambda: totals)

        table = exporter._totals(sample_document, 0)[0]
        rows = dict(table._cellvalues)
        assert rows["Sub Total:"] == rows["Grand Total:"] == format_money(999, sample_document.currency)
        assert rows["Total Exclusive:"] == format_money(250, sample_document.currency)

    def test_unsupported_format(self, exporter, sample_document, tmp_path):
        with pytest.raises(ExportError):
            exporter.export(sample_document, str(tmp_path / "quote.docx"))

    def test_unwritable_target_raises_export_error(self, exporter, sample_document, tmp_path):
        target = tmp_path / "taken.pdf"
        target.mkdir()
        with pytest.raises(ExportError):
            exporter.export_pdf(sample_document, str(target))
