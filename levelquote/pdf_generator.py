"""
PDF invoice / estimate generator.

Renders a stored Document with fpdf2 (pure Python, no system dependencies):

1. Letterhead — company picked by the document's business type
2. Document number, dates, customer block
3. Services table
4. Subtotal / tax / total
5. Notes and terms
"""

from datetime import datetime

from fpdf import FPDF

from .config import company_info
from .models import Document, DocumentType
from .presentation import format_currency, format_quantity

SERVICE_COLUMNS = [("Description", 100), ("Qty", 20), ("Unit", 20), ("Rate", 25), ("Amount", 25)]

INVOICE_TERMS = "Payment is due by the due date shown above. Thank you for your business."
ESTIMATE_TERMS = "This estimate is valid until the date shown above. Prices may change after that date."


def _safe(text: str) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        str(text)
        .replace("•", "-")    # bullet
        .replace("—", " - ")  # em dash
        .replace("–", "-")    # en dash
        .replace("“", '"')
        .replace("”", '"')
        .replace("‘", "'")
        .replace("’", "'")
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


def _date(value) -> str:
    return value.strftime("%B %d, %Y") if value else ""


class DocumentPDF(FPDF):
    """Letter-size invoice/estimate layout."""

    def __init__(self):
        super().__init__()
        self.set_auto_page_break(auto=True, margin=20)

    def header(self):
        pass  # Letterhead is drawn once on the first page

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="C")

    def section_header(self, title):
        self.set_font("Helvetica", "B", 11)
        self.set_fill_color(45, 55, 72)
        self.set_text_color(255, 255, 255)
        self.cell(0, 8, f"  {title}", fill=True, new_x="LMARGIN", new_y="NEXT")
        self.set_text_color(0, 0, 0)
        self.ln(2)

    def table_header(self, cols):
        self.set_font("Helvetica", "B", 8)
        self.set_fill_color(240, 240, 240)
        for label, width in cols:
            align = "L" if label == "Description" else "R"
            self.cell(width, 6, label, border="B", fill=True, align=align)
        self.ln()

    def fit_text(self, text: str, width: float) -> str:
        """Trim text with '...' until it fits the column at the current font."""
        text = _safe(text)
        if self.get_string_width(text) <= width - 2:
            return text
        while text and self.get_string_width(text + "...") > width - 2:
            text = text[:-1]
        return text + "..."

    def total_row(self, label, amount, bold=False):
        self.set_font("Helvetica", "B" if bold else "", 10)
        self.cell(140, 6, label, align="R")
        self.cell(50, 6, format_currency(amount), align="R")
        self.ln()


def generate_document_pdf(document: Document) -> bytes:
    """Render an invoice or estimate. Returns the PDF bytes."""
    is_invoice = document.doc_type == DocumentType.INVOICE
    company = company_info(document.business_type)

    pdf = DocumentPDF()
    pdf.alias_nb_pages()
    pdf.add_page()

    # ── Letterhead ──
    pdf.set_font("Helvetica", "B", 18)
    pdf.cell(0, 10, _safe(company["name"]), new_x="LMARGIN", new_y="NEXT")
    contact = " | ".join(p for p in (company["address"], company["phone"], company["email"], company["website"]) if p)
    if contact:
        pdf.set_font("Helvetica", "", 9)
        pdf.set_text_color(100, 100, 100)
        pdf.cell(0, 5, _safe(contact), new_x="LMARGIN", new_y="NEXT")
        pdf.set_text_color(0, 0, 0)
    pdf.ln(4)

    # ── Number and dates ──
    title = "INVOICE" if is_invoice else "ESTIMATE"
    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 8, f"{title} #{document.document_number}", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 5, f"Date: {_date(document.issue_date or datetime.utcnow())}", new_x="LMARGIN", new_y="NEXT")
    if is_invoice and document.due_date:
        pdf.cell(0, 5, f"Due: {_date(document.due_date)}", new_x="LMARGIN", new_y="NEXT")
    if not is_invoice and document.valid_until:
        pdf.cell(0, 5, f"Valid until: {_date(document.valid_until)}", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, f"Status: {(document.status or 'draft').title()}", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # ── Customer ──
    pdf.section_header("BILL TO" if is_invoice else "PREPARED FOR")
    pdf.set_font("Helvetica", "", 10)
    for value in (document.customer_name, document.customer_address, document.customer_phone, document.customer_email):
        if value:
            pdf.multi_cell(0, 5, _safe(value), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # ── Services ──
    pdf.section_header("SERVICES")
    pdf.table_header(SERVICE_COLUMNS)
    pdf.set_font("Helvetica", "", 8)
    widths = [w for _, w in SERVICE_COLUMNS]
    for line in document.service_lines:
        pdf.cell(widths[0], 5.5, pdf.fit_text(line.description, widths[0]))
        pdf.cell(widths[1], 5.5, format_quantity(line.quantity), align="R")
        pdf.cell(widths[2], 5.5, _safe(line.unit or ""), align="R")
        pdf.cell(widths[3], 5.5, format_currency(line.rate), align="R")
        pdf.cell(widths[4], 5.5, format_currency(line.amount), align="R")
        pdf.ln()
    pdf.ln(2)

    # ── Totals ──
    pdf.set_draw_color(200, 200, 200)
    pdf.line(pdf.l_margin, pdf.get_y(), pdf.w - pdf.r_margin, pdf.get_y())
    pdf.ln(1)
    pdf.total_row("Subtotal", document.subtotal)
    pdf.total_row(f"Tax ({(document.tax_rate or 0) * 100:g}%)", document.tax)
    pdf.ln(1)
    pdf.set_fill_color(45, 55, 72)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font("Helvetica", "B", 13)
    pdf.cell(130, 10, "  TOTAL", fill=True)
    pdf.cell(60, 10, f"{format_currency(document.total)}  ", fill=True, align="R")
    pdf.set_text_color(0, 0, 0)
    pdf.ln(14)

    # ── Notes and terms ──
    if document.notes:
        pdf.section_header("NOTES")
        pdf.set_font("Helvetica", "", 9)
        pdf.multi_cell(0, 4.5, _safe(document.notes), new_x="LMARGIN", new_y="NEXT")
        pdf.ln(4)

    pdf.set_font("Helvetica", "I", 8)
    pdf.set_text_color(100, 100, 100)
    pdf.multi_cell(0, 4, INVOICE_TERMS if is_invoice else ESTIMATE_TERMS, new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)

    return bytes(pdf.output())
