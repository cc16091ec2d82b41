from __future__ import annotations

import logging
from pathlib import Path

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from tbo.domain.models import Invoice

log = logging.getLogger("tbo.invoices")

COMPANY_NAME = "Trading Back Office"
TERMS = (
    "Payment is due upon receipt of this invoice.",
    "Goods remain the property of the seller until paid in full.",
)


def _money(value: float, currency: str) -> str:
    return f"{value:,.2f} {currency}"


class InvoicePdfService:
    def render_invoice(self, invoice: Invoice, path: str | Path) -> Path:
        path = Path(path)
        c = canvas.Canvas(str(path), pagesize=A4)
        W, H = A4
        x_margin = 20 * mm
        y = H - 20 * mm

        c.setFont("Helvetica-Bold", 16)
        c.drawString(x_margin, y, COMPANY_NAME)
        c.setFont("Helvetica-Bold", 14)
        c.drawRightString(W - 20 * mm, y, "INVOICE")
        y -= 24

        c.setFont("Helvetica", 10)
        c.drawString(x_margin, y, f"Invoice No: {invoice.invoice_number}"); y -= 12
        c.drawString(x_margin, y, f"Date: {invoice.date}"); y -= 12
        c.drawString(x_margin, y, f"Currency: {invoice.currency}"); y -= 20

        c.setFont("Helvetica-Bold", 10)
        c.drawString(x_margin, y, "Bill To:"); y -= 12
        c.setFont("Helvetica", 10)
        c.drawString(x_margin, y, invoice.person_name); y -= 24

        def table_header(y: float) -> float:
            c.setFont("Helvetica-Bold", 10)
            c.drawString(x_margin, y, "Item")
            c.drawRightString(W - 90 * mm, y, "Qty")
            c.drawRightString(W - 55 * mm, y, "Unit Price")
            c.drawRightString(W - 20 * mm, y, "Amount")
            y -= 6
            c.setStrokeColor(colors.grey)
            c.line(x_margin, y, W - 20 * mm, y)
            c.setFont("Helvetica", 10)
            return y - 12

        y = table_header(y)
        for it in invoice.items:
            c.drawString(x_margin, y, it.product_name[:60])
            c.drawRightString(W - 90 * mm, y, str(it.quantity))
            c.drawRightString(W - 55 * mm, y, f"{it.unit_price:,.2f}")
            c.drawRightString(W - 20 * mm, y, f"{it.line_total:,.2f}")
            y -= 14
            if y < 60 * mm:
                c.showPage()
                y = table_header(H - 20 * mm)

        c.line(x_margin, y + 6, W - 20 * mm, y + 6)
        y -= 8
        c.setFont("Helvetica-Bold", 10); c.drawRightString(W - 55 * mm, y, "Subtotal:")
        c.setFont("Helvetica", 10); c.drawRightString(W - 20 * mm, y, _money(invoice.subtotal, invoice.currency)); y -= 14
        if invoice.discount:
            c.setFont("Helvetica-Bold", 10); c.drawRightString(W - 55 * mm, y, "Discount:")
            c.setFont("Helvetica", 10); c.drawRightString(W - 20 * mm, y, f"-{_money(invoice.discount, invoice.currency)}"); y -= 14
        c.setFont("Helvetica-Bold", 11); c.drawRightString(W - 55 * mm, y, "Total:")
        c.drawRightString(W - 20 * mm, y, _money(invoice.total_amount, invoice.currency)); y -= 14
        c.setFont("Helvetica", 10)
        c.drawRightString(W - 55 * mm, y, "Total items:")
        c.drawRightString(W - 20 * mm, y, str(invoice.total_quantity)); y -= 30

        c.setFont("Helvetica-Bold", 9)
        c.drawString(x_margin, y, "Terms & Conditions"); y -= 12
        c.setFont("Helvetica", 8)
        for line in TERMS:
            c.drawString(x_margin, y, line); y -= 10
        y -= 10
        c.drawString(x_margin, y, "Thank you for your business!")

        c.showPage()
        c.save()
        log.info("invoice_pdf_written number=%s path=%s", invoice.invoice_number, path)
        return path
