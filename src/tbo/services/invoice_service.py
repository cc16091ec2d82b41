from __future__ import annotations

import logging
import math
import re
from collections import Counter
from dataclasses import replace
from datetime import date as _date
from typing import Iterable, Mapping, Optional

from tbo.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from tbo.domain.models import INVOICE_CURRENCIES, PAYMENT_OUT, Invoice, InvoiceItem, Person, Product
from tbo.domain.stock import compute_current_stock
from tbo.repositories.memory_store import MemoryStore
from tbo.services.transaction_service import TransactionService, parse_iso_date

log = logging.getLogger("tbo.invoices")

_NUMBER_RE = re.compile(r"^INV-(\d+)$")


def default_unit_price(product: Product, currency: str) -> float:
    # IRT invoices are pre-filled from the CNY purchase price column
    if currency == "USD":
        return float(product.usd_selling_price or 0)
    return float(product.cny_purchase_price or 0)


class InvoiceService:
    def __init__(self, store: MemoryStore, transactions: TransactionService):
        self.store = store
        self.transactions = transactions

    def list_invoices(self) -> list[Invoice]:
        return self.store.get_invoices()

    def get_invoice(self, invoice_id: str) -> Invoice:
        for inv in self.store.get_invoices():
            if inv.id == invoice_id:
                return inv
        raise NotFoundError("Invoice not found.")

    def next_invoice_number(self) -> str:
        # numbers of deleted invoices are never handed out again
        highest = 0
        for inv in self.store.get_invoices():
            m = _NUMBER_RE.match(inv.invoice_number or "")
            if m:
                highest = max(highest, int(m.group(1)))
        return f"INV-{highest + 1:04d}"

    def _customer(self, person_id) -> Person:
        try:
            pid = int(person_id or 0)
        except (TypeError, ValueError):
            raise NotFoundError("Select a customer.")
        person = next((p for p in self.store.get_persons() if p.id == pid), None)
        if not person:
            raise NotFoundError("Select a customer.")
        return person

    def _check_lines(
        self,
        items: Iterable[Mapping],
        currency: str,
        discount,
        exclude_invoice_id: Optional[str] = None,
    ) -> tuple[list[InvoiceItem], float]:
        """
        Validate raw lines against the catalogue and the current stock.

        Current stock is derived from every stored invoice except
        `exclude_invoice_id`, so an edited invoice is checked against the
        stock it would leave behind. Returns the lines and the discount.
        """
        items = list(items)
        if not items:
            raise ValidationError("Add at least one invoice item.")
        if currency not in INVOICE_CURRENCIES:
            raise ValidationError(f"Invoices can only be issued in {', '.join(INVOICE_CURRENCIES)}.")

        try:
            discount = float(discount or 0)
        except (TypeError, ValueError):
            raise ValidationError("Discount must be a number.")
        if not math.isfinite(discount):
            raise ValidationError("Discount must be a number.")

        products = {p.id: p for p in self.store.get_products()}
        others = [inv for inv in self.store.get_invoices() if inv.id != exclude_invoice_id]
        current = compute_current_stock(products.values(), self.store.get_inventory(), others)

        lines: list[InvoiceItem] = []
        qty_by_product: Counter[str] = Counter()
        for it in items:
            product_id = str(it.get("product_id") or "")
            prod = products.get(product_id)
            if not prod:
                raise NotFoundError("Product not found.")
            try:
                qty = int(it.get("quantity") or 0)
                unit_price = it.get("unit_price")
                unit_price = default_unit_price(prod, currency) if unit_price is None else float(unit_price)
            except (TypeError, ValueError):
                raise ValidationError("Please ensure all invoice items are complete before saving.")
            if qty <= 0:
                raise ValidationError("Quantity must be >= 1.")
            if not math.isfinite(unit_price) or unit_price < 0:
                raise ValidationError("Unit price must be >= 0.")

            qty_by_product[product_id] += qty
            available = current.get(product_id, 0)
            if qty_by_product[product_id] > available:
                raise InsufficientStockError(prod.display_name, qty_by_product[product_id], available)
            lines.append(InvoiceItem(product_id=product_id, product_name=prod.display_name, quantity=qty, unit_price=unit_price))

        subtotal = sum(line.line_total for line in lines)
        if discount < 0 or discount > subtotal:
            raise ValidationError("Discount must be between 0 and the invoice subtotal.")
        return lines, discount

    def create_invoice(
        self,
        person_id: int,
        items: Iterable[dict],
        currency: str = "USD",
        date: Optional[str] = None,
        discount: float = 0.0,
    ) -> Invoice:
        """
        items: [{product_id, quantity, unit_price?}]

        Stock is checked against the current stock derived from the invoices
        that exist before this one. Saving also books a PaymentOut for the
        customer in the invoice currency.
        """
        items = list(items)
        if not items:
            raise ValidationError("Add at least one invoice item.")
        if currency not in INVOICE_CURRENCIES:
            raise ValidationError(f"Invoices can only be issued in {', '.join(INVOICE_CURRENCIES)}.")
        person = self._customer(person_id)
        invoice_date = parse_iso_date(date or _date.today().isoformat(), "Invoice date")
        lines, discount = self._check_lines(items, currency, discount)

        invoice = Invoice(
            id=self.store.new_id(),
            invoice_number=self.next_invoice_number(),
            person_id=person.id,
            person_name=person.name,
            date=invoice_date,
            currency=currency,
            items=tuple(lines),
            total_amount=sum(line.line_total for line in lines) - discount,
            discount=discount,
        )

        self.store.set_invoices([invoice, *self.store.get_invoices()])
        self.transactions.add_transaction(
            PAYMENT_OUT,
            invoice.total_amount,
            invoice.currency,
            date=invoice.date,
            description=f"Invoice #{invoice.invoice_number}",
            entity_id=invoice.person_id,
            id_suffix="-invoice",
        )
        log.info(
            "invoice_created id=%s number=%s person_id=%s total=%.2f currency=%s lines=%s",
            invoice.id, invoice.invoice_number, invoice.person_id, invoice.total_amount, invoice.currency, len(lines),
        )
        return invoice

    def update_invoice(self, invoice: Invoice) -> Invoice:
        """
        Full replace by id, validated like a new invoice.

        The stock check ignores the stored version of this invoice. Number and
        id are kept; the total is recomputed from the lines and discount. The
        PaymentOut booked at creation is left untouched.
        """
        existing = self.get_invoice(invoice.id)
        person = self._customer(invoice.person_id)
        invoice_date = parse_iso_date(invoice.date or "", "Invoice date")
        raw = [
            {"product_id": it.product_id, "quantity": it.quantity, "unit_price": it.unit_price}
            for it in invoice.items
        ]
        lines, discount = self._check_lines(raw, invoice.currency, invoice.discount, exclude_invoice_id=existing.id)

        updated = replace(
            invoice,
            invoice_number=existing.invoice_number,
            person_id=person.id,
            person_name=person.name,
            date=invoice_date,
            items=tuple(lines),
            total_amount=sum(line.line_total for line in lines) - discount,
            discount=discount,
        )
        self.store.set_invoices([updated if inv.id == updated.id else inv for inv in self.store.get_invoices()])
        log.info("invoice_updated id=%s number=%s total=%.2f", updated.id, updated.invoice_number, updated.total_amount)
        return updated

    def delete_invoice(self, invoice_id: str) -> None:
        invoice = self.get_invoice(invoice_id)
        self.store.set_invoices([inv for inv in self.store.get_invoices() if inv.id != invoice_id])
        log.warning("invoice_deleted id=%s number=%s payment_kept=1", invoice.id, invoice.invoice_number)
