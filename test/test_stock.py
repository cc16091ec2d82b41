from tbo.domain.models import Invoice, InvoiceItem, Product
from tbo.domain.stock import compute_current_stock, sold_quantities


def _invoice(i, *lines):
    items = tuple(InvoiceItem(product_id=pid, product_name=pid, quantity=q, unit_price=1.0) for pid, q in lines)
    return Invoice(
        id=str(i), invoice_number=f"INV-{i:04d}", person_id=1, person_name="A",
        date="2024-01-01", currency="USD", items=items, total_amount=0.0,
    )


def test_current_stock_is_clamped_at_zero():
    products = [Product(id="p1", item_code="P1")]
    invoices = [_invoice(1, ("p1", 30)), _invoice(2, ("p1", 80))]
    assert compute_current_stock(products, {"p1": 100}, invoices) == {"p1": 0}


def test_every_line_of_every_invoice_counts():
    invoices = [_invoice(1, ("p1", 2), ("p2", 1), ("p1", 3)), _invoice(2, ("p2", 4))]
    sold = sold_quantities(invoices)
    assert sold["p1"] == 5
    assert sold["p2"] == 5


def test_missing_inventory_defaults_to_zero_and_unknown_lines_are_ignored():
    products = [Product(id="p1", item_code="P1"), Product(id="p2", item_code="P2")]
    invoices = [_invoice(1, ("ghost", 10), ("p1", 4))]
    out = compute_current_stock(products, {"p1": 10}, invoices)
    assert out == {"p1": 6, "p2": 0}
    assert compute_current_stock(products, {"p1": 10}, invoices) == out
