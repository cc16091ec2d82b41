from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping

from tbo.domain.models import Invoice, Product


def sold_quantities(invoices: Iterable[Invoice]) -> Counter[str]:
    sold: Counter[str] = Counter()
    for invoice in invoices:
        for item in invoice.items:
            sold[str(item.product_id)] += int(item.quantity)
    return sold


def compute_current_stock(
    products: Iterable[Product],
    inventory: Mapping[str, int],
    invoices: Iterable[Invoice],
) -> dict[str, int]:
    """
    current = max(0, initial - sold) for every product.

    Oversold products floor at 0 instead of going negative.
    """
    sold = sold_quantities(invoices)
    return {
        p.id: max(0, int(inventory.get(p.id, 0)) - sold[p.id])
        for p in products
    }
