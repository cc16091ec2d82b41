from __future__ import annotations

import logging

from tbo.domain.errors import NotFoundError, ValidationError
from tbo.domain.models import StockRow
from tbo.domain.stock import compute_current_stock
from tbo.repositories.memory_store import MemoryStore

log = logging.getLogger(__name__)


class InventoryService:
    def __init__(self, store: MemoryStore):
        self.store = store

    def _require_product(self, product_id: str) -> None:
        if not any(p.id == product_id for p in self.store.get_products()):
            raise NotFoundError("Product not found.")

    def initial_stock(self, product_id: str) -> int:
        return int(self.store.get_inventory().get(product_id, 0))

    def set_initial_stock(self, product_id: str, qty: int) -> None:
        try:
            qty = int(qty)
        except (TypeError, ValueError):
            raise ValidationError("Quantity must be an integer.")
        if qty < 0:
            raise ValidationError("Quantity must be >= 0.")
        self._require_product(product_id)

        inventory = self.store.get_inventory()
        old = inventory.get(product_id, 0)
        inventory[product_id] = qty
        self.store.set_inventory(inventory)
        log.info("initial_stock_set product_id=%s old=%s new=%s", product_id, old, qty)

    def current_stock(self) -> dict[str, int]:
        return compute_current_stock(
            self.store.get_products(),
            self.store.get_inventory(),
            self.store.get_invoices(),
        )

    def available(self, product_id: str) -> int:
        return self.current_stock().get(product_id, 0)

    def stock_rows(self) -> list[StockRow]:
        inventory = self.store.get_inventory()
        current = self.current_stock()
        return [
            StockRow(product=p, initial_stock=int(inventory.get(p.id, 0)), current_stock=current[p.id])
            for p in self.store.get_products()
        ]
