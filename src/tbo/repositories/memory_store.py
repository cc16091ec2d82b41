from __future__ import annotations

import time
from typing import Iterable, Mapping

from tbo.domain.models import (
    Delivery,
    ExpenseCategory,
    Invoice,
    OrderNumberCategory,
    Person,
    Product,
    Transaction,
)


class MemoryStore:
    """Single owner of the in-memory collections.

    Reads return copies; writes replace a whole collection at once. Nothing is
    persisted: a restart starts from an empty (or seeded) store.
    """

    def __init__(self) -> None:
        self._persons: list[Person] = []
        self._transactions: list[Transaction] = []
        self._products: list[Product] = []
        self._inventory: dict[str, int] = {}
        self._invoices: list[Invoice] = []
        self._expense_categories: list[ExpenseCategory] = []
        self._order_number_categories: list[OrderNumberCategory] = []
        self._deliveries: list[Delivery] = []
        self._last_stamp = 0

    def next_stamp(self) -> int:
        """Millisecond timestamp, strictly increasing within this store."""
        stamp = max(int(time.time() * 1000), self._last_stamp + 1)
        self._last_stamp = stamp
        return stamp

    def new_id(self) -> str:
        return str(self.next_stamp())

    # ---------- persons ----------
    def get_persons(self) -> list[Person]:
        return list(self._persons)

    def set_persons(self, persons: Iterable[Person]) -> None:
        self._persons = list(persons)

    # ---------- transactions ----------
    def get_transactions(self) -> list[Transaction]:
        return list(self._transactions)

    def set_transactions(self, transactions: Iterable[Transaction]) -> None:
        self._transactions = list(transactions)

    # ---------- products ----------
    def get_products(self) -> list[Product]:
        return list(self._products)

    def set_products(self, products: Iterable[Product]) -> None:
        self._products = list(products)

    # ---------- inventory ----------
    def get_inventory(self) -> dict[str, int]:
        return dict(self._inventory)

    def set_inventory(self, inventory: Mapping[str, int]) -> None:
        self._inventory = {str(k): int(v) for k, v in inventory.items()}

    # ---------- invoices ----------
    def get_invoices(self) -> list[Invoice]:
        return list(self._invoices)

    def set_invoices(self, invoices: Iterable[Invoice]) -> None:
        self._invoices = list(invoices)

    # ---------- expense categories ----------
    def get_expense_categories(self) -> list[ExpenseCategory]:
        return list(self._expense_categories)

    def set_expense_categories(self, categories: Iterable[ExpenseCategory]) -> None:
        self._expense_categories = list(categories)

    # ---------- deliveries ----------
    def get_order_number_categories(self) -> list[OrderNumberCategory]:
        return list(self._order_number_categories)

    def set_order_number_categories(self, categories: Iterable[OrderNumberCategory]) -> None:
        self._order_number_categories = list(categories)

    def get_deliveries(self) -> list[Delivery]:
        return list(self._deliveries)

    def set_deliveries(self, deliveries: Iterable[Delivery]) -> None:
        self._deliveries = list(deliveries)


def seed_demo_data(store: MemoryStore) -> None:
    store.set_persons([
        Person(id=1, name="Amir"),
        Person(id=2, name="Jack"),
        Person(id=3, name="System Account"),
        Person(id=4, name="Customer A"),
        Person(id=5, name="Customer B"),
    ])
    store.set_products([
        Product(id="p1", item_code="HW-001", specifications="Keyboard", cny_purchase_price=500, usd_selling_price=75),
        Product(id="p2", item_code="HW-002", specifications="Mouse", cny_purchase_price=200, usd_selling_price=25),
        Product(id="p3", item_code="SW-001", specifications="Office Suite License", cny_purchase_price=3000, usd_selling_price=299),
    ])
    store.set_inventory({"p1": 150, "p2": 300, "p3": 1000})
    store.set_order_number_categories([
        OrderNumberCategory(id="cat1", name="Standard Orders"),
        OrderNumberCategory(id="cat2", name="Express Orders"),
    ])
