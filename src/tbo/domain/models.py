from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

CURRENCIES = ("USD", "CNY", "IRT")
INVOICE_CURRENCIES = ("USD", "IRT")

PAYMENT_IN = "PaymentIn"
PAYMENT_OUT = "PaymentOut"
CONVERSION = "Conversion"
INTERNAL_TRANSFER = "InternalTransfer"
TRANSACTION_TYPES = (PAYMENT_IN, PAYMENT_OUT, CONVERSION, INTERNAL_TRANSFER)

DELIVERY_TYPES = ("sea", "air")
DESTINATIONS = ("dubai", "iraq")

# balances closer to zero than this count as settled
ZERO_TOLERANCE = 1e-9


@dataclass(frozen=True)
class Person:
    id: int
    name: str


@dataclass(frozen=True)
class Transaction:
    id: str
    date: str
    type: str
    amount: float
    currency: str
    description: str = ""
    entity_id: Optional[int] = None
    from_entity_id: Optional[int] = None
    to_entity_id: Optional[int] = None
    rate: Optional[float] = None
    to_currency: Optional[str] = None
    category_id: Optional[str] = None

    def touches(self, person_id: int) -> bool:
        return person_id in (self.entity_id, self.from_entity_id, self.to_entity_id)


@dataclass(frozen=True)
class Product:
    id: str
    item_code: str
    brand_named: str = ""
    specifications: str = ""
    category_name: str = ""
    source: str = ""
    order_number: str = ""
    quantity: int = 0
    cny_purchase_price: float = 0.0
    usd_selling_price: float = 0.0
    description: str = ""
    warehouse_name: str = ""

    @property
    def display_name(self) -> str:
        return self.specifications or self.item_code


@dataclass(frozen=True)
class InvoiceItem:
    product_id: str
    product_name: str
    quantity: int
    unit_price: float

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class Invoice:
    id: str
    invoice_number: str
    person_id: int
    person_name: str
    date: str
    currency: str
    items: tuple[InvoiceItem, ...]
    total_amount: float
    discount: float = 0.0

    @property
    def subtotal(self) -> float:
        return sum(it.line_total for it in self.items)

    @property
    def total_quantity(self) -> int:
        return sum(int(it.quantity) for it in self.items)


@dataclass(frozen=True)
class ExpenseCategory:
    id: str
    name: str


@dataclass(frozen=True)
class Expense:
    id: str
    date: str
    description: str
    amount: float


@dataclass(frozen=True)
class CategorySummary:
    id: str
    name: str
    expenses: tuple[Expense, ...]
    total_spent: float


@dataclass(frozen=True)
class OrderNumberCategory:
    id: str
    name: str


@dataclass(frozen=True)
class Delivery:
    id: str
    order_number_category_id: str
    delivery_date: str
    carton_count: int
    weight: float
    receipt_number: str
    delivery_type: str = "sea"
    destination: str = "dubai"
    receipt_photo: Optional[str] = None
    cargo_photo: Optional[str] = None
    description: str = ""
    is_arrived: bool = False


@dataclass(frozen=True)
class BalanceRow:
    person_id: int
    person_name: str
    balances: dict[str, float] = field(default_factory=dict)

    @property
    def is_zero(self) -> bool:
        return all(abs(v) < ZERO_TOLERANCE for v in self.balances.values())


@dataclass(frozen=True)
class StockRow:
    product: Product
    initial_stock: int
    current_stock: int


@dataclass(frozen=True)
class User:
    username: str
